from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.auth import Principal
from storefront.core.security import get_principal, issue_api_key, revoke_api_key
from storefront.database import get_session
from storefront.schemas import LoginRequest, LoginResponse

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    session: Session = Depends(get_session)
):
    api_key = issue_api_key(session, credentials.name, credentials.secret)
    principal = get_principal(api_key, session)
    return LoginResponse(api_key=api_key, user_id=principal.user_id, role=principal.role)


@router.post("/logout")
def logout(
    current: Principal = Depends(get_principal),
    session: Session = Depends(get_session)
):
    revoke_api_key(session, current.user_id)
    return {"message": "Logged out"}
