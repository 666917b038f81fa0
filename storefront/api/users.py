from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.auth import Principal
from storefront.core.security import get_principal
from storefront.database import get_session
from storefront.schemas import UserCreate, UserRead, UserUpdate
from storefront.services import users

router = APIRouter()


@router.post("/", response_model=UserRead)
def register(
    payload: UserCreate,
    session: Session = Depends(get_session)
):
    user = users.register_customer(
        session, payload.name, payload.secret, payload.latitude, payload.longitude
    )
    return UserRead.model_validate(user)


@router.get("/me", response_model=UserRead)
def read_me(current: Principal = Depends(get_principal)):
    location = current.location
    return UserRead(
        id=current.user_id,
        name=current.name,
        role=current.role,
        latitude=location.latitude if location else None,
        longitude=location.longitude if location else None,
    )


@router.get("/", response_model=List[UserRead])
def list_users(
    skip: int = 0,
    limit: int = 100,
    session: Session = Depends(get_session),
    current: Principal = Depends(get_principal)  # Admin only
):
    return [UserRead.model_validate(view) for view in users.list_users(session, current, skip, limit)]


@router.get("/{user_id}", response_model=UserRead)
def read_user(
    user_id: int,
    session: Session = Depends(get_session),
    current: Principal = Depends(get_principal)  # Admin only
):
    return UserRead.model_validate(users.get_user(session, current, user_id))


@router.patch("/{user_id}", response_model=UserRead)
def edit_user(
    user_id: int,
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current: Principal = Depends(get_principal)  # Admin only
):
    changes = users.UserChanges(**payload.model_dump(exclude_unset=True))
    return UserRead.model_validate(users.update_user(session, current, user_id, changes))
