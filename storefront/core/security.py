import secrets

from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlmodel import Session, select

from storefront.auth import Principal, authenticate
from storefront.core.errors import AuthFailed, persistence_errors
from storefront.database import get_session
from storefront.models import User

# API Key header
API_KEY_NAME = "X-API-Key"
api_key_header = APIKeyHeader(name=API_KEY_NAME, auto_error=False)


@persistence_errors("login")
def issue_api_key(session: Session, name: str, secret: str) -> str:
    """Log in by name and secret; the returned key identifies the session until logout."""
    user = authenticate(session, name, secret)
    # A new login replaces any earlier session for this user
    user.api_key = secrets.token_urlsafe(32)
    session.add(user)
    session.commit()
    return user.api_key


@persistence_errors("logout")
def revoke_api_key(session: Session, user_id: int) -> None:
    user = session.get(User, user_id)
    if user:
        user.api_key = None
        session.add(user)
        session.commit()


def get_principal(
    api_key: str = Depends(api_key_header),
    session: Session = Depends(get_session)
) -> Principal:
    if not api_key:
        raise AuthFailed("Not logged in")
    with persistence_errors("session lookup"):
        user = session.exec(select(User).where(User.api_key == api_key)).first()
    if not user:
        raise AuthFailed("Invalid or expired session key")
    return Principal.from_user(user)
