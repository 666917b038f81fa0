import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from sqlmodel import Session, select

from storefront.core.errors import AuthFailed, persistence_errors
from storefront.geo import Location, location_of
from storefront.models import Role, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Authenticated identity handed to every core operation"""
    user_id: int
    name: str
    role: Role
    location: Optional[Location] = None

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(
            user_id=user.id,
            name=user.name,
            role=Role(user.role),
            location=location_of(user),
        )


@persistence_errors("login")
def authenticate(session: Session, name: str, secret: str) -> User:
    user = session.exec(select(User).where(User.name == name)).first()
    # Credentials are compared as-is; hashing is left to the deployment's auth layer
    if not user or not secrets.compare_digest(user.secret.encode(), secret.encode()):
        logger.info("Login rejected for %r", name)
        raise AuthFailed()
    return user


class UserSession:
    """Holds at most one logged-in principal for the lifetime of a login."""

    def __init__(self, session: Session):
        self.session = session
        self._principal: Optional[Principal] = None

    def login(self, name: str, secret: str) -> Principal:
        user = authenticate(self.session, name, secret)
        # A new login replaces whoever was logged in before
        self._principal = Principal.from_user(user)
        logger.info("User %s logged in as %s", user.id, self._principal.role.value)
        return self._principal

    def current_principal(self) -> Optional[Principal]:
        return self._principal

    def require_principal(self) -> Principal:
        if self._principal is None:
            raise AuthFailed("Not logged in")
        return self._principal

    def logout(self) -> None:
        if self._principal is not None:
            logger.info("User %s logged out", self._principal.user_id)
        self._principal = None
