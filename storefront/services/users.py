import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from storefront.access import Operation, require
from storefront.auth import Principal
from storefront.cache import invalidate
from storefront.core.errors import (
    InvalidValue,
    NameTaken,
    PersistenceFailure,
    UserNotFound,
    persistence_errors,
)
from storefront.models import Role, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserChanges:
    """Partial user edit. Role is fixed at creation and cannot be changed here."""
    name: Optional[str] = None
    secret: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class UserView:
    id: int
    name: str
    role: Role
    latitude: Optional[float]
    longitude: Optional[float]

    @classmethod
    def from_user(cls, user: User) -> "UserView":
        return cls(id=user.id, name=user.name, role=Role(user.role),
                   latitude=user.latitude, longitude=user.longitude)


@persistence_errors("user lookup")
def _name_taken(session: Session, name: str, exclude_id: Optional[int] = None) -> bool:
    query = select(User.id).where(User.name == name)
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    return session.exec(query).first() is not None


def _save(session: Session, user: User, operation: str) -> User:
    try:
        session.add(user)
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise NameTaken(user.name) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Could not save user %r", user.name)
        raise PersistenceFailure(operation, exc) from exc
    session.refresh(user)
    return user


@persistence_errors("user registration")
def create_user(session: Session, name: str, secret: str, latitude: Optional[float] = None,
                longitude: Optional[float] = None, role: Role = Role.CUSTOMER) -> User:
    if not name:
        raise InvalidValue("name", "cannot be blank")
    if not secret:
        raise InvalidValue("secret", "cannot be blank")
    if _name_taken(session, name):
        raise NameTaken(name)

    user = _save(
        session,
        User(name=name, secret=secret, latitude=latitude, longitude=longitude, role=role),
        "user registration",
    )
    logger.info("Created %s user %s (%r)", user.role.value, user.id, user.name)
    return user


def register_customer(session: Session, name: str, secret: str, latitude: Optional[float] = None,
                      longitude: Optional[float] = None) -> User:
    """Self-service sign up; always creates a customer."""
    return create_user(session, name, secret, latitude, longitude, Role.CUSTOMER)


@persistence_errors("user listing")
def list_users(session: Session, principal: Principal, skip: int = 0, limit: int = 100) -> List[UserView]:
    require(principal, Operation.MANAGE_USERS)
    users = session.exec(select(User).order_by(User.id).offset(skip).limit(limit)).all()
    return [UserView.from_user(user) for user in users]


@persistence_errors("user lookup")
def get_user(session: Session, principal: Principal, user_id: int) -> UserView:
    require(principal, Operation.MANAGE_USERS)
    user = session.get(User, user_id)
    if not user:
        raise UserNotFound(user_id)
    return UserView.from_user(user)


@persistence_errors("user update")
def update_user(session: Session, principal: Principal, user_id: int, changes: UserChanges) -> UserView:
    require(principal, Operation.MANAGE_USERS)
    user = session.get(User, user_id)
    if not user:
        raise UserNotFound(user_id)

    if changes.name is not None:
        if not changes.name:
            raise InvalidValue("name", "cannot be blank")
        if _name_taken(session, changes.name, exclude_id=user_id):
            raise NameTaken(changes.name)
    if changes.secret is not None and not changes.secret:
        raise InvalidValue("secret", "cannot be blank")

    if changes.name is not None:
        user.name = changes.name
    if changes.secret is not None:
        user.secret = changes.secret
    if changes.latitude is not None:
        user.latitude = changes.latitude
    if changes.longitude is not None:
        user.longitude = changes.longitude

    user = _save(session, user, "user update")
    if changes.name is not None:
        # Cached reports carry customer names
        invalidate("report")
    logger.info("Admin %s updated user %s", principal.user_id, user_id)
    return UserView.from_user(user)
