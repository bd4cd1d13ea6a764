"""User account reads and profile updates."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from learnpath.db import transaction
from learnpath.db.models import User
from learnpath.errors import Conflict, Forbidden, NotFound
from learnpath.repositories import user_repository
from learnpath.services.auth_service import invalidate_identity
from learnpath.services.containment import require_identity
from learnpath.services.identity import Identity
from learnpath.utils import get_logger

logger = get_logger(__name__)


def list_users(db: Session, identity: Identity | None, skip: int = 0, limit: int = 100) -> list[User]:
    if not require_identity(identity).is_admin:
        raise Forbidden("User role user is not authorized to access this route")
    return user_repository.get_all(db, skip=skip, limit=limit)


def get_user(db: Session, user_id: str) -> User:
    user = user_repository.get_by_id(db, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def update_user(db: Session, identity: Identity | None, user_id: str, name: str | None = None, email: str | None = None) -> User:
    """Update a profile; users edit themselves, admins edit anyone."""
    identity = require_identity(identity)
    if identity.id != user_id and not identity.is_admin:
        raise Forbidden("User not authorized to update this user")

    with transaction(db):
        user = get_user(db, user_id)
        fields = {}
        if name is not None:
            fields["name"] = name
        if email is not None and email.lower() != user.email:
            if user_repository.get_by_email(db, email):
                raise Conflict("Email already in use")
            fields["email"] = email.lower()
        try:
            user = user_repository.update(db, user, fields)
        except IntegrityError as e:
            raise Conflict("Email already in use") from e
    invalidate_identity(user_id)
    logger.info(f"Updated user {user_id}")
    return user
