"""Base repository class with common CRUD operations.

Repositories stage changes on the session and flush; committing is left
to the caller's ``transaction`` block so several repository calls form
one atomic unit of work.
"""

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from learnpath.db.models import Base
from learnpath.utils import get_timestamp_ms

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with common CRUD operations."""

    def __init__(self, model: type[ModelType]):
        """Initialize repository with model class.

        Args:
            model: SQLAlchemy model class
        """
        self.model = model

    def get_by_id(self, db: Session, id: str) -> ModelType | None:
        """Get entity by ID.

        Args:
            db: Database session
            id: Entity ID

        Returns:
            Entity or None if not found
        """
        return db.get(self.model, id)

    def get_many(self, db: Session, ids: Iterable[str]) -> list[ModelType]:
        """Get entities by ID, in the order of ``ids``, skipping missing ones."""
        ids = list(ids)
        if not ids:
            return []
        stmt = select(self.model).where(self.model.id.in_(ids))
        found = {obj.id: obj for obj in db.execute(stmt).scalars().all()}
        return [found[i] for i in ids if i in found]

    def get_all(
        self,
        db: Session,
        skip: int = 0,
        limit: int = 100,
    ) -> list[ModelType]:
        """Get all entities with pagination."""
        stmt = select(self.model).offset(skip).limit(limit)
        result = db.execute(stmt)
        return list(result.scalars().all())

    def create(self, db: Session, obj_in: dict[str, Any]) -> ModelType:
        """Create a new entity.

        ``created_at``/``updated_at`` default to now when not supplied.
        """
        now = get_timestamp_ms()
        obj_in.setdefault("created_at", now)
        obj_in.setdefault("updated_at", now)
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        db.flush()
        return db_obj

    def update(
        self,
        db: Session,
        db_obj: ModelType,
        obj_in: dict[str, Any],
    ) -> ModelType:
        """Update an existing entity and bump ``updated_at``."""
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        if hasattr(db_obj, "updated_at"):
            db_obj.updated_at = get_timestamp_ms()
        db.add(db_obj)
        db.flush()
        return db_obj

    def delete(self, db: Session, id: str) -> bool:
        """Delete an entity by ID.

        Returns:
            True if deleted, False if not found
        """
        obj = db.get(self.model, id)
        if obj:
            db.delete(obj)
            db.flush()
            return True
        return False

    def exists(self, db: Session, id: str) -> bool:
        return db.get(self.model, id) is not None


def push_id(obj: Base, field: str, child_id: str, head: bool = False) -> None:
    """Add ``child_id`` to the JSON id list ``field`` of ``obj`` once.

    The list is replaced rather than mutated in place so the ORM detects
    the change.
    """
    current = list(getattr(obj, field) or [])
    if child_id in current:
        return
    setattr(obj, field, [child_id, *current] if head else [*current, child_id])


def pull_id(obj: Base, field: str, child_id: str) -> bool:
    """Remove ``child_id`` from the JSON id list ``field``; True if present."""
    current = list(getattr(obj, field) or [])
    if child_id not in current:
        return False
    setattr(obj, field, [i for i in current if i != child_id])
    return True
