"""Content records (links, videos, documents) referenced by pathway items."""

from typing import Any

from sqlalchemy.orm import Session

from learnpath.db import transaction
from learnpath.errors import Conflict, NotFound
from learnpath.models.enums import ContentType
from learnpath.repositories import content_repositories, pathway_repository
from learnpath.services.containment import require_identity
from learnpath.services.identity import Identity
from learnpath.utils import get_logger

logger = get_logger(__name__)


class ContentService:
    """CRUD for one content type; any authenticated user may manage content."""

    def __init__(self, content_type: ContentType):
        self.content_type = content_type
        self.repo = content_repositories[content_type]

    def list_all(self, db: Session, skip: int = 0, limit: int = 100):
        return self.repo.get_all(db, skip=skip, limit=limit)

    def get(self, db: Session, content_id: str):
        record = self.repo.get_by_id(db, content_id)
        if not record:
            raise NotFound(f"{self.content_type.value} not found")
        return record

    def create(self, db: Session, identity: Identity | None, fields: dict[str, Any]):
        require_identity(identity)
        with transaction(db):
            record = self.repo.create_content(db, fields)
        logger.info(f"Created {self.content_type.value} {record.id}")
        return record

    def update(self, db: Session, identity: Identity | None, content_id: str, fields: dict[str, Any]):
        require_identity(identity)
        with transaction(db):
            record = self.get(db, content_id)
            record = self.repo.update(db, record, {k: v for k, v in fields.items() if v is not None})
        logger.info(f"Updated {self.content_type.value} {content_id}")
        return record

    def delete(self, db: Session, identity: Identity | None, content_id: str) -> None:
        """Delete a record that no pathway item points at any more."""
        require_identity(identity)
        with transaction(db):
            record = self.get(db, content_id)
            users = pathway_repository.referencing_content(db, self.content_type.value, content_id)
            if users:
                raise Conflict(f"{self.content_type.value} is used by {len(users)} pathway(s)")
            db.delete(record)
            db.flush()
        logger.info(f"Deleted {self.content_type.value} {content_id}")


link_service = ContentService(ContentType.Link)
video_service = ContentService(ContentType.Video)
document_service = ContentService(ContentType.Document)
