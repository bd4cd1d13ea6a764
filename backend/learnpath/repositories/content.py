"""Repositories for content records (links, videos, documents).

``content_repositories`` is the dispatch table that resolves a pathway
item's ``content`` id in the collection named by its ``type`` tag.
"""

from typing import Any

from sqlalchemy.orm import Session

from learnpath.db.models import Document, Link, Video
from learnpath.models.enums import ContentType
from learnpath.repositories.base import BaseRepository
from learnpath.utils import id_for_table


class ContentRepository(BaseRepository):
    """CRUD for one content table."""

    def create_content(self, db: Session, fields: dict[str, Any]):
        return self.create(db, {"id": id_for_table(self.model.__tablename__), **fields})


link_repository = ContentRepository(Link)
video_repository = ContentRepository(Video)
document_repository = ContentRepository(Document)

content_repositories: dict[ContentType, ContentRepository] = {
    ContentType.Link: link_repository,
    ContentType.Video: video_repository,
    ContentType.Document: document_repository,
}
