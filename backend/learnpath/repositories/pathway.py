"""Pathway repository for database operations."""

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from learnpath.db.models import Pathway
from learnpath.repositories.base import BaseRepository
from learnpath.utils import generate_id


class PathwayRepository(BaseRepository[Pathway]):
    """Repository for Pathway entity operations."""

    def __init__(self):
        super().__init__(Pathway)

    def create_pathway(
        self,
        db: Session,
        title: str,
        description: str | None = None,
        project_id: str | None = None,
        folder_id: str | None = None,
        visibility: str = "private",
    ) -> Pathway:
        pathway_data = {
            "id": generate_id("path"),
            "title": title,
            "description": description,
            "project_id": project_id,
            "folder_id": folder_id,
            "items": [],
            "sub_pathways": [],
            "visibility": visibility,
            "completed": False,
        }
        return self.create(db, pathway_data)

    def get_by_project(self, db: Session, project_id: str) -> list[Pathway]:
        stmt = select(Pathway).where(Pathway.project_id == project_id).order_by(Pathway.created_at)
        return list(db.execute(stmt).scalars().all())

    def count_completed(self, db: Session, project_ids: list[str]) -> int:
        if not project_ids:
            return 0
        stmt = select(func.count()).select_from(Pathway).where(
            Pathway.project_id.in_(project_ids),
            Pathway.completed.is_(True),
        )
        return db.execute(stmt).scalar_one()

    def delete_by_project(self, db: Session, project_id: str) -> int:
        result = db.execute(delete(Pathway).where(Pathway.project_id == project_id))
        return result.rowcount

    def delete_by_folders(self, db: Session, folder_ids: list[str]) -> int:
        if not folder_ids:
            return 0
        result = db.execute(delete(Pathway).where(Pathway.folder_id.in_(folder_ids)))
        return result.rowcount

    def referencing_content(self, db: Session, content_type: str, content_id: str) -> list[Pathway]:
        """Pathways with an item pointing at the given content record."""
        # JSON containment queries are dialect specific
        stmt = select(Pathway)
        return [
            p
            for p in db.execute(stmt).scalars().all()
            if any(i.get("type") == content_type and i.get("content") == content_id for i in p.items or [])
        ]


pathway_repository = PathwayRepository()
