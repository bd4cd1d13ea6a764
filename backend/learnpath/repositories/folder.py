"""Folder repository for database operations."""

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from learnpath.db.models import Folder
from learnpath.repositories.base import BaseRepository
from learnpath.utils import generate_id


class FolderRepository(BaseRepository[Folder]):
    """Repository for Folder entity operations."""

    def __init__(self):
        super().__init__(Folder)

    def create_folder(
        self,
        db: Session,
        project_id: str,
        name: str,
        description: str | None = None,
        parent_folder_id: str | None = None,
        visibility: str = "private",
    ) -> Folder:
        folder_data = {
            "id": generate_id("fold"),
            "name": name,
            "description": description,
            "project_id": project_id,
            "parent_folder_id": parent_folder_id,
            "sub_folders": [],
            "pathways": [],
            "visibility": visibility,
        }
        return self.create(db, folder_data)

    def get_by_project(self, db: Session, project_id: str) -> list[Folder]:
        stmt = select(Folder).where(Folder.project_id == project_id).order_by(Folder.created_at)
        return list(db.execute(stmt).scalars().all())

    def get_descendant_ids(self, db: Session, folder_id: str) -> list[str]:
        """Ids of all folders below ``folder_id``, parents before children.

        Walks the ``parent_folder_id`` pointers breadth first.
        """
        descendants: list[str] = []
        frontier = [folder_id]
        while frontier:
            stmt = select(Folder.id).where(Folder.parent_folder_id.in_(frontier))
            frontier = [fid for fid in db.execute(stmt).scalars().all() if fid not in descendants]
            descendants.extend(frontier)
        return descendants

    def delete_ids(self, db: Session, folder_ids: list[str]) -> int:
        """Delete folders one by one, in the given order."""
        deleted = 0
        for folder_id in folder_ids:
            result = db.execute(delete(Folder).where(Folder.id == folder_id))
            deleted += result.rowcount
        return deleted


folder_repository = FolderRepository()
