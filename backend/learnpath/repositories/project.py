"""Project repository for database operations."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from learnpath.db.models import Project
from learnpath.repositories.base import BaseRepository
from learnpath.utils import generate_id


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project entity operations."""

    def __init__(self):
        super().__init__(Project)

    def create_project(
        self,
        db: Session,
        owner_id: str,
        name: str,
        description: str | None = None,
        workspace_id: str | None = None,
        visibility: str = "private",
        parent_project_id: str | None = None,
    ) -> Project:
        project_data = {
            "id": generate_id("proj"),
            "name": name,
            "description": description,
            "owner_id": owner_id,
            "workspace_id": workspace_id,
            "parent_project_id": parent_project_id,
            "sub_projects": [],
            "folders": [],
            "pathways": [],
            "visibility": visibility,
        }
        return self.create(db, project_data)

    def get_by_owner(self, db: Session, owner_id: str, limit: int | None = None) -> list[Project]:
        """Projects owned by a user, newest first."""
        stmt = select(Project).where(Project.owner_id == owner_id).order_by(Project.created_at.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(db.execute(stmt).scalars().all())

    def get_by_workspace(self, db: Session, workspace_id: str) -> list[Project]:
        stmt = select(Project).where(Project.workspace_id == workspace_id).order_by(Project.created_at)
        return list(db.execute(stmt).scalars().all())


project_repository = ProjectRepository()
