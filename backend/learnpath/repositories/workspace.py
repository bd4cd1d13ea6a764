"""Workspace repository for database operations."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from learnpath.db.models import User, Workspace
from learnpath.repositories.base import BaseRepository
from learnpath.utils import generate_id


class WorkspaceRepository(BaseRepository[Workspace]):
    """Repository for Workspace entity operations."""

    def __init__(self):
        super().__init__(Workspace)

    def create_workspace(
        self,
        db: Session,
        owner_id: str,
        name: str,
        description: str | None = None,
        visibility: str = "private",
    ) -> Workspace:
        workspace_data = {
            "id": generate_id("ws"),
            "name": name,
            "description": description,
            "owner_id": owner_id,
            "members": [],
            "projects": [],
            "visibility": visibility,
        }
        return self.create(db, workspace_data)

    def get_by_owner(self, db: Session, owner_id: str, limit: int | None = None) -> list[Workspace]:
        """Workspaces owned by a user, newest first."""
        stmt = select(Workspace).where(Workspace.owner_id == owner_id).order_by(Workspace.created_at.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(db.execute(stmt).scalars().all())

    def get_for_user(self, db: Session, user: User) -> list[Workspace]:
        """Workspaces the user owns or is a member of.

        Membership is read from the user's back-linked workspace list, then
        confirmed against each workspace's own member list.
        """
        owned = self.get_by_owner(db, user.id)
        seen = {w.id for w in owned}
        joined = [
            w
            for w in self.get_many(db, user.workspaces or [])
            if w.id not in seen and any(m.get("user") == user.id for m in w.members or [])
        ]
        return owned + joined


workspace_repository = WorkspaceRepository()
