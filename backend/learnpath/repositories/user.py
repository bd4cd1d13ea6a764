"""User repository for database operations."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from learnpath.db.models import User
from learnpath.repositories.base import BaseRepository
from learnpath.utils import generate_id


class UserRepository(BaseRepository[User]):
    """Repository for User entity operations."""

    def __init__(self):
        super().__init__(User)

    def get_by_email(self, db: Session, email: str) -> User | None:
        """Get user by email (case-insensitive)."""
        stmt = select(User).where(User.email == email.lower())
        result = db.execute(stmt)
        return result.scalar_one_or_none()

    def create_user(
        self,
        db: Session,
        name: str,
        email: str,
        hashed_password: str,
        role: str = "user",
    ) -> User:
        """Create a new user with an empty workspace list."""
        user_data = {
            "id": generate_id("user"),
            "name": name,
            "email": email.lower(),
            "hashed_password": hashed_password,
            "role": role,
            "workspaces": [],
        }
        return self.create(db, user_data)

    def link_workspace(self, db: Session, user: User, workspace_id: str) -> None:
        if workspace_id not in user.workspaces:
            user.workspaces = [*user.workspaces, workspace_id]
            db.flush()

    def unlink_workspace(self, db: Session, user: User, workspace_id: str) -> None:
        if workspace_id in user.workspaces:
            user.workspaces = [w for w in user.workspaces if w != workspace_id]
            db.flush()


user_repository = UserRepository()
