"""Identity context and workspace membership resolution."""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from learnpath.db.models import Workspace
from learnpath.models.enums import MemberRole, UserRole, WorkspaceRelation
from learnpath.repositories import user_repository, workspace_repository


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, passed explicitly into every service call."""

    id: str
    role: UserRole = UserRole.user

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin


class MembershipResolver:
    """Answers how an identity relates to a workspace.

    Only the owner/member/none distinction gates access; the member role is
    advisory metadata exposed for clients.
    """

    def role_in(self, identity: Identity | None, workspace: Workspace | None) -> WorkspaceRelation:
        if identity is None or workspace is None:
            return WorkspaceRelation.none
        if workspace.owner_id == identity.id:
            return WorkspaceRelation.owner
        if self.is_member(identity, workspace):
            return WorkspaceRelation.member
        return WorkspaceRelation.none

    def is_member(self, identity: Identity | None, workspace: Workspace | None) -> bool:
        """True if the identity appears in the workspace's explicit member list."""
        if identity is None or workspace is None:
            return False
        return any(m.get("user") == identity.id for m in workspace.members or [])

    def is_owner_or_member(self, identity: Identity | None, workspace: Workspace | None) -> bool:
        return self.role_in(identity, workspace) != WorkspaceRelation.none

    def member_role(self, identity: Identity | None, workspace: Workspace | None) -> MemberRole | None:
        if identity is None or workspace is None:
            return None
        for member in workspace.members or []:
            if member.get("user") == identity.id:
                return MemberRole(member.get("role", MemberRole.viewer.value))
        return None

    def workspaces_for(self, db: Session, identity: Identity) -> list[Workspace]:
        """Workspaces the identity owns or is a member of."""
        user = user_repository.get_by_id(db, identity.id)
        if user is None:
            return []
        return workspace_repository.get_for_user(db, user)


membership_resolver = MembershipResolver()
