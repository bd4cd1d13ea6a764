"""Workspace membership management.

Membership edges live on the workspace (``members``) and are mirrored in
each user's ``workspaces`` list; both sides change in one transaction.
Only the workspace owner manages members.
"""

from sqlalchemy.orm import Session

from learnpath.db import transaction
from learnpath.db.models import Workspace
from learnpath.errors import Conflict, NotFound
from learnpath.models.enums import Action, MemberRole
from learnpath.repositories import user_repository, workspace_repository
from learnpath.services.access_policy import access_policy
from learnpath.services.containment import containment_manager, require_identity
from learnpath.services.identity import Identity, membership_resolver
from learnpath.services.locks import lock_key, resource_locks
from learnpath.utils import get_logger

logger = get_logger(__name__)


def list_workspaces(db: Session, identity: Identity | None) -> list[Workspace]:
    return membership_resolver.workspaces_for(db, require_identity(identity))


def add_member(
    db: Session,
    identity: Identity | None,
    workspace_id: str,
    email: str,
    role: MemberRole = MemberRole.viewer,
) -> Workspace:
    with resource_locks.hold(lock_key("workspace", workspace_id)), transaction(db):
        workspace = containment_manager.load_workspace(db, workspace_id)
        access_policy.require(db, identity, workspace, Action.write)

        user = user_repository.get_by_email(db, email)
        if not user:
            raise NotFound("User not found")
        if user.id == workspace.owner_id:
            raise Conflict("User already owns this workspace")
        if any(m.get("user") == user.id for m in workspace.members or []):
            raise Conflict("User is already a member of this workspace")

        workspace_repository.update(
            db, workspace, {"members": [*workspace.members, {"user": user.id, "role": MemberRole(role).value}]}
        )
        user_repository.link_workspace(db, user, workspace.id)
    logger.info(f"Added {user.id} to workspace {workspace_id} as {MemberRole(role).value}")
    return workspace


def remove_member(db: Session, identity: Identity | None, workspace_id: str, user_id: str) -> Workspace:
    with resource_locks.hold(lock_key("workspace", workspace_id)), transaction(db):
        workspace = containment_manager.load_workspace(db, workspace_id)
        access_policy.require(db, identity, workspace, Action.write)

        if not any(m.get("user") == user_id for m in workspace.members or []):
            raise NotFound("Member not found")
        workspace_repository.update(
            db, workspace, {"members": [m for m in workspace.members if m.get("user") != user_id]}
        )
        user = user_repository.get_by_id(db, user_id)
        if user is not None:
            user_repository.unlink_workspace(db, user, workspace.id)
    logger.info(f"Removed {user_id} from workspace {workspace_id}")
    return workspace


def update_member_role(
    db: Session,
    identity: Identity | None,
    workspace_id: str,
    user_id: str,
    role: MemberRole,
) -> Workspace:
    with resource_locks.hold(lock_key("workspace", workspace_id)), transaction(db):
        workspace = containment_manager.load_workspace(db, workspace_id)
        access_policy.require(db, identity, workspace, Action.write)

        if not any(m.get("user") == user_id for m in workspace.members or []):
            raise NotFound("Member not found")
        members = [
            {**m, "role": MemberRole(role).value} if m.get("user") == user_id else m for m in workspace.members
        ]
        workspace_repository.update(db, workspace, {"members": members})
    logger.info(f"Changed role of {user_id} in workspace {workspace_id} to {MemberRole(role).value}")
    return workspace
