"""Workspace API endpoints, including membership management."""

from fastapi import APIRouter, status

from learnpath.api.deps import CurrentIdentity, DbSession, ok
from learnpath.models.enums import ResourceKind
from learnpath.models.schemas import (
    AddMemberRequest,
    CreateWorkspaceRequest,
    ProjectOut,
    UpdateMemberRequest,
    UpdateWorkspaceRequest,
    WorkspaceOut,
)
from learnpath.services import containment_manager, workspace_service
from learnpath.services.views import readable_projects_in_workspace

router = APIRouter()


@router.get("")
def list_workspaces(identity: CurrentIdentity, db: DbSession):
    """Workspaces the caller owns or is a member of."""
    workspaces = workspace_service.list_workspaces(db, identity)
    return ok([WorkspaceOut.from_model(w) for w in workspaces])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_workspace(body: CreateWorkspaceRequest, identity: CurrentIdentity, db: DbSession):
    workspace = containment_manager.create_workspace(
        db, identity, body.name, description=body.description, visibility=body.visibility
    )
    return ok(WorkspaceOut.from_model(workspace))


@router.get("/{workspace_id}")
def get_workspace(workspace_id: str, identity: CurrentIdentity, db: DbSession):
    workspace = containment_manager.get_readable(db, identity, ResourceKind.workspace, workspace_id)
    return ok(WorkspaceOut.from_model(workspace))


@router.put("/{workspace_id}")
def update_workspace(workspace_id: str, body: UpdateWorkspaceRequest, identity: CurrentIdentity, db: DbSession):
    workspace = containment_manager.update_workspace(db, identity, workspace_id, body.model_dump())
    return ok(WorkspaceOut.from_model(workspace))


@router.delete("/{workspace_id}")
def delete_workspace(workspace_id: str, identity: CurrentIdentity, db: DbSession):
    """Delete a workspace and every project filed in it (owner only)."""
    containment_manager.delete_workspace(db, identity, workspace_id)
    return ok(message="Workspace deleted")


@router.get("/{workspace_id}/projects")
def list_workspace_projects(workspace_id: str, identity: CurrentIdentity, db: DbSession):
    """Projects of a readable workspace that the caller may read."""
    containment_manager.get_readable(db, identity, ResourceKind.workspace, workspace_id)
    projects = readable_projects_in_workspace(db, identity, workspace_id)
    return ok([ProjectOut.from_model(p) for p in projects])


# ==================== Members ====================


@router.post("/{workspace_id}/members", status_code=status.HTTP_201_CREATED)
def add_member(workspace_id: str, body: AddMemberRequest, identity: CurrentIdentity, db: DbSession):
    workspace = workspace_service.add_member(db, identity, workspace_id, body.email, body.role)
    return ok(WorkspaceOut.from_model(workspace))


@router.put("/{workspace_id}/members/{user_id}")
def update_member(
    workspace_id: str,
    user_id: str,
    body: UpdateMemberRequest,
    identity: CurrentIdentity,
    db: DbSession,
):
    workspace = workspace_service.update_member_role(db, identity, workspace_id, user_id, body.role)
    return ok(WorkspaceOut.from_model(workspace))


@router.delete("/{workspace_id}/members/{user_id}")
def remove_member(workspace_id: str, user_id: str, identity: CurrentIdentity, db: DbSession):
    workspace = workspace_service.remove_member(db, identity, workspace_id, user_id)
    return ok(WorkspaceOut.from_model(workspace))
