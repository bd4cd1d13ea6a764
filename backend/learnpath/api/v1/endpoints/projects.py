"""Project API endpoints."""

from fastapi import APIRouter, status

from learnpath.api.deps import CurrentIdentity, DbSession, ok
from learnpath.models.enums import ResourceKind
from learnpath.models.schemas import CreateProjectRequest, PathwayOut, ProjectOut, UpdateProjectRequest
from learnpath.repositories import project_repository
from learnpath.services import containment_manager
from learnpath.services.views import project_detail, project_tree, readable_pathways_in_project

router = APIRouter()


@router.get("")
def list_my_projects(identity: CurrentIdentity, db: DbSession):
    """Projects owned by the caller, newest first."""
    return ok([ProjectOut.from_model(p) for p in project_repository.get_by_owner(db, identity.id)])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_project(body: CreateProjectRequest, identity: CurrentIdentity, db: DbSession):
    project = containment_manager.create_project(
        db,
        identity,
        body.name,
        description=body.description,
        workspace_id=body.workspace,
        visibility=body.visibility,
    )
    return ok(ProjectOut.from_model(project))


@router.get("/{project_id}")
def get_project(project_id: str, identity: CurrentIdentity, db: DbSession):
    """Project with its folders and pathways populated."""
    project = containment_manager.get_readable(db, identity, ResourceKind.project, project_id)
    return ok(project_detail(db, identity, project))


@router.get("/{project_id}/tree")
def get_project_tree(project_id: str, identity: CurrentIdentity, db: DbSession):
    project = containment_manager.get_readable(db, identity, ResourceKind.project, project_id)
    return ok(project_tree(db, identity, project))


@router.get("/{project_id}/pathways")
def list_project_pathways(project_id: str, identity: CurrentIdentity, db: DbSession):
    containment_manager.get_readable(db, identity, ResourceKind.project, project_id)
    pathways = readable_pathways_in_project(db, identity, project_id)
    return ok([PathwayOut.from_model(p) for p in pathways])


@router.put("/{project_id}")
def update_project(project_id: str, body: UpdateProjectRequest, identity: CurrentIdentity, db: DbSession):
    project = containment_manager.update_project(db, identity, project_id, body.model_dump())
    return ok(ProjectOut.from_model(project))


@router.delete("/{project_id}")
def delete_project(project_id: str, identity: CurrentIdentity, db: DbSession):
    """Delete a project with all of its folders and pathways."""
    containment_manager.delete_project(db, identity, project_id)
    return ok(message="Project deleted")


@router.delete("/{project_id}/folders/{folder_id}")
def delete_folder_from_project(project_id: str, folder_id: str, identity: CurrentIdentity, db: DbSession):
    containment_manager.delete_folder_from_project(db, identity, project_id, folder_id)
    return ok(message="Folder deleted")


@router.delete("/{project_id}/pathways/{pathway_id}")
def delete_pathway_from_project(project_id: str, pathway_id: str, identity: CurrentIdentity, db: DbSession):
    containment_manager.delete_pathway_from_project(db, identity, project_id, pathway_id)
    return ok(message="Pathway deleted")
