"""Folder API endpoints."""

from fastapi import APIRouter, status

from learnpath.api.deps import CurrentIdentity, DbSession, ok
from learnpath.models.enums import ResourceKind
from learnpath.models.schemas import CreateFolderRequest, FolderOut, MoveFolderRequest, UpdateFolderRequest
from learnpath.services import containment_manager
from learnpath.services.views import folder_detail

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_folder(body: CreateFolderRequest, identity: CurrentIdentity, db: DbSession):
    """Create a folder under a parent folder, or at the root of a project.

    When both are given the parent folder wins.
    """
    folder = containment_manager.create_folder(
        db,
        identity,
        body.name,
        description=body.description,
        parent_folder_id=body.parentFolder,
        project_id=body.project,
        visibility=body.visibility,
    )
    return ok(FolderOut.from_model(folder))


@router.get("/{folder_id}")
def get_folder(folder_id: str, identity: CurrentIdentity, db: DbSession):
    folder = containment_manager.get_readable(db, identity, ResourceKind.folder, folder_id)
    return ok(folder_detail(db, identity, folder))


@router.put("/{folder_id}")
def update_folder(folder_id: str, body: UpdateFolderRequest, identity: CurrentIdentity, db: DbSession):
    folder = containment_manager.update_folder(db, identity, folder_id, body.model_dump())
    return ok(FolderOut.from_model(folder))


@router.put("/{folder_id}/move")
def move_folder(folder_id: str, body: MoveFolderRequest, identity: CurrentIdentity, db: DbSession):
    folder = containment_manager.move_folder(db, identity, folder_id, parent_folder_id=body.parentFolder)
    return ok(FolderOut.from_model(folder))


@router.delete("/{folder_id}")
def delete_folder(folder_id: str, identity: CurrentIdentity, db: DbSession):
    containment_manager.delete_folder(db, identity, folder_id)
    return ok(message="Folder deleted")
