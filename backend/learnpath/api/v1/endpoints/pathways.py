"""Pathway API endpoints, including item mutations."""

from fastapi import APIRouter, status

from learnpath.api.deps import CurrentIdentity, DbSession, ok
from learnpath.models.enums import ResourceKind
from learnpath.models.schemas import (
    AddItemRequest,
    CreatePathwayRequest,
    MovePathwayRequest,
    PathwayOut,
    ReorderItemRequest,
    UpdatePathwayRequest,
)
from learnpath.services import containment_manager, pathway_item_service

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_pathway(body: CreatePathwayRequest, identity: CurrentIdentity, db: DbSession):
    pathway = containment_manager.create_pathway(
        db,
        identity,
        body.title,
        description=body.description,
        folder_id=body.folder,
        project_id=body.project,
        visibility=body.visibility,
    )
    return ok(PathwayOut.from_model(pathway))


@router.get("/{pathway_id}")
def get_pathway(pathway_id: str, identity: CurrentIdentity, db: DbSession, populate: bool = False):
    """Get a pathway; ``populate`` resolves each item's content record."""
    pathway = containment_manager.get_readable(db, identity, ResourceKind.pathway, pathway_id)
    items = pathway_item_service.populate(db, pathway.items or []) if populate else None
    return ok(PathwayOut.from_model(pathway, items=items))


@router.put("/{pathway_id}")
def update_pathway(pathway_id: str, body: UpdatePathwayRequest, identity: CurrentIdentity, db: DbSession):
    pathway = containment_manager.update_pathway(db, identity, pathway_id, body.model_dump())
    return ok(PathwayOut.from_model(pathway))


@router.put("/{pathway_id}/move")
def move_pathway(pathway_id: str, body: MovePathwayRequest, identity: CurrentIdentity, db: DbSession):
    pathway = containment_manager.move_pathway(db, identity, pathway_id, folder_id=body.folder)
    return ok(PathwayOut.from_model(pathway))


@router.delete("/{pathway_id}")
def delete_pathway(pathway_id: str, identity: CurrentIdentity, db: DbSession):
    containment_manager.delete_pathway(db, identity, pathway_id)
    return ok(message="Pathway deleted")


# ==================== Items ====================


@router.post("/{pathway_id}/items", status_code=status.HTTP_201_CREATED)
def add_item(pathway_id: str, body: AddItemRequest, identity: CurrentIdentity, db: DbSession):
    """Insert an item at the head of the pathway; returns the full sequence."""
    items = pathway_item_service.add_item(db, identity, pathway_id, body.type, body.content)
    return ok(items)


@router.put("/{pathway_id}/items/reorder")
def reorder_item(pathway_id: str, body: ReorderItemRequest, identity: CurrentIdentity, db: DbSession):
    items = pathway_item_service.reorder_item(db, identity, pathway_id, body.fromIndex, body.toIndex)
    return ok(items)


@router.put("/{pathway_id}/items/{index}/toggle")
def toggle_item(pathway_id: str, index: int, identity: CurrentIdentity, db: DbSession):
    items = pathway_item_service.toggle_completed(db, identity, pathway_id, index)
    return ok(items)


@router.delete("/{pathway_id}/items/{index}")
def remove_item(pathway_id: str, index: int, identity: CurrentIdentity, db: DbSession):
    items = pathway_item_service.remove_item(db, identity, pathway_id, index)
    return ok(items)
