"""Link, video and document API endpoints.

The three content types share one router shape, built per type.
"""

from fastapi import APIRouter, status
from pydantic import BaseModel

from learnpath.api.deps import CurrentIdentity, DbSession, ok
from learnpath.models.schemas import (
    DocumentOut,
    DocumentRequest,
    LinkOut,
    LinkRequest,
    VideoOut,
    VideoRequest,
)
from learnpath.services.content_service import (
    ContentService,
    document_service,
    link_service,
    video_service,
)


def build_content_router(
    service: ContentService,
    request_model: type[BaseModel],
    out_model: type[BaseModel],
) -> APIRouter:
    router = APIRouter()
    label = service.content_type.value

    @router.get("")
    def list_contents(identity: CurrentIdentity, db: DbSession, skip: int = 0, limit: int = 100):
        return ok([out_model.from_model(r) for r in service.list_all(db, skip=skip, limit=limit)])

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create_content(body: request_model, identity: CurrentIdentity, db: DbSession):  # type: ignore[valid-type]
        return ok(out_model.from_model(service.create(db, identity, body.model_dump())))

    @router.get("/{content_id}")
    def get_content(content_id: str, identity: CurrentIdentity, db: DbSession):
        return ok(out_model.from_model(service.get(db, content_id)))

    @router.put("/{content_id}")
    def update_content(content_id: str, body: request_model, identity: CurrentIdentity, db: DbSession):  # type: ignore[valid-type]
        return ok(out_model.from_model(service.update(db, identity, content_id, body.model_dump())))

    @router.delete("/{content_id}")
    def delete_content(content_id: str, identity: CurrentIdentity, db: DbSession):
        service.delete(db, identity, content_id)
        return ok(message=f"{label} deleted")

    return router


links_router = build_content_router(link_service, LinkRequest, LinkOut)
videos_router = build_content_router(video_service, VideoRequest, VideoOut)
documents_router = build_content_router(document_service, DocumentRequest, DocumentOut)
