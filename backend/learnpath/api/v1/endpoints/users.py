"""User API endpoints."""

from fastapi import APIRouter

from learnpath.api.deps import AdminIdentity, CurrentIdentity, DbSession, ok
from learnpath.models.schemas import UpdateUserRequest, UserOut
from learnpath.services import user_service

router = APIRouter()


@router.get("")
def list_users(identity: AdminIdentity, db: DbSession, skip: int = 0, limit: int = 100):
    """List all users (admin only)."""
    users = user_service.list_users(db, identity, skip=skip, limit=limit)
    return ok([UserOut.from_model(u) for u in users])


@router.get("/{user_id}")
def get_user(user_id: str, identity: CurrentIdentity, db: DbSession):
    return ok(UserOut.from_model(user_service.get_user(db, user_id)))


@router.put("/{user_id}")
def update_user(user_id: str, body: UpdateUserRequest, identity: CurrentIdentity, db: DbSession):
    """Update a profile; users may only update themselves unless admin."""
    user = user_service.update_user(db, identity, user_id, name=body.name, email=body.email)
    return ok(UserOut.from_model(user))
