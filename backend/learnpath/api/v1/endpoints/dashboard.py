"""Dashboard API endpoint."""

from fastapi import APIRouter

from learnpath.api.deps import CurrentIdentity, DbSession, ok
from learnpath.services.dashboard import get_stats

router = APIRouter()


@router.get("")
def dashboard_stats(identity: CurrentIdentity, db: DbSession):
    return ok(get_stats(db, identity))
