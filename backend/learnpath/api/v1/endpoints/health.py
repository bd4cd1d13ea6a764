"""Health check API endpoints."""

from fastapi import APIRouter

from learnpath.api.deps import AdminIdentity, DbSession, ok
from learnpath.db import check_connection
from learnpath.services import containment_manager

router = APIRouter()


@router.get("")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy" if check_connection() else "degraded"}


@router.get("/integrity")
def integrity_check(identity: AdminIdentity, db: DbSession):
    """List broken parent/child links (admin only)."""
    problems = containment_manager.check_integrity(db)
    return ok({"consistent": not problems, "problems": problems})
