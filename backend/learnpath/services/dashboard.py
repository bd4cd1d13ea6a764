"""Per-user dashboard statistics."""

from sqlalchemy.orm import Session

from learnpath.models.schemas import DashboardStats
from learnpath.repositories import pathway_repository, project_repository, workspace_repository
from learnpath.services.containment import require_identity
from learnpath.services.identity import Identity

RECENT_PROJECTS = 3
RECENT_WORKSPACES = 2


def get_stats(db: Session, identity: Identity | None) -> DashboardStats:
    """Totals over what the user owns, plus the latest projects and workspaces."""
    identity = require_identity(identity)
    workspaces = workspace_repository.get_by_owner(db, identity.id)
    projects = project_repository.get_by_owner(db, identity.id)

    activity = [
        {"type": "project", "id": p.id, "name": p.name, "createdAt": p.created_at}
        for p in projects[:RECENT_PROJECTS]
    ] + [
        {"type": "workspace", "id": w.id, "name": w.name, "createdAt": w.created_at}
        for w in workspaces[:RECENT_WORKSPACES]
    ]
    activity.sort(key=lambda a: a["createdAt"], reverse=True)

    return DashboardStats(
        totalWorkspaces=len(workspaces),
        totalProjects=len(projects),
        completedPathways=pathway_repository.count_completed(db, [p.id for p in projects]),
        recentActivity=activity,
    )
