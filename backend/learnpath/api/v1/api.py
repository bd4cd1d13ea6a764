"""API v1 Router Aggregator.

Aggregates all v1 API endpoints into a single router.
"""

from fastapi import APIRouter

from learnpath.api.v1.endpoints import auth, dashboard, folders, health, pathways, projects, users, workspaces
from learnpath.api.v1.endpoints.contents import documents_router, links_router, videos_router

api_router = APIRouter()

# Mount endpoint routers
api_router.include_router(health.router, prefix="/health", tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(workspaces.router, prefix="/workspaces", tags=["Workspaces"])
api_router.include_router(projects.router, prefix="/projects", tags=["Projects"])
api_router.include_router(folders.router, prefix="/folders", tags=["Folders"])
api_router.include_router(pathways.router, prefix="/pathways", tags=["Pathways"])
api_router.include_router(links_router, prefix="/links", tags=["Links"])
api_router.include_router(videos_router, prefix="/videos", tags=["Videos"])
api_router.include_router(documents_router, prefix="/documents", tags=["Documents"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
