"""Repository layer for database access.

Repositories wrap the CRUD queries of each entity; they flush but never
commit, so services compose them inside one transaction.

Usage:
    from learnpath.repositories import project_repository

    project = project_repository.get_by_id(db, project_id)
"""

from learnpath.repositories.content import (
    ContentRepository,
    content_repositories,
    document_repository,
    link_repository,
    video_repository,
)
from learnpath.repositories.folder import FolderRepository, folder_repository
from learnpath.repositories.pathway import PathwayRepository, pathway_repository
from learnpath.repositories.project import ProjectRepository, project_repository
from learnpath.repositories.user import UserRepository, user_repository
from learnpath.repositories.workspace import WorkspaceRepository, workspace_repository

__all__ = [
    "UserRepository",
    "user_repository",
    "WorkspaceRepository",
    "workspace_repository",
    "ProjectRepository",
    "project_repository",
    "FolderRepository",
    "folder_repository",
    "PathwayRepository",
    "pathway_repository",
    "ContentRepository",
    "content_repositories",
    "link_repository",
    "video_repository",
    "document_repository",
]
