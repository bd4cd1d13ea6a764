"""Read models: populated project and folder views and the project tree.

Children the caller may not read are left out.
"""

from typing import Any

from sqlalchemy.orm import Session

from learnpath.db.models import Folder, Project
from learnpath.models.schemas import FolderOut, PathwayOut, ProjectOut
from learnpath.repositories import folder_repository, pathway_repository, project_repository
from learnpath.services.access_policy import access_policy
from learnpath.services.identity import Identity


def _readable(db: Session, identity: Identity | None, records: list) -> list:
    return [r for r in records if access_policy.can_read(db, identity, r)]


def project_detail(db: Session, identity: Identity | None, project: Project) -> ProjectOut:
    folders = _readable(db, identity, folder_repository.get_many(db, project.folders or []))
    pathways = _readable(db, identity, pathway_repository.get_many(db, project.pathways or []))
    return ProjectOut.from_model(
        project,
        folders=[FolderOut.from_model(f) for f in folders],
        pathways=[PathwayOut.from_model(p) for p in pathways],
    )


def folder_detail(db: Session, identity: Identity | None, folder: Folder) -> FolderOut:
    sub_folders = _readable(db, identity, folder_repository.get_many(db, folder.sub_folders or []))
    pathways = _readable(db, identity, pathway_repository.get_many(db, folder.pathways or []))
    return FolderOut.from_model(
        folder,
        sub_folders=[FolderOut.from_model(f) for f in sub_folders],
        pathways=[PathwayOut.from_model(p) for p in pathways],
    )


def project_tree(db: Session, identity: Identity | None, project: Project) -> dict[str, Any]:
    """Nested folders with their pathways, in the stored child order."""
    folders = {f.id: f for f in folder_repository.get_by_project(db, project.id)}
    pathways = {p.id: p for p in pathway_repository.get_by_project(db, project.id)}

    def pathway_nodes(ids: list[str]) -> list[dict[str, Any]]:
        return [
            {"id": p.id, "title": p.title, "completed": bool(p.completed), "itemCount": len(p.items or [])}
            for p in (pathways[i] for i in ids if i in pathways)
            if access_policy.can_read(db, identity, p)
        ]

    def folder_node(folder: Folder, seen: set[str]) -> dict[str, Any]:
        seen = seen | {folder.id}
        return {
            "id": folder.id,
            "name": folder.name,
            "folders": [
                folder_node(folders[i], seen)
                for i in folder.sub_folders or []
                if i in folders and i not in seen and access_policy.can_read(db, identity, folders[i])
            ],
            "pathways": pathway_nodes(folder.pathways or []),
        }

    return {
        "id": project.id,
        "name": project.name,
        "folders": [
            folder_node(folders[i], set())
            for i in project.folders or []
            if i in folders and access_policy.can_read(db, identity, folders[i])
        ],
        "pathways": pathway_nodes(project.pathways or []),
    }


def readable_projects_in_workspace(db: Session, identity: Identity | None, workspace_id: str) -> list[Project]:
    return _readable(db, identity, project_repository.get_by_workspace(db, workspace_id))


def readable_pathways_in_project(db: Session, identity: Identity | None, project_id: str) -> list:
    return _readable(db, identity, pathway_repository.get_by_project(db, project_id))
