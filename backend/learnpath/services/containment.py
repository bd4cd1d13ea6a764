"""Hierarchical containment manager.

Owns the Workspace -> Project -> Folder -> Pathway hierarchy. Parents keep
ordered id lists of their children and children keep pointers back to
their parents; every operation here updates both directions inside one
transaction, so a failed cascade leaves nothing half deleted.

Mutations take the locks of every record they link or unlink in one
sorted acquisition, and every row update or delete checks its version
stamp.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.orm import Session

from learnpath.db import transaction
from learnpath.db.models import Folder, Pathway, Project, User, Workspace
from learnpath.errors import Forbidden, NotFound, StaleWrite, Unauthenticated, ValidationError
from learnpath.models.enums import ALLOWED_VISIBILITY, Action, ResourceKind, Visibility
from learnpath.repositories import (
    content_repositories,
    folder_repository,
    pathway_repository,
    project_repository,
    user_repository,
    workspace_repository,
)
from learnpath.repositories.base import pull_id, push_id
from learnpath.services.access_policy import AccessPolicy, access_policy
from learnpath.services.identity import Identity, MembershipResolver, membership_resolver
from learnpath.services.locks import lock_key, resource_locks
from learnpath.utils import get_logger

logger = get_logger(__name__)

LOCK_PLAN_ATTEMPTS = 5


def check_visibility(kind: ResourceKind, visibility: str | Visibility) -> str:
    """Validate a visibility value for a resource kind and return its string form."""
    try:
        value = Visibility(visibility)
    except ValueError as e:
        raise ValidationError(f"Invalid visibility: {visibility}") from e
    if value not in ALLOWED_VISIBILITY[kind]:
        raise ValidationError(f"Visibility '{value.value}' is not allowed for a {kind.value}")
    return value.value


def require_identity(identity: Identity | None) -> Identity:
    if identity is None:
        raise Unauthenticated()
    return identity


class ContainmentManager:
    """Creates, moves, updates and deletes records of the hierarchy."""

    def __init__(
        self,
        policy: AccessPolicy = access_policy,
        resolver: MembershipResolver = membership_resolver,
    ):
        self.policy = policy
        self.resolver = resolver

    # ==================== Loading ====================

    def load_workspace(self, db: Session, workspace_id: str) -> Workspace:
        workspace = workspace_repository.get_by_id(db, workspace_id)
        if not workspace:
            raise NotFound("Workspace not found")
        return workspace

    def load_project(self, db: Session, project_id: str) -> Project:
        project = project_repository.get_by_id(db, project_id)
        if not project:
            raise NotFound("Project not found")
        return project

    def load_folder(self, db: Session, folder_id: str) -> Folder:
        folder = folder_repository.get_by_id(db, folder_id)
        if not folder:
            raise NotFound("Folder not found")
        return folder

    def load_pathway(self, db: Session, pathway_id: str) -> Pathway:
        pathway = pathway_repository.get_by_id(db, pathway_id)
        if not pathway:
            raise NotFound("Pathway not found")
        return pathway

    def get_readable(self, db: Session, identity: Identity | None, kind: ResourceKind, resource_id: str):
        """Load a record and check read access on it."""
        loaders = {
            ResourceKind.workspace: self.load_workspace,
            ResourceKind.project: self.load_project,
            ResourceKind.folder: self.load_folder,
            ResourceKind.pathway: self.load_pathway,
        }
        resource = loaders[kind](db, resource_id)
        self.policy.require(db, identity, resource, Action.read)
        return resource

    # ==================== Create ====================

    def create_workspace(
        self,
        db: Session,
        identity: Identity | None,
        name: str,
        description: str | None = None,
        visibility: str = Visibility.private.value,
    ) -> Workspace:
        identity = require_identity(identity)
        with resource_locks.hold(lock_key("user", identity.id)), transaction(db):
            owner = user_repository.get_by_id(db, identity.id)
            if not owner:
                raise NotFound("User not found")
            workspace = self.create_workspace_for(db, owner, name, description, visibility)
        logger.info(f"Created workspace {workspace.id} for {identity.id}")
        return workspace

    def create_workspace_for(
        self,
        db: Session,
        owner: User,
        name: str,
        description: str | None = None,
        visibility: str = Visibility.private.value,
    ) -> Workspace:
        """Create a workspace and link it to its owner; the caller owns the transaction."""
        visibility = check_visibility(ResourceKind.workspace, visibility)
        workspace = workspace_repository.create_workspace(db, owner.id, name, description, visibility)
        user_repository.link_workspace(db, owner, workspace.id)
        return workspace

    def create_project(
        self,
        db: Session,
        identity: Identity | None,
        name: str,
        description: str | None = None,
        workspace_id: str | None = None,
        visibility: str = Visibility.private.value,
    ) -> Project:
        identity = require_identity(identity)
        visibility = check_visibility(ResourceKind.project, visibility)
        with resource_locks.hold(lock_key("workspace", workspace_id)), transaction(db):
            workspace = None
            if workspace_id:
                workspace = self.load_workspace(db, workspace_id)
                if not self.resolver.is_owner_or_member(identity, workspace):
                    logger.warning(f"Denied project creation in workspace {workspace_id} for {identity.id}")
                    raise Forbidden("User not authorized to add projects to this workspace")
            project = project_repository.create_project(
                db, identity.id, name, description, workspace_id, visibility
            )
            if workspace is not None:
                push_id(workspace, "projects", project.id)
        logger.info(f"Created project {project.id} in workspace {workspace_id}")
        return project

    def create_folder(
        self,
        db: Session,
        identity: Identity | None,
        name: str,
        description: str | None = None,
        parent_folder_id: str | None = None,
        project_id: str | None = None,
        visibility: str = Visibility.private.value,
    ) -> Folder:
        identity = require_identity(identity)
        visibility = check_visibility(ResourceKind.folder, visibility)
        if not parent_folder_id and not project_id:
            raise ValidationError("A folder needs a parent folder or a project")

        parent_key = lock_key("folder", parent_folder_id) or lock_key("project", project_id)
        with resource_locks.hold(parent_key), transaction(db):
            if parent_folder_id:
                parent = self.load_folder(db, parent_folder_id)
                self.policy.require(db, identity, parent, Action.write)
                folder = folder_repository.create_folder(
                    db, parent.project_id, name, description, parent.id, visibility
                )
                push_id(parent, "sub_folders", folder.id)
            else:
                project = self.load_project(db, project_id)
                self.policy.require(db, identity, project, Action.write)
                folder = folder_repository.create_folder(db, project.id, name, description, None, visibility)
                push_id(project, "folders", folder.id)
        logger.info(f"Created folder {folder.id} in project {folder.project_id}")
        return folder

    def create_pathway(
        self,
        db: Session,
        identity: Identity | None,
        title: str,
        description: str | None = None,
        folder_id: str | None = None,
        project_id: str | None = None,
        visibility: str = Visibility.private.value,
    ) -> Pathway:
        identity = require_identity(identity)
        visibility = check_visibility(ResourceKind.pathway, visibility)
        if not folder_id and not project_id:
            raise ValidationError("A pathway needs a folder or a project")

        parent_key = lock_key("folder", folder_id) or lock_key("project", project_id)
        with resource_locks.hold(parent_key), transaction(db):
            if folder_id:
                folder = self.load_folder(db, folder_id)
                self.policy.require(db, identity, folder, Action.write)
                pathway = pathway_repository.create_pathway(
                    db, title, description, folder.project_id, folder.id, visibility
                )
                push_id(folder, "pathways", pathway.id)
            else:
                project = self.load_project(db, project_id)
                self.policy.require(db, identity, project, Action.write)
                pathway = pathway_repository.create_pathway(db, title, description, project.id, None, visibility)
                push_id(project, "pathways", pathway.id)
        logger.info(f"Created pathway {pathway.id} in project {pathway.project_id}")
        return pathway

    # ==================== Update ====================

    def update_workspace(self, db: Session, identity: Identity | None, workspace_id: str, fields: dict[str, Any]) -> Workspace:
        with resource_locks.hold(lock_key("workspace", workspace_id)), transaction(db):
            workspace = self.load_workspace(db, workspace_id)
            self.policy.require(db, identity, workspace, Action.write)
            workspace = workspace_repository.update(db, workspace, self._clean(ResourceKind.workspace, fields))
        logger.info(f"Updated workspace {workspace_id}")
        return workspace

    def update_project(self, db: Session, identity: Identity | None, project_id: str, fields: dict[str, Any]) -> Project:
        with resource_locks.hold(lock_key("project", project_id)), transaction(db):
            project = self.load_project(db, project_id)
            self.policy.require(db, identity, project, Action.write)
            project = project_repository.update(db, project, self._clean(ResourceKind.project, fields))
        logger.info(f"Updated project {project_id}")
        return project

    def update_folder(self, db: Session, identity: Identity | None, folder_id: str, fields: dict[str, Any]) -> Folder:
        with resource_locks.hold(lock_key("folder", folder_id)), transaction(db):
            folder = self.load_folder(db, folder_id)
            self.policy.require(db, identity, folder, Action.write)
            folder = folder_repository.update(db, folder, self._clean(ResourceKind.folder, fields))
        logger.info(f"Updated folder {folder_id}")
        return folder

    def update_pathway(self, db: Session, identity: Identity | None, pathway_id: str, fields: dict[str, Any]) -> Pathway:
        with resource_locks.hold(lock_key("pathway", pathway_id)), transaction(db):
            pathway = self.load_pathway(db, pathway_id)
            self.policy.require(db, identity, pathway, Action.write)
            pathway = pathway_repository.update(db, pathway, self._clean(ResourceKind.pathway, fields))
        logger.info(f"Updated pathway {pathway_id}")
        return pathway

    @staticmethod
    def _clean(kind: ResourceKind, fields: dict[str, Any]) -> dict[str, Any]:
        """Drop unset values and validate visibility; structural fields are not editable here."""
        editable = {"name", "title", "description", "visibility", "completed"}
        cleaned = {k: v for k, v in fields.items() if k in editable and v is not None}
        if "visibility" in cleaned:
            cleaned["visibility"] = check_visibility(kind, cleaned["visibility"])
        return cleaned

    # ==================== Locking ====================

    @contextmanager
    def _locked(self, db: Session, plan: Callable[[], list[str]]) -> Iterator[None]:
        """Hold every lock ``plan`` names in one sorted acquisition, inside one transaction.

        ``plan`` reads the current parent pointers of the records to mutate.
        It runs once unlocked and again under the locks; if a concurrent
        mutation re-filed a record in between, the locks are dropped and the
        plan is retried.
        """
        for _ in range(LOCK_PLAN_ATTEMPTS):
            keys = set(plan())
            db.rollback()
            with resource_locks.hold(*keys):
                if set(plan()) == keys:
                    with transaction(db):
                        yield
                    return
            db.rollback()
        logger.warning(f"Gave up locking {sorted(keys)} after {LOCK_PLAN_ATTEMPTS} attempts")
        raise StaleWrite()

    def _folder_keys(self, db: Session, folder_id: str, *extra: str) -> list[str]:
        folder = self.load_folder(db, folder_id)
        return [
            lock_key("folder", folder.id),
            lock_key("folder", folder.parent_folder_id),
            lock_key("project", folder.project_id),
            *extra,
        ]

    def _pathway_keys(self, db: Session, pathway_id: str, *extra: str) -> list[str]:
        pathway = self.load_pathway(db, pathway_id)
        project = self.policy.governing_project(db, pathway)
        return [
            lock_key("pathway", pathway.id),
            lock_key("folder", pathway.folder_id),
            lock_key("project", project.id if project else None),
            *extra,
        ]

    def _project_keys(self, db: Session, project_id: str) -> list[str]:
        project = self.load_project(db, project_id)
        return [lock_key("project", project.id), lock_key("workspace", project.workspace_id)]

    # ==================== Move ====================

    def move_folder(
        self,
        db: Session,
        identity: Identity | None,
        folder_id: str,
        parent_folder_id: str | None = None,
    ) -> Folder:
        """Re-file a folder under another folder of its project, or at the project root."""
        if parent_folder_id and parent_folder_id == folder_id:
            raise ValidationError("Cannot move a folder into itself")

        with self._locked(db, lambda: self._folder_keys(db, folder_id, lock_key("folder", parent_folder_id))):
            folder = self.load_folder(db, folder_id)
            self.policy.require(db, identity, folder, Action.write)
            project = self.load_project(db, folder.project_id)

            target = None
            if parent_folder_id:
                target = self.load_folder(db, parent_folder_id)
                if target.project_id != folder.project_id:
                    raise ValidationError("Cannot move a folder to another project")
                if target.id in folder_repository.get_descendant_ids(db, folder.id):
                    raise ValidationError("Cannot move a folder into one of its sub-folders")

            self._detach_folder(db, folder, project)
            if target is not None:
                push_id(target, "sub_folders", folder.id)
            else:
                push_id(project, "folders", folder.id)
            folder_repository.update(db, folder, {"parent_folder_id": parent_folder_id or None})
        logger.info(f"Moved folder {folder_id} under {parent_folder_id or project.id}")
        return folder

    def move_pathway(
        self,
        db: Session,
        identity: Identity | None,
        pathway_id: str,
        folder_id: str | None = None,
    ) -> Pathway:
        """Re-file a pathway under a folder of its project, or at the project root."""
        with self._locked(db, lambda: self._pathway_keys(db, pathway_id, lock_key("folder", folder_id))):
            pathway = self.load_pathway(db, pathway_id)
            self.policy.require(db, identity, pathway, Action.write)
            project = self.policy.governing_project(db, pathway)
            if project is None:
                raise NotFound("Project not found")

            target = None
            if folder_id:
                target = self.load_folder(db, folder_id)
                if target.project_id != project.id:
                    raise ValidationError("Cannot move a pathway to another project")

            self._detach_pathway(db, pathway)
            if target is not None:
                push_id(target, "pathways", pathway.id)
            else:
                push_id(project, "pathways", pathway.id)
            pathway_repository.update(db, pathway, {"folder_id": folder_id or None, "project_id": project.id})
        logger.info(f"Moved pathway {pathway_id} under {folder_id or project.id}")
        return pathway

    # ==================== Delete ====================

    def delete_workspace(self, db: Session, identity: Identity | None, workspace_id: str) -> None:
        """Delete a workspace, every project filed in it, and its membership back-links."""

        def plan() -> list[str]:
            workspace = self.load_workspace(db, workspace_id)
            user_ids = [workspace.owner_id] + [m.get("user") for m in workspace.members or []]
            return [
                lock_key("workspace", workspace.id),
                *(lock_key("project", p) for p in self._workspace_project_ids(db, workspace)),
                *(lock_key("user", u) for u in user_ids),
            ]

        with self._locked(db, plan):
            workspace = self.load_workspace(db, workspace_id)
            self.policy.require(db, identity, workspace, Action.delete)

            project_ids = self._workspace_project_ids(db, workspace)
            for project in project_repository.get_many(db, project_ids):
                self._cascade_project(db, project, detach=False)

            user_ids = [workspace.owner_id] + [m.get("user") for m in workspace.members or []]
            for user in user_repository.get_many(db, user_ids):
                user_repository.unlink_workspace(db, user, workspace.id)

            db.delete(workspace)
            db.flush()
        logger.info(f"Deleted workspace {workspace_id} with {len(project_ids)} projects")

    @staticmethod
    def _workspace_project_ids(db: Session, workspace: Workspace) -> list[str]:
        project_ids = list(workspace.projects or [])
        project_ids += [p.id for p in project_repository.get_by_workspace(db, workspace.id) if p.id not in project_ids]
        return project_ids

    def delete_project(self, db: Session, identity: Identity | None, project_id: str) -> None:
        """Delete a project with all of its folders and pathways."""
        with self._locked(db, lambda: self._project_keys(db, project_id)):
            project = self.load_project(db, project_id)
            self.policy.require(db, identity, project, Action.delete)
            self._cascade_project(db, project)
        logger.info(f"Deleted project {project_id}")

    def delete_folder(self, db: Session, identity: Identity | None, folder_id: str) -> None:
        """Delete a folder with its sub-folders and the pathways filed in them."""
        with self._locked(db, lambda: self._folder_keys(db, folder_id)):
            folder = self.load_folder(db, folder_id)
            self.policy.require(db, identity, folder, Action.delete)
            self._cascade_folder(db, folder)
        logger.info(f"Deleted folder {folder_id}")

    def delete_pathway(self, db: Session, identity: Identity | None, pathway_id: str) -> None:
        with self._locked(db, lambda: self._pathway_keys(db, pathway_id)):
            pathway = self.load_pathway(db, pathway_id)
            self.policy.require(db, identity, pathway, Action.delete)
            self._cascade_pathway(db, pathway)
        logger.info(f"Deleted pathway {pathway_id}")

    def delete_folder_from_project(
        self,
        db: Session,
        identity: Identity | None,
        project_id: str,
        folder_id: str,
    ) -> None:
        """Delete a folder addressed through its project; the project owner only."""

        def plan() -> list[str]:
            keys = [lock_key("project", project_id)]
            if folder_repository.get_by_id(db, folder_id) is not None:
                keys += self._folder_keys(db, folder_id)
            return keys

        with self._locked(db, plan):
            project = self.load_project(db, project_id)
            self.policy.require(db, identity, project, Action.delete)
            folder = folder_repository.get_by_id(db, folder_id)
            if not folder or folder.project_id != project.id:
                raise NotFound("Folder not found in this project")
            self._cascade_folder(db, folder)
        logger.info(f"Deleted folder {folder_id} from project {project_id}")

    def delete_pathway_from_project(
        self,
        db: Session,
        identity: Identity | None,
        project_id: str,
        pathway_id: str,
    ) -> None:
        """Delete a pathway addressed through its project; the project owner only."""

        def plan() -> list[str]:
            keys = [lock_key("project", project_id)]
            if pathway_repository.get_by_id(db, pathway_id) is not None:
                keys += self._pathway_keys(db, pathway_id)
            return keys

        with self._locked(db, plan):
            project = self.load_project(db, project_id)
            self.policy.require(db, identity, project, Action.delete)
            pathway = pathway_repository.get_by_id(db, pathway_id)
            governing = self.policy.governing_project(db, pathway) if pathway else None
            if governing is None or governing.id != project.id:
                raise NotFound("Pathway not found in this project")
            self._cascade_pathway(db, pathway)
        logger.info(f"Deleted pathway {pathway_id} from project {project_id}")

    # ==================== Cascades ====================
    # Run inside the caller's transaction; nothing here commits.
    # Children go through bulk deletes; the root row is deleted through the
    # session so its version stamp is checked.

    def _cascade_project(self, db: Session, project: Project, detach: bool = True) -> None:
        folders = folder_repository.get_by_project(db, project.id)
        folder_ids = [f.id for f in folders]

        pathway_repository.delete_by_project(db, project.id)
        pathway_repository.delete_by_folders(db, folder_ids)
        folder_repository.delete_ids(db, _children_first(folders))

        if detach and project.workspace_id:
            workspace = workspace_repository.get_by_id(db, project.workspace_id)
            if workspace is not None:
                pull_id(workspace, "projects", project.id)

        db.delete(project)
        db.flush()

    def _cascade_folder(self, db: Session, folder: Folder) -> None:
        descendant_ids = folder_repository.get_descendant_ids(db, folder.id)
        pathway_repository.delete_by_folders(db, [folder.id, *descendant_ids])

        project = project_repository.get_by_id(db, folder.project_id)
        self._detach_folder(db, folder, project)

        folder_repository.delete_ids(db, list(reversed(descendant_ids)))
        db.delete(folder)
        db.flush()

    def _cascade_pathway(self, db: Session, pathway: Pathway) -> None:
        self._detach_pathway(db, pathway)
        db.delete(pathway)
        db.flush()

    def _detach_folder(self, db: Session, folder: Folder, project: Project | None) -> None:
        if folder.parent_folder_id:
            parent = folder_repository.get_by_id(db, folder.parent_folder_id)
            if parent is not None:
                pull_id(parent, "sub_folders", folder.id)
        if project is not None:
            pull_id(project, "folders", folder.id)

    def _detach_pathway(self, db: Session, pathway: Pathway) -> None:
        if pathway.folder_id:
            folder = folder_repository.get_by_id(db, pathway.folder_id)
            if folder is not None:
                pull_id(folder, "pathways", pathway.id)
        if pathway.project_id:
            project = project_repository.get_by_id(db, pathway.project_id)
            if project is not None:
                pull_id(project, "pathways", pathway.id)

    # ==================== Integrity ====================

    def check_integrity(self, db: Session) -> list[str]:
        """Report broken links between parents and children.

        Returns a list of human readable problems; an empty list means every
        child id listed by a parent resolves to a record pointing back at
        that parent, and every parent pointer is listed by its parent.
        """
        problems: list[str] = []
        users = {u.id: u for u in db.query(User).all()}
        workspaces = {w.id: w for w in db.query(Workspace).all()}
        projects = {p.id: p for p in db.query(Project).all()}
        folders = {f.id: f for f in db.query(Folder).all()}
        pathways = {p.id: p for p in db.query(Pathway).all()}

        for ws in workspaces.values():
            if ws.owner_id not in users:
                problems.append(f"Workspace {ws.id} has missing owner {ws.owner_id}")
            for pid in ws.projects or []:
                project = projects.get(pid)
                if project is None:
                    problems.append(f"Workspace {ws.id} lists missing project {pid}")
                elif project.workspace_id != ws.id:
                    problems.append(f"Workspace {ws.id} lists project {pid} filed under {project.workspace_id}")
            for member in ws.members or []:
                if member.get("user") not in users:
                    problems.append(f"Workspace {ws.id} has missing member {member.get('user')}")

        for user in users.values():
            for wid in user.workspaces or []:
                if wid not in workspaces:
                    problems.append(f"User {user.id} lists missing workspace {wid}")

        for project in projects.values():
            if project.workspace_id:
                ws = workspaces.get(project.workspace_id)
                if ws is None:
                    problems.append(f"Project {project.id} points at missing workspace {project.workspace_id}")
                elif project.id not in (ws.projects or []):
                    problems.append(f"Project {project.id} is not listed by workspace {ws.id}")
            for fid in project.folders or []:
                folder = folders.get(fid)
                if folder is None:
                    problems.append(f"Project {project.id} lists missing folder {fid}")
                elif folder.project_id != project.id or folder.parent_folder_id:
                    problems.append(f"Project {project.id} lists folder {fid} filed elsewhere")
            for pid in project.pathways or []:
                pathway = pathways.get(pid)
                if pathway is None:
                    problems.append(f"Project {project.id} lists missing pathway {pid}")
                elif pathway.project_id != project.id or pathway.folder_id:
                    problems.append(f"Project {project.id} lists pathway {pid} filed elsewhere")

        for folder in folders.values():
            project = projects.get(folder.project_id)
            if project is None:
                problems.append(f"Folder {folder.id} points at missing project {folder.project_id}")
            if folder.parent_folder_id:
                parent = folders.get(folder.parent_folder_id)
                if parent is None:
                    problems.append(f"Folder {folder.id} points at missing parent {folder.parent_folder_id}")
                elif folder.id not in (parent.sub_folders or []):
                    problems.append(f"Folder {folder.id} is not listed by parent {parent.id}")
                elif parent.project_id != folder.project_id:
                    problems.append(f"Folder {folder.id} and its parent belong to different projects")
            elif project is not None and folder.id not in (project.folders or []):
                problems.append(f"Folder {folder.id} is not listed by project {project.id}")
            for sid in folder.sub_folders or []:
                child = folders.get(sid)
                if child is None:
                    problems.append(f"Folder {folder.id} lists missing sub-folder {sid}")
                elif child.parent_folder_id != folder.id:
                    problems.append(f"Folder {folder.id} lists sub-folder {sid} filed elsewhere")
            for pid in folder.pathways or []:
                pathway = pathways.get(pid)
                if pathway is None:
                    problems.append(f"Folder {folder.id} lists missing pathway {pid}")
                elif pathway.folder_id != folder.id:
                    problems.append(f"Folder {folder.id} lists pathway {pid} filed elsewhere")

        for pathway in pathways.values():
            if pathway.folder_id:
                folder = folders.get(pathway.folder_id)
                if folder is None:
                    problems.append(f"Pathway {pathway.id} points at missing folder {pathway.folder_id}")
                elif pathway.id not in (folder.pathways or []):
                    problems.append(f"Pathway {pathway.id} is not listed by folder {folder.id}")
            elif pathway.project_id:
                project = projects.get(pathway.project_id)
                if project is None:
                    problems.append(f"Pathway {pathway.id} points at missing project {pathway.project_id}")
                elif pathway.id not in (project.pathways or []):
                    problems.append(f"Pathway {pathway.id} is not listed by project {project.id}")
            else:
                problems.append(f"Pathway {pathway.id} is not filed anywhere")
            for index, item in enumerate(pathway.items or []):
                repo = _content_repo(item.get("type"))
                if repo is None or not repo.exists(db, item.get("content")):
                    problems.append(f"Pathway {pathway.id} item {index} points at missing content")

        if problems:
            logger.warning(f"Integrity check found {len(problems)} problems")
        return problems


def _content_repo(tag: str | None):
    for content_type, repo in content_repositories.items():
        if content_type.value == tag:
            return repo
    return None


def _children_first(folders: list[Folder]) -> list[str]:
    """Order folder ids so every folder comes before its parent."""
    parents = {f.id: f.parent_folder_id for f in folders}

    def depth(folder_id: str) -> int:
        level, seen = 0, set()
        while parents.get(folder_id) in parents and folder_id not in seen:
            seen.add(folder_id)
            folder_id = parents[folder_id]
            level += 1
        return level

    return sorted(parents, key=depth, reverse=True)


containment_manager = ContainmentManager()
