"""Visibility policy evaluator.

Decides whether an identity may read, write or delete a workspace,
project, folder or pathway.

Write and delete are reserved to the owner. Workspaces and projects carry
their own owner; folders and pathways are owned through their governing
project.

Reads are decided by the first matching row:

    owner matches        any visibility        allow
    otherwise            public                allow
    otherwise            private               explicit member of the governing workspace
    otherwise            workspace             owner or member of the governing workspace
    otherwise            project / folder      read access to the governing project / folder

The governing workspace is the workspace itself, the project's workspace,
or the workspace of the folder's or pathway's project. Evaluation reads
membership data and never mutates anything.
"""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from learnpath.db.models import Folder, Pathway, Project, Workspace
from learnpath.errors import Forbidden, LearnPathError, Unauthenticated
from learnpath.models.enums import Action, ResourceKind, Visibility
from learnpath.repositories import (
    FolderRepository,
    ProjectRepository,
    WorkspaceRepository,
    folder_repository,
    project_repository,
    workspace_repository,
)
from learnpath.services.identity import Identity, MembershipResolver, membership_resolver
from learnpath.utils import get_logger

logger = get_logger(__name__)

Resource = Workspace | Project | Folder | Pathway


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy evaluation."""

    allowed: bool
    reason: type[LearnPathError] | None = None
    message: str = ""

    def raise_if_denied(self) -> None:
        if not self.allowed:
            raise (self.reason or Forbidden)(self.message or None)


ALLOW = Decision(True)


def resource_kind(resource: Resource) -> ResourceKind:
    if isinstance(resource, Workspace):
        return ResourceKind.workspace
    if isinstance(resource, Project):
        return ResourceKind.project
    if isinstance(resource, Folder):
        return ResourceKind.folder
    if isinstance(resource, Pathway):
        return ResourceKind.pathway
    raise TypeError(f"Not an access-controlled resource: {resource!r}")


class AccessPolicy:
    """Authorization decisions for workspace, project, folder and pathway records."""

    def __init__(
        self,
        workspace_repo: WorkspaceRepository = workspace_repository,
        project_repo: ProjectRepository = project_repository,
        folder_repo: FolderRepository = folder_repository,
        resolver: MembershipResolver = membership_resolver,
    ):
        self._workspace_repo = workspace_repo
        self._project_repo = project_repo
        self._folder_repo = folder_repo
        self._resolver = resolver

    # ==================== Public API ====================

    def decide(
        self,
        db: Session,
        identity: Identity | None,
        resource: Resource,
        action: Action,
    ) -> Decision:
        """Evaluate ``action`` on ``resource`` for ``identity``."""
        kind = resource_kind(resource)
        if identity is None:
            return Decision(False, Unauthenticated, "Not authorized to access this route")

        if action == Action.read:
            decision = self._decide_read(db, identity, resource)
        else:
            decision = self._decide_owner_only(db, identity, resource)

        if not decision.allowed:
            logger.warning(f"Denied {action.value} on {kind.value} {resource.id} for {identity.id}")
        return decision

    def require(
        self,
        db: Session,
        identity: Identity | None,
        resource: Resource,
        action: Action,
    ) -> None:
        """Raise ``Unauthenticated`` or ``Forbidden`` unless the action is allowed."""
        self.decide(db, identity, resource, action).raise_if_denied()

    def can_read(self, db: Session, identity: Identity | None, resource: Resource) -> bool:
        return self.decide(db, identity, resource, Action.read).allowed

    # ==================== Governing records ====================

    def owner_id(self, db: Session, resource: Resource) -> str | None:
        """Owner of a resource; folders and pathways inherit their project's."""
        if isinstance(resource, (Workspace, Project)):
            return resource.owner_id
        project = self.governing_project(db, resource)
        return project.owner_id if project else None

    def governing_project(self, db: Session, resource: Resource) -> Project | None:
        if isinstance(resource, Project):
            return resource
        if isinstance(resource, Folder):
            return self._project_repo.get_by_id(db, resource.project_id)
        if isinstance(resource, Pathway):
            if resource.project_id:
                return self._project_repo.get_by_id(db, resource.project_id)
            if resource.folder_id:
                folder = self._folder_repo.get_by_id(db, resource.folder_id)
                return self._project_repo.get_by_id(db, folder.project_id) if folder else None
        return None

    def governing_workspace(self, db: Session, resource: Resource) -> Workspace | None:
        if isinstance(resource, Workspace):
            return resource
        project = self.governing_project(db, resource)
        if project is None or not project.workspace_id:
            return None
        return self._workspace_repo.get_by_id(db, project.workspace_id)

    # ==================== Decisions ====================

    def _decide_owner_only(self, db: Session, identity: Identity, resource: Resource) -> Decision:
        if self.owner_id(db, resource) == identity.id:
            return ALLOW
        return Decision(False, Forbidden, f"User not authorized to modify this {resource_kind(resource).value}")

    def _decide_read(self, db: Session, identity: Identity, resource: Resource) -> Decision:
        kind = resource_kind(resource)
        denied = Decision(False, Forbidden, f"User not authorized to view this {kind.value}")

        if self.owner_id(db, resource) == identity.id:
            return ALLOW

        visibility = Visibility(resource.visibility)
        if visibility == Visibility.public:
            return ALLOW

        if visibility == Visibility.private:
            workspace = self.governing_workspace(db, resource)
            return ALLOW if self._resolver.is_member(identity, workspace) else denied

        if visibility == Visibility.workspace:
            workspace = self.governing_workspace(db, resource)
            return ALLOW if self._resolver.is_owner_or_member(identity, workspace) else denied

        if visibility == Visibility.project:
            project = self.governing_project(db, resource)
            if project is None:
                return denied
            return ALLOW if self._decide_read(db, identity, project).allowed else denied

        if visibility == Visibility.folder:
            parent = self._governing_folder(db, resource)
            if parent is None:
                return denied
            return ALLOW if self._decide_read(db, identity, parent).allowed else denied

        return denied

    def _governing_folder(self, db: Session, resource: Resource) -> Folder | Project | None:
        """Folder a pathway is filed under, or its project when filed directly."""
        if isinstance(resource, Pathway) and resource.folder_id:
            return self._folder_repo.get_by_id(db, resource.folder_id)
        return self.governing_project(db, resource)


access_policy = AccessPolicy()
