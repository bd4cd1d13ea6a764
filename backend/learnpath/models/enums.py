"""Enumerations shared by the ORM, services and API schemas."""

from enum import Enum


class UserRole(str, Enum):
    user = "user"
    admin = "admin"


class MemberRole(str, Enum):
    """Advisory role attached to a workspace membership edge."""

    admin = "admin"
    editor = "editor"
    viewer = "viewer"


class Visibility(str, Enum):
    public = "public"
    private = "private"
    workspace = "workspace"
    project = "project"
    folder = "folder"


class ResourceKind(str, Enum):
    workspace = "workspace"
    project = "project"
    folder = "folder"
    pathway = "pathway"


# Visibility values each resource kind accepts
ALLOWED_VISIBILITY: dict[ResourceKind, frozenset[Visibility]] = {
    ResourceKind.workspace: frozenset({Visibility.public, Visibility.private, Visibility.workspace}),
    ResourceKind.project: frozenset({Visibility.public, Visibility.private, Visibility.workspace}),
    ResourceKind.folder: frozenset({Visibility.public, Visibility.private, Visibility.project}),
    ResourceKind.pathway: frozenset(
        {Visibility.public, Visibility.private, Visibility.project, Visibility.folder}
    ),
}


class Action(str, Enum):
    read = "read"
    write = "write"
    delete = "delete"


class ContentType(str, Enum):
    """Tag of a pathway item; names the table its content id resolves in."""

    Link = "Link"
    Video = "Video"
    Document = "Document"


class WorkspaceRelation(str, Enum):
    """How an identity relates to a workspace."""

    owner = "owner"
    member = "member"
    none = "none"
