"""Pydantic models for request bodies and response payloads.

Field names follow the frontend's camelCase JSON.
"""

from typing import Any, Literal

from pydantic import BaseModel, EmailStr, Field

from learnpath.db.models import Document, Folder, Link, Pathway, Project, User, Video, Workspace
from learnpath.models.enums import ContentType, MemberRole, UserRole


# ==================== Users ====================


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    workspaces: list[str] = Field(default_factory=list)
    createdAt: int

    @classmethod
    def from_model(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            workspaces=list(user.workspaces or []),
            createdAt=user.created_at,
        )


class UpdateUserRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None


# ==================== Workspaces ====================


class Member(BaseModel):
    user: str
    role: MemberRole = MemberRole.viewer


class WorkspaceOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    owner: str
    members: list[Member] = Field(default_factory=list)
    projects: list[str] = Field(default_factory=list)
    visibility: str
    createdAt: int
    updatedAt: int

    @classmethod
    def from_model(cls, ws: Workspace) -> "WorkspaceOut":
        return cls(
            id=ws.id,
            name=ws.name,
            description=ws.description,
            owner=ws.owner_id,
            members=[Member(**m) for m in ws.members or []],
            projects=list(ws.projects or []),
            visibility=ws.visibility,
            createdAt=ws.created_at,
            updatedAt=ws.updated_at,
        )


class CreateWorkspaceRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    visibility: Literal["public", "private", "workspace"] = "private"


class UpdateWorkspaceRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    visibility: Literal["public", "private", "workspace"] | None = None


class AddMemberRequest(BaseModel):
    email: str
    role: MemberRole = MemberRole.viewer


class UpdateMemberRequest(BaseModel):
    role: MemberRole


# ==================== Projects ====================


class ProjectOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    owner: str
    workspace: str | None = None
    parentProject: str | None = None
    subProjects: list[str] = Field(default_factory=list)
    folders: list[Any] = Field(default_factory=list)
    pathways: list[Any] = Field(default_factory=list)
    visibility: str
    createdAt: int
    updatedAt: int

    @classmethod
    def from_model(cls, project: Project, folders: list | None = None, pathways: list | None = None) -> "ProjectOut":
        """Folders and pathways default to their ids unless populated records are given."""
        return cls(
            id=project.id,
            name=project.name,
            description=project.description,
            owner=project.owner_id,
            workspace=project.workspace_id,
            parentProject=project.parent_project_id,
            subProjects=list(project.sub_projects or []),
            folders=folders if folders is not None else list(project.folders or []),
            pathways=pathways if pathways is not None else list(project.pathways or []),
            visibility=project.visibility,
            createdAt=project.created_at,
            updatedAt=project.updated_at,
        )


class CreateProjectRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    workspace: str | None = None
    visibility: Literal["public", "private", "workspace"] = "private"


class UpdateProjectRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    visibility: Literal["public", "private", "workspace"] | None = None


# ==================== Folders ====================


class FolderOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    project: str
    parentFolder: str | None = None
    subFolders: list[Any] = Field(default_factory=list)
    pathways: list[Any] = Field(default_factory=list)
    visibility: str
    createdAt: int
    updatedAt: int

    @classmethod
    def from_model(cls, folder: Folder, sub_folders: list | None = None, pathways: list | None = None) -> "FolderOut":
        return cls(
            id=folder.id,
            name=folder.name,
            description=folder.description,
            project=folder.project_id,
            parentFolder=folder.parent_folder_id,
            subFolders=sub_folders if sub_folders is not None else list(folder.sub_folders or []),
            pathways=pathways if pathways is not None else list(folder.pathways or []),
            visibility=folder.visibility,
            createdAt=folder.created_at,
            updatedAt=folder.updated_at,
        )


class CreateFolderRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    parentFolder: str | None = None
    project: str | None = None
    visibility: Literal["public", "private", "project"] = "private"


class UpdateFolderRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    visibility: Literal["public", "private", "project"] | None = None


class MoveFolderRequest(BaseModel):
    parentFolder: str | None = None


# ==================== Pathways ====================


class PathwayItem(BaseModel):
    type: ContentType
    content: Any
    completed: bool = False


class PathwayOut(BaseModel):
    id: str
    title: str
    description: str | None = None
    items: list[PathwayItem] = Field(default_factory=list)
    project: str | None = None
    folder: str | None = None
    parentPathway: str | None = None
    subPathways: list[str] = Field(default_factory=list)
    visibility: str
    completed: bool = False
    createdAt: int
    updatedAt: int

    @classmethod
    def from_model(cls, pathway: Pathway, items: list | None = None) -> "PathwayOut":
        return cls(
            id=pathway.id,
            title=pathway.title,
            description=pathway.description,
            items=items if items is not None else list(pathway.items or []),
            project=pathway.project_id,
            folder=pathway.folder_id,
            parentPathway=pathway.parent_pathway_id,
            subPathways=list(pathway.sub_pathways or []),
            visibility=pathway.visibility,
            completed=bool(pathway.completed),
            createdAt=pathway.created_at,
            updatedAt=pathway.updated_at,
        )


class CreatePathwayRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    folder: str | None = None
    project: str | None = None
    visibility: Literal["public", "private", "project", "folder"] = "private"


class UpdatePathwayRequest(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    visibility: Literal["public", "private", "project", "folder"] | None = None
    completed: bool | None = None


class MovePathwayRequest(BaseModel):
    folder: str | None = None


class AddItemRequest(BaseModel):
    # Validated by the item engine so an unknown tag is a 400 with a clear message
    type: str
    content: str = Field(..., min_length=1)


class ReorderItemRequest(BaseModel):
    fromIndex: int
    toIndex: int


# ==================== Content ====================


class LinkOut(BaseModel):
    id: str
    title: str
    url: str
    description: str | None = None
    createdAt: int

    @classmethod
    def from_model(cls, link: Link) -> "LinkOut":
        return cls(
            id=link.id, title=link.title, url=link.url, description=link.description, createdAt=link.created_at
        )


class LinkRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1, max_length=2048)
    description: str | None = None


class VideoOut(BaseModel):
    id: str
    title: str
    url: str
    description: str | None = None
    duration: int | None = None
    thumbnail: str | None = None
    createdAt: int

    @classmethod
    def from_model(cls, video: Video) -> "VideoOut":
        return cls(
            id=video.id,
            title=video.title,
            url=video.url,
            description=video.description,
            duration=video.duration,
            thumbnail=video.thumbnail,
            createdAt=video.created_at,
        )


class VideoRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1, max_length=2048)
    description: str | None = None
    duration: int | None = Field(None, ge=0)
    thumbnail: str | None = None


class DocumentOut(BaseModel):
    id: str
    title: str
    content: str | None = None
    description: str | None = None
    createdAt: int

    @classmethod
    def from_model(cls, doc: Document) -> "DocumentOut":
        return cls(
            id=doc.id,
            title=doc.title,
            content=doc.content,
            description=doc.description,
            createdAt=doc.created_at,
        )


class DocumentRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str | None = None
    description: str | None = None


# ==================== Dashboard ====================


class DashboardStats(BaseModel):
    totalWorkspaces: int
    totalProjects: int
    completedPathways: int
    recentActivity: list[dict[str, Any]] = Field(default_factory=list)
