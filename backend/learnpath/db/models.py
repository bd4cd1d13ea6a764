"""SQLAlchemy ORM models for LearnPath.

Entity Hierarchy:
    User -> Workspace -> Project -> Folder -> Folder ...
                                 -> Pathway -> items (Link | Video | Document)
                                    Folder  -> Pathway

Containment is stored arena style: every child keeps its parent pointer
columns and every parent keeps an ordered JSON list of child ids. The
containment service keeps both directions consistent; the models do not.
"""

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Column,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class User(Base):
    """User account."""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum("user", "admin", name="user_role"), nullable=False, default="user")
    # Workspace ids the user owns or is a member of
    workspaces = Column(JSON, nullable=False, default=list)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    __table_args__ = (Index("idx_users_email", "email"),)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


class Workspace(Base):
    """Workspace - top-level collaborative container."""

    __tablename__ = "workspaces"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(String(64), ForeignKey("users.id"), nullable=False)
    # [{"user": user_id, "role": "admin" | "editor" | "viewer"}]
    members = Column(JSON, nullable=False, default=list)
    projects = Column(JSON, nullable=False, default=list)
    visibility = Column(
        Enum("public", "private", "workspace", name="workspace_visibility"),
        nullable=False,
        default="private",
    )
    version = Column(Integer, nullable=False)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (Index("idx_workspaces_owner_id", "owner_id"),)

    def __repr__(self) -> str:
        return f"<Workspace(id={self.id}, name={self.name})>"


class Project(Base):
    """Project - folder-like container scoped to a workspace."""

    __tablename__ = "projects"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(String(64), ForeignKey("users.id"), nullable=False)
    workspace_id = Column(String(64), ForeignKey("workspaces.id"), nullable=True)
    # Stored only; nested projects carry no behaviour
    parent_project_id = Column(String(64), nullable=True)
    sub_projects = Column(JSON, nullable=False, default=list)
    folders = Column(JSON, nullable=False, default=list)
    pathways = Column(JSON, nullable=False, default=list)
    visibility = Column(
        Enum("public", "private", "workspace", name="project_visibility"),
        nullable=False,
        default="private",
    )
    version = Column(Integer, nullable=False)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        Index("idx_projects_owner_id", "owner_id"),
        Index("idx_projects_workspace_id", "workspace_id"),
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name})>"


class Folder(Base):
    """Folder - nested grouping of pathways and sub-folders within a project."""

    __tablename__ = "folders"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    project_id = Column(String(64), ForeignKey("projects.id"), nullable=False)
    parent_folder_id = Column(String(64), ForeignKey("folders.id"), nullable=True)
    sub_folders = Column(JSON, nullable=False, default=list)
    pathways = Column(JSON, nullable=False, default=list)
    visibility = Column(
        Enum("public", "private", "project", name="folder_visibility"),
        nullable=False,
        default="private",
    )
    version = Column(Integer, nullable=False)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        Index("idx_folders_project_id", "project_id"),
        Index("idx_folders_parent_folder_id", "parent_folder_id"),
    )

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name={self.name})>"


class Pathway(Base):
    """Pathway - ordered learning sequence of content items."""

    __tablename__ = "pathways"

    id = Column(String(64), primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    # [{"type": "Link" | "Video" | "Document", "content": id, "completed": bool}]
    items = Column(JSON, nullable=False, default=list)
    # Governing project; set for pathways filed under a folder as well
    project_id = Column(String(64), ForeignKey("projects.id"), nullable=True)
    folder_id = Column(String(64), ForeignKey("folders.id"), nullable=True)
    parent_pathway_id = Column(String(64), nullable=True)
    sub_pathways = Column(JSON, nullable=False, default=list)
    visibility = Column(
        Enum("public", "private", "project", "folder", name="pathway_visibility"),
        nullable=False,
        default="private",
    )
    completed = Column(Boolean, nullable=False, default=False)
    version = Column(Integer, nullable=False)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        Index("idx_pathways_project_id", "project_id"),
        Index("idx_pathways_folder_id", "folder_id"),
    )

    def __repr__(self) -> str:
        return f"<Pathway(id={self.id}, title={self.title})>"


class Link(Base):
    """External link referenced by pathway items."""

    __tablename__ = "links"

    id = Column(String(64), primary_key=True)
    title = Column(String(255), nullable=False)
    url = Column(String(2048), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        return f"<Link(id={self.id}, title={self.title})>"


class Video(Base):
    """Video referenced by pathway items."""

    __tablename__ = "videos"

    id = Column(String(64), primary_key=True)
    title = Column(String(255), nullable=False)
    url = Column(String(2048), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=True)  # seconds
    thumbnail = Column(String(2048), nullable=True)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        return f"<Video(id={self.id}, title={self.title})>"


class Document(Base):
    """Markdown document referenced by pathway items."""

    __tablename__ = "documents"

    id = Column(String(64), primary_key=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, title={self.title})>"
