"""Database module for the LearnPath backend.

Components:
- SQL database (SQLite or MySQL): users, workspaces, projects, folders,
  pathways and content records
- Redis: identity cache
"""

from learnpath.db.database import (
    SessionLocal,
    check_connection,
    close_db,
    engine,
    get_db,
    init_db,
    transaction,
)
from learnpath.db.models import (
    Base,
    Document,
    Folder,
    Link,
    Pathway,
    Project,
    User,
    Video,
    Workspace,
)
from learnpath.db.redis_cache import RedisCache, RedisKeyPrefix, get_redis_cache

__all__ = [
    # Redis
    "RedisCache",
    "RedisKeyPrefix",
    "get_redis_cache",
    # SQL - Connection
    "engine",
    "SessionLocal",
    "get_db",
    "transaction",
    "init_db",
    "close_db",
    "check_connection",
    # SQL - Models
    "Base",
    "User",
    "Workspace",
    "Project",
    "Folder",
    "Pathway",
    "Link",
    "Video",
    "Document",
]
