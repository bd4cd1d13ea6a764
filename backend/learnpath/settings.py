"""
Application Settings Management

All configuration is loaded from environment variables, falling back to
``.env.local`` at the project root for local development:

    cp .env.example .env.local

Secrets (JWT key, database and Redis passwords) must come from the
environment in production.
"""

from pathlib import Path

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

# backend/learnpath/settings.py -> backend/learnpath/ -> backend/ -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

ENV_FILE = PROJECT_ROOT / ".env.local"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ==================== Environment ====================
    # "local-dev" | "test" | "production"
    environment: str = "local-dev"

    # ==================== Server ====================
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = True

    # ==================== JWT ====================
    jwt_secret_key: str = "learnpath-dev-jwt-secret-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 7 * 24 * 60

    # ==================== Frontend / CORS ====================
    frontend_host: str = "localhost"
    frontend_port: int = 3000

    # ==================== API ====================
    api_prefix: str = "/api/v1"

    # ==================== Database ====================
    # "sqlite" | "mysql"
    database_type: str = "sqlite"

    # Overrides the generated URL when set
    database_url: str = ""

    mysql_host: str = "localhost"
    mysql_port: int = 3306
    mysql_user: str = "learnpath"
    mysql_password: str = "learnpath_dev"
    mysql_database: str = "learnpath"
    mysql_pool_size: int = 10
    mysql_max_overflow: int = 20
    mysql_pool_pre_ping: bool = True

    # ==================== Redis ====================
    # "in_memory" | "redis"
    # - in_memory: FakeRedis, no external service
    # - redis: real Redis instance
    redis_type: str = "in_memory"

    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_index: int = 0
    redis_password: str | None = None
    redis_socket_timeout: int = 5
    redis_socket_connect_timeout: int = 5

    # Cached identity lifetime (seconds)
    identity_cache_ttl: int = 900

    # ==================== Paths ====================
    workspace_name: str = "learnpath-workspace"
    logs_subdir: str = "logs"

    # ==================== Logging ====================
    log_max_bytes: int = 20 * 1024 * 1024  # 20MB
    log_backup_count: int = 5

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @computed_field  # type: ignore[misc]
    @property
    def cors_origins(self) -> list[str]:
        """CORS origins derived from the frontend host and port."""
        return [
            f"http://{self.frontend_host}:{self.frontend_port}",
            f"http://127.0.0.1:{self.frontend_port}",
            f"http://localhost:{self.frontend_port}",
        ]

    def validate_configuration(self) -> None:
        """Validate configuration settings.

        Raises:
            ValueError: If configuration is invalid
        """
        if self.port == self.frontend_port:
            raise ValueError(
                f"Port conflict: Backend port {self.port} conflicts with "
                f"frontend port {self.frontend_port}"
            )
        if self.environment == "production" and self.jwt_secret_key.startswith("learnpath-dev"):
            raise ValueError("JWT_SECRET_KEY must be set in production")

    # ==================== Paths ====================

    @classmethod
    def get_project_root(cls) -> Path:
        return PROJECT_ROOT

    def is_local_dev(self) -> bool:
        return self.environment == "local-dev"

    def is_test(self) -> bool:
        return self.environment == "test"

    def get_workspace_root(self) -> Path:
        """
        Root of runtime files.

        - local-dev / test: {project_root}/learnpath-workspace/
        - production: /app/
        """
        if self.environment == "production":
            return Path("/app")
        return self.get_project_root() / self.workspace_name

    def get_database_dir(self) -> Path:
        return self.get_workspace_root() / "databases"

    def get_logs_root(self) -> Path:
        return self.get_workspace_root() / self.logs_subdir

    def get_sqlite_path(self) -> Path:
        """SQLite database file for the current environment.

        - test: :memory:
        - local-dev: {workspace}/databases/learnpath_dev.db
        - production: {workspace}/databases/learnpath.db
        """
        if self.is_test():
            return Path(":memory:")
        db_dir = self.get_database_dir()
        db_dir.mkdir(parents=True, exist_ok=True)
        if self.is_local_dev():
            return db_dir / "learnpath_dev.db"
        return db_dir / "learnpath.db"

    def get_database_url_auto(self) -> str:
        """Database URL from an explicit override or the database type."""
        if self.database_url:
            return self.database_url

        if self.database_type == "sqlite":
            sqlite_path = self.get_sqlite_path()
            if str(sqlite_path) == ":memory:":
                return "sqlite:///:memory:"
            return f"sqlite:///{sqlite_path}"

        return (
            f"mysql+pymysql://{self.mysql_user}:{self.mysql_password}"
            f"@{self.mysql_host}:{self.mysql_port}/{self.mysql_database}?charset=utf8mb4"
        )


settings = Settings()
