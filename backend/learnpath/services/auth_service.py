"""Authentication service for JWT token management and password hashing."""

from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from learnpath.db import transaction
from learnpath.db.models import User
from learnpath.db.redis_cache import RedisKeyPrefix, get_redis_cache
from learnpath.errors import Conflict, Unauthenticated
from learnpath.models.enums import UserRole
from learnpath.repositories import user_repository
from learnpath.services.containment import containment_manager
from learnpath.services.identity import Identity
from learnpath.settings import settings
from learnpath.utils import get_logger

logger = get_logger(__name__)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create JWT access token.

    Args:
        data: Payload data to encode (must include 'sub' claim with user ID)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> str | None:
    """Verify JWT token and return user ID.

    Returns:
        User ID if token is valid, None otherwise
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        user_id: str = payload.get("sub")
        if user_id is None:
            return None
        return user_id
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None


def get_password_hash(password: str) -> str:
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.error(f"Password verification error: {e}")
        return False


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate user by email and password.

    Returns:
        User object if authentication successful, None otherwise
    """
    user = user_repository.get_by_email(db, email)
    if not user or not user.hashed_password:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def get_identity_from_cache(db: Session, user_id: str) -> Identity | None:
    """Resolve the identity of a token subject, Redis first, then the database.

    Only id and role are cached; everything else is read fresh by the
    services that need it.
    """
    cache_key = RedisKeyPrefix.identity_key(user_id)
    cache = get_redis_cache()

    cached = cache.get(cache_key)
    if cached:
        return Identity(id=cached["id"], role=UserRole(cached["role"]))

    user = user_repository.get_by_id(db, user_id)
    if not user:
        return None
    cache.set(cache_key, {"id": user.id, "role": user.role}, expire_seconds=settings.identity_cache_ttl)
    return Identity(id=user.id, role=UserRole(user.role))


def invalidate_identity(user_id: str) -> None:
    get_redis_cache().delete(RedisKeyPrefix.identity_key(user_id))


def register_user(db: Session, name: str, email: str, password: str) -> User:
    """Create an account together with its default workspace."""
    with transaction(db):
        if user_repository.get_by_email(db, email):
            raise Conflict("User already exists")
        try:
            user = user_repository.create_user(db, name, email, get_password_hash(password))
        except IntegrityError as e:
            # Registered concurrently between the lookup and the insert
            raise Conflict("User already exists") from e
        workspace = containment_manager.create_workspace_for(db, user, f"{name}'s Workspace")
    logger.info(f"Registered user {user.id} with default workspace {workspace.id}")
    return user


def login(db: Session, email: str, password: str) -> tuple[User, str]:
    """Check credentials and issue an access token."""
    user = authenticate_user(db, email, password)
    if not user:
        logger.warning(f"Failed login for {email}")
        raise Unauthenticated("Invalid credentials")
    return user, create_access_token({"sub": user.id})
