"""Shared endpoint dependencies and the response envelope."""

from typing import Annotated, Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from learnpath.db import get_db
from learnpath.errors import Forbidden, Unauthenticated
from learnpath.services.auth_service import get_identity_from_cache, verify_token
from learnpath.services.identity import Identity

# Missing credentials are reported through Unauthenticated, not FastAPI's 403
optional_security = HTTPBearer(auto_error=False)


def get_current_identity_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_security)],
    db: Session = Depends(get_db),
) -> Identity | None:
    """Identity of the bearer token, or None when absent or invalid."""
    if not credentials:
        return None
    user_id = verify_token(credentials.credentials)
    if not user_id:
        return None
    return get_identity_from_cache(db, user_id)


def get_current_identity(
    identity: Annotated[Identity | None, Depends(get_current_identity_optional)],
) -> Identity:
    if identity is None:
        raise Unauthenticated()
    return identity


def require_admin(identity: Annotated[Identity, Depends(get_current_identity)]) -> Identity:
    if not identity.is_admin:
        raise Forbidden(f"User role {identity.role.value} is not authorized to access this route")
    return identity


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
AdminIdentity = Annotated[Identity, Depends(require_admin)]
DbSession = Annotated[Session, Depends(get_db)]


def ok(data: Any = None, message: str | None = None) -> dict[str, Any]:
    """Success envelope: ``{success, data}`` or ``{success, message}``."""
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None or message is None:
        body["data"] = data
    return body
