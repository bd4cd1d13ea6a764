"""Authentication API endpoints."""

from fastapi import APIRouter, status

from learnpath.api.deps import CurrentIdentity, DbSession, ok
from learnpath.models.auth_schemas import Token, UserLogin, UserRegister
from learnpath.models.schemas import UserOut
from learnpath.services import auth_service
from learnpath.services.user_service import get_user
from learnpath.utils import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: UserRegister, db: DbSession):
    """Create an account with a default workspace and return an access token."""
    logger.info(f"POST /auth/register: email={body.email}")
    user = auth_service.register_user(db, body.name, body.email, body.password)
    token = auth_service.create_access_token({"sub": user.id})
    return ok({"token": Token(access_token=token), "user": UserOut.from_model(user)})


@router.post("/login")
def login(body: UserLogin, db: DbSession):
    logger.info(f"POST /auth/login: email={body.email}")
    user, token = auth_service.login(db, body.email, body.password)
    return ok({"token": Token(access_token=token), "user": UserOut.from_model(user)})


@router.get("/me")
def me(identity: CurrentIdentity, db: DbSession):
    return ok(UserOut.from_model(get_user(db, identity.id)))
