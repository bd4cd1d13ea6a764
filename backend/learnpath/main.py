"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from learnpath import __version__
from learnpath.api.v1.api import api_router
from learnpath.db import close_db, init_db
from learnpath.errors import LearnPathError
from learnpath.settings import settings
from learnpath.utils import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging("learnpath")
    settings.validate_configuration()
    init_db()
    logger.info(f"LearnPath API started (environment={settings.environment})")
    yield
    close_db()


app = FastAPI(
    title="LearnPath API",
    description="Learning pathways organized in workspaces, projects and folders",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LearnPathError)
async def learnpath_error_handler(request: Request, exc: LearnPathError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    return JSONResponse(status_code=400, content={"success": False, "message": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"success": False, "message": "Server Error"})


app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/")
def root():
    return {"status": "ok", "service": "LearnPath API", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("learnpath.main:app", host=settings.host, port=settings.port, reload=settings.debug)
