"""FastAPI web application for userapi."""

import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from userapi import __version__
from userapi.config import Settings, configure_logging, get_settings
from userapi.database.database import build_engine, build_session_factory
from userapi.database.errors import (
    StoreConnectionError,
    StoreConstraintError,
    UserValidationError,
)
from userapi.database.user_repository import UserRepository
from userapi.models.user import User, UserCreate

logger = logging.getLogger(__name__)


def get_user_repository(request: Request) -> UserRepository:
    """Return the repository the app was built with (FastAPI dependency)."""
    return request.app.state.user_repository


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"detail": "Request body must be a JSON object with name and email"})


def create_app(settings: Optional[Settings] = None, repository: Optional[UserRepository] = None) -> FastAPI:
    """Build the application around an explicit repository.

    When no repository is given one is built from settings; tests pass their
    own so no global database handle is involved.
    """
    settings = settings or get_settings()
    if repository is None:
        configure_logging(settings)
        engine = build_engine(settings.DATABASE_URL, settings)
        repository = UserRepository(build_session_factory(engine))

    app = FastAPI(
        title="userapi",
        description="Minimal persistence-backed CRUD service for users",
        version=__version__,
    )
    app.state.user_repository = repository
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    @app.get("/health")
    def health(repo: UserRepository = Depends(get_user_repository)):
        """Health check endpoint."""
        try:
            repo.ping()
        except (StoreConnectionError, StoreConstraintError) as e:
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "version": __version__, "detail": str(e)},
            )
        return {"status": "healthy", "version": __version__}

    @app.get("/users", response_model=List[User])
    def list_users(repo: UserRepository = Depends(get_user_repository)):
        """List all users."""
        try:
            return repo.list_users()
        except (StoreConnectionError, StoreConstraintError) as e:
            raise HTTPException(status_code=500, detail=f"Failed to list users: {str(e)}")

    @app.post("/users", response_model=User, status_code=201)
    def create_user(payload: UserCreate, repo: UserRepository = Depends(get_user_repository)):
        """Create a user."""
        try:
            return repo.insert_user(payload.name, payload.email)
        except UserValidationError as e:
            logger.warning(f"Rejected user creation: {str(e)}")
            raise HTTPException(status_code=400, detail=str(e))
        except (StoreConnectionError, StoreConstraintError) as e:
            raise HTTPException(status_code=500, detail=f"Failed to create user: {str(e)}")

    return app
