import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app import models  # noqa: F401
from app.core.config import get_settings
from app.core.errors import REQUIRED_FIELDS_MESSAGE, AppError, AuthenticationError, UnexpectedFailure
from app.core.logging import configure_logging
from app.db.base import Base
from app.db.session import engine
from app.routers import auth, categories, products, users

logger = logging.getLogger(__name__)

REQUIRED_ERROR_TYPES = {"missing", "string_too_short"}


def _error_response(exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


def _without_input(error: dict) -> dict:
    # The rejected input can hold a plaintext password.
    return {key: value for key, value in error.items() if key != "input"}


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if settings.auto_create_tables:
            Base.metadata.create_all(bind=engine)
        yield

    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

    @app.middleware("http")
    async def unexpected_failure_middleware(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("unexpected_failure", extra={"path": request.url.path})
            return _error_response(UnexpectedFailure(str(exc)))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Authorization"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        missing = any(error.get("type") in REQUIRED_ERROR_TYPES for error in errors)
        body = {
            "error": REQUIRED_FIELDS_MESSAGE if missing else "Invalid request payload",
            "code": "validation_error",
            "details": jsonable_encoder([_without_input(error) for error in errors]),
        }
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("store_failure", extra={"path": request.url.path})
        message = str(getattr(exc, "orig", None) or exc)
        return _error_response(UnexpectedFailure(message))

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(categories.router)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
