import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobboard.config import Settings, get_settings
from jobboard.database import create_db_engine, create_session_factory
from jobboard.exceptions import (
    FORMAT_ERROR_CODE,
    ConflictError,
    JobBoardError,
    NotFoundError,
    NotImplementedOperationError,
    NotPermittedError,
    ParameterFormatError,
    UnauthenticatedError,
)
from jobboard.logging_config import configure_logging
from jobboard.routers import admin, applications, health, jobs, users

logger = logging.getLogger(__name__)

# Most specific class first
ERROR_STATUS = (
    (ParameterFormatError, status.HTTP_400_BAD_REQUEST),
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (NotPermittedError, status.HTTP_405_METHOD_NOT_ALLOWED),
    (ConflictError, status.HTTP_409_CONFLICT),
    (NotImplementedOperationError, status.HTTP_501_NOT_IMPLEMENTED),
)


def status_for(exc: JobBoardError) -> int:
    for error_class, status_code in ERROR_STATUS:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _internal_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal error", "name": "InternalError"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(JobBoardError)
    async def job_board_error_handler(request: Request, exc: JobBoardError):
        """Translate core errors into status codes and structured bodies."""
        status_code = status_for(exc)
        if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Error %s code %s: %s %s %s",
                exc.name,
                exc.error_code,
                request.method,
                request.url.path,
                exc.message,
            )
            return _internal_error_response()
        logger.info(
            "Error %s code %s on %s %s: %s",
            exc.name,
            exc.error_code,
            request.method,
            request.url.path,
            exc.message,
        )
        return JSONResponse(status_code=status_code, content=exc.as_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Malformed bodies and parameters are format errors like any other."""
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        error = ParameterFormatError(
            f"Parameter not correct: {location} {first.get('msg', '')}".strip(),
            FORMAT_ERROR_CODE,
        )
        logger.info("Error %s code %s: %s", error.name, error.error_code, error.message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error.as_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Known paths called with an unsupported verb answer 501."""
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            error = NotImplementedOperationError()
            return JSONResponse(
                status_code=status.HTTP_501_NOT_IMPLEMENTED,
                content=error.as_dict(),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail), "name": "HttpError"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with a generic 500 body."""
        logger.exception(
            "Unhandled exception: %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return _internal_error_response()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application. The database engine lives as long as the app."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = create_db_engine(settings)
        app.state.session_factory = create_session_factory(engine)
        logger.info("Job board started (%s)", settings.environment)
        yield
        engine.dispose()

    app = FastAPI(
        title="Job Board",
        description="Companies publish jobs, workers apply to them",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
    app.include_router(jobs.router, prefix=settings.api_prefix, tags=["jobs"])
    app.include_router(applications.router, prefix=settings.api_prefix, tags=["applications"])
    app.include_router(users.router, prefix=settings.api_prefix, tags=["users"])
    app.include_router(admin.router, prefix=settings.api_prefix, tags=["admin"])

    register_exception_handlers(app)
    return app


app = create_app()
