"""
Main Application Entry Point
============================

Responsibilities:
- Initialize FastAPI application
- Configure middleware stack
- Register API routers
- Set up exception handlers
- Provide health check endpoints
- Configure CORS
"""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import UserManagerException
from app.core.logging import configure_logging, get_logger
from app.db.session import check_database_connection
from app.middleware.request_context import RequestContextMiddleware
from app.routes import debug_routes, grant_routes, role_routes, user_routes

configure_logging()

# Initialize logger
logger = get_logger(__name__)


# =====================================
# Application Lifespan Handler
# =====================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler for startup and shutdown events.

    Startup:
    - Log application start
    - Check database connection

    Shutdown:
    - Log application shutdown
    """
    logger.info(
        "application_starting",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        role_assignment_backend=settings.ROLE_ASSIGNMENT_BACKEND,
    )

    if settings.ROLE_ASSIGNMENT_BACKEND == "database" and settings.targets_system_schema:
        logger.warning("role_assignments_in_system_schema", db_name=settings.DB_NAME)

    if not check_database_connection():
        logger.error("database_connection_failed_on_startup")
    else:
        logger.info("database_connection_established")

    try:
        yield
    except asyncio.CancelledError:
        logger.debug("application_shutdown_requested")
        raise
    finally:
        logger.info("application_shutdown_complete")


# =====================================
# FastAPI App Initialization
# =====================================

app = FastAPI(
    title=settings.APP_NAME,
    description="""
    HTTP API over MySQL account management.

    * Create and drop accounts, grant privileges per database
    * Define custom roles as named privilege bundles
    * Every listed account carries a role: an explicit assignment when one
      exists, otherwise a label inferred from its grants
    """,
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
)


# =====================================
# Middleware
# =====================================

app.add_middleware(RequestContextMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.cors_methods_list,
    allow_headers=settings.cors_headers_list,
    max_age=3600,
)


# =====================================
# Exception Handlers
# =====================================

@app.exception_handler(UserManagerException)
async def user_manager_exception_handler(request: Request, exc: UserManagerException):
    """
    Handle application exceptions.

    Converts custom exceptions to proper HTTP responses.
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "application_exception",
        exception_type=type(exc).__name__,
        message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle request validation errors.

    Missing or malformed fields are a client error (400).
    """
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })

    logger.warning("request_validation_error", path=request.url.path, errors=errors)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Missing or invalid request fields",
            "details": {"errors": errors},
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle unexpected exceptions.

    Logs the error and returns a generic error message.
    """
    logger.error(
        "unhandled_exception",
        exception_type=type(exc).__name__,
        message=str(exc),
        path=request.url.path,
        method=request.method,
        exc_info=True,
    )

    if settings.ENVIRONMENT == "production":
        content = {"message": "An unexpected error occurred", "details": {}}
    else:
        content = {"message": str(exc), "details": {"type": type(exc).__name__}}

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
    )


# =====================================
# Register Routers
# =====================================

app.include_router(user_routes.router)
app.include_router(grant_routes.router)
app.include_router(role_routes.router)

if settings.DEBUG:
    app.include_router(debug_routes.router)


# =====================================
# Health Check Endpoints
# =====================================

@app.get(
    "/health",
    tags=["Health"],
    summary="Detailed Health Check",
    description="Returns service status including database connectivity.",
)
def health_check():
    db_healthy = check_database_connection()

    return {
        "status": "healthy" if db_healthy else "degraded",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "checks": {
            "database": "healthy" if db_healthy else "unhealthy",
        },
    }


@app.get(
    "/ready",
    tags=["Health"],
    summary="Readiness Check",
    description="Returns whether the service is ready to accept requests.",
)
def readiness_check():
    """
    Readiness check for container orchestration.

    Returns:
        200 if ready, 503 if not ready
    """
    if not check_database_connection():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )

    return {"status": "ready"}
