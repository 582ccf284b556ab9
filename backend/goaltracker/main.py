"""FastAPI application entry point for the Annual Goals Tracker API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from goaltracker.config import get_settings
from goaltracker.database import create_tables
from goaltracker.exceptions import ErrorCodes, ServiceError, error_body, status_for_error
from goaltracker.routers import activities, auth, dashboard, goal_history, goals, progress, sports

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: Create database tables
    create_tables()
    yield


app = FastAPI(
    title="Annual Goals Tracker API",
    description="Backend API for annual fitness goals - goals, activities and cumulative progress",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
cors_origins = [
    settings.FRONTEND_URL,
    "http://localhost:4321",
    "http://localhost:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _validation_errors(errors: list) -> list[dict]:
    validation_errors = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        validation_errors.append({
            "field": ".".join(location) or None,
            "message": error.get("msg", "Invalid value"),
        })
    return validation_errors


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    status_code = status_for_error(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code} - {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=error_body(exc.code, exc.message, exc.details),
    )


@app.exception_handler(RequestValidationError)
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            ErrorCodes.VALIDATION_ERROR,
            "Invalid request parameters",
            {"validation_errors": _validation_errors(exc.errors())},
        ),
    )


# Include routers
app.include_router(activities.router, prefix="/api/activities", tags=["Activities"])
app.include_router(sports.router, prefix="/api/sports", tags=["Sports"])
app.include_router(goals.router, prefix="/api/goals", tags=["Goals"])
app.include_router(goal_history.router, prefix="/api/goal-history", tags=["Goals"])
app.include_router(progress.router, prefix="/api", tags=["Progress"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(auth.router, prefix="/api/auth", tags=["Account"])


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - API information."""
    return {
        "name": "Annual Goals Tracker API",
        "version": "1.0.0",
        "status": "running",
    }


@app.get("/health", tags=["Health"])
@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
