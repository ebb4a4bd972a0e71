"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api import (
    auth,
    bottles,
    guest_sessions,
    locations,
    scan_label,
    stats,
    tastings,
    uploads,
)
from src.config import get_settings
from src.exceptions import UnauthorizedError, WinelogError

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    yield


app = FastAPI(
    title="Winelog API",
    description="Self-hosted wine and beer cellar with social tastings",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(WinelogError)
async def winelog_error_handler(request: Request, exc: WinelogError):
    """Render domain errors as {"detail", "kind"}."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors()), "kind": "validation_error"},
    )


# Register routers
app.include_router(auth.router)
app.include_router(locations.router)
app.include_router(bottles.router)
app.include_router(tastings.router)
app.include_router(guest_sessions.router)
app.include_router(stats.router)
app.include_router(uploads.router)
app.include_router(scan_label.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
