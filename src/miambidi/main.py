"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from miambidi.config import get_settings
from miambidi.logging_config import clear_context, configure_logging, get_logger, set_context
from miambidi.routers import shopping_lists_router

settings = get_settings()

# Configure logging on module load
configure_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info(f"Starting MiamBidi shopping list API ({settings.environment})")
    yield
    logger.info("Shutting down MiamBidi shopping list API")


app = FastAPI(
    title="MiamBidi Shopping List API",
    description="Weekly meal plans turned into categorized shopping lists",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.is_development,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def request_context(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Tag every log line of a request with its id and echo the id back."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    set_context(request_id=request_id)
    try:
        response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(shopping_lists_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "miambidi-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "MiamBidi Shopping List API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
