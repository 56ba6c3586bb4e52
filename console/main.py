import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from console.core.config import settings
from console.core.errors import (
    ConsoleException,
    console_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)
from console.routers import forms as forms_router
from console.routers import perf as perf_router
from console.routers import screens as screens_router
from console.services.api_client import BencherApiClient
from console.services.forms import FormStore
from console.services.resources import build_default_registry
from console.services.screens import ScreenStore

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Suppress noisy third-party loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the resource registry, the API client and the form/screen arenas."""
    logger.info(f"Starting Bencher console against {settings.api_url}")
    app.state.registry = build_default_registry(settings.api_url)
    app.state.api_client = BencherApiClient.from_settings(settings)
    app.state.forms = FormStore()
    app.state.screens = ScreenStore(max_sessions=settings.MAX_SCREEN_SESSIONS)
    yield
    await app.state.api_client.aclose()
    logger.info("Bencher console stopped")


app = FastAPI(
    title="Bencher Console API",
    description=(
        "**Declarative console engine for Bencher**\n\n"
        "Interprets per-resource screen configuration into table, form and deck "
        "render instructions, validates form input and submits it to the Bencher API.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(ConsoleException, console_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(screens_router.router)
app.include_router(forms_router.router)
app.include_router(perf_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health():
    """Returns `{"status": "ok"}` with the configured API base URL."""
    return {"status": "ok", "api_url": settings.api_url, "env": settings.APP_ENV}
