from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from barberbook.config import get_settings
from barberbook.dependencies.services import get_supabase_client_cached

# Import routers directly from submodules
from barberbook.routes.admin import router as admin_router
from barberbook.routes.dashboard import router as dashboard_router
from barberbook.routes.health import router as health_router
from barberbook.routes.public import router as public_router


def configure_logging() -> None:
    """Apply the configured log level, installing a handler if none exists."""
    level = getattr(logging, get_settings().log_level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    else:
        root_logger.setLevel(level)

# Configure logging as soon as the module is loaded
configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    # --- Startup Logic ---
    settings = get_settings()

    # Log application settings on startup
    settings_snapshot = settings.model_dump(
        exclude={"supabase_key", "supabase_service_role_key"},
    )
    logger.info("Application settings on startup: %s", settings_snapshot)

    # Initialize shared resources
    client = get_supabase_client_cached()
    logger.info("Application startup complete (mock data: %s).", client.use_mock_data)

    try:
        yield  # The application is now running
    finally:
        # --- Shutdown Logic ---
        logger.info("Closing data store client connection.")
        await client.close()
        logger.info("Application shutdown complete.")


# --- Application Setup ---

settings = get_settings()
app = FastAPI(
    title=settings.app_name,
    lifespan=lifespan,
    redirect_slashes=False
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin).rstrip("/") for origin in settings.cors_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Include Routers ---

app.include_router(public_router, prefix="/shops")
app.include_router(dashboard_router, prefix="/dashboard")
app.include_router(admin_router, prefix="/admin")
app.include_router(health_router)
