"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from plantanim.config import settings
from plantanim.middleware.error_handler import ErrorHandlerMiddleware
from plantanim.api.v1.routers import notifications, suggestions, tasks

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# Rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_requests}/minute"],
    enabled=settings.rate_limit_enabled,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Logs the active configuration on startup and closes the weather client
    on shutdown.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Farm timezone: {settings.timezone}")
    logger.info(
        f"Suggestion thresholds: heavy_rain={settings.heavy_rain_probability}%/"
        f"{settings.heavy_rain_volume_mm}mm, strong_wind={settings.strong_wind_kmh}km/h, "
        f"heat={settings.heat_stress_temperature}°C"
    )
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute")

    yield

    # Shutdown
    from plantanim.infrastructure.weather_client import get_weather_client
    logger.info("Shutting down application...")
    client = get_weather_client()
    await client.close()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Weather-driven farming advisory API

    Turns the local forecast and the farmer's crop calendar into prioritized
    advice, dated field tasks and device reminders.

    ## Features

    - **Suggestions**: Rule-based risk warnings, farming advice and schedule
      suggestions derived from the forecast
    - **Crop-Cycle Tasks**: Daily tasks projected from each crop's calendar
      and planting date
    - **Notifications**: Idempotent reminders for tasks due soon and urgent
      warnings
    - **Robust Error Handling**: Automatic retries with exponential backoff for
      weather API calls
    - **Rate Limiting**: Protects the API from abuse

    Suggestions are weather-based guidance only. Final decisions remain with
    the farmer.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    debug=settings.debug,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Include routers
app.include_router(suggestions.router, prefix="/api/v1")
app.include_router(tasks.router, prefix="/api/v1")
app.include_router(notifications.router, prefix="/api/v1")


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.

    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }
