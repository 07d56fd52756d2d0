from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
import sys
import logging

from app.core.config import settings
from app.api.v1.router import api_router
from app.core.rate_limit import limiter
from app.exceptions import ConfigurationError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def validate_production_config():
    """
    Validate critical configuration for production deployments.

    Authentication cannot work without the Clerk host, and the browser
    client cannot reach the API without CORS origins, so production
    refuses to start without them.

    Raises:
        SystemExit: If critical configuration is missing in production
    """
    if settings.ENVIRONMENT.lower() not in ["production", "prod"]:
        logger.info(f"Running in {settings.ENVIRONMENT} environment - skipping production config validation")
        return

    logger.info("Validating production configuration...")

    errors = []

    if not settings.CLERK_FRONTEND_API:
        errors.append(
            "CLERK_FRONTEND_API is not configured. Every authenticated endpoint "
            "verifies Clerk tokens against this host's JWKS."
        )

    if not settings.BACKEND_CORS_ORIGINS:
        errors.append(
            "BACKEND_CORS_ORIGINS is not configured. The web client will be "
            "blocked by the browser."
        )

    if settings.DEBUG:
        logger.warning("DEBUG is enabled in production")

    if errors:
        logger.error("PRODUCTION CONFIGURATION VALIDATION FAILED:")
        for i, error in enumerate(errors, 1):
            logger.error(f"  {i}. {error}")
        logger.error("Deployment halted. Fix configuration and try again.")
        sys.exit(1)

    logger.info("Production configuration validation passed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    validate_production_config()

    yield
    # Shutdown
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan
)

# Add rate limiter state
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """
    Custom handler for rate limit exceeded errors.
    Returns 429 status with retry information.
    """
    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "message": "Too many requests. Please try again later.",
            "detail": str(exc.detail) if hasattr(exc, 'detail') else None
        },
        headers={"Retry-After": "60"}
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Configuration error on {request.url.path}: {exc.message} ({exc.config_key})")
    return JSONResponse(
        status_code=503,
        content={"detail": "Service is not configured correctly"}
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # Rows committed before the failure stay committed
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


# Set up CORS
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin).rstrip('/') for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
