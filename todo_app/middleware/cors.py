"""CORS configuration for the browser client."""
from fastapi.middleware.cors import CORSMiddleware
import os

from todo_app.utils.logger import get_logger

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")

# Base allowed origins for development
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

if FRONTEND_URL and FRONTEND_URL not in ALLOWED_ORIGINS:
    ALLOWED_ORIGINS.append(FRONTEND_URL)

logger = get_logger(__name__)


def add_cors_middleware(app):
    """Add CORS middleware to the FastAPI application."""
    if ENVIRONMENT == "production":
        # Only the configured frontend may call the API in production
        origins = [FRONTEND_URL] if FRONTEND_URL else []
    else:
        origins = ALLOWED_ORIGINS

    logger.info("[CORS] Configuration", environment=ENVIRONMENT, allowed_origins=origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
