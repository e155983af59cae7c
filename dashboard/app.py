"""
FastAPI application factory for the PR Dashboard.

Serves the GitHub sign-in flow and the dashboard payload consumed by the
React frontend. Logging, CORS and the routes all read the same Config,
loaded once from .env and the environment.

Run with:
    uvicorn dashboard.app:create_app --factory --reload
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dashboard.routes import get_config, router
from models.config_models import Config
from utils.logger import setup_logger


def create_app(config: Optional[Config] = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        config: Settings to use; loaded via get_config() when omitted.
            An explicit config also replaces get_config for the routes.

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = get_config()

    logger = setup_logger(
        config.log_level,
        secrets=(config.credentials.github_client_secret, config.credentials.session_secret),
    )

    app = FastAPI(
        title="PR Dashboard API",
        description="Open GitHub pull requests for the signed-in user",
        version="1.0.0"
    )
    app.dependency_overrides[get_config] = lambda: config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.frontend_origins,
        allow_credentials=True,  # session cookie
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(router)

    logger.info(f"FastAPI app initialized (CORS origins: {', '.join(config.frontend_origins)})")
    return app
