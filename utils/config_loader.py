"""Configuration loader that reads from .env and validates with Pydantic."""

import os
import sys
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic import ValidationError

from models.config_models import (
    DEFAULT_FRONTEND_ORIGIN,
    DEFAULT_SEARCH_QUERY,
    Config,
    CredentialsConfig,
)

DEFAULT_ENV_PATH = Path(__file__).parent.parent / ".env"


def _split(raw: str, sep: str) -> list[str]:
    """Split a list-valued variable, dropping empty entries."""
    return [item.strip() for item in raw.split(sep) if item.strip()]


def load_config(env_path: Optional[Path] = None) -> Config:
    """
    Load and validate configuration from environment variables.
    
    Reads the .env file (project root by default) without overriding
    variables already set in the environment, then validates all
    credentials and settings using Pydantic models. This is the only
    place settings are read; the app factory and routes use its result.
    
    Args:
        env_path: Alternative .env file
    
    Returns:
        Config: Validated configuration object
        
    Raises:
        SystemExit: If configuration is invalid or missing required fields
    """
    load_dotenv(dotenv_path=env_path or DEFAULT_ENV_PATH)
    
    try:
        config = Config(
            credentials=CredentialsConfig(
                github_client_id=os.getenv("GITHUB_CLIENT_ID", ""),
                github_client_secret=os.getenv("GITHUB_CLIENT_SECRET", ""),
                session_secret=os.getenv("SESSION_SECRET", ""),
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            search_queries=_split(os.getenv("PR_SEARCH_QUERIES", DEFAULT_SEARCH_QUERY), ";"),
            request_timeout=os.getenv("GITHUB_REQUEST_TIMEOUT", "15"),
            frontend_origins=_split(os.getenv("FRONTEND_ORIGINS", DEFAULT_FRONTEND_ORIGIN), ","),
        )
        
        return config
        
    except ValidationError as e:
        print("❌ Configuration validation failed:", file=sys.stderr)
        print("\nPlease check your .env file. Missing or invalid fields:", file=sys.stderr)
        
        for error in e.errors():
            field_path = " → ".join(str(x) for x in error["loc"])
            message = error["msg"]
            print(f"  • {field_path}: {message}", file=sys.stderr)
        
        print("\nHint: Copy .env.example to .env and fill in your credentials.", file=sys.stderr)
        sys.exit(1)
