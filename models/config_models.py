"""Configuration models for validation using Pydantic."""

from pydantic import BaseModel, Field, field_validator

DEFAULT_SEARCH_QUERY = "is:open is:pr involves:@me archived:false"
DEFAULT_FRONTEND_ORIGIN = "http://localhost:5173"  # Vite dev server


class CredentialsConfig(BaseModel):
    """OAuth and session credentials loaded from environment variables."""
    
    github_client_id: str = Field(..., min_length=1, description="GitHub OAuth App client ID")
    github_client_secret: str = Field(..., min_length=1, description="GitHub OAuth App client secret")
    session_secret: str = Field(..., min_length=1, description="Key used to sign session cookies")
    
    @field_validator("github_client_id")
    @classmethod
    def validate_client_id(cls, v: str) -> str:
        """Validate GitHub client ID is set."""
        if not v or v == "your_client_id_here":
            raise ValueError("GitHub client ID must be set in .env file")
        return v
    
    @field_validator("github_client_secret")
    @classmethod
    def validate_client_secret(cls, v: str) -> str:
        """Validate GitHub client secret is set."""
        if not v or v == "your_client_secret_here":
            raise ValueError("GitHub client secret must be set in .env file")
        return v
    
    @field_validator("session_secret")
    @classmethod
    def validate_session_secret(cls, v: str) -> str:
        """Reject the placeholder secret and anything too short to sign with."""
        if not v or v == "change_me":
            raise ValueError("Session secret must be set in .env file")
        if len(v) < 16:
            raise ValueError("Session secret must be at least 16 characters")
        return v


class Config(BaseModel):
    """Application configuration."""
    
    credentials: CredentialsConfig
    log_level: str = Field(default="INFO", description="Logging level")
    search_queries: list[str] = Field(
        default_factory=lambda: [DEFAULT_SEARCH_QUERY],
        description="GitHub search queries whose PRs are merged into the dashboard",
    )
    request_timeout: float = Field(default=15.0, gt=0, description="Timeout in seconds for GitHub requests")
    frontend_origins: list[str] = Field(
        default_factory=lambda: [DEFAULT_FRONTEND_ORIGIN],
        description="Origins allowed to call the API with the session cookie (CORS)",
    )
    
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v_upper
    
    @field_validator("search_queries")
    @classmethod
    def validate_search_queries(cls, v: list[str]) -> list[str]:
        """Strip blanks and require at least one query."""
        queries = [q.strip() for q in v if q and q.strip()]
        if not queries:
            raise ValueError("At least one search query must be configured")
        return queries
    
    @field_validator("frontend_origins")
    @classmethod
    def validate_frontend_origins(cls, v: list[str]) -> list[str]:
        """Strip blanks and trailing slashes; origins must be http(s) URLs."""
        origins = [o.strip().rstrip("/") for o in v if o and o.strip()]
        for origin in origins:
            if not origin.startswith(("http://", "https://")):
                raise ValueError(f"Frontend origin must start with http:// or https://: {origin}")
        return origins
