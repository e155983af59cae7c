"""Data models for the PR dashboard."""

from models.config_models import Config, CredentialsConfig
from models.data_models import PullRequest, Session

__all__ = [
    "Config",
    "CredentialsConfig",
    "PullRequest",
    "Session",
]
