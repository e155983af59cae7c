"""Shared pytest fixtures and configuration."""

from unittest.mock import Mock

import pytest

from models.config_models import Config, CredentialsConfig


@pytest.fixture
def test_env(monkeypatch):
    """
    Set valid test environment variables.
    
    Config can then be loaded during tests without requiring real credentials.
    """
    monkeypatch.setenv("GITHUB_CLIENT_ID", "Iv1.test_client_id")
    monkeypatch.setenv("GITHUB_CLIENT_SECRET", "test_client_secret_1234567890")
    monkeypatch.setenv("SESSION_SECRET", "test_session_secret_1234567890")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("PR_SEARCH_QUERIES", raising=False)
    monkeypatch.delenv("GITHUB_REQUEST_TIMEOUT", raising=False)
    monkeypatch.delenv("FRONTEND_ORIGINS", raising=False)
    
    return {
        "github_client_id": "Iv1.test_client_id",
        "github_client_secret": "test_client_secret_1234567890",
        "session_secret": "test_session_secret_1234567890",
        "log_level": "DEBUG",
    }


@pytest.fixture
def invalid_env(monkeypatch):
    """
    Set up invalid/missing environment variables for testing validation.
    """
    monkeypatch.setenv("GITHUB_CLIENT_ID", "")
    monkeypatch.setenv("GITHUB_CLIENT_SECRET", "")
    monkeypatch.setenv("SESSION_SECRET", "")


@pytest.fixture
def test_config():
    """Validated Config built directly, without touching the environment."""
    return Config(
        credentials=CredentialsConfig(
            github_client_id="Iv1.test_client_id",
            github_client_secret="test_client_secret_1234567890",
            session_secret="test_session_secret_1234567890",
        ),
        log_level="DEBUG",
    )


def make_pr_node(
    url: str,
    updated_at: str = "2025-01-15T10:30:00Z",
    **overrides
) -> dict:
    """Raw GraphQL PullRequest search node with every field populated."""
    number = int(url.rsplit("/", 1)[-1]) if url.rsplit("/", 1)[-1].isdigit() else 1
    node = {
        "title": f"PR {number}",
        "url": url,
        "number": number,
        "isDraft": False,
        "headRefName": f"feature-{number}",
        "createdAt": "2025-01-10T09:00:00Z",
        "updatedAt": updated_at,
        "author": {"login": "octocat", "avatarUrl": "https://avatars.githubusercontent.com/u/1"},
        "repository": {"nameWithOwner": "octo-org/hello-world"},
        "reviewDecision": "APPROVED",
        "commits": {"nodes": [{"commit": {"statusCheckRollup": {"state": "SUCCESS"}}}]},
    }
    node.update(overrides)
    return node


def make_search_response(nodes: list, has_next: bool = False, end_cursor=None, status_code: int = 200) -> Mock:
    """Mock requests.Response for one GraphQL search page."""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = {
        "data": {
            "search": {
                "pageInfo": {"hasNextPage": has_next, "endCursor": end_cursor},
                "nodes": nodes,
            }
        }
    }
    return response
