"""Tests for data models."""

from datetime import datetime, timezone
import pytest
from pydantic import ValidationError

from models.data_models import PullRequest, Session


def _pr(**overrides) -> PullRequest:
    values = {
        "title": "Fix bug",
        "url": "https://github.com/octo-org/hello-world/pull/42",
        "repo_name": "octo-org/hello-world",
        "created_at": "2025-01-10T09:00:00Z",
        "updated_at": "2025-01-15T10:30:00Z",
        "number": 42,
    }
    values.update(overrides)
    return PullRequest(**values)


class TestSession:
    """Tests for Session model."""
    
    def test_empty_session_is_anonymous(self):
        """All fields optional; no token means anonymous."""
        session = Session()
        assert session.access_token is None
        assert session.login is None
        assert session.avatar_url is None
        assert session.is_authenticated is False
    
    def test_empty_token_is_anonymous(self):
        """An empty-string token does not authorize anything."""
        assert Session(access_token="").is_authenticated is False
    
    def test_session_with_token_is_authenticated(self):
        session = Session(access_token="gho_abc", login="octocat")
        assert session.is_authenticated is True
    
    def test_accepts_camel_case_keys(self):
        """Cookie payloads use camelCase keys."""
        session = Session.model_validate(
            {"accessToken": "gho_abc", "login": "octocat", "avatarUrl": "https://a/1"}
        )
        assert session.access_token == "gho_abc"
        assert session.avatar_url == "https://a/1"
    
    def test_session_is_frozen(self):
        session = Session(login="octocat")
        with pytest.raises(ValidationError):
            session.login = "someone-else"


class TestPullRequest:
    """Tests for PullRequest model."""
    
    def test_minimal_valid_pr_defaults(self):
        """Create PR with required fields only; optional fields default."""
        pr = _pr()
        assert pr.author == "unknown"
        assert pr.author_avatar == ""
        assert pr.status_state == "none"
        assert pr.review_decision == ""
        assert pr.is_draft is False
        assert pr.branch == "unknown"
    
    def test_parses_iso_timestamps(self):
        """ISO-8601 strings become timezone-aware datetimes."""
        pr = _pr()
        assert pr.updated_at == datetime(2025, 1, 15, 10, 30, 0, tzinfo=timezone.utc)
        assert pr.created_at.tzinfo is not None
    
    def test_org_property(self):
        assert _pr(repo_name="facebook/react").org == "facebook"
    
    def test_serializes_camel_case(self):
        """Frontend payload keys are camelCase."""
        data = _pr(author_avatar="https://a/1", is_draft=True).model_dump(mode="json", by_alias=True)
        assert data["repoName"] == "octo-org/hello-world"
        assert data["authorAvatar"] == "https://a/1"
        assert data["statusState"] == "none"
        assert data["reviewDecision"] == ""
        assert data["isDraft"] is True
        assert data["updatedAt"].startswith("2025-01-15T10:30:00")
    
    def test_missing_url_rejected(self):
        with pytest.raises(ValidationError):
            PullRequest(
                title="No url",
                repo_name="o/r",
                created_at="2025-01-10T09:00:00Z",
                updated_at="2025-01-10T09:00:00Z",
                number=1,
            )
    
    def test_pr_is_frozen(self):
        """Records are never mutated after construction."""
        pr = _pr()
        with pytest.raises(ValidationError):
            pr.title = "Changed"
