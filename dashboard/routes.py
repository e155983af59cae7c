"""
Routes for the PR dashboard.

Provides the GitHub sign-in flow (entry, callback, logout), the dashboard
payload with the signed-in user's open PRs, and a small session lookup (`/api/me`).
"""

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from auth.oauth import STATE_COOKIE, STATE_MAX_AGE, AuthError, GitHubOAuth
from auth.session import SessionCodec, clear_session_cookie, read_session, set_session_cookie
from dashboard.views import filter_prs, list_organizations, sort_prs, time_ago
from fetchers.github import AggregationError, fetch_open_prs
from models.config_models import Config
from models.data_models import PullRequest
from utils.config_loader import load_config

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load configuration once per process."""
    return load_config()


def get_codec(config: Config = Depends(get_config)) -> SessionCodec:
    return SessionCodec(config.credentials.session_secret)


def get_oauth(config: Config = Depends(get_config)) -> GitHubOAuth:
    return GitHubOAuth(
        config.credentials.github_client_id,
        config.credentials.github_client_secret,
        timeout=config.request_timeout,
    )


class HomeResponse(BaseModel):
    """Response model for the landing endpoint."""
    logged_in: bool
    login: Optional[str] = None
    error: Optional[str] = None
    login_url: str = "/auth/github"


class DashboardResponse(BaseModel):
    """Response model for the dashboard endpoint."""
    user: Dict[str, Optional[str]]
    prs: List[Dict[str, Any]]
    total: int
    organizations: List[str]
    error: Optional[str] = None


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=302)


def _error_redirect(reason: str) -> RedirectResponse:
    return _redirect(f"/?{urlencode({'error': reason})}")


def _serialize_pr(pr: PullRequest) -> Dict[str, Any]:
    data = pr.model_dump(mode="json", by_alias=True)
    data["createdAgo"] = time_ago(pr.created_at)
    data["updatedAgo"] = time_ago(pr.updated_at)
    return data


@router.get("/", response_model=HomeResponse)
def home(
    request: Request,
    error: Optional[str] = Query(None, description="Error tag from a failed sign-in"),
    codec: SessionCodec = Depends(get_codec),
):
    """Landing payload: whether a session exists and any sign-in error tag."""
    session = read_session(request, codec)
    return HomeResponse(
        logged_in=session.is_authenticated,
        login=session.login,
        error=error,
    )


@router.get("/auth/github")
def auth_start(oauth: GitHubOAuth = Depends(get_oauth)):
    """Redirect to GitHub's consent screen with a fresh state token."""
    state = oauth.new_state()
    response = _redirect(oauth.authorization_url(state))
    response.set_cookie(
        STATE_COOKIE,
        state,
        max_age=STATE_MAX_AGE,
        path="/",
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/auth/callback")
def auth_callback(
    request: Request,
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    oauth: GitHubOAuth = Depends(get_oauth),
    codec: SessionCodec = Depends(get_codec),
):
    """
    Complete the OAuth exchange.

    On success the session cookie is set and the browser goes to /dashboard.
    On failure it goes back to / with ?error=<tag>
    (no_code, state_mismatch, token_failed, profile_failed).
    """
    expected_state = request.cookies.get(STATE_COOKIE)

    try:
        session = oauth.complete(code, state, expected_state)
    except AuthError as e:
        logger.warning(f"GitHub sign-in failed: {e}")
        response = _error_redirect(e.reason)
    else:
        response = _redirect("/dashboard")
        set_session_cookie(response, session, codec)

    response.delete_cookie(STATE_COOKIE, path="/")
    return response


@router.get("/auth/logout")
def auth_logout():
    """Drop the session cookie, whatever state the caller is in."""
    response = _redirect("/")
    clear_session_cookie(response)
    return response


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    request: Request,
    search: str = Query("", description="Filter by title, repo or author"),
    org: str = Query("all", description="Filter by organization (repository owner)"),
    sort: str = Query("activity", pattern="^(activity|org)$", description="Sort by last activity or organization"),
    direction: str = Query("desc", pattern="^(asc|desc)$", description="Activity sort direction"),
    config: Config = Depends(get_config),
    codec: SessionCodec = Depends(get_codec),
):
    """
    Open PRs for the signed-in user.

    Redirects to sign-in when there is no authenticated session. If GitHub
    fails, returns an empty list with a human-readable `error` instead of
    failing the request.

    Returns:
    - user: login and avatar of the session owner
    - prs: filtered and sorted PRs (camelCase keys)
    - total: number of PRs before filtering
    - organizations: owners present in the unfiltered list
    - error: aggregation error message, if any
    """
    session = read_session(request, codec)
    if not session.is_authenticated:
        return _redirect("/auth/github")

    prs: List[PullRequest] = []
    error = None

    try:
        prs = fetch_open_prs(
            session.access_token,
            queries=config.search_queries,
            timeout=config.request_timeout,
        )
    except AggregationError as e:
        logger.error(f"Failed to load PRs for {session.login}: {e}")
        error = str(e)

    visible = sort_prs(filter_prs(prs, org=org, search=search), mode=sort, direction=direction)

    return DashboardResponse(
        user={"login": session.login, "avatarUrl": session.avatar_url},
        prs=[_serialize_pr(pr) for pr in visible],
        total=len(prs),
        organizations=list_organizations(prs),
        error=error,
    )


@router.get("/api/me")
def api_me(request: Request, codec: SessionCodec = Depends(get_codec)):
    """Describe the current session without exposing the token."""
    session = read_session(request, codec)
    if not session.is_authenticated:
        return {"logged_in": False}
    return {
        "logged_in": True,
        "user": {"login": session.login, "avatarUrl": session.avatar_url},
    }
