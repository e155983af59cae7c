"""GitHub OAuth authorization-code flow for the dashboard.

Flow:
    1. /auth/github redirects to GitHub with client_id, scope and a random
       state token (also stored in a short-lived cookie)
    2. /auth/callback checks code and state, exchanges the code for an access
       token and fetches the user's profile
    3. The resulting Session is written to the signed session cookie

Failures never retry. They surface as an AuthError whose reason is the tag
put in the redirect URL (``/?error=<reason>``).
"""

import logging
import secrets
from typing import Any, Optional
from urllib.parse import urlencode

import requests

from models.data_models import Session

logger = logging.getLogger(__name__)

GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_USER_URL = "https://api.github.com/user"
OAUTH_SCOPE = "read:org repo"
USER_AGENT = "github-pr-dashboard"

STATE_COOKIE = "gh_oauth_state"
STATE_MAX_AGE = 600

NO_AUTHORIZATION_CODE = "no_code"
STATE_MISMATCH = "state_mismatch"
TOKEN_EXCHANGE_FAILED = "token_failed"
PROFILE_FETCH_FAILED = "profile_failed"


class AuthError(Exception):
    """OAuth callback could not produce a session."""

    def __init__(self, reason: str, detail: str = ""):
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason}: {detail}" if detail else reason)


class GitHubOAuth:
    """Drives the three-step OAuth exchange against github.com."""

    def __init__(self, client_id: str, client_secret: str, timeout: float = 15.0):
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout

    @staticmethod
    def new_state() -> str:
        """Fresh anti-forgery token for one sign-in attempt."""
        return secrets.token_urlsafe(32)

    def authorization_url(self, state: str) -> str:
        """URL the browser is sent to for the consent screen."""
        params = {
            "client_id": self.client_id,
            "scope": OAUTH_SCOPE,
            "state": state,
        }
        return f"{GITHUB_AUTHORIZE_URL}?{urlencode(params)}"

    def exchange_code(self, code: str) -> str:
        """Trade an authorization code for an access token.

        Raises:
            AuthError: token_failed if the request fails or no token comes back
        """
        try:
            resp = requests.post(
                GITHUB_TOKEN_URL,
                json={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "code": code,
                },
                headers={
                    "Accept": "application/json",
                    "User-Agent": USER_AGENT,
                },
                timeout=self.timeout,
            )
            token_data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise AuthError(TOKEN_EXCHANGE_FAILED, f"token request failed: {e}") from e

        access_token = token_data.get("access_token") if isinstance(token_data, dict) else None
        if not access_token:
            # GitHub answers 200 with {"error": "bad_verification_code", ...}
            error = token_data.get("error", "") if isinstance(token_data, dict) else ""
            raise AuthError(TOKEN_EXCHANGE_FAILED, error or f"no access_token (HTTP {resp.status_code})")

        return access_token

    def fetch_profile(self, access_token: str) -> dict[str, Any]:
        """Fetch the signed-in user's profile.

        Raises:
            AuthError: profile_failed on transport or HTTP errors, or a non-object body
        """
        try:
            resp = requests.get(
                GITHUB_USER_URL,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/vnd.github+json",
                    "User-Agent": USER_AGENT,
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()
            profile = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise AuthError(PROFILE_FETCH_FAILED, str(e)) from e

        if not isinstance(profile, dict):
            raise AuthError(PROFILE_FETCH_FAILED, f"unexpected profile payload: {type(profile).__name__}")
        return profile

    def complete(
        self,
        code: Optional[str],
        state: Optional[str],
        expected_state: Optional[str]
    ) -> Session:
        """Handle the provider callback and build the signed-in Session.

        Args:
            code: `code` query parameter from GitHub
            state: `state` query parameter from GitHub
            expected_state: state token issued when the flow started

        Returns:
            Authenticated Session

        Raises:
            AuthError: with reason no_code, state_mismatch, token_failed or profile_failed
        """
        if not code:
            raise AuthError(NO_AUTHORIZATION_CODE)

        if not state or not expected_state or not secrets.compare_digest(
            state.encode("utf-8"), expected_state.encode("utf-8")
        ):
            raise AuthError(STATE_MISMATCH)

        access_token = self.exchange_code(code)
        profile = self.fetch_profile(access_token)

        logger.info(f"GitHub sign-in completed for {profile.get('login', '<unknown>')}")
        return Session(
            access_token=access_token,
            login=profile.get("login"),
            avatar_url=profile.get("avatar_url"),
        )
