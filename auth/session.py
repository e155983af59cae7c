"""Signed, cookie-safe encoding of the dashboard Session.

Wire format: ``<base64url(json)>.<hex hmac-sha256>``. Both halves use only
URL-safe characters so the value can be put in a cookie as-is.
"""

import base64
import hashlib
import hmac
import json
import logging
from typing import Optional
from urllib.parse import quote, unquote

from fastapi import Request, Response
from models.data_models import Session

logger = logging.getLogger(__name__)

SESSION_COOKIE = "gh_session"
SESSION_MAX_AGE = 86400  # 24h


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


class SessionCodec:
    """Encode and decode Session records with an HMAC signature.
    
    decode() never raises: anything it cannot verify or parse yields an
    anonymous Session, so a corrupt or forged cookie only logs the user out.
    """
    
    def __init__(self, secret: str):
        self._key = secret.encode("utf-8")
    
    def _sign(self, payload: str) -> str:
        return hmac.new(self._key, payload.encode("ascii"), hashlib.sha256).hexdigest()
    
    def encode(self, session: Session) -> str:
        """Serialize a session to a signed transport string."""
        data = session.model_dump(by_alias=True, exclude_none=True)
        payload = _b64encode(json.dumps(data, separators=(",", ":")).encode("utf-8"))
        return f"{payload}.{self._sign(payload)}"
    
    def decode(self, value: Optional[str]) -> Session:
        """Verify and deserialize; returns an anonymous Session on any failure."""
        if not value or "." not in value:
            return Session()
        
        payload, _, signature = value.rpartition(".")
        try:
            expected = self._sign(payload).encode("ascii")
            provided = signature.encode("utf-8")
        except UnicodeEncodeError:
            return Session()
        if not hmac.compare_digest(expected, provided):
            logger.debug("Session signature mismatch, treating as anonymous")
            return Session()
        
        try:
            data = json.loads(_b64decode(payload))
            return Session.model_validate(data)
        except ValueError:
            # binascii.Error, JSONDecodeError, UnicodeDecodeError and
            # pydantic.ValidationError are all ValueError subclasses
            logger.debug("Malformed session payload, treating as anonymous")
            return Session()


def read_session(request: Request, codec: SessionCodec) -> Session:
    """Decode the session cookie from an incoming request."""
    raw = request.cookies.get(SESSION_COOKIE)
    if not raw:
        return Session()
    return codec.decode(unquote(raw))


def set_session_cookie(response: Response, session: Session, codec: SessionCodec) -> None:
    """Attach a 24h session cookie to the response."""
    response.set_cookie(
        SESSION_COOKIE,
        quote(codec.encode(session)),
        max_age=SESSION_MAX_AGE,
        path="/",
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    """Tell the browser to drop its session immediately."""
    response.set_cookie(
        SESSION_COOKIE,
        "",
        max_age=0,
        path="/",
        httponly=True,
        samesite="lax",
    )
