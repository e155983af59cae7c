"""Tests for the signed session cookie codec."""

import base64
import json

import pytest
from fastapi import Response

from auth.session import (
    SESSION_COOKIE,
    SessionCodec,
    clear_session_cookie,
    set_session_cookie,
)
from models.data_models import Session

SECRET = "test_session_secret_1234567890"


@pytest.fixture
def codec():
    return SessionCodec(SECRET)


class TestRoundTrip:
    """decode(encode(s)) == s for well-formed sessions."""
    
    @pytest.mark.parametrize("session", [
        Session(),
        Session(login="octocat"),
        Session(access_token="gho_abc123", login="octocat", avatar_url="https://avatars.githubusercontent.com/u/1?v=4"),
        Session(access_token="gho_üñíçødé", login="ök"),
    ])
    def test_round_trip(self, codec, session):
        assert codec.decode(codec.encode(session)) == session
    
    def test_encoded_value_is_url_safe(self, codec):
        """Only base64url characters, '.' and hex digits."""
        value = codec.encode(Session(access_token="gho_+/=?&", login="octocat"))
        allowed = set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.")
        assert set(value) <= allowed
    
    def test_absent_fields_not_serialized(self, codec):
        payload = codec.encode(Session(login="octocat")).split(".")[0]
        data = json.loads(base64.urlsafe_b64decode(payload + "=" * (-len(payload) % 4)))
        assert data == {"login": "octocat"}


class TestAnonymousFallback:
    """Malformed or forged input decodes to an anonymous session."""
    
    @pytest.mark.parametrize("value", [
        None,
        "",
        "garbage",
        "not-base64!!.deadbeef",
        ".",
        "eyJsb2dpbiI6Im9jdG9jYXQifQ",  # payload without signature
        "ÿÿÿ.ÿÿÿ",
    ])
    def test_malformed_values(self, codec, value):
        session = codec.decode(value)
        assert session == Session()
        assert session.is_authenticated is False
    
    def test_truncated_value(self, codec):
        value = codec.encode(Session(access_token="gho_abc", login="octocat"))
        assert codec.decode(value[:-5]) == Session()
        assert codec.decode(value[5:]) == Session()
    
    def test_tampered_payload_rejected(self, codec):
        """Changing the payload invalidates the signature."""
        value = codec.encode(Session(access_token="gho_abc", login="octocat"))
        _, signature = value.split(".")
        forged_payload = base64.urlsafe_b64encode(
            json.dumps({"accessToken": "gho_stolen", "login": "admin"}).encode()
        ).rstrip(b"=").decode()
        assert codec.decode(f"{forged_payload}.{signature}") == Session()
    
    def test_other_secret_rejected(self, codec):
        value = SessionCodec("a_different_secret_value").encode(Session(access_token="gho_abc"))
        assert codec.decode(value) == Session()
    
    @pytest.mark.parametrize("data", [
        [1, 2, 3],
        "just a string",
        {"accessToken": 12345},
    ])
    def test_signed_but_invalid_payload(self, codec, data):
        """Correctly signed but non-conforming payloads are still anonymous."""
        payload = base64.urlsafe_b64encode(json.dumps(data).encode()).rstrip(b"=").decode()
        assert codec.decode(f"{payload}.{codec._sign(payload)}") == Session()


class TestCookieHelpers:
    """Tests for cookie attributes."""
    
    def test_set_session_cookie(self, codec):
        response = Response()
        set_session_cookie(response, Session(access_token="gho_abc", login="octocat"), codec)
        
        header = response.headers["set-cookie"]
        assert header.startswith(f"{SESSION_COOKIE}=")
        assert "Max-Age=86400" in header
        assert "Path=/" in header
        assert "HttpOnly" in header
        assert "samesite=lax" in header.lower()
    
    def test_clear_session_cookie(self):
        response = Response()
        clear_session_cookie(response)
        
        header = response.headers["set-cookie"]
        assert header.startswith(f'{SESSION_COOKIE}="";') or header.startswith(f"{SESSION_COOKIE}=;")
        assert "Max-Age=0" in header
        assert "Path=/" in header
