"""
Unit Tests: Access Token Issuance & Verification
"""

import time

import jwt
import pytest

from service.token_service import TokenService

SECRET = "unit-test-secret-0123456789abcdef0123"


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(SECRET, expires_seconds=3600)


class TestTokenService:

    @pytest.mark.unit
    def test_round_trip(self, tokens):
        token = tokens.issue("user-1")
        assert tokens.verify(token) == "user-1"

    @pytest.mark.unit
    def test_token_carries_expiry(self, tokens):
        now = int(time.time())
        claims = jwt.decode(tokens.issue("user-1", now=now), SECRET, algorithms=["HS256"])
        assert claims["exp"] == now + 3600

    @pytest.mark.unit
    def test_expired(self, tokens):
        token = tokens.issue("user-1", now=int(time.time()) - 7200)
        assert tokens.verify(token) is None

    @pytest.mark.unit
    def test_wrong_secret(self, tokens):
        other = TokenService("another-secret-0123456789abcdef01234")
        assert tokens.verify(other.issue("user-1")) is None

    @pytest.mark.unit
    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_malformed(self, tokens, token):
        assert tokens.verify(token) is None

    @pytest.mark.unit
    def test_missing_subject(self, tokens):
        token = jwt.encode({"exp": int(time.time()) + 60}, SECRET, algorithm="HS256")
        assert tokens.verify(token) is None

    @pytest.mark.unit
    def test_missing_expiry(self, tokens):
        token = jwt.encode({"sub": "user-1"}, SECRET, algorithm="HS256")
        assert tokens.verify(token) is None

    @pytest.mark.unit
    def test_unsigned_token_rejected(self, tokens):
        token = jwt.encode(
            {"sub": "user-1", "exp": int(time.time()) + 60}, "", algorithm="none"
        )
        assert tokens.verify(token) is None
