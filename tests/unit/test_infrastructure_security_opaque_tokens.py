"""Unit tests for opaque token generation (refresh and action tokens).

Tests cover:
- Token shape and entropy (length, alphabet, uniqueness)
- Digest is deterministic SHA-256 hex and never equals the token
- Expiration relative to issuance time
"""

import hashlib
import re
from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from src.infrastructure.security import ActionTokenService, RefreshTokenService


@pytest.mark.unit
class TestRefreshTokenService:
    def test_token_shape(self):
        token, token_hash = RefreshTokenService().generate_token()

        assert len(token) == 43
        assert re.fullmatch(r"[A-Za-z0-9_-]+", token)
        assert token_hash == hashlib.sha256(token.encode()).hexdigest()
        assert token_hash != token

    def test_tokens_are_unique(self):
        service = RefreshTokenService()

        tokens = {service.generate_token()[0] for _ in range(100)}

        assert len(tokens) == 100

    def test_hash_is_deterministic(self):
        assert RefreshTokenService.hash_token("abc") == RefreshTokenService.hash_token(
            "abc"
        )

    @freeze_time("2026-03-01 12:00:00")
    def test_expiration(self):
        service = RefreshTokenService(ttl_seconds=3600)

        assert service.calculate_expiration() == datetime(2026, 3, 1, 13, 0, tzinfo=UTC)


@pytest.mark.unit
class TestActionTokenService:
    def test_token_is_hex(self):
        token, token_hash = ActionTokenService(ttl=timedelta(hours=1)).generate_token()

        assert re.fullmatch(r"[0-9a-f]{64}", token)
        assert token_hash == ActionTokenService.hash_token(token)
        assert token_hash != token

    @freeze_time("2026-03-01 12:00:00")
    def test_expiration(self):
        service = ActionTokenService(ttl=timedelta(hours=24))

        assert service.calculate_expiration() == datetime(2026, 3, 2, 12, 0, tzinfo=UTC)
