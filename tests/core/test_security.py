"""
Tests for security utilities.
"""

from datetime import timedelta

import pytest

from agrofinance.core.security import (
    JWTError,
    create_access_token,
    decode_token,
    get_password_hash,
    verify_password,
)


@pytest.mark.unit
class TestSecurity:
    """Test security utilities."""

    def test_password_hashing(self):
        password = "adminpassword123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert verify_password(password, hashed) is True
        assert verify_password("wrongpassword", hashed) is False

    def test_create_access_token(self):
        token = create_access_token(subject=42, additional_claims={"role": "ADMIN"})
        payload = decode_token(token)

        assert payload["sub"] == "42"
        assert payload["type"] == "access"
        assert payload["role"] == "ADMIN"

    def test_expired_token(self):
        token = create_access_token(subject=1, expires_delta=timedelta(seconds=-1))

        with pytest.raises(JWTError):
            decode_token(token)
