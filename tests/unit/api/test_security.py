"""Tests for token encoding and decoding."""

from datetime import timedelta

from jose import jwt

from opsdesk.core.config import get_settings
from opsdesk.core.rbac import Principal, UserRole
from opsdesk.core.security import create_access_token, decode_principal


class TestAccessTokens:
    """Principal claims survive a token round-trip."""

    def test_roundtrip(self):
        principal = Principal(id=12, role=UserRole.PLANNER, department_id=3, department_name="Mining")
        assert decode_principal(create_access_token(principal)) == principal

    def test_expired_token(self):
        token = create_access_token(Principal(id=1, role=UserRole.ADMIN), expires_delta=timedelta(seconds=-5))
        assert decode_principal(token) is None

    def test_wrong_signature(self):
        token = jwt.encode({"sub": "1", "role": "ADMIN"}, "another-secret", algorithm="HS256")
        assert decode_principal(token) is None

    def test_unknown_role(self):
        settings = get_settings()
        token = jwt.encode({"sub": "1", "role": "ROOT"}, settings.secret_key, algorithm=settings.algorithm)
        assert decode_principal(token) is None

    def test_missing_role(self):
        settings = get_settings()
        token = jwt.encode({"sub": "1"}, settings.secret_key, algorithm=settings.algorithm)
        assert decode_principal(token) is None
