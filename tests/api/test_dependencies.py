# tests/api/test_dependencies.py
"""Tests for API dependencies module."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from viet_kconnect.api.dependencies import get_current_user, get_optional_user
from viet_kconnect.core.errors import UnauthorizedError
from viet_kconnect.core.security import create_access_token, decode_subject
from viet_kconnect.core.settings import settings


def _credentials(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestDecodeSubject:
    """Test JWT subject decoding."""

    def test_valid_token(self):
        assert decode_subject(create_access_token("user-1")) == "user-1"

    def test_expired_token(self):
        token = jwt.encode(
            {"sub": "user-1", "exp": datetime.now(UTC) - timedelta(minutes=1)},
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )
        assert decode_subject(token) is None

    def test_wrong_key(self):
        token = jwt.encode({"sub": "user-1"}, "other-key", algorithm=settings.jwt_algorithm)
        assert decode_subject(token) is None

    def test_missing_subject(self):
        token = jwt.encode({"role": "x"}, settings.secret_key, algorithm=settings.jwt_algorithm)
        assert decode_subject(token) is None


class TestGetOptionalUser:
    """Test the optional session dependency."""

    def test_no_credentials(self, db_session):
        assert get_optional_user(None, db_session) is None

    def test_known_user(self, db_session, test_user):
        token = create_access_token(test_user.id)
        assert get_optional_user(_credentials(token), db_session) is test_user

    def test_unknown_user(self, db_session):
        token = create_access_token("missing-user")
        assert get_optional_user(_credentials(token), db_session) is None

    def test_garbage_token(self, db_session):
        assert get_optional_user(_credentials("garbage"), db_session) is None


class TestGetCurrentUser:
    """Test the required session dependency."""

    def test_returns_user(self, test_user):
        assert get_current_user(test_user) is test_user

    def test_anonymous_raises(self):
        with pytest.raises(UnauthorizedError) as exc_info:
            get_current_user(None)
        assert exc_info.value.status_code == 401
