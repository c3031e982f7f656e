"""
Notekeep Backend: Session Gate Tests
======================================

What we test:
    ✅ A freshly issued token decodes to its user id
    ✅ Expired, tampered and subject-less tokens are rejected
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.config import settings
from app.exceptions import UnauthorizedError
from app.security import UserContext, decode_session_token, issue_session_token


class TestSessionTokens:

    def test_issue_then_decode(self):
        token = issue_session_token("user-42")
        assert decode_session_token(token) == "user-42"

    def test_expired_token_rejected(self):
        token = issue_session_token("user-42", expires_in=timedelta(seconds=-30))

        with pytest.raises(UnauthorizedError) as exc_info:
            decode_session_token(token)

        assert exc_info.value.reason == "invalid_token"
        assert exc_info.value.message == "Unauthorized"

    def test_wrong_secret_rejected(self):
        token = jwt.encode({"sub": "user-42"}, "someone-elses-secret", algorithm="HS256")

        with pytest.raises(UnauthorizedError):
            decode_session_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(UnauthorizedError):
            decode_session_token("not-a-jwt")

    def test_missing_subject_rejected(self):
        exp = int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())
        token = jwt.encode({"exp": exp}, settings.auth_jwt_secret, algorithm=settings.auth_jwt_algorithm)

        with pytest.raises(UnauthorizedError) as exc_info:
            decode_session_token(token)

        assert exc_info.value.reason == "token_missing_sub"


def test_user_context_is_immutable():
    user = UserContext(user_id="user-42")
    with pytest.raises(Exception):
        user.user_id = "user-43"
