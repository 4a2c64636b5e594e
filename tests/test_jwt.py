"""TokenService unit tests — issue/verify, expiry boundary, tampering."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from todoserver.auth.jwt import TokenExpired, TokenInvalid, TokenService


@pytest.fixture
def svc():
    return TokenService(secret="unit-secret", expire_days=7)


def test_issue_and_verify(svc):
    user_id = str(uuid.uuid4())
    assert svc.verify(svc.issue(user_id)) == user_id


def test_claims(svc):
    now = datetime.now(timezone.utc)
    token = svc.issue("abc", now=now)
    payload = jwt.decode(token, "unit-secret", algorithms=["HS256"])
    assert payload["sub"] == "abc"
    assert payload["exp"] - payload["iat"] == 7 * 24 * 3600


def test_valid_just_before_expiry(svc):
    """Issued lifetime-minus-a-minute ago: still inside the window."""
    issued = datetime.now(timezone.utc) - timedelta(days=7) + timedelta(minutes=1)
    assert svc.verify(svc.issue("abc", now=issued)) == "abc"


def test_expired_at_expiry(svc):
    """exp == now (or earlier) is expired."""
    issued = datetime.now(timezone.utc) - timedelta(days=7)
    with pytest.raises(TokenExpired):
        svc.verify(svc.issue("abc", now=issued))


def test_expired_is_a_token_invalid(svc):
    issued = datetime.now(timezone.utc) - timedelta(days=30)
    with pytest.raises(TokenInvalid):
        svc.verify(svc.issue("abc", now=issued))


def test_wrong_secret_rejected(svc):
    other = TokenService(secret="someone-else")
    with pytest.raises(TokenInvalid) as exc:
        svc.verify(other.issue("abc"))
    assert not isinstance(exc.value, TokenExpired)


def test_expired_token_with_wrong_signature_is_invalid_not_expired(svc):
    """Signature is checked first: a forged expired token reads as forged."""
    other = TokenService(secret="someone-else")
    issued = datetime.now(timezone.utc) - timedelta(days=30)
    with pytest.raises(TokenInvalid) as exc:
        svc.verify(other.issue("abc", now=issued))
    assert not isinstance(exc.value, TokenExpired)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_rejected(svc, token):
    with pytest.raises(TokenInvalid):
        svc.verify(token)


def test_missing_exp_rejected(svc):
    token = jwt.encode({"sub": "abc", "iat": datetime.now(timezone.utc)}, "unit-secret")
    with pytest.raises(TokenInvalid):
        svc.verify(token)


def test_none_algorithm_rejected(svc):
    token = jwt.encode(
        {"sub": "abc", "iat": datetime.now(timezone.utc),
         "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        None,
        algorithm="none",
    )
    with pytest.raises(TokenInvalid):
        svc.verify(token)
