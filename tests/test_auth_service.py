"""AuthService tests — registration, login, and the credential-store races.

These run against the service directly (no HTTP) so the error kinds can
be asserted as exceptions.
"""

import pytest

from todoserver.services.auth_service import (
    AuthService,
    InvalidCredentials,
    UserExists,
    UserNotFound,
)
from todoserver.services.user_service import UserService
from todoserver.services.validation import ValidationError


@pytest.fixture
def svc(db_session, hasher, tokens):
    return AuthService(db_session, hasher, tokens)


# ═══════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_returns_token_for_new_user(svc, tokens):
    result = await svc.register("Ann", "ann@x.com", "secret1")
    assert tokens.verify(result.token) == str(result.user.id)
    assert result.user.email == "ann@x.com"
    assert result.user.password_hash != "secret1"


@pytest.mark.asyncio
async def test_distinct_emails_get_distinct_ids(svc, tokens):
    results = [
        await svc.register(f"User {i}", f"user{i}@x.com", "secret1")
        for i in range(3)
    ]
    ids = {r.user.id for r in results}
    assert len(ids) == 3
    for r in results:
        assert tokens.verify(r.token) == str(r.user.id)


@pytest.mark.asyncio
async def test_register_normalizes_email_and_name(svc):
    result = await svc.register("  Ann  ", "  Ann@X.COM ", "secret1")
    assert result.user.email == "ann@x.com"
    assert result.user.name == "Ann"


@pytest.mark.asyncio
async def test_register_duplicate_normalized_email(svc):
    await svc.register("Ann", "ann@x.com", "secret1")
    with pytest.raises(UserExists):
        await svc.register("Other Ann", " ANN@x.com", "secret2")


@pytest.mark.asyncio
async def test_register_duplicate_past_precheck_is_user_exists(svc, db_session):
    """A racing insert that slips past the lookup hits the unique constraint."""
    await svc.register("Ann", "ann@x.com", "secret1")

    async def no_user(email):
        return None

    svc.users.get_by_email = no_user
    with pytest.raises(UserExists):
        await svc.register("Ann Again", "ann@x.com", "secret2")

    # The store still holds exactly the first account
    user = await UserService(db_session).get_by_email("ann@x.com")
    assert user.name == "Ann"


@pytest.mark.parametrize(
    "name,email,password,bad_fields",
    [
        ("", "ann@x.com", "secret1", ["name"]),
        ("A", "ann@x.com", "secret1", ["name"]),
        ("A" * 51, "ann@x.com", "secret1", ["name"]),
        ("Ann", "not-an-email", "secret1", ["email"]),
        ("Ann", "ann@x.com", "12345", ["password"]),
        (None, None, None, ["name", "email", "password"]),
    ],
)
@pytest.mark.asyncio
async def test_register_validation(svc, name, email, password, bad_fields):
    with pytest.raises(ValidationError) as exc:
        await svc.register(name, email, password)
    assert exc.value.fields == bad_fields


@pytest.mark.asyncio
async def test_failed_token_issue_leaves_no_user(db_session, hasher):
    """Registration is all-or-nothing from the caller's view."""

    class BrokenTokens:
        def issue(self, user_id):
            raise RuntimeError("signing failed")

    svc = AuthService(db_session, hasher, BrokenTokens())
    with pytest.raises(RuntimeError):
        await svc.register("Ann", "ann@x.com", "secret1")

    assert await UserService(db_session).get_by_email("ann@x.com") is None


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_success(svc, tokens):
    registered = await svc.register("Ann", "ann@x.com", "secret1")
    result = await svc.login(" ANN@x.com ", "secret1")
    assert result.user.id == registered.user.id
    assert tokens.verify(result.token) == str(registered.user.id)


@pytest.mark.asyncio
async def test_login_wrong_password_is_invalid_credentials(svc):
    await svc.register("Ann", "ann@x.com", "secret1")
    with pytest.raises(InvalidCredentials):
        await svc.login("ann@x.com", "wrong-password")


@pytest.mark.asyncio
async def test_login_unknown_email_is_user_not_found(svc):
    await svc.register("Ann", "ann@x.com", "secret1")
    with pytest.raises(UserNotFound):
        await svc.login("bob@x.com", "secret1")


@pytest.mark.asyncio
async def test_login_missing_fields(svc):
    with pytest.raises(ValidationError) as exc:
        await svc.login("", None)
    assert exc.value.fields == ["email", "password"]
