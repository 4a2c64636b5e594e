"""Shared request helpers for API tests."""


async def register(client, name: str, email: str, password: str) -> dict:
    """Register through the API and return the response body."""
    r = await client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert r.status_code == 201, r.text
    return r.json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
