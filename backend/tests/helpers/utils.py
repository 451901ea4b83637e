"""Tiny helpers shared across API test modules."""

from __future__ import annotations

from typing import Any

API = "/api/v1"


def register(
    client,
    *,
    email: str = "ana@example.com",
    password: str = "secret1",
    full_name: str = "Ana Putri",
) -> dict[str, Any]:
    """Register through the HTTP API and return the ``data`` envelope.

    Parameters
    ----------
    client: flask.testing.FlaskClient
        Test client of an app whose auth provider is already seeded.

    Returns
    -------
    dict[str, Any]
        ``{"user": ..., "access_token": ..., ...}`` as served.
    """
    resp = client.post(
        f"{API}/authentications/register",
        json={"email": email, "password": password, "full_name": full_name},
    )
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
