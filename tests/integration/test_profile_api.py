"""API tests for the caller's profile and the service agreement."""

import uuid

import pytest

from conftest import auth_headers, make_token


@pytest.mark.asyncio
async def test_profile_is_created_on_first_read(client):
    user_id = uuid.uuid4()
    headers = {"Authorization": f"Bearer {make_token(user_id, email='jane@example.com')}"}

    response = await client.get("/api/v1/profile", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["user_id"] == str(user_id)
    assert body["email"] == "jane@example.com"
    assert body["agreement_signed"] is False
    assert body["agreement_signed_at"] is None
    assert body["roles"] == []


@pytest.mark.asyncio
async def test_profile_echoes_roles(client, grant_role):
    user_id = uuid.uuid4()
    await grant_role(user_id, "operator")
    await grant_role(user_id, "admin")

    response = await client.get("/api/v1/profile", headers=auth_headers(user_id))

    assert response.json()["roles"] == ["admin", "operator"]


@pytest.mark.asyncio
async def test_signing_twice_keeps_first_signature(client):
    headers = auth_headers(uuid.uuid4())

    first = await client.post("/api/v1/profile/agreement", headers=headers)
    second = await client.post("/api/v1/profile/agreement", headers=headers)
    profile = await client.get("/api/v1/profile", headers=headers)

    assert first.status_code == 200
    assert second.status_code == 200
    signed_at = first.json()["agreement_signed_at"]
    assert signed_at is not None
    assert second.json()["agreement_signed_at"] == signed_at
    assert profile.json()["agreement_signed"] is True
    assert profile.json()["agreement_signed_at"] == signed_at


@pytest.mark.asyncio
async def test_profile_requires_token(client):
    response = await client.get("/api/v1/profile")
    assert response.status_code == 401
