"""Tests for the scheduler-facing cleanup endpoint."""

import uuid
from datetime import timedelta

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from clausewise.database import create_session_factory
from clausewise.models import ContractStatus
from clausewise.services.retention_service import RetentionService

CLEANUP_URL = "/functions/cleanup-expired-contracts"


class ExplodingService:
    """Fails the test if the endpoint touches data for a preflight request."""

    async def sweep(self, now=None):
        raise AssertionError("preflight must not run a sweep")


@pytest_asyncio.fixture
async def tableless_service(storage):
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield RetentionService(create_session_factory(engine), storage)
    await engine.dispose()


@pytest.mark.asyncio
async def test_preflight_returns_empty_ok_with_cors(app, client):
    app.state.retention_service = ExplodingService()

    response = await client.options(CLEANUP_URL)

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"
    assert "content-type" in response.headers["access-control-allow-headers"]


@pytest.mark.asyncio
async def test_sweep_with_nothing_expired(client, add_contract):
    await add_contract(expires_in=timedelta(hours=10))

    response = await client.post(CLEANUP_URL)

    assert response.status_code == 200
    assert response.json() == {"message": "No expired contracts found", "deleted": 0}
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_sweep_expires_overdue_contracts(client, add_contract, load_contract, storage):
    owner = uuid.uuid4()
    overdue_pending = await add_contract(owner, ContractStatus.PENDING, timedelta(hours=-1))
    overdue_completed = await add_contract(owner, ContractStatus.COMPLETED, timedelta(minutes=-5))
    still_valid = await add_contract(owner, ContractStatus.PROCESSING, timedelta(hours=1))

    response = await client.post(CLEANUP_URL, json={"ignored": True})

    assert response.status_code == 200
    assert response.json() == {"message": "Cleaned up 2 expired contracts", "deleted": 2}

    for contract in (overdue_pending, overdue_completed):
        reloaded = await load_contract(contract.id)
        assert reloaded.status == ContractStatus.EXPIRED.value
        with pytest.raises(FileNotFoundError):
            await storage.read(contract.file_path)

    untouched = await load_contract(still_valid.id)
    assert untouched.status == ContractStatus.PROCESSING.value
    assert await storage.read(still_valid.file_path)


@pytest.mark.asyncio
async def test_any_method_runs_the_sweep(client, add_contract):
    await add_contract(expires_in=timedelta(hours=-2))

    first = await client.get(CLEANUP_URL)
    second = await client.delete(CLEANUP_URL)

    assert first.json()["deleted"] == 1
    assert second.json() == {"message": "No expired contracts found", "deleted": 0}


@pytest.mark.asyncio
async def test_head_runs_the_sweep(client, add_contract, load_contract):
    contract = await add_contract(expires_in=timedelta(hours=-2))

    response = await client.head(CLEANUP_URL)

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert (await load_contract(contract.id)).status == ContractStatus.EXPIRED.value


@pytest.mark.asyncio
async def test_fetch_failure_returns_500_with_cors(app, client, tableless_service):
    app.state.retention_service = tableless_service

    response = await client.post(CLEANUP_URL)

    assert response.status_code == 500
    body = response.json()
    assert body["error"].startswith("Failed to fetch expired contracts:")
    assert response.headers["access-control-allow-origin"] == "*"
