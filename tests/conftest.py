"""Shared fixtures: in-memory SQLite database, local storage and an ASGI test client."""

import os
import uuid
from datetime import datetime, timedelta, timezone

# Settings() built from the environment (worker tasks) needs these
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-with-enough-length-for-hs256")

import httpx
import jwt
import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from clausewise.config import Settings
from clausewise.database import create_session_factory
from clausewise.main import create_app
from clausewise.models import Base, Contract, ContractStatus, ContractType, Profile, UserRole
from clausewise.services.retention_service import RetentionService
from clausewise.services.storage.local_storage import LocalFileStorage

JWT_SECRET = os.environ["JWT_SECRET"]


def make_token(user_id: uuid.UUID, email: str | None = None, expires_in: int = 3600) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "aud": "authenticated",
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, JWT_SECRET, algorithm="HS256")


def auth_headers(user_id: uuid.UUID) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL="sqlite+aiosqlite://",
        JWT_SECRET=JWT_SECRET,
        STORAGE_BACKEND="local",
        STORAGE_DIR=str(tmp_path / "storage"),
        LOG_LEVEL="DEBUG",
    )


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def storage(settings) -> LocalFileStorage:
    return LocalFileStorage(settings.STORAGE_DIR)


@pytest.fixture
def app(settings, engine, session_factory, storage):
    # State is wired by hand because ASGITransport does not run the lifespan
    application = create_app(settings)
    application.state.engine = engine
    application.state.session_factory = session_factory
    application.state.storage = storage
    application.state.retention_service = RetentionService(session_factory, storage, batch_size=100)
    return application


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def add_contract(session_factory, storage):
    """Insert a contract row (and its stored file unless store_file=False)."""

    async def _add(
        user_id: uuid.UUID | None = None,
        status: ContractStatus = ContractStatus.PENDING,
        expires_in: timedelta = timedelta(hours=48),
        store_file: bool = True,
        file_name: str = "nda.pdf",
    ) -> Contract:
        user_id = user_id or uuid.uuid4()
        now = datetime.now(timezone.utc)
        file_path = f"{user_id}/{uuid.uuid4().hex}_{file_name}"
        if store_file:
            await storage.save(file_path, b"%PDF-1.4\ncontract body\n", "application/pdf")
        async with session_factory() as session:
            contract = Contract(
                user_id=user_id,
                file_name=file_name,
                file_path=file_path,
                contract_type=ContractType.NDA.value,
                status=status.value,
                uploaded_at=now + expires_in - timedelta(hours=48),
                expires_at=now + expires_in,
            )
            session.add(contract)
            await session.commit()
            await session.refresh(contract)
            return contract

    return _add


@pytest.fixture
def load_contract(session_factory):
    async def _load(contract_id: uuid.UUID) -> Contract:
        async with session_factory() as session:
            result = await session.execute(select(Contract).where(Contract.id == contract_id))
            return result.scalar_one()

    return _load


@pytest.fixture
def grant_role(session_factory):
    async def _grant(user_id: uuid.UUID, role: str) -> None:
        async with session_factory() as session:
            session.add(UserRole(user_id=user_id, role=role))
            await session.commit()

    return _grant


@pytest.fixture
def sign_agreement(session_factory):
    async def _sign(user_id: uuid.UUID) -> None:
        async with session_factory() as session:
            session.add(
                Profile(
                    user_id=user_id,
                    agreement_signed=True,
                    agreement_signed_at=datetime.now(timezone.utc),
                )
            )
            await session.commit()

    return _sign
