"""Test config and shared fixtures."""
import os
import tempfile

# Must be set before framework.config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "taskflow-test-logs"))
os.environ.setdefault("APP_ENV", "testing")

import pytest
from types import SimpleNamespace
from typing import AsyncGenerator, Optional
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from main import app
from framework.database.manager import get_db


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """Create async test database session."""
    # Import all models so they are registered in metadata
    import apps.models  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async_session_maker = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def client(async_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with the DB session swapped for the test one."""
    async def _get_db():
        yield async_session

    app.dependency_overrides[get_db] = _get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


class Api:
    """Thin helpers over the HTTP API. Cookies are cleared after auth calls so
    every request authenticates only through the header it is given."""

    def __init__(self, client: AsyncClient):
        self.client = client

    @staticmethod
    def auth(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    async def register(
        self,
        name: str = "Alice",
        email: str = "a@x.com",
        password: str = "secret1",
        workspace_name: str = "Acme",
    ):
        response = await self.client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password, "workspaceName": workspace_name},
        )
        self.client.cookies.clear()
        return response

    async def login(self, email: str, password: str = "secret1"):
        response = await self.client.post("/api/auth/login", json={"email": email, "password": password})
        self.client.cookies.clear()
        return response

    async def add_member(
        self, owner_token: str, name: str, email: str, role: str = "member", password: str = "secret1"
    ) -> SimpleNamespace:
        """Create a teammate and log them in."""
        response = await self.client.post(
            "/api/workspaces/create-member",
            json={"name": name, "email": email, "password": password, "role": role},
            headers=self.auth(owner_token),
        )
        assert response.status_code == 201, response.text
        login = await self.login(email, password)
        assert login.status_code == 200, login.text
        return SimpleNamespace(id=response.json()["data"]["id"], token=login.json()["data"]["token"])

    async def create_task(self, token: str, title: str = "Write report", **fields):
        return await self.client.post("/api/tasks", json={"title": title, **fields}, headers=self.auth(token))

    async def update_task(self, token: str, task_id: int, **fields):
        return await self.client.put(f"/api/tasks/{task_id}", json=fields, headers=self.auth(token))


@pytest.fixture
def api(client: AsyncClient) -> Api:
    return Api(client)


async def _register_owner(api: Api, name: str, email: str, workspace_name: str) -> SimpleNamespace:
    response = await api.register(name=name, email=email, workspace_name=workspace_name)
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    return SimpleNamespace(
        id=data["user"]["id"],
        token=data["token"],
        workspace_id=data["workspace"]["id"],
        slug=data["workspace"]["slug"],
    )


@pytest.fixture
async def acme(api: Api) -> SimpleNamespace:
    """Workspace 'Acme': owner Alice, admin Dave, members Bob and Carol."""
    alice = await _register_owner(api, "Alice", "a@x.com", "Acme")
    bob = await api.add_member(alice.token, "Bob", "bob@x.com")
    carol = await api.add_member(alice.token, "Carol", "carol@x.com")
    dave = await api.add_member(alice.token, "Dave", "dave@x.com", role="admin")
    return SimpleNamespace(owner=alice, bob=bob, carol=carol, admin=dave, workspace_id=alice.workspace_id)


@pytest.fixture
async def globex(api: Api) -> SimpleNamespace:
    """A second, unrelated workspace: owner Gina, member Hank."""
    gina = await _register_owner(api, "Gina", "gina@globex.com", "Globex")
    hank = await api.add_member(gina.token, "Hank", "hank@globex.com")
    return SimpleNamespace(owner=gina, member=hank, workspace_id=gina.workspace_id)


@pytest.fixture
async def bob_task(api: Api, acme) -> dict:
    """Task created by Bob in Acme, unassigned."""
    response = await api.create_task(acme.bob.token, title="Bob's task")
    assert response.status_code == 201, response.text
    return response.json()["data"]
