import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key-long-enough-for-hs256-signing"
os.environ["ADMIN_EMAIL"] = ""
os.environ["ADMIN_PASSWORD"] = ""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.db.session import get_db
from app.core.dependencies import get_notifier
from app.services.user_service import ensure_admin

PASSWORD = "secret123"


class RecordingNotifier:
    """Stands in for EmailNotifier and remembers what would have been sent."""

    def __init__(self):
        self.status_mails = []
        self.broadcasts = []

    async def send_group_status(self, notification):
        self.status_mails.append(notification)
        return True

    async def broadcast(self, users, subject, message):
        users = list(users)
        self.broadcasts.append((users, subject, message))
        return {"sent": len(users), "failed": 0, "total": len(users)}


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


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest_asyncio.fixture
async def client(session_factory, notifier):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def auth(token):
    return {"Authorization": f"Bearer {token}"}


async def register(client, name, email=None, password=PASSWORD):
    email = email or f"{name.lower()}@example.com"
    res = await client.post("/api/v1/auth/register", json={
        "name": name,
        "email": email,
        "contact_number": "0123456789",
        "password": password,
        "terms_accepted": True,
    })
    assert res.status_code == 201, res.text
    # requests authenticate by header only
    client.cookies.clear()
    body = res.json()
    return body["token"], body["user"]


@pytest_asyncio.fixture
async def admin_token(client, session_factory):
    async with session_factory() as db:
        await ensure_admin(db, "Admin", "admin@example.com", PASSWORD)

    res = await client.post("/api/v1/auth/admin/login", json={
        "email": "admin@example.com",
        "password": PASSWORD,
    })
    assert res.status_code == 200, res.text
    client.cookies.clear()
    return res.json()["token"]


async def create_group(client, token, **overrides):
    payload = {
        "title": "Linear Algebra Crew",
        "subject": "Mathematics",
        "description": "Weekly problem sets and exam prep",
        "max_members": 5,
    }
    payload.update(overrides)
    res = await client.post("/api/v1/groups/", json=payload, headers=auth(token))
    assert res.status_code == 201, res.text
    return res.json()


async def approve(client, admin_token, group_id):
    res = await client.put(f"/api/v1/admin/groups/{group_id}/approve", headers=auth(admin_token))
    assert res.status_code == 200, res.text
    return res.json()
