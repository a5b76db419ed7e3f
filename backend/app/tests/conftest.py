import os

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-the-mermaid-studio-suite")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CREDENTIAL_STORE_PATH", "")

import uuid

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import Base
from app.models import User
from app.services.credential_service import CredentialHolder
from app.services.generation_service import GenerationClient


class ManualTimer:
    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualLoop:
    """Just enough of an event loop for call_later, driven by advance()."""

    def __init__(self):
        self.now = 0.0
        self.timers: list[ManualTimer] = []

    def call_later(self, delay, callback, *args):
        timer = ManualTimer(self.now + delay, callback, args)
        self.timers.append(timer)
        return timer

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [t for t in self.timers if not t.cancelled and t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.when)
            self.timers.remove(timer)
            self.now = timer.when
            timer.callback(*timer.args)
        self.now = target


class FakeCompletionEndpoint:
    """Records requests and answers them with a canned response."""

    def __init__(self, status_code=200, json_body=None, content=None):
        self.status_code = status_code
        self.json_body = json_body
        self.content = content
        self.requests: list[httpx.Request] = []

    @classmethod
    def returning(cls, text):
        return cls(json_body={"choices": [{"message": {"role": "assistant", "content": text}}]})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def manual_loop():
    return ManualLoop()


@pytest.fixture
def credentials():
    holder = CredentialHolder(store_path=None)
    holder.set("sk-test-key")
    return holder


@pytest.fixture
def make_client(credentials):
    def _make(endpoint: FakeCompletionEndpoint, holder: CredentialHolder | None = None):
        return GenerationClient(
            holder or credentials,
            base_url="https://llm.test/v1",
            model="gpt-4o-mini",
            temperature=0.2,
            max_tokens=512,
            transport=endpoint.transport,
        )
    return _make


@pytest_asyncio.fixture
async def db_session():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()


async def create_user(session: AsyncSession, username: str) -> User:
    user = User(
        id=uuid.uuid4(),
        username=username,
        email=f"{username}@example.com",
        password_hash="not-a-real-hash",
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def alice(db_session):
    return await create_user(db_session, "alice")


@pytest_asyncio.fixture
async def bob(db_session):
    return await create_user(db_session, "bob")


@pytest.fixture
def fake_endpoint():
    return FakeCompletionEndpoint
