"""Service test fixtures — async DB, seeded project, collaborator fakes, FastAPI client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Seed data is exposed as plain ids/emails (ORM instances expire on rollback,
      and expired attributes cannot be lazy-loaded in async sessions)
    - get_db overridden to use the test DB; the notification dispatcher overridden
      with one wrapping a recording notifier

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for service and route tests
    - Fakes over mocks for oracle/notifier: assertions read recorded calls directly
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from tasktrack.api.dependencies import get_notification_dispatcher
from tasktrack.core.boundary_types import RightsDecision
from tasktrack.db.base import Base
from tasktrack.infrastructure.database import get_db
from tasktrack.infrastructure.sql_repositories import SqlUnitOfWork
from tasktrack.main import app
from tasktrack.models.project import Project, ProjectMember
from tasktrack.models.task import Task
from tasktrack.models.user import User
from tasktrack.services.notification_dispatch import (
    AssignmentNotificationDispatcher,
)


class RecordingOracle:
    """Allows everything except the configured fields; records every query."""

    def __init__(self, denied_fields=frozenset(), reason="Field not editable"):
        self.denied_fields = frozenset(denied_fields)
        self.reason = reason
        self.calls = []

    async def check(self, project_id, actor_id, action, fields):
        self.calls.append((project_id, actor_id, action, fields))
        if fields & self.denied_fields:
            return RightsDecision.deny(self.reason)
        return RightsDecision.allow()


class RecordingNotifier:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    async def notify_assigned(self, recipient_email, task_id, actor):
        self.calls.append((recipient_email, task_id, actor))
        if self.fail:
            raise RuntimeError("mail relay down")


class FixedClock:
    """Returns strictly increasing timestamps, one minute apart."""

    def __init__(self):
        self.current = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(minutes=1)
        return self.current


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def seed(test_db):
    """Project with owner Alice, member Bob, observer Carol; Dave is an outsider.

    Stored membership order is Bob, Alice, Carol (deliberately not alphabetical).
    One task authored by Alice, unassigned, no time logged yet.
    """
    alice = User(name="Alice", email="alice@example.com")
    bob = User(name="Bob", email="bob@example.com")
    carol = User(name="Carol", email="carol@example.com")
    dave = User(name="Dave", email="dave@example.com")
    project = Project(name="Launch")
    other_project = Project(name="Elsewhere")
    test_db.add_all([alice, bob, carol, dave, project, other_project])
    await test_db.flush()
    test_db.add_all([
        ProjectMember(project_id=project.id, user_id=bob.id, role="member", position=0),
        ProjectMember(project_id=project.id, user_id=alice.id, role="owner", position=1),
        ProjectMember(project_id=project.id, user_id=carol.id, role="observer", position=2),
        ProjectMember(project_id=other_project.id, user_id=dave.id, role="owner", position=0),
    ])
    task = Task(
        title="Write launch notes", description="Draft", priority=2,
        author_id=alice.id, parent_id=project.id,
    )
    test_db.add(task)
    await test_db.commit()
    return SimpleNamespace(
        project_id=project.id,
        other_project_id=other_project.id,
        task_id=task.id,
        alice_id=alice.id,
        bob_id=bob.id,
        carol_id=carol.id,
        dave_id=dave.id,
    )


@pytest.fixture
async def load_task(test_session_factory):
    """Read a task through a fresh session (sees only committed state)."""
    async def _load(task_id):
        async with test_session_factory() as session:
            return await session.get(Task, task_id)
    return _load


@pytest.fixture
def uow(test_db):
    return SqlUnitOfWork(test_db)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def dispatcher(notifier):
    return AssignmentNotificationDispatcher(notifier, timeout_seconds=1.0)


@pytest.fixture
async def client(test_session_factory, dispatcher):
    """FastAPI test client with DB and notification dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def as_user():
    """Headers identifying the acting user."""
    def _headers(user_id) -> dict:
        return {"X-User-Id": str(user_id)}
    return _headers


@pytest.fixture
def oracle():
    return RecordingOracle()


@pytest.fixture
def clock():
    return FixedClock()
