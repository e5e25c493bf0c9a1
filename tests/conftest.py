"""
Pytest configuration and fixtures for scoped search tests.
"""
import uuid
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, date, datetime, timedelta
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from scopedsearch.api.deps import get_registry, get_search_store
from scopedsearch.api.middleware.auth import get_current_principal
from scopedsearch.config import Settings
from scopedsearch.domain.resources import BUNDLED_RESOURCES
from scopedsearch.domain.search.pagination import LimitPolicy
from scopedsearch.domain.search.resource import ResourceRegistry
from scopedsearch.domain.search.service import SearchService
from scopedsearch.domain.search.types import Principal
from scopedsearch.infrastructure.database.memory_store import InMemorySearchStore
from scopedsearch.main import create_app

BASE_TIME = datetime(2024, 5, 1, 8, 30, tzinfo=UTC)

TENANT_A = uuid.UUID("aaaaaaaa-0000-0000-0000-000000000001")
TENANT_B = uuid.UUID("bbbbbbbb-0000-0000-0000-000000000002")
ORG_A = uuid.UUID("aaaaaaaa-1111-0000-0000-000000000001")
ORG_B = uuid.UUID("bbbbbbbb-1111-0000-0000-000000000002")
USER_A = uuid.UUID("aaaaaaaa-2222-0000-0000-000000000001")
USER_B = uuid.UUID("bbbbbbbb-2222-0000-0000-000000000002")
SUPPORT_USER = uuid.UUID("cccccccc-2222-0000-0000-000000000003")


@pytest.fixture
def test_settings() -> Settings:
    """Settings with no .env lookup."""
    return Settings(_env_file=None)


# ----- Principals -----


@pytest.fixture
def member_a() -> Principal:
    return Principal(id=USER_A, role="member", tenant_id=TENANT_A, organization_id=ORG_A)


@pytest.fixture
def member_b() -> Principal:
    return Principal(id=USER_B, role="member", tenant_id=TENANT_B, organization_id=ORG_B)


@pytest.fixture
def admin_a() -> Principal:
    return Principal(id=uuid.uuid4(), role="admin", tenant_id=TENANT_A, organization_id=ORG_A)


@pytest.fixture
def org_admin_a() -> Principal:
    return Principal(id=uuid.uuid4(), role="organization_admin", organization_id=ORG_A)


@pytest.fixture
def support_agent() -> Principal:
    return Principal(id=SUPPORT_USER, role="support")


# ----- Rows -----


def make_task(tenant_id: uuid.UUID, index: int, **overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": uuid.UUID(int=index),
        "tenant_id": tenant_id,
        "title": f"Task {index}",
        "description": None,
        "status": "todo",
        "priority": 3,
        "assignee_id": None,
        "due_at": None,
        "created_at": BASE_TIME + timedelta(minutes=index),
        "updated_at": BASE_TIME + timedelta(minutes=index),
        "deleted_at": None,
    }
    row.update(overrides)
    return row


def make_policy(organization_id: uuid.UUID, index: int, **overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": uuid.UUID(int=1000 + index),
        "organization_id": organization_id,
        "patient_id": uuid.UUID(int=5000 + index),
        "policy_number": f"POL-{index:04d}",
        "payer_name": "Acme Health",
        "group_number": None,
        "plan_type": "ppo",
        "policy_status": "active",
        "coverage_start_date": date(2024, 1, 1),
        "coverage_end_date": None,
        "created_at": BASE_TIME + timedelta(minutes=index),
        "updated_at": BASE_TIME + timedelta(minutes=index),
        "deleted_at": None,
    }
    row.update(overrides)
    return row


def make_reminder(owner_id: uuid.UUID, index: int, **overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": uuid.UUID(int=2000 + index),
        "owner_id": owner_id,
        "reminder_type": "appointment",
        "message": f"Reminder {index}",
        "status": "pending",
        "scheduled_for": BASE_TIME + timedelta(hours=index),
        "delivered_at": None,
        "acknowledged_at": None,
        "delivery_uri": f"https://push.internal/{index}",
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
        "deleted_at": None,
    }
    row.update(overrides)
    return row


def make_member(tenant_id: uuid.UUID, index: int, **overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": uuid.UUID(int=3000 + index),
        "tenant_id": tenant_id,
        "email": f"user{index}@example.com",
        "full_name": f"User {index}",
        "role": "member",
        "password_hash": "$argon2id$secret",
        "avatar_storage_uri": "s3://avatars/secret.png",
        "last_login_at": None,
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
        "deleted_at": None,
    }
    row.update(overrides)
    return row


@pytest.fixture
def rows() -> dict[str, list[dict[str, Any]]]:
    """Rows for two tenants/organizations across every bundled resource."""
    tasks = [make_task(TENANT_A, i) for i in range(1, 26)]
    tasks += [make_task(TENANT_B, i) for i in range(101, 106)]
    tasks.append(make_task(TENANT_A, 99, title="Deleted task", deleted_at=BASE_TIME))

    policies = [make_policy(ORG_A, i) for i in range(1, 4)]
    policies.append(make_policy(ORG_B, 10))

    reminders = [make_reminder(USER_A, i) for i in range(1, 4)]
    reminders += [make_reminder(USER_B, i) for i in range(10, 12)]

    members = [make_member(TENANT_A, i) for i in range(1, 3)]
    members.append(make_member(TENANT_B, 10))

    return {
        "tasks": tasks,
        "insurance_policies": policies,
        "reminders": reminders,
        "members": members,
    }


# ----- Engine -----


@pytest.fixture
def registry() -> ResourceRegistry:
    """Registry of the bundled resources with default limits."""
    registry = ResourceRegistry(default_limits=LimitPolicy(default_limit=20, max_limit=100))
    registry.register_all(BUNDLED_RESOURCES)
    return registry


@pytest.fixture
def store(rows: dict[str, list[dict[str, Any]]]) -> InMemorySearchStore:
    return InMemorySearchStore(rows)


@pytest.fixture
def service(registry: ResourceRegistry, store: InMemorySearchStore) -> SearchService:
    return SearchService(registry, store)


# ----- API -----


@pytest.fixture
def app(registry: ResourceRegistry, store: InMemorySearchStore, member_a: Principal) -> FastAPI:
    """Test application backed by the in-memory store."""
    app = create_app()
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_search_store] = lambda: store
    app.dependency_overrides[get_current_principal] = lambda: member_a
    return app


@pytest.fixture
def as_principal(app: FastAPI) -> Callable[[Principal], None]:
    """Switch the authenticated caller for subsequent requests."""

    def _switch(principal: Principal) -> None:
        app.dependency_overrides[get_current_principal] = lambda: principal

    return _switch


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create sync test client."""
    return TestClient(app)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def unauthenticated_client(registry: ResourceRegistry, store: InMemorySearchStore) -> TestClient:
    """Client whose requests go through the real bearer-token dependency."""
    app = create_app()
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_search_store] = lambda: store
    return TestClient(app)
