import uuid

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.models.subscription import Subscription
from app.services.auth import CurrentUser, get_current_user
from app.services.store import get_subscription_store


class InMemoryStore:
    """Stands in for SubscriptionStore without a database."""

    def __init__(self):
        self.rows: list[Subscription] = []

    async def list_for_user(self, user_id, is_active=None):
        rows = [r for r in self.rows if r.user_id == user_id]
        if is_active is not None:
            rows = [r for r in rows if r.is_active == is_active]
        return sorted(rows, key=lambda r: r.next_payment, reverse=True)

    async def add(self, user_id, values):
        values = {"category": "general", **values}
        sub = Subscription(id=uuid.uuid4(), user_id=user_id, is_active=True, **values)
        self.rows.append(sub)
        return sub

    async def delete_owned(self, sub_id, user_id):
        for row in self.rows:
            if row.id == sub_id and row.user_id == user_id:
                self.rows.remove(row)
                return True
        return False


class Principal:
    def __init__(self, user_id: str):
        self.user_id = user_id

    async def __call__(self) -> CurrentUser:
        return CurrentUser(id=self.user_id)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def principal():
    return Principal("user_a")


@pytest.fixture
def client(store, principal):
    app.dependency_overrides[get_subscription_store] = lambda: store
    app.dependency_overrides[get_current_user] = principal
    yield TestClient(app)
    app.dependency_overrides.clear()
