import asyncio
import uuid
from datetime import date

import pytest

from app.exceptions import UnsupportedCycleError
from app.models.subscription import Subscription
from app.services.cycles import advance_next_payment
from app.services.scheduler import update_next_payment_dates
from app.services.store import SubscriptionStore


class TestAdvanceNextPayment:
    def test_future_date_unchanged(self):
        assert advance_next_payment(date(2026, 12, 1), "monthly", date(2026, 10, 19)) == date(2026, 12, 1)

    def test_today_is_not_past_due(self):
        assert advance_next_payment(date(2026, 10, 19), "monthly", date(2026, 10, 19)) == date(2026, 10, 19)

    def test_monthly_skips_missed_cycles(self):
        assert advance_next_payment(date(2026, 7, 5), "monthly", date(2026, 10, 19)) == date(2026, 11, 5)

    def test_month_end_does_not_drift(self):
        assert advance_next_payment(date(2026, 1, 31), "monthly", date(2026, 3, 15)) == date(2026, 3, 31)

    def test_yearly_leap_day(self):
        assert advance_next_payment(date(2024, 2, 29), "yearly", date(2025, 3, 1)) == date(2026, 2, 28)

    def test_unknown_cycle(self):
        with pytest.raises(UnsupportedCycleError):
            advance_next_payment(date(2026, 1, 1), "weekly", date(2026, 10, 19))


class _Result:
    def __init__(self, rows):
        self.rows = rows

    def scalars(self):
        return self

    def all(self):
        return self.rows


class _Session:
    """Returns the given rows for any query; records commits."""

    def __init__(self, rows):
        self.rows = rows
        self.committed = False

    async def execute(self, query):
        return _Result(self.rows)

    async def commit(self):
        self.committed = True


def _sub(next_payment: date, cycle: str) -> Subscription:
    return Subscription(
        id=uuid.uuid4(), user_id="user_a", name="x", price=100,
        currency="JPY", cycle=cycle, next_payment=next_payment, is_active=True,
    )


def test_store_advances_past_due_rows():
    rows = [
        _sub(date(2026, 9, 1), "monthly"),
        _sub(date(2025, 1, 10), "yearly"),
        _sub(date(2026, 9, 1), "weekly"),
    ]
    session = _Session(rows)

    updated = asyncio.run(SubscriptionStore(session).advance_past_due(date(2026, 10, 19)))

    assert updated == 2
    assert session.committed
    assert rows[0].next_payment == date(2026, 11, 1)
    assert rows[1].next_payment == date(2027, 1, 10)
    assert rows[2].next_payment == date(2026, 9, 1)


class _AdvancingStore:
    def __init__(self):
        self.seen = None

    async def advance_past_due(self, today):
        self.seen = today
        return 3


def test_job_delegates_to_store():
    store = _AdvancingStore()
    assert asyncio.run(update_next_payment_dates(store, today=date(2026, 10, 19))) == 3
    assert store.seen == date(2026, 10, 19)
