import logging
import uuid
from datetime import date, datetime

from fastapi import Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.exceptions import UnsupportedCycleError
from app.models.subscription import Subscription
from app.services.cycles import advance_next_payment

logger = logging.getLogger(__name__)


class SubscriptionStore:
    """Persistence for subscriptions; per-user calls filter on the owner."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(self, user_id: str, is_active: bool | None = None) -> list[Subscription]:
        query = select(Subscription).where(Subscription.user_id == user_id)
        if is_active is not None:
            query = query.where(Subscription.is_active == is_active)
        query = query.order_by(Subscription.next_payment.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def add(self, user_id: str, values: dict) -> Subscription:
        sub = Subscription(**values, user_id=user_id, updated_at=datetime.now())
        self.db.add(sub)
        await self.db.flush()
        await self.db.refresh(sub)
        return sub

    async def delete_owned(self, sub_id: uuid.UUID, user_id: str) -> bool:
        result = await self.db.execute(
            delete(Subscription)
            .where(Subscription.id == sub_id, Subscription.user_id == user_id)
            .returning(Subscription.id)
        )
        return result.first() is not None

    async def list_past_due(self, today: date) -> list[Subscription]:
        result = await self.db.execute(
            select(Subscription)
            .where(Subscription.is_active.is_(True))
            .where(Subscription.next_payment < today)
        )
        return list(result.scalars().all())

    async def advance_past_due(self, today: date) -> int:
        """Move every past-due next_payment to its upcoming date and commit."""
        updated = 0
        for sub in await self.list_past_due(today):
            try:
                sub.next_payment = advance_next_payment(sub.next_payment, sub.cycle, today)
            except UnsupportedCycleError:
                logger.warning(f"Skipping subscription {sub.id} with unknown cycle {sub.cycle!r}")
                continue
            updated += 1
        await self.db.commit()
        return updated


async def get_subscription_store(db: AsyncSession = Depends(get_db)) -> SubscriptionStore:
    return SubscriptionStore(db)
