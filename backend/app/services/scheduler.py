import logging
from datetime import date

from app.services.store import SubscriptionStore

logger = logging.getLogger(__name__)


async def update_next_payment_dates(store: SubscriptionStore, today: date | None = None) -> int:
    """For active subscriptions past their next_payment, move to the upcoming one."""
    updated = await store.advance_past_due(today or date.today())
    logger.info(f"Advanced next payment date for {updated} subscription(s)")
    return updated
