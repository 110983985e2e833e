from datetime import date

from dateutil.relativedelta import relativedelta

from app.constants import SUBSCRIPTION_CYCLES
from app.exceptions import UnsupportedCycleError

CYCLE_STEPS = {
    SUBSCRIPTION_CYCLES["monthly"]: relativedelta(months=1),
    SUBSCRIPTION_CYCLES["yearly"]: relativedelta(years=1),
}


def advance_next_payment(current: date, cycle: str, today: date) -> date:
    """Roll ``current`` forward by whole cycles until it is not before ``today``.

    Steps are counted from ``current`` so a payment on the 31st stays on the
    last day of shorter months instead of drifting.
    """
    step = CYCLE_STEPS.get(cycle)
    if step is None:
        raise UnsupportedCycleError(cycle)
    n = 0
    candidate = current
    while candidate < today:
        n += 1
        candidate = current + step * n
    return candidate
