from collections.abc import Iterable
from decimal import Decimal, localcontext

from app.constants import CURRENCIES, SUBSCRIPTION_CYCLES
from app.exceptions import UnsupportedCycleError
from app.schemas.subscription import SubscriptionCharge
from app.services.money import Amount, as_decimal, from_minor_units, quantize_amount

MONTHS_PER_YEAR = 12


def monthly_equivalent(amount: Amount, cycle: str) -> Decimal:
    """Amortize ``amount`` billed every ``cycle`` to a per-month cost.

    Yearly amounts are divided by 12 and rounded half-up to 2 digits per row,
    so a total always equals the sum of the row values shown next to it.
    """
    value = as_decimal(amount)
    if cycle == SUBSCRIPTION_CYCLES["monthly"]:
        return value
    if cycle == SUBSCRIPTION_CYCLES["yearly"]:
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, value.adjusted() + 6)
            return quantize_amount(value / MONTHS_PER_YEAR, 2)
    raise UnsupportedCycleError(cycle)


def aggregate(subscriptions: Iterable[SubscriptionCharge]) -> dict[str, Decimal]:
    """Monthly-equivalent totals, one entry per registered currency.

    Records in a currency outside the registry are skipped. Every record passed
    in is counted; filter inactive ones before calling.
    """
    totals = {code: Decimal("0") for code in CURRENCIES}
    for sub in subscriptions:
        if sub.currency not in totals:
            continue
        actual = from_minor_units(sub.price, sub.currency)
        totals[sub.currency] += monthly_equivalent(actual, sub.cycle)
    return totals
