from dataclasses import dataclass


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    # Scale between the stored integer and the displayed amount (2 -> x100).
    # Never change for an existing code: stored prices depend on it.
    minor_unit_digits: int


CURRENCIES: dict[str, Currency] = {
    "JPY": Currency(code="JPY", symbol="¥", minor_unit_digits=0),
    "USD": Currency(code="USD", symbol="$", minor_unit_digits=2),
    "EUR": Currency(code="EUR", symbol="€", minor_unit_digits=2),
}

DEFAULT_CURRENCY = CURRENCIES["JPY"]

SUBSCRIPTION_CYCLES = {
    "monthly": "monthly",
    "yearly": "yearly",
}

CYCLE_LABELS = {
    SUBSCRIPTION_CYCLES["monthly"]: "月額",
    SUBSCRIPTION_CYCLES["yearly"]: "年額",
}


def lookup_currency(code: str) -> Currency:
    """Return the registered currency for ``code``.

    Unknown codes resolve to ``DEFAULT_CURRENCY`` instead of raising; codes are
    validated at the API boundary before they get here.
    """
    return CURRENCIES.get(code, DEFAULT_CURRENCY)

# Upper bound of the INTEGER price column, in minor units
MAX_STORED_PRICE = 2**31 - 1
