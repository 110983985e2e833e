"""Typed errors raised by the money core.

Every error carries a machine-readable ``code`` so the API layer can map it to
a response without parsing messages. Unknown currency codes are deliberately
absent: they resolve to the default currency (or are skipped when totalling)
rather than failing.
"""


class SubscriptionError(Exception):
    code: str = "SUBSCRIPTION_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidAmountError(SubscriptionError):
    """Amount is negative, not finite, or not a number."""

    code = "INVALID_AMOUNT"

    def __init__(self, amount: object):
        self.amount = amount
        super().__init__(f"Invalid monetary amount: {amount!r}")


class UnsupportedCycleError(SubscriptionError):
    """Billing cycle is neither monthly nor yearly."""

    code = "UNSUPPORTED_CYCLE"

    def __init__(self, cycle: object):
        self.cycle = cycle
        super().__init__(f"Unsupported billing cycle: {cycle!r}")
