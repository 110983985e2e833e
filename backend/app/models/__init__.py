from app.models.subscription import Subscription

__all__ = [
    "Subscription",
]
