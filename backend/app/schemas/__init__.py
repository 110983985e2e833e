from app.schemas.subscription import (
    CurrencyTotal, SubscriptionCharge, SubscriptionCreate,
    SubscriptionListResponse, SubscriptionPublic, SubscriptionRow,
)
