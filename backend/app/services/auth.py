from dataclasses import dataclass

from app.config import settings


@dataclass(frozen=True)
class CurrentUser:
    id: str


async def get_current_user() -> CurrentUser:
    # Swap for a real identity provider; routers only rely on ``id``.
    return CurrentUser(id=settings.DEMO_USER_ID)
