import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.constants import CYCLE_LABELS, SUBSCRIPTION_CYCLES
from app.schemas.subscription import (
    CurrencyTotal, SubscriptionCharge, SubscriptionCreate,
    SubscriptionListResponse, SubscriptionRow, SubscriptionPublic,
)
from app.services.aggregation import aggregate
from app.services.auth import CurrentUser, get_current_user
from app.services.money import format_decimal, format_from_minor_units, to_minor_units
from app.services.store import SubscriptionStore, get_subscription_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


def _charges(subs) -> list[SubscriptionCharge]:
    charges = []
    for s in subs:
        if s.cycle not in SUBSCRIPTION_CYCLES:
            logger.warning(f"Leaving subscription {s.id} out of totals: unknown cycle {s.cycle!r}")
            continue
        charges.append(SubscriptionCharge.model_validate(s))
    return charges


def _to_row(sub) -> SubscriptionRow:
    return SubscriptionRow(
        **SubscriptionPublic.model_validate(sub).model_dump(),
        formatted_price=format_from_minor_units(sub.price, sub.currency),
        cycle_label=CYCLE_LABELS.get(sub.cycle, sub.cycle),
    )


@router.get("/", response_model=SubscriptionListResponse)
async def list_subscriptions(
    is_active: bool | None = Query(default=None),
    store: SubscriptionStore = Depends(get_subscription_store),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        subs = await store.list_for_user(current_user.id, is_active=is_active)
    except SQLAlchemyError as exc:
        logger.error(f"Failed to fetch subscriptions: {exc}")
        raise HTTPException(status_code=500, detail="データの取得に失敗しました")

    totals = aggregate(_charges(subs))
    return SubscriptionListResponse(
        subscriptions=[_to_row(s) for s in subs],
        count=len(subs),
        totals=[
            CurrencyTotal(currency=code, monthly_total=total, formatted=format_decimal(total, code))
            for code, total in totals.items()
        ],
    )


@router.post("/", response_model=SubscriptionRow, status_code=201)
async def create_subscription(
    data: SubscriptionCreate,
    store: SubscriptionStore = Depends(get_subscription_store),
    current_user: CurrentUser = Depends(get_current_user),
):
    values = data.model_dump()
    values["price"] = to_minor_units(data.price, data.currency)
    if values["category"] is None:
        values.pop("category")
    try:
        sub = await store.add(current_user.id, values)
    except IntegrityError as exc:
        logger.error(f"[create_subscription] Error: {exc}")
        if "unique" in str(exc).lower():
            raise HTTPException(status_code=409, detail="重複したデータが存在します")
        raise HTTPException(status_code=500, detail="データベースへの保存に失敗しました")
    except SQLAlchemyError as exc:
        logger.error(f"[create_subscription] Error: {exc}")
        raise HTTPException(status_code=500, detail="データベースへの保存に失敗しました")
    logger.info(f"Created subscription {sub.id} for {current_user.id}")
    return _to_row(sub)


@router.delete("/{sub_id}", status_code=204)
async def delete_subscription(
    sub_id: uuid.UUID,
    store: SubscriptionStore = Depends(get_subscription_store),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        deleted = await store.delete_owned(sub_id, current_user.id)
    except SQLAlchemyError as exc:
        logger.error(f"[delete_subscription] Error: {exc}")
        raise HTTPException(status_code=500, detail="削除処理中にエラーが発生しました")
    if not deleted:
        raise HTTPException(status_code=404, detail="削除対象が見つからないか、権限がありません")
    logger.info(f"Deleted subscription {sub_id} for {current_user.id}")
