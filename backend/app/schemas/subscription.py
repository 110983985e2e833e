from datetime import date
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from app.constants import CURRENCIES, DEFAULT_CURRENCY, MAX_STORED_PRICE
from app.services.money import to_minor_units

Cycle = Literal["monthly", "yearly"]


class SubscriptionCreate(BaseModel):
    name: str = Field(min_length=1)
    currency: str = DEFAULT_CURRENCY.code
    price: Decimal = Field(ge=Decimal("0.01"), le=Decimal(MAX_STORED_PRICE))
    cycle: Cycle
    next_payment: date
    category: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("サービス名は必須です")
        return v.strip()

    @field_validator("currency")
    @classmethod
    def currency_registered(cls, v: str) -> str:
        if v not in CURRENCIES:
            raise ValueError(f"対応していない通貨です: {v}")
        return v

    @field_validator("price")
    @classmethod
    def price_fits_storage(cls, v: Decimal, info: ValidationInfo) -> Decimal:
        # currency is validated first; fall back to the default if it failed
        currency = info.data.get("currency", DEFAULT_CURRENCY.code)
        if to_minor_units(v, currency) > MAX_STORED_PRICE:
            raise ValueError("金額が大きすぎます")
        return v

    @field_validator("next_payment")
    @classmethod
    def plausible_date(cls, v: date) -> date:
        if v.year <= 2000:
            raise ValueError("正しい日付を入力してください")
        return v


class SubscriptionPublic(BaseModel):
    id: UUID
    name: str
    price: int
    currency: str
    cycle: str
    next_payment: date
    category: str | None = None
    is_active: bool

    model_config = {"from_attributes": True}


class SubscriptionRow(SubscriptionPublic):
    formatted_price: str
    cycle_label: str


class SubscriptionCharge(BaseModel):
    """The only fields the money core reads from a stored subscription."""

    price: int = Field(ge=0)
    currency: str
    cycle: str

    model_config = {"from_attributes": True, "frozen": True}


class CurrencyTotal(BaseModel):
    currency: str
    monthly_total: Decimal
    formatted: str


class SubscriptionListResponse(BaseModel):
    subscriptions: list[SubscriptionRow]
    count: int
    totals: list[CurrencyTotal]
