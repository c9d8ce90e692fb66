"""Exchange Rate Schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from negobi.core.dates import parse_timestamp
from .common import BackendRecord, NegobiModel


class ExchangeRateBase(NegobiModel):
    base_currency_id: Optional[int] = Field(None, alias="baseCurrencyId")
    target_currency_id: Optional[int] = Field(None, alias="targetCurrencyId")
    exchange_rate: Optional[float] = None
    rate_date: Optional[datetime] = None
    rate_time: Optional[str] = None
    source: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("rate_date", mode="before")
    @classmethod
    def parse_rate_date(cls, v):
        return parse_timestamp(v)


class ExchangeRate(ExchangeRateBase, BackendRecord):
    exchange_rate: float
    is_active: bool = False


class ExchangeRateCreate(ExchangeRateBase):
    base_currency_id: int = Field(..., alias="baseCurrencyId")
    target_currency_id: int = Field(..., alias="targetCurrencyId")
    exchange_rate: float = Field(..., gt=0)
    rate_date: datetime


class ExchangeRateUpdate(ExchangeRateBase):
    exchange_rate: Optional[float] = Field(None, gt=0)


class CurrencyConversion(BaseModel):
    amount: float
    exchange_rate: float
    from_currency_id: int
    to_currency_id: int
