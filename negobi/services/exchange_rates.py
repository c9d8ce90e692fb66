"""
Exchange Rate Service
Currency pair rates, history and conversion
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from negobi.core.config import settings
from negobi.core.dates import ensure_aware, parse_timestamp, utc_now
from negobi.schemas.common import SortOrder
from negobi.schemas.exchange_rates import CurrencyConversion, ExchangeRate
from .base import ResourceService

logger = logging.getLogger(__name__)

DateLike = Union[str, date, datetime]


class ExchangeRateService(ResourceService[ExchangeRate]):
    """
    Exchange rates between currencies

    Filters: baseCurrencyId, targetCurrencyId, exchange_rate, rate_date,
    source, is_active.
    """

    path = "/exchange-rates"
    model = ExchangeRate
    resource_name = "exchange rate"

    def __init__(self, client, now=None):
        super().__init__(client)
        self._now = now or utc_now

    def now(self) -> datetime:
        return ensure_aware(self._now())

    def get_active_exchange_rates(self) -> List[ExchangeRate]:
        return self.fetch_all(is_active=True)

    def get_exchange_rates_by_currency_pair(self, base_currency_id: int, target_currency_id: int) -> List[ExchangeRate]:
        return self.fetch_all(baseCurrencyId=base_currency_id, targetCurrencyId=target_currency_id)

    def get_latest_exchange_rate(self, base_currency_id: int, target_currency_id: int) -> Optional[ExchangeRate]:
        """Most recent active rate of the pair, or None"""
        rates = self.get_all(
            items_per_page=1,
            order=SortOrder.DESC,
            baseCurrencyId=base_currency_id,
            targetCurrencyId=target_currency_id,
            is_active=True,
        )
        return rates[0] if rates else None

    def get_exchange_rates_by_date(self, rate_date: DateLike) -> List[ExchangeRate]:
        day = parse_timestamp(rate_date).date()
        return self.fetch_all(rate_date=day.isoformat())

    def get_exchange_rates_by_date_range(self, start: DateLike, end: DateLike) -> List[ExchangeRate]:
        """
        Rates dated within ``[start, end]``

        The backend has no range filter, so every rate is fetched and
        filtered here. A date-only ``end`` covers that whole day.
        """
        start_at = parse_timestamp(start)
        end_at = parse_timestamp(end)
        if isinstance(end, date) and not isinstance(end, datetime):
            end_at = end_at + timedelta(days=1) - timedelta(microseconds=1)
        elif isinstance(end, str) and len(end.strip()) == 10:
            end_at = end_at + timedelta(days=1) - timedelta(microseconds=1)

        return [
            rate for rate in self.fetch_all()
            if rate.rate_date is not None and start_at <= rate.rate_date <= end_at
        ]

    def get_exchange_rate_history(
        self,
        base_currency_id: int,
        target_currency_id: int,
        days: Optional[int] = None,
    ) -> List[ExchangeRate]:
        """Rates of one pair over the last ``days`` days, oldest first"""
        days = settings.EXCHANGE_RATE_HISTORY_DAYS if days is None else days
        end = self.now()
        start = end - timedelta(days=days)
        rates = [
            rate for rate in self.get_exchange_rates_by_date_range(start, end)
            if rate.base_currency_id == base_currency_id and rate.target_currency_id == target_currency_id
        ]
        return sorted(rates, key=lambda rate: rate.rate_date)

    def convert_currency(self, amount: float, from_currency_id: int, to_currency_id: int) -> Optional[CurrencyConversion]:
        """
        Convert with the latest active rate

        Same currency converts at 1; returns None when the pair has no rate.
        """
        if from_currency_id == to_currency_id:
            return CurrencyConversion(
                amount=amount,
                exchange_rate=1,
                from_currency_id=from_currency_id,
                to_currency_id=to_currency_id,
            )

        rate = self.get_latest_exchange_rate(from_currency_id, to_currency_id)
        if rate is None:
            logger.warning("No active exchange rate from %s to %s", from_currency_id, to_currency_id)
            return None

        return CurrencyConversion(
            amount=amount * rate.exchange_rate,
            exchange_rate=rate.exchange_rate,
            from_currency_id=from_currency_id,
            to_currency_id=to_currency_id,
        )

    def create_multiple_exchange_rates(self, items) -> List[ExchangeRate]:
        return self.create_many(items)
