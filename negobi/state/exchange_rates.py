"""Exchange rate state"""
from typing import List, Optional

from negobi.schemas.exchange_rates import CurrencyConversion, ExchangeRate
from negobi.services.exchange_rates import ExchangeRateService
from .base import ResourceState


class ExchangeRatesState(ResourceState[ExchangeRate]):
    service_class = ExchangeRateService
    service: ExchangeRateService

    def __init__(self, client=None, default_filters=None, service=None):
        super().__init__(client, default_filters, service)
        self.history: List[ExchangeRate] = []
        self.conversion: Optional[CurrencyConversion] = None

    def load_active(self) -> List[ExchangeRate]:
        return self.load(is_active=True)

    def load_by_currency_pair(self, base_currency_id: int, target_currency_id: int) -> List[ExchangeRate]:
        return self.load(baseCurrencyId=base_currency_id, targetCurrencyId=target_currency_id)

    def convert(self, amount: float, from_currency_id: int, to_currency_id: int) -> Optional[CurrencyConversion]:
        """None when the pair has no rate or the lookup failed (see ``error``)"""
        self.conversion = self._run(
            lambda: self.service.convert_currency(amount, from_currency_id, to_currency_id)
        )
        if self.conversion is None and self.error is None:
            self.error = "No exchange rate found for this currency pair"
        return self.conversion

    def load_history(
        self,
        base_currency_id: Optional[int],
        target_currency_id: Optional[int],
        days: Optional[int] = None,
    ) -> List[ExchangeRate]:
        if not base_currency_id or not target_currency_id:
            self._fail_validation(["baseCurrencyId and targetCurrencyId are required"])
            self.history = []
            return self.history
        self.history = self._run(
            lambda: self.service.get_exchange_rate_history(base_currency_id, target_currency_id, days),
            fallback=[],
        )
        return self.history
