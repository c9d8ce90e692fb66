"""
Tests for Exchange Rate Service
"""

from datetime import date

import pytest


def seed_rate(backend, base, target, rate, rate_date, is_active=True):
    return backend.seed(
        "exchange-rates",
        baseCurrencyId=base,
        targetCurrencyId=target,
        exchange_rate=rate,
        rate_date=rate_date,
        is_active=is_active,
    )


@pytest.fixture
def sample_rates(backend):
    return [
        seed_rate(backend, 1, 2, 36.0, "2025-06-05"),
        seed_rate(backend, 1, 2, 37.0, "2025-06-10"),
        seed_rate(backend, 1, 2, 40.0, "2025-06-11", is_active=False),
        seed_rate(backend, 1, 2, 35.0, "2025-06-01"),
        seed_rate(backend, 1, 2, 30.0, "2025-04-01", is_active=False),
        seed_rate(backend, 2, 3, 0.5, "2025-06-10"),
    ]


class TestLatestRate:
    """Latest active rate and conversion"""

    def test_latest_active_rate(self, exchange_rate_service, backend, sample_rates):
        rate = exchange_rate_service.get_latest_exchange_rate(1, 2)
        assert rate.exchange_rate == 35.0
        params = backend.calls("GET", "exchange-rates")[-1]["params"]
        assert params["order"] == "DESC"
        assert params["is_active"] == "true"
        assert params["itemsPerPage"] == "1"

    def test_no_rate_for_pair(self, exchange_rate_service, sample_rates):
        assert exchange_rate_service.get_latest_exchange_rate(3, 1) is None

    def test_convert(self, exchange_rate_service, sample_rates):
        conversion = exchange_rate_service.convert_currency(100, 1, 2)
        assert conversion.amount == pytest.approx(3500.0)
        assert conversion.exchange_rate == 35.0

    def test_same_currency_converts_at_one(self, exchange_rate_service, backend):
        conversion = exchange_rate_service.convert_currency(42, 5, 5)
        assert conversion.amount == 42
        assert conversion.exchange_rate == 1
        assert backend.calls("GET", "exchange-rates") == []

    def test_convert_without_rate(self, exchange_rate_service, sample_rates):
        assert exchange_rate_service.convert_currency(10, 3, 1) is None


class TestRateQueries:
    """Lists by pair, date and history"""

    def test_active_rates(self, exchange_rate_service, sample_rates):
        assert len(exchange_rate_service.get_active_exchange_rates()) == 4

    def test_by_currency_pair(self, exchange_rate_service, sample_rates):
        assert len(exchange_rate_service.get_exchange_rates_by_currency_pair(1, 2)) == 5

    def test_by_date(self, exchange_rate_service, sample_rates):
        rates = exchange_rate_service.get_exchange_rates_by_date(date(2025, 6, 10))
        assert {rate.exchange_rate for rate in rates} == {37.0, 0.5}

    def test_date_only_end_covers_whole_day(self, exchange_rate_service, sample_rates):
        rates = exchange_rate_service.get_exchange_rates_by_date_range("2025-06-01", "2025-06-05")
        assert sorted(rate.exchange_rate for rate in rates) == [35.0, 36.0]

    def test_history_is_oldest_first(self, exchange_rate_service, sample_rates):
        history = exchange_rate_service.get_exchange_rate_history(1, 2)
        assert [rate.exchange_rate for rate in history] == [35.0, 36.0, 37.0, 40.0]

    def test_short_history(self, exchange_rate_service, sample_rates):
        history = exchange_rate_service.get_exchange_rate_history(1, 2, days=3)
        assert [rate.exchange_rate for rate in history] == [37.0, 40.0]
