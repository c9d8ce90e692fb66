"""
Exchange Rate API Endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from negobi.api.deps import get_exchange_rate_service
from negobi.schemas.exchange_rates import CurrencyConversion, ExchangeRate
from negobi.services.exchange_rates import ExchangeRateService

router = APIRouter()


@router.get("/latest", response_model=ExchangeRate)
def get_latest_rate(
    base_currency_id: int = Query(...),
    target_currency_id: int = Query(...),
    service: ExchangeRateService = Depends(get_exchange_rate_service),
):
    rate = service.get_latest_exchange_rate(base_currency_id, target_currency_id)
    if rate is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active exchange rate for this pair")
    return rate


@router.get("/convert", response_model=CurrencyConversion)
def convert_currency(
    amount: float = Query(...),
    from_currency_id: int = Query(...),
    to_currency_id: int = Query(...),
    service: ExchangeRateService = Depends(get_exchange_rate_service),
):
    conversion = service.convert_currency(amount, from_currency_id, to_currency_id)
    if conversion is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active exchange rate for this pair")
    return conversion


@router.get("/history", response_model=List[ExchangeRate])
def get_history(
    base_currency_id: int = Query(...),
    target_currency_id: int = Query(...),
    days: Optional[int] = Query(None, ge=1),
    service: ExchangeRateService = Depends(get_exchange_rate_service),
):
    return service.get_exchange_rate_history(base_currency_id, target_currency_id, days)
