"""
API Dependencies
Request-scoped backend client and services
"""

from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from negobi.core.api_client import ApiClient
from negobi.services import (
    ExchangeRateService,
    ProductLotService,
    ProductSerialService,
    ServiceCatalogService,
    StockByWarehouseService,
    VisitService,
)

# Bearer token is optional: without one the configured API_TOKEN is used
security = HTTPBearer(auto_error=False)


def get_api_client(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Generator:
    """
    Backend client dependency - one client per request, forwarding the
    caller's bearer token when present.
    """
    client = ApiClient(token=credentials.credentials if credentials else None)
    try:
        yield client
    finally:
        client.close()


def get_stock_service(client: ApiClient = Depends(get_api_client)) -> StockByWarehouseService:
    return StockByWarehouseService(client)


def get_lot_service(client: ApiClient = Depends(get_api_client)) -> ProductLotService:
    return ProductLotService(client)


def get_serial_service(client: ApiClient = Depends(get_api_client)) -> ProductSerialService:
    return ProductSerialService(client)


def get_visit_service(client: ApiClient = Depends(get_api_client)) -> VisitService:
    return VisitService(client)


def get_exchange_rate_service(client: ApiClient = Depends(get_api_client)) -> ExchangeRateService:
    return ExchangeRateService(client)


def get_catalog_service(client: ApiClient = Depends(get_api_client)) -> ServiceCatalogService:
    return ServiceCatalogService(client)
