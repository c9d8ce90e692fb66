"""
Test Configuration and Fixtures
Shared testing infrastructure for the Negobi client
"""

from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from negobi.core.api_client import ApiClient
from negobi.main import app
from negobi.api.deps import get_api_client
from negobi.services import (
    ExchangeRateService,
    ProductLotService,
    ProductSerialService,
    ServiceCatalogService,
    StockByWarehouseService,
    VisitService,
)

from tests.fake_backend import FakeBackend

BACKEND_URL = "http://testserver"

# Fixed clock: Wednesday 2025-06-11 12:00 UTC
NOW = datetime(2025, 6, 11, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def backend() -> FakeBackend:
    """Fresh in-memory backend for each test"""
    return FakeBackend()


@pytest.fixture
def api_client(backend: FakeBackend) -> ApiClient:
    """Backend client wired to the fake backend"""
    session = TestClient(backend.app)
    return ApiClient(base_url=BACKEND_URL, token="test-token", api_key="test-key", session=session)


@pytest.fixture
def stock_service(api_client) -> StockByWarehouseService:
    return StockByWarehouseService(api_client)


@pytest.fixture
def lot_service(api_client) -> ProductLotService:
    return ProductLotService(api_client, now=lambda: NOW)


@pytest.fixture
def serial_service(api_client) -> ProductSerialService:
    return ProductSerialService(api_client)


@pytest.fixture
def visit_service(api_client) -> VisitService:
    return VisitService(api_client, now=lambda: NOW, max_workers=1)


@pytest.fixture
def exchange_rate_service(api_client) -> ExchangeRateService:
    return ExchangeRateService(api_client, now=lambda: NOW)


@pytest.fixture
def catalog_service(api_client) -> ServiceCatalogService:
    return ServiceCatalogService(api_client)


@pytest.fixture
def client(api_client: ApiClient) -> Generator[TestClient, None, None]:
    """Operations API test client with the backend client dependency overridden"""
    def override_get_api_client():
        yield api_client

    app.dependency_overrides[get_api_client] = override_get_api_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_stock(backend: FakeBackend):
    """Two warehouses holding the same product"""
    source = backend.seed(
        "stock-by-warehouse",
        warehouseId=1, productId=10, stock=50, min_stock=10, max_stock=100,
        reserve_stock=5, incoming_stock=0, erp_code_product="P10", erp_code_warehouse="W1",
    )
    destination = backend.seed(
        "stock-by-warehouse",
        warehouseId=2, productId=10, stock=20, min_stock=10, max_stock=100,
        reserve_stock=0, incoming_stock=15, erp_code_product="P10", erp_code_warehouse="W2",
    )
    return source, destination


@pytest.fixture
def sample_lots(backend: FakeBackend):
    """Expired, expiring, healthy and undated lots of product 10"""
    return {
        "expired": backend.seed(
            "product-lots", product_id=10, lot_number="L-EXP", quantity=5, purchase_price=2.0,
            expiration_date=(NOW - timedelta(days=3)).isoformat(), currentWarehouseId=1,
        ),
        "expiring": backend.seed(
            "product-lots", product_id=10, lot_number="L-SOON", quantity=40, purchase_price=1.5,
            expiration_date=(NOW + timedelta(days=10)).isoformat(), currentWarehouseId=1,
        ),
        "healthy": backend.seed(
            "product-lots", product_id=10, lot_number="L-OK", quantity=100, purchase_price=1.0,
            expiration_date=(NOW + timedelta(days=200)).isoformat(), currentWarehouseId=2,
        ),
        "undated": backend.seed(
            "product-lots", product_id=10, lot_number="L-NODATE", quantity=0, currentWarehouseId=2,
        ),
        "other_product": backend.seed(
            "product-lots", product_id=20, lot_number="L-OTHER", quantity=8, purchase_price=3.0,
            expiration_date=(NOW - timedelta(days=1)).isoformat(), currentWarehouseId=1,
        ),
    }


@pytest.fixture
def visit_payload():
    return {
        "date": (NOW + timedelta(days=1)).isoformat(),
        "location": {"type": "Point", "coordinates": [-74.0, 40.7]},
        "status": "pending",
        "description": "Quarterly review with the client",
        "clientId": 7,
    }
