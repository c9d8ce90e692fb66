"""
Tests for the state adapters
Failures become messages; lists and mutations keep local state in step
"""

from datetime import timedelta

import pytest

from negobi.schemas.stock import SyncStockByWarehouseData
from negobi.schemas.visits import VisitStatus
from negobi.state import (
    ExchangeRatesState,
    ProductLotsState,
    ProductSerialsState,
    ServicesState,
    StockByWarehouseState,
    VisitsState,
)
from negobi.state.visits import SCHEDULE_CONFLICT_MESSAGE

from tests.conftest import NOW


@pytest.fixture
def visits_state(visit_service):
    return VisitsState(service=visit_service)


class TestResourceState:
    """Shared list and mutation behaviour"""

    def test_requires_client_or_service(self):
        with pytest.raises(ValueError):
            VisitsState()

    def test_load_sets_totals(self, visits_state, backend):
        for index in range(12):
            backend.seed("visits", description=f"visit {index}", status="pending")
        items = visits_state.load()
        assert len(items) == 10
        assert visits_state.total == 12
        assert visits_state.total_pages == 2
        assert visits_state.loading is False
        assert visits_state.error is None

    def test_default_filters_are_applied(self, visit_service, backend):
        backend.seed("visits", description="a", status="pending", clientId=7)
        backend.seed("visits", description="b", status="pending", clientId=8)
        state = VisitsState(service=visit_service, default_filters={"clientId": 7})
        assert [visit.description for visit in state.load()] == ["a"]

    def test_failed_load_clears_items(self, visits_state, backend):
        backend.seed("visits", description="a", status="pending")
        visits_state.load()
        backend.malformed.add("visits")

        assert visits_state.load() == []
        assert visits_state.items == []
        assert visits_state.total == 0
        assert visits_state.error

    def test_refetch_reuses_last_filters(self, visits_state, backend):
        backend.seed("visits", description="a", status="completed")
        visits_state.load_by_status(VisitStatus.COMPLETED)
        backend.seed("visits", description="b", status="completed")
        backend.seed("visits", description="c", status="pending")
        assert len(visits_state.refetch()) == 2

    def test_delete_missing_record(self, visits_state):
        assert visits_state.delete(999) is False
        assert "not found" in visits_state.error

    def test_delete_removes_item(self, visits_state, backend):
        record = backend.seed("visits", description="a", status="pending")
        visits_state.load()
        assert visits_state.delete(record["id"]) is True
        assert visits_state.items == []


class TestVisitsState:
    """Visit creation checks and bulk status changes"""

    def test_invalid_visit_short_circuits(self, visits_state, backend, visit_payload):
        visit_payload["description"] = ""
        visit_payload["location"]["coordinates"] = [0, 120]

        assert visits_state.create(visit_payload) is None
        assert visits_state.validation_errors == [
            "Latitude must be between -90 and 90",
            "Visit description is required",
        ]
        assert visits_state.error == "Latitude must be between -90 and 90, Visit description is required"
        assert backend.requests == []

    def test_schedule_conflict_blocks_creation(self, visits_state, backend, visit_payload):
        backend.seed("visits", date=visit_payload["date"], status="pending", description="taken")
        assert visits_state.create(visit_payload) is None
        assert visits_state.error == SCHEDULE_CONFLICT_MESSAGE
        assert backend.calls("POST", "visits") == []

    def test_create_appends_visit(self, visits_state, visit_payload):
        visit = visits_state.create(visit_payload)
        assert visit is not None
        assert visits_state.items == [visit]
        assert visits_state.error is None

    def test_complete_multiple_reports_each_failure(self, visits_state, backend):
        first = backend.seed("visits", description="a", status="pending")
        second = backend.seed("visits", description="b", status="pending")

        assert visits_state.complete_multiple([first["id"], 998, second["id"], 999]) is False
        assert "Visit 998" in visits_state.error
        assert "Visit 999" in visits_state.error
        assert backend.get("visits", second["id"])["status"] == "completed"

    def test_cancel_multiple(self, visits_state, backend):
        ids = [backend.seed("visits", description="a", status="pending")["id"]]
        assert visits_state.cancel_multiple(ids) is True
        assert visits_state.error is None

    def test_reschedule_replaces_item(self, visits_state, backend):
        record = backend.seed("visits", date=(NOW + timedelta(days=1)).isoformat(), status="pending", description="a")
        visits_state.load()
        visits_state.reschedule(record["id"], NOW + timedelta(days=3))
        assert visits_state.items[0].date == NOW + timedelta(days=3)

    def test_statistics(self, visits_state, backend):
        backend.seed("visits", date=NOW.isoformat(), status="pending", description="a")
        assert visits_state.load_statistics().total == 1

    def test_unknown_status_is_a_validation_error(self, visits_state, backend):
        assert visits_state.load_by_status("postponed") == []
        assert visits_state.validation_errors == ["Unknown visit status: postponed"]
        assert backend.requests == []

    def test_route_with_unlocated_visit_keeps_message(self, visits_state, backend):
        backend.seed("visits", date=NOW.isoformat(), status="pending", description="a",
                     location={"type": "Point", "coordinates": [0, 0]})
        unlocated = backend.seed("visits", date=NOW.isoformat(), status="pending", description="b")
        visits_state.load()

        assert visits_state.optimized_route() == []
        assert visits_state.error == f"Visits without a location cannot be routed: {unlocated['id']}"


class TestInventoryState:
    """Stock, lots and serials"""

    def test_failed_transfer_keeps_message(self, stock_service, backend, sample_stock):
        source, destination = sample_stock
        backend.patch_budget[("stock-by-warehouse", destination["id"])] = 0
        state = StockByWarehouseState(service=stock_service)
        state.load_by_product(10)

        assert state.transfer_stock(source["id"], destination["id"], 5) is None
        assert "source restored" in state.error
        assert [record.stock for record in state.items] == [50, 20]

    def test_transfer_updates_items(self, stock_service, sample_stock):
        source, destination = sample_stock
        state = StockByWarehouseState(service=stock_service)
        state.load_by_product(10)
        state.transfer_stock(source["id"], destination["id"], 5)
        assert [record.stock for record in state.items] == [45, 25]

    def test_invalid_transfer_is_a_validation_error(self, stock_service, sample_stock):
        source, _ = sample_stock
        state = StockByWarehouseState(service=stock_service)
        assert state.transfer_stock(source["id"], source["id"], 5) is None
        assert state.validation_errors == ["Source and destination stock records must differ"]

    def test_sync_reports_failed_reload(self, stock_service, backend, sample_stock):
        state = StockByWarehouseState(service=stock_service)
        state.load_by_product(10)
        backend.malformed.add("stock-by-warehouse")
        sync_data = SyncStockByWarehouseData(
            companyId=1, data=[{"erp_code_product": "P10", "erp_code_warehouse": "W1", "stock": 60}],
        )

        assert state.sync(sync_data) is False
        assert state.error
        assert state.items == []
        assert backend.get("stock-by-warehouse", sample_stock[0]["id"])["stock"] == 60

    def test_sync_reloads_items(self, stock_service, backend, sample_stock):
        state = StockByWarehouseState(service=stock_service)
        state.load_by_product(10)
        sync_data = SyncStockByWarehouseData(
            companyId=1, data=[{"erp_code_product": "P10", "erp_code_warehouse": "W1", "stock": 60}],
        )

        assert state.sync(sync_data) is True
        assert [record.stock for record in state.items] == [60, 20]

    def test_low_stock(self, stock_service, backend, sample_stock):
        backend.seed("stock-by-warehouse", warehouseId=3, productId=11, stock=0)
        state = StockByWarehouseState(service=stock_service)
        assert len(state.load_low_stock()) == 1

    def test_lot_consolidation_updates_items(self, lot_service, sample_lots):
        state = ProductLotsState(service=lot_service)
        state.load_by_product(10)
        target, source = sample_lots["healthy"]["id"], sample_lots["expiring"]["id"]

        assert state.consolidate_lots(target, [source]) is True
        assert source not in [lot.id for lot in state.items]
        assert state.calculations().total_quantity == 145

    def test_empty_lot_transfer(self, lot_service):
        state = ProductLotsState(service=lot_service)
        assert state.transfer_lots_between_warehouses([], 2) is False
        assert state.error == "No lots selected for transfer"

    def test_expiration_alerts(self, lot_service, sample_lots):
        state = ProductLotsState(service=lot_service)
        assert state.load_expiration_alerts().total_alerts == 3

    def test_serial_sell(self, serial_service, backend):
        serial = backend.seed("product-serials", product_id=1, serial_number="SN-1", status="Available")
        state = ProductSerialsState(service=serial_service)
        state.load_available()
        assert state.sell(serial["id"]).status.value == "Sold"
        assert state.items[0].status.value == "Sold"

    def test_serial_validation_failure_becomes_result(self, serial_service, backend):
        backend.malformed.add("product-serials")
        result = ProductSerialsState(service=serial_service).validate_serial("SN-1")
        assert result.is_valid is False


class TestRatesAndCatalogState:
    """Exchange rates and services"""

    def test_conversion_without_rate(self, exchange_rate_service):
        state = ExchangeRatesState(service=exchange_rate_service)
        assert state.convert(10, 1, 2) is None
        assert state.error == "No exchange rate found for this currency pair"

    def test_history_requires_pair(self, exchange_rate_service, backend):
        state = ExchangeRatesState(service=exchange_rate_service)
        assert state.load_history(None, 2) == []
        assert state.validation_errors == ["baseCurrencyId and targetCurrencyId are required"]
        assert backend.requests == []

    def test_service_create_adds_company(self, catalog_service, backend):
        state = ServicesState(service=catalog_service, company_id=3)
        service = state.create({"name": "Repair", "code": "R-1", "description": "Repairs"})
        assert service.company_id == 3
        assert backend.get("services", service.id)["company_id"] == 3

    def test_invalid_service_short_circuits(self, catalog_service, backend):
        state = ServicesState(service=catalog_service, company_id=3)
        assert state.create({"name": "", "code": "R-1", "description": "Repairs"}) is None
        assert state.validation_errors == ["Service name is required"]
        assert backend.requests == []

    def test_statistics_require_company(self, catalog_service):
        state = ServicesState(service=catalog_service)
        assert state.load_statistics() is None
        assert state.error == "companyId is required"
