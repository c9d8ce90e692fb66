"""Stock by warehouse state"""
from typing import List, Optional

from negobi.schemas.stock import (
    StockAnalysis,
    StockByWarehouse,
    StockTransferResult,
    SyncStockByWarehouseData,
)
from negobi.services.stock_by_warehouse import StockByWarehouseService
from .base import ResourceState


class StockByWarehouseState(ResourceState[StockByWarehouse]):
    service_class = StockByWarehouseService
    service: StockByWarehouseService

    def __init__(self, client=None, default_filters=None, service=None):
        super().__init__(client, default_filters, service)
        self.low_stock_items: List[StockByWarehouse] = []
        self.out_of_stock_items: List[StockByWarehouse] = []

    def load_by_warehouse(self, warehouse_id: int) -> List[StockByWarehouse]:
        return self.load(warehouseId=warehouse_id)

    def load_by_product(self, product_id: int) -> List[StockByWarehouse]:
        return self.load(productId=product_id)

    def load_low_stock(self, warehouse_id: Optional[int] = None) -> List[StockByWarehouse]:
        self.low_stock_items = self._run(lambda: self.service.get_low_stock_items(warehouse_id), fallback=[])
        return self.low_stock_items

    def load_out_of_stock(self, warehouse_id: Optional[int] = None) -> List[StockByWarehouse]:
        self.out_of_stock_items = self._run(lambda: self.service.get_out_of_stock_items(warehouse_id), fallback=[])
        return self.out_of_stock_items

    def sync(self, sync_data: SyncStockByWarehouseData) -> bool:
        """Push ERP rows, then reload; False when either step failed"""
        def action():
            self.service.sync_stock_by_warehouse(sync_data)
            return True

        if not self._run(action, fallback=False):
            return False
        self.refetch()
        return self.error is None

    def adjust_stock_quantity(self, stock_id: int, adjustment: float) -> Optional[StockByWarehouse]:
        def action():
            record = self.service.adjust_stock_quantity(stock_id, adjustment)
            self._replace(record)
            return record

        return self._run(action)

    def transfer_stock(self, from_stock_id: int, to_stock_id: int, quantity: float) -> Optional[StockTransferResult]:
        def action():
            result = self.service.transfer_stock(from_stock_id, to_stock_id, quantity)
            self._replace(result.source)
            self._replace(result.destination)
            return result

        return self._run(action)

    def analyze_stock_level(self, record: StockByWarehouse) -> StockAnalysis:
        return self.service.analyze_stock_level(record)

    def calculate_available_stock(self, record: StockByWarehouse) -> float:
        return self.service.calculate_available_stock(record)
