"""
Stock By Warehouse Service
Per-warehouse stock records, stock level analysis and warehouse transfers
"""
from typing import Any, Dict, List, Optional

from negobi.core.exceptions import (
    NegobiException,
    StockTransferError,
    ValidationError,
)
from negobi.core.logging import get_logger
from negobi.schemas.stock import (
    ProductStockTotals,
    StockAnalysis,
    StockByWarehouse,
    StockLevel,
    StockTransferResult,
    SyncStockByWarehouseData,
)
from .base import ResourceService
from .saga import Saga

logger = get_logger("inventory.stock")


class StockByWarehouseService(ResourceService[StockByWarehouse]):
    """
    Stock per (warehouse, product)

    Quantities live on the backend. Analysis helpers are pure functions of a
    fetched record; list-wide queries fetch every page and filter locally.
    """

    path = "/stock-by-warehouse"
    model = StockByWarehouse
    resource_name = "stock record"

    def sync_stock_by_warehouse(self, sync_data: SyncStockByWarehouseData) -> Any:
        """Bulk upsert from the ERP, keyed by product and warehouse ERP codes"""
        result = self.client.request(
            "POST", f"{self.path}/sync", json=sync_data.to_payload(), require_data=False
        )
        logger.info(
            "Synced %s stock rows for company %s", len(sync_data.data), sync_data.company_id
        )
        return result

    # Lookups

    def get_stock_by_warehouse_and_product(
        self, warehouse_id: int, product_id: int
    ) -> Optional[StockByWarehouse]:
        records = self.get_all(items_per_page=1, warehouseId=warehouse_id, productId=product_id)
        return records[0] if records else None

    def get_stock_by_warehouse_id(self, warehouse_id: int) -> List[StockByWarehouse]:
        return self.fetch_all(warehouseId=warehouse_id)

    def get_stock_by_product(self, product_id: int) -> List[StockByWarehouse]:
        return self.fetch_all(productId=product_id)

    # Quantity updates

    def update_stock_quantity(self, stock_id: int, new_stock: float) -> StockByWarehouse:
        return self.update(stock_id, {"stock": new_stock})

    def adjust_stock_quantity(self, stock_id: int, adjustment: float) -> StockByWarehouse:
        """Add (or subtract) units; the result never drops below zero"""
        current = self.get_by_id(stock_id)
        new_stock = max(0, current.stock + adjustment)
        if current.stock + adjustment < 0:
            logger.warning(
                "Stock %s clamped at 0 (had %s, adjustment %s)", stock_id, current.stock, adjustment
            )
        return self.update_stock_quantity(stock_id, new_stock)

    def update_reserve_stock(self, stock_id: int, reserve_stock: float) -> StockByWarehouse:
        return self.update(stock_id, {"reserve_stock": reserve_stock})

    def update_incoming_stock(self, stock_id: int, incoming_stock: float) -> StockByWarehouse:
        return self.update(stock_id, {"incoming_stock": incoming_stock})

    # Analysis

    @staticmethod
    def calculate_available_stock(record: StockByWarehouse) -> float:
        """Physical stock minus reservations, floored at zero"""
        return max(0, record.stock - record.reserve_stock)

    @classmethod
    def analyze_stock_level(cls, record: StockByWarehouse) -> StockAnalysis:
        """
        Classify a stock record

        Rules are checked in order:
        1. nothing available -> OUT_OF_STOCK, reorder up to max_stock
        2. available at or below min_stock -> LOW, reorder the gap to max_stock
        3. available at or above max_stock -> HIGH
        4. otherwise NORMAL
        A zero min/max disables the matching rule.
        """
        available = cls.calculate_available_stock(record)
        needs_replenishment = False
        reorder_quantity = None

        if available == 0:
            level = StockLevel.OUT_OF_STOCK
            needs_replenishment = True
            reorder_quantity = record.max_stock if record.max_stock > 0 else None
        elif record.min_stock > 0 and available <= record.min_stock:
            level = StockLevel.LOW
            needs_replenishment = True
            reorder_quantity = record.max_stock - available if record.max_stock > 0 else None
        elif record.max_stock > 0 and available >= record.max_stock:
            level = StockLevel.HIGH
        else:
            level = StockLevel.NORMAL

        return StockAnalysis(
            available_stock=available,
            reserved_stock=record.reserve_stock,
            incoming_stock=record.incoming_stock,
            total_physical_stock=record.stock,
            stock_level=level,
            needs_replenishment=needs_replenishment,
            reorder_quantity=reorder_quantity,
        )

    @classmethod
    def has_sufficient_stock(cls, record: StockByWarehouse, required_quantity: float) -> bool:
        return cls.calculate_available_stock(record) >= required_quantity

    def _scan(self, warehouse_id: Optional[int]) -> List[StockByWarehouse]:
        filters: Dict[str, Any] = {}
        if warehouse_id is not None:
            filters["warehouseId"] = warehouse_id
        return self.fetch_all(**filters)

    def get_low_stock_items(self, warehouse_id: Optional[int] = None) -> List[StockByWarehouse]:
        """Records that need replenishment (out of stock included)"""
        return [
            record for record in self._scan(warehouse_id)
            if self.analyze_stock_level(record).needs_replenishment
        ]

    def get_out_of_stock_items(self, warehouse_id: Optional[int] = None) -> List[StockByWarehouse]:
        return [
            record for record in self._scan(warehouse_id)
            if self.calculate_available_stock(record) == 0
        ]

    # Transfers

    def transfer_stock(self, from_stock_id: int, to_stock_id: int, quantity: float) -> StockTransferResult:
        """
        Move units between two stock records

        Two independent remote updates: subtract from the source, then add to
        the destination. The source is floored at zero, so the destination is
        credited with what was actually deducted, which can be less than
        ``quantity``. If the second update fails the source gets back exactly
        that amount. Concurrent writers are not guarded against.

        Raises:
            ValidationError: non-positive quantity or same record on both ends
            StockTransferError: a step failed; ``compensated`` tells whether
                the source was restored
        """
        if quantity <= 0:
            raise ValidationError("Transfer quantity must be greater than zero")
        if from_stock_id == to_stock_id:
            raise ValidationError("Source and destination stock records must differ")

        saga = Saga(f"transfer {quantity} from stock {from_stock_id} to stock {to_stock_id}")

        def deduct_from_source() -> Dict[str, Any]:
            before = self.get_by_id(from_stock_id)
            after = self.adjust_stock_quantity(from_stock_id, -quantity)
            return {"deducted": before.stock - after.stock, "record": after}

        def restore_source(step: Dict[str, Any]):
            self.adjust_stock_quantity(from_stock_id, step["deducted"])

        try:
            deducted = saga.step(deduct_from_source, restore_source, f"deduction from stock {from_stock_id}")
        except NegobiException as e:
            logger.error("Stock transfer aborted, source %s not updated: %s", from_stock_id, e)
            raise StockTransferError(f"Could not deduct stock from source: {e}", compensated=True) from e

        try:
            destination = self.adjust_stock_quantity(to_stock_id, deducted["deducted"])
        except NegobiException as e:
            logger.error(
                "Stock transfer to %s failed after deducting from %s: %s", to_stock_id, from_stock_id, e
            )
            compensated = saga.compensate()
            if compensated:
                message = f"Could not add stock to destination, source restored: {e}"
            else:
                message = f"Could not add stock to destination and source could not be restored: {e}"
            raise StockTransferError(message, compensated=compensated) from e

        moved = deducted["deducted"]
        logger.info("Transferred %s units from stock %s to stock %s", moved, from_stock_id, to_stock_id)
        return StockTransferResult(source=deducted["record"], destination=destination, quantity=moved)

    # Totals

    def get_total_stock_by_product(self, product_id: int) -> float:
        return sum(record.stock for record in self.get_stock_by_product(product_id))

    def get_total_available_stock_by_product(self, product_id: int) -> float:
        return sum(self.calculate_available_stock(record) for record in self.get_stock_by_product(product_id))

    def get_product_totals(self, product_id: int) -> ProductStockTotals:
        records = self.get_stock_by_product(product_id)
        return ProductStockTotals(
            product_id=product_id,
            total_stock=sum(record.stock for record in records),
            total_available_stock=sum(self.calculate_available_stock(record) for record in records),
        )
