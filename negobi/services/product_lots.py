"""
Product Lot Service
Lot tracking: quantities, expiry windows, warehouse moves and consolidation
"""
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from negobi.core.config import settings
from negobi.core.dates import ensure_aware, utc_now
from negobi.core.exceptions import NegobiException, StockTransferError, ValidationError
from negobi.core.logging import get_logger
from negobi.schemas.lots import (
    ExpirationAlerts,
    LotInventoryCalculations,
    ProductLot,
    ProductLotCreate,
    ProductLotStats,
)
from .base import ResourceService
from .saga import Saga

logger = get_logger("inventory.lots")


def is_lot_expired(lot: ProductLot, now: datetime) -> bool:
    """Past its expiration date with units left; lots without a date never expire"""
    if lot.expiration_date is None:
        return False
    return lot.expiration_date < now and lot.quantity > 0


def is_lot_expiring(lot: ProductLot, now: datetime, days: int) -> bool:
    if lot.expiration_date is None:
        return False
    return now <= lot.expiration_date <= now + timedelta(days=days) and lot.quantity > 0


def lot_value(lot: ProductLot) -> float:
    return lot.quantity * (lot.purchase_price or 0)


class ProductLotService(ResourceService[ProductLot]):
    """
    Product lots

    Filters: productId, lotNumber, currentWarehouseId, expirationDate,
    manufacturingDate.
    """

    path = "/product-lots"
    model = ProductLot
    resource_name = "product lot"

    def __init__(self, client, now=None):
        super().__init__(client)
        self._now = now or utc_now

    def now(self) -> datetime:
        return ensure_aware(self._now())

    # Lookups

    def get_product_lots_by_product(self, product_id: int) -> List[ProductLot]:
        return self.fetch_all(productId=product_id)

    def get_product_lots_by_warehouse(self, warehouse_id: int) -> List[ProductLot]:
        return self.fetch_all(currentWarehouseId=warehouse_id)

    def get_product_lot_by_lot_number(self, lot_number: str) -> Optional[ProductLot]:
        lots = self.get_all(items_per_page=1, lotNumber=lot_number)
        return lots[0] if lots else None

    # Expiry

    def get_expired_product_lots(self) -> List[ProductLot]:
        now = self.now()
        return [lot for lot in self.fetch_all() if is_lot_expired(lot, now)]

    def get_expiring_product_lots(self, days: Optional[int] = None) -> List[ProductLot]:
        days = settings.LOT_EXPIRY_ALERT_DAYS if days is None else days
        now = self.now()
        return [lot for lot in self.fetch_all() if is_lot_expiring(lot, now, days)]

    def get_expiration_alerts(self, alert_days: Optional[int] = None) -> ExpirationAlerts:
        """Expired lots are critical, lots expiring within ``alert_days`` are warnings"""
        alert_days = settings.LOT_EXPIRY_ALERT_DAYS if alert_days is None else alert_days
        now = self.now()
        lots = self.fetch_all()
        critical = [lot for lot in lots if is_lot_expired(lot, now)]
        warning = [lot for lot in lots if is_lot_expiring(lot, now, alert_days)]
        at_risk = critical + warning
        return ExpirationAlerts(
            critical=critical,
            warning=warning,
            total_alerts=len(at_risk),
            total_value_at_risk=sum(lot_value(lot) for lot in at_risk),
            affected_products=len({lot.product_id for lot in at_risk}),
        )

    # Quantities

    def adjust_product_lot_quantity(self, lot_id: int, adjustment: float) -> ProductLot:
        """Add (or subtract) units; the lot quantity never drops below zero"""
        current = self.get_by_id(lot_id)
        new_quantity = max(0, current.quantity + adjustment)
        return self.update(lot_id, {"quantity": new_quantity})

    def get_total_quantity_by_product(self, product_id: int) -> float:
        return sum(lot.quantity for lot in self.get_product_lots_by_product(product_id))

    def get_product_lot_stats(self, product_id: int) -> ProductLotStats:
        lots = self.get_product_lots_by_product(product_id)
        now = self.now()
        quantities = [lot.quantity for lot in lots]
        total_quantity = sum(quantities)
        return ProductLotStats(
            total_lots=len(lots),
            total_quantity=total_quantity,
            expired_lots=sum(1 for lot in lots if is_lot_expired(lot, now)),
            expiring_lots=sum(
                1 for lot in lots if is_lot_expiring(lot, now, settings.LOT_EXPIRY_ALERT_DAYS)
            ),
            average_quantity=total_quantity / len(lots) if lots else 0,
            min_quantity=min(quantities) if quantities else 0,
            max_quantity=max(quantities) if quantities else 0,
        )

    def calculate_lot_inventory(self, lots: Iterable[ProductLot]) -> LotInventoryCalculations:
        """Inventory figures over an already fetched set of lots"""
        lots = list(lots)
        now = self.now()
        total_quantity = sum(lot.quantity for lot in lots)

        max_lot = None
        for lot in lots:
            if lot.quantity > (max_lot.quantity if max_lot else 0):
                max_lot = lot
        min_lot = min(lots, key=lambda lot: lot.quantity) if lots else None

        return LotInventoryCalculations(
            total_quantity=total_quantity,
            total_value=sum(lot_value(lot) for lot in lots),
            lot_count=len(lots),
            max_quantity_lot=max_lot,
            min_quantity_lot=min_lot,
            average_quantity=total_quantity / len(lots) if lots else 0,
            expired_lots=[lot for lot in lots if is_lot_expired(lot, now)],
            expiring_soon_lots=[
                lot for lot in lots if is_lot_expiring(lot, now, settings.LOT_EXPIRY_ALERT_DAYS)
            ],
            low_quantity_lots=[
                lot for lot in lots if lot.quantity < settings.LOT_LOW_QUANTITY_THRESHOLD
            ],
            zero_quantity_lots=[lot for lot in lots if lot.quantity == 0],
        )

    # Warehouse moves

    def transfer_product_lot_to_warehouse(self, lot_id: int, warehouse_id: int) -> ProductLot:
        lot = self.update(lot_id, {"currentWarehouseId": warehouse_id})
        logger.info("Moved lot %s to warehouse %s", lot_id, warehouse_id)
        return lot

    def transfer_lots_between_warehouses(self, lot_ids: List[int], to_warehouse_id: int) -> List[ProductLot]:
        """Move several lots; stops at the first failure without undoing earlier moves"""
        if not lot_ids:
            raise ValidationError("No lots selected for transfer")
        return [self.transfer_product_lot_to_warehouse(lot_id, to_warehouse_id) for lot_id in lot_ids]

    def consolidate_lots(
        self,
        target_lot_id: int,
        source_lot_ids: List[int],
        target_warehouse_id: Optional[int] = None,
    ) -> ProductLot:
        """
        Merge source lots into a target lot

        The target receives the summed quantity (and optionally a new
        warehouse), then every source lot is deleted. On failure the target
        is restored and deleted sources are re-created from their snapshots
        (re-created lots get new ids).
        """
        source_ids = [lot_id for lot_id in dict.fromkeys(source_lot_ids) if lot_id != target_lot_id]
        if not source_ids:
            raise ValidationError("No source lots to consolidate")

        target = self.get_by_id(target_lot_id)
        sources = [self.get_by_id(lot_id) for lot_id in source_ids]
        total_quantity = target.quantity + sum(lot.quantity for lot in sources)

        updates = {"quantity": total_quantity}
        if target_warehouse_id is not None:
            updates["currentWarehouseId"] = target_warehouse_id

        saga = Saga(f"consolidate lots {source_ids} into lot {target_lot_id}")
        try:
            consolidated = saga.step(
                lambda: self.update(target_lot_id, updates),
                lambda _: self.update(
                    target_lot_id,
                    {"quantity": target.quantity, "currentWarehouseId": target.current_warehouse_id},
                ),
                f"update of target lot {target_lot_id}",
            )
            for source in sources:
                saga.step(
                    lambda source=source: self.delete(source.id),
                    lambda _, source=source: self.create(self._snapshot(source)),
                    f"deletion of lot {source.id}",
                )
        except NegobiException as e:
            logger.error("Lot consolidation into %s failed: %s", target_lot_id, e)
            compensated = saga.compensate()
            raise StockTransferError(f"Could not consolidate lots: {e}", compensated=compensated) from e

        logger.info(
            "Consolidated %s lots into lot %s (quantity %s)", len(sources), target_lot_id, total_quantity
        )
        return consolidated

    @staticmethod
    def _snapshot(lot: ProductLot) -> ProductLotCreate:
        return ProductLotCreate(
            product_id=lot.product_id,
            lot_number=lot.lot_number,
            quantity=lot.quantity,
            expiration_date=lot.expiration_date,
            manufacturing_date=lot.manufacturing_date,
            purchase_price=lot.purchase_price,
            notes=lot.notes,
            current_warehouse_id=lot.current_warehouse_id,
            external_code=lot.external_code,
        )

    def create_multiple_product_lots(self, items) -> List[ProductLot]:
        return self.create_many(items)
