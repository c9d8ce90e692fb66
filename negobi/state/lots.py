"""Product lot state"""
from typing import List, Optional

from negobi.schemas.lots import ExpirationAlerts, LotInventoryCalculations, ProductLot
from negobi.services.product_lots import ProductLotService
from .base import ResourceState


class ProductLotsState(ResourceState[ProductLot]):
    service_class = ProductLotService
    service: ProductLotService

    def __init__(self, client=None, default_filters=None, service=None):
        super().__init__(client, default_filters, service)
        self.expiration_alerts: Optional[ExpirationAlerts] = None

    def load_by_product(self, product_id: int) -> List[ProductLot]:
        return self.load(productId=product_id)

    def load_by_warehouse(self, warehouse_id: int) -> List[ProductLot]:
        return self.load(currentWarehouseId=warehouse_id)

    def adjust_quantity(self, lot_id: int, adjustment: float) -> Optional[ProductLot]:
        def action():
            lot = self.service.adjust_product_lot_quantity(lot_id, adjustment)
            self._replace(lot)
            return lot

        return self._run(action)

    def calculations(self) -> LotInventoryCalculations:
        """Inventory figures over the loaded lots"""
        return self.service.calculate_lot_inventory(self.items)

    def load_expiration_alerts(self, alert_days: Optional[int] = None) -> Optional[ExpirationAlerts]:
        self.expiration_alerts = self._run(lambda: self.service.get_expiration_alerts(alert_days))
        return self.expiration_alerts

    def transfer_lots_between_warehouses(self, lot_ids: List[int], to_warehouse_id: int) -> bool:
        def action():
            for lot in self.service.transfer_lots_between_warehouses(lot_ids, to_warehouse_id):
                self._replace(lot)
            return True

        return self._run(action, fallback=False)

    def consolidate_lots(
        self,
        target_lot_id: int,
        source_lot_ids: List[int],
        target_warehouse_id: Optional[int] = None,
    ) -> bool:
        def action():
            target = self.service.consolidate_lots(target_lot_id, source_lot_ids, target_warehouse_id)
            self.items = [lot for lot in self.items if lot.id not in source_lot_ids or lot.id == target.id]
            self._replace(target)
            return True

        return self._run(action, fallback=False)
