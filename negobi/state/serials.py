"""Product serial state"""
from typing import List, Optional

from negobi.schemas.serials import ProductSerial, ProductSerialStatus, SerialValidationResult
from negobi.services.product_serials import ProductSerialService
from .base import ResourceState


class ProductSerialsState(ResourceState[ProductSerial]):
    service_class = ProductSerialService
    service: ProductSerialService

    def load_by_product(self, product_id: int) -> List[ProductSerial]:
        return self.load(productId=product_id)

    def load_available(self, product_id: Optional[int] = None) -> List[ProductSerial]:
        filters = {"status": ProductSerialStatus.AVAILABLE}
        if product_id is not None:
            filters["productId"] = product_id
        return self.load(**filters)

    def _mutate(self, operation, *args) -> Optional[ProductSerial]:
        def action():
            serial = operation(*args)
            self._replace(serial)
            return serial

        return self._run(action)

    def change_status(self, serial_id: int, status: ProductSerialStatus) -> Optional[ProductSerial]:
        return self._mutate(self.service.change_serial_status, serial_id, status)

    def sell(self, serial_id: int) -> Optional[ProductSerial]:
        return self._mutate(self.service.mark_as_sold, serial_id)

    def reserve(self, serial_id: int) -> Optional[ProductSerial]:
        return self._mutate(self.service.reserve_serial, serial_id)

    def release(self, serial_id: int) -> Optional[ProductSerial]:
        return self._mutate(self.service.release_serial, serial_id)

    def mark_defective(self, serial_id: int) -> Optional[ProductSerial]:
        return self._mutate(self.service.mark_as_defective, serial_id)

    def transfer(self, serial_id: int, warehouse_id: int) -> Optional[ProductSerial]:
        return self._mutate(self.service.transfer_serial_to_warehouse, serial_id, warehouse_id)

    def validate_serial(self, serial_number: str, product_id: Optional[int] = None) -> SerialValidationResult:
        result = self._run(lambda: self.service.validate_serial(serial_number, product_id))
        if result is None:
            return SerialValidationResult(is_valid=False, message=self.error or "Serial could not be validated")
        return result
