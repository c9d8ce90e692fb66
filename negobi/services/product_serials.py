"""
Product Serial Service
Serialized units: status handling, availability checks and warehouse moves
"""
from typing import List, Optional, Union

from negobi.core.logging import get_logger
from negobi.schemas.serials import (
    ProductSerial,
    ProductSerialStats,
    ProductSerialStatus,
    SerialValidationResult,
)
from .base import ResourceService

logger = get_logger("inventory.serials")

StatusValue = Union[ProductSerialStatus, str]


class ProductSerialService(ResourceService[ProductSerial]):
    """
    Serial numbers of individual units

    A serial has exactly one status at a time. Any status may follow any
    other; the backend is the only authority on transitions.
    """

    path = "/product-serials"
    model = ProductSerial
    resource_name = "product serial"

    # Lookups

    def get_product_serials_by_product(self, product_id: int) -> List[ProductSerial]:
        return self.fetch_all(productId=product_id)

    def get_product_serials_by_warehouse(self, warehouse_id: int) -> List[ProductSerial]:
        return self.fetch_all(currentWarehouseId=warehouse_id)

    def get_product_serials_by_status(self, status: StatusValue) -> List[ProductSerial]:
        return self.fetch_all(status=ProductSerialStatus(status))

    def get_product_serial_by_serial_number(self, serial_number: str) -> Optional[ProductSerial]:
        serials = self.get_all(items_per_page=1, serialNumber=serial_number)
        return serials[0] if serials else None

    def get_available_product_serials(self, product_id: Optional[int] = None) -> List[ProductSerial]:
        filters = {"status": ProductSerialStatus.AVAILABLE}
        if product_id is not None:
            filters["productId"] = product_id
        return self.fetch_all(**filters)

    # Status changes

    def change_serial_status(self, serial_id: int, status: StatusValue) -> ProductSerial:
        status = ProductSerialStatus(status)
        serial = self.update(serial_id, {"status": status.value})
        logger.info("Serial %s is now %s", serial_id, status.value)
        return serial

    def mark_as_sold(self, serial_id: int) -> ProductSerial:
        return self.change_serial_status(serial_id, ProductSerialStatus.SOLD)

    def mark_as_defective(self, serial_id: int) -> ProductSerial:
        return self.change_serial_status(serial_id, ProductSerialStatus.DEFECTIVE)

    def reserve_serial(self, serial_id: int) -> ProductSerial:
        return self.change_serial_status(serial_id, ProductSerialStatus.RESERVED)

    def release_serial(self, serial_id: int) -> ProductSerial:
        return self.change_serial_status(serial_id, ProductSerialStatus.AVAILABLE)

    def transfer_serial_to_warehouse(self, serial_id: int, warehouse_id: int) -> ProductSerial:
        """Moving a unit always puts it In Transit"""
        serial = self.update(
            serial_id,
            {"currentWarehouseId": warehouse_id, "status": ProductSerialStatus.IN_TRANSIT.value},
        )
        logger.info("Serial %s in transit to warehouse %s", serial_id, warehouse_id)
        return serial

    # Checks

    def is_serial_available(self, serial_number: str) -> bool:
        serial = self.get_product_serial_by_serial_number(serial_number)
        return serial is not None and serial.status == ProductSerialStatus.AVAILABLE

    def validate_serial(self, serial_number: str, product_id: Optional[int] = None) -> SerialValidationResult:
        """Check that a serial exists, belongs to the product and can be sold"""
        serial = self.get_product_serial_by_serial_number(serial_number)
        if serial is None:
            return SerialValidationResult(is_valid=False, message="Serial not found")
        if product_id is not None and serial.product_id != product_id:
            return SerialValidationResult(
                is_valid=False, serial=serial, message="Serial does not belong to the given product"
            )
        if serial.status != ProductSerialStatus.AVAILABLE:
            status = serial.status.value if serial.status else "unknown"
            return SerialValidationResult(
                is_valid=False, serial=serial, message=f"Serial not available. Current status: {status}"
            )
        return SerialValidationResult(is_valid=True, serial=serial, message="Serial is valid")

    def get_product_serial_stats(self, product_id: int) -> ProductSerialStats:
        serials = self.get_product_serials_by_product(product_id)

        def count(status: ProductSerialStatus) -> int:
            return sum(1 for serial in serials if serial.status == status)

        return ProductSerialStats(
            total=len(serials),
            available=count(ProductSerialStatus.AVAILABLE),
            sold=count(ProductSerialStatus.SOLD),
            reserved=count(ProductSerialStatus.RESERVED),
            in_transit=count(ProductSerialStatus.IN_TRANSIT),
            defective=count(ProductSerialStatus.DEFECTIVE),
        )

    def create_multiple_product_serials(self, items) -> List[ProductSerial]:
        return self.create_many(items)
