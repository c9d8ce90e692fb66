"""Product Serial Schemas"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from negobi.core.dates import parse_timestamp
from .common import BackendRecord, NegobiModel


# Enums
class ProductSerialStatus(str, Enum):
    AVAILABLE = "Available"
    SOLD = "Sold"
    RESERVED = "Reserved"
    IN_TRANSIT = "In Transit"
    DEFECTIVE = "Defective"


class ProductSerialBase(NegobiModel):
    product_id: Optional[int] = None
    serial_number: Optional[str] = None
    status: Optional[ProductSerialStatus] = None
    purchase_date: Optional[datetime] = None
    purchase_price: Optional[float] = None
    notes: Optional[str] = None
    current_warehouse_id: Optional[int] = Field(None, alias="currentWarehouseId")

    @field_validator("purchase_date", mode="before")
    @classmethod
    def parse_purchase_date(cls, v):
        return parse_timestamp(v)


class ProductSerial(ProductSerialBase, BackendRecord):
    pass


class ProductSerialCreate(ProductSerialBase):
    product_id: int
    serial_number: str = Field(..., min_length=1)
    status: ProductSerialStatus = ProductSerialStatus.AVAILABLE
    external_code: Optional[str] = None
    sync_with_erp: Optional[bool] = None


class ProductSerialUpdate(ProductSerialBase):
    external_code: Optional[str] = None
    sync_with_erp: Optional[bool] = None


class ProductSerialStats(BaseModel):
    total: int = 0
    available: int = 0
    sold: int = 0
    reserved: int = 0
    in_transit: int = 0
    defective: int = 0


class SerialValidationResult(BaseModel):
    is_valid: bool
    message: str
    serial: Optional[ProductSerial] = None


class SerialStatusRequest(BaseModel):
    status: ProductSerialStatus


class SerialTransferRequest(BaseModel):
    warehouse_id: int


class SerialAvailability(BaseModel):
    serial_number: str
    available: bool

