"""Product Lot Schemas"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from negobi.core.dates import parse_timestamp
from .common import BackendRecord, NegobiModel


class ProductLotBase(NegobiModel):
    product_id: Optional[int] = None
    lot_number: Optional[str] = None
    quantity: float = 0
    expiration_date: Optional[datetime] = None
    manufacturing_date: Optional[datetime] = None
    purchase_price: Optional[float] = None
    notes: Optional[str] = None
    current_warehouse_id: Optional[int] = Field(None, alias="currentWarehouseId")

    @field_validator("expiration_date", "manufacturing_date", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return parse_timestamp(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def null_quantity_is_zero(cls, v):
        return 0 if v is None else v


class ProductLot(ProductLotBase, BackendRecord):
    pass


class ProductLotCreate(ProductLotBase):
    product_id: int
    lot_number: str = Field(..., min_length=1)
    quantity: float = Field(0, ge=0)
    external_code: Optional[str] = None
    sync_with_erp: Optional[bool] = None


class ProductLotUpdate(NegobiModel):
    product_id: Optional[int] = None
    lot_number: Optional[str] = None
    quantity: Optional[float] = Field(None, ge=0)
    expiration_date: Optional[datetime] = None
    manufacturing_date: Optional[datetime] = None
    purchase_price: Optional[float] = None
    notes: Optional[str] = None
    current_warehouse_id: Optional[int] = Field(None, alias="currentWarehouseId")
    external_code: Optional[str] = None
    sync_with_erp: Optional[bool] = None

    @field_validator("expiration_date", "manufacturing_date", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return parse_timestamp(v)


class ProductLotStats(BaseModel):
    total_lots: int
    total_quantity: float
    expired_lots: int
    expiring_lots: int
    average_quantity: float
    min_quantity: float
    max_quantity: float


class LotInventoryCalculations(BaseModel):
    total_quantity: float
    total_value: float
    lot_count: int
    max_quantity_lot: Optional[ProductLot] = None
    min_quantity_lot: Optional[ProductLot] = None
    average_quantity: float
    expired_lots: List[ProductLot] = []
    expiring_soon_lots: List[ProductLot] = []
    low_quantity_lots: List[ProductLot] = []
    zero_quantity_lots: List[ProductLot] = []


class ExpirationAlerts(BaseModel):
    critical: List[ProductLot] = []
    warning: List[ProductLot] = []
    total_alerts: int = 0
    total_value_at_risk: float = 0
    affected_products: int = 0


class LotAdjustmentRequest(BaseModel):
    adjustment: float


class LotConsolidationRequest(BaseModel):
    target_lot_id: int
    source_lot_ids: List[int] = Field(..., min_length=1)
    target_warehouse_id: Optional[int] = None
