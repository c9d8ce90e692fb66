"""Stock By Warehouse Schemas"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from enum import Enum

from .common import BackendRecord, NegobiModel


# Enums
class StockLevel(str, Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    OUT_OF_STOCK = "OUT_OF_STOCK"


# Record Schemas
class StockByWarehouseBase(NegobiModel):
    stock: float = 0
    min_stock: float = 0
    max_stock: float = 0
    reserve_stock: float = 0
    incoming_stock: float = 0
    location_in_warehouse: Optional[str] = None
    show_in_ecommerce: bool = False
    show_in_sales_app: bool = False
    erp_code_product: Optional[str] = None
    erp_code_warehouse: Optional[str] = None
    warehouse_id: Optional[int] = Field(None, alias="warehouseId")
    product_id: Optional[int] = Field(None, alias="productId")

    @field_validator("stock", "min_stock", "max_stock", "reserve_stock", "incoming_stock", mode="before")
    @classmethod
    def null_quantities_are_zero(cls, v):
        return 0 if v is None else v


class StockByWarehouse(StockByWarehouseBase, BackendRecord):
    pass


class StockByWarehouseCreate(StockByWarehouseBase):
    warehouse_id: int = Field(..., alias="warehouseId")
    product_id: int = Field(..., alias="productId")
    stock: float = Field(0, ge=0)
    external_code: Optional[str] = None
    sync_with_erp: Optional[bool] = None


class StockByWarehouseUpdate(NegobiModel):
    stock: Optional[float] = Field(None, ge=0)
    min_stock: Optional[float] = Field(None, ge=0)
    max_stock: Optional[float] = Field(None, ge=0)
    reserve_stock: Optional[float] = Field(None, ge=0)
    incoming_stock: Optional[float] = Field(None, ge=0)
    location_in_warehouse: Optional[str] = None
    show_in_ecommerce: Optional[bool] = None
    show_in_sales_app: Optional[bool] = None
    erp_code_product: Optional[str] = None
    erp_code_warehouse: Optional[str] = None
    warehouse_id: Optional[int] = Field(None, alias="warehouseId")
    product_id: Optional[int] = Field(None, alias="productId")
    external_code: Optional[str] = None
    sync_with_erp: Optional[bool] = None


class SyncStockRow(NegobiModel):
    """One ERP row; the backend upserts by ERP codes"""
    erp_code_product: str
    erp_code_warehouse: str
    stock: float = 0
    min_stock: Optional[float] = None
    max_stock: Optional[float] = None
    reserve_stock: Optional[float] = None
    incoming_stock: Optional[float] = None
    location_in_warehouse: Optional[str] = None
    show_in_ecommerce: Optional[bool] = None
    show_in_sales_app: Optional[bool] = None
    external_code: Optional[str] = None


class SyncStockByWarehouseData(NegobiModel):
    company_id: int = Field(..., alias="companyId")
    data: List[SyncStockRow] = Field(..., min_length=1)


# Derived Schemas
class StockAnalysis(BaseModel):
    available_stock: float
    reserved_stock: float
    incoming_stock: float
    total_physical_stock: float
    stock_level: StockLevel
    needs_replenishment: bool
    reorder_quantity: Optional[float] = None


class StockTransferRequest(BaseModel):
    from_stock_id: int
    to_stock_id: int
    quantity: float = Field(..., gt=0)


class StockTransferResult(BaseModel):
    source: StockByWarehouse
    destination: StockByWarehouse
    quantity: float


class ProductStockTotals(BaseModel):
    product_id: int
    total_stock: float
    total_available_stock: float
