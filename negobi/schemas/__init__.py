"""
Negobi Pydantic Schemas
Backend records, request payloads and derived business results
"""

from .common import ApiEnvelope, BackendRecord, Page, PaginatedData, SortOrder, ValidationResult
from .stock import (
    StockAnalysis,
    StockByWarehouse,
    StockByWarehouseCreate,
    StockByWarehouseUpdate,
    StockLevel,
    StockTransferResult,
    SyncStockByWarehouseData,
)
from .lots import (
    ExpirationAlerts,
    LotInventoryCalculations,
    ProductLot,
    ProductLotCreate,
    ProductLotStats,
    ProductLotUpdate,
)
from .serials import (
    ProductSerial,
    ProductSerialCreate,
    ProductSerialStats,
    ProductSerialStatus,
    ProductSerialUpdate,
    SerialValidationResult,
)
from .visits import (
    Visit,
    VisitCreate,
    VisitLocation,
    VisitStatistics,
    VisitStatus,
    VisitUpdate,
    VisitValidationResult,
)
from .exchange_rates import CurrencyConversion, ExchangeRate, ExchangeRateCreate, ExchangeRateUpdate
from .catalog import (
    Service,
    ServiceCreate,
    ServiceOption,
    ServicePriceAnalysis,
    ServiceStatistics,
    ServiceUpdate,
)

__all__ = [
    "ApiEnvelope", "BackendRecord", "Page", "PaginatedData", "SortOrder", "ValidationResult",
    "StockAnalysis", "StockByWarehouse", "StockByWarehouseCreate", "StockByWarehouseUpdate",
    "StockLevel", "StockTransferResult", "SyncStockByWarehouseData",
    "ExpirationAlerts", "LotInventoryCalculations", "ProductLot", "ProductLotCreate",
    "ProductLotStats", "ProductLotUpdate",
    "ProductSerial", "ProductSerialCreate", "ProductSerialStats", "ProductSerialStatus",
    "ProductSerialUpdate", "SerialValidationResult",
    "Visit", "VisitCreate", "VisitLocation", "VisitStatistics", "VisitStatus", "VisitUpdate",
    "VisitValidationResult",
    "CurrencyConversion", "ExchangeRate", "ExchangeRateCreate", "ExchangeRateUpdate",
    "Service", "ServiceCreate", "ServiceOption", "ServicePriceAnalysis", "ServiceStatistics",
    "ServiceUpdate",
]
