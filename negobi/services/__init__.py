"""
Negobi Business Services
One service per backend resource plus the business rules built on it
"""

from .base import ResourceService
from .saga import Saga
from .stock_by_warehouse import StockByWarehouseService
from .product_lots import ProductLotService
from .product_serials import ProductSerialService
from .visits import VisitService
from .exchange_rates import ExchangeRateService
from .catalog import ServiceCatalogService

__all__ = [
    "ResourceService",
    "Saga",
    "StockByWarehouseService",
    "ProductLotService",
    "ProductSerialService",
    "VisitService",
    "ExchangeRateService",
    "ServiceCatalogService",
]
