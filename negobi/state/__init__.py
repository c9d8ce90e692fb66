"""
Negobi State Adapters
Per-request list state with user-visible error messages
"""

from .base import ResourceState
from .stock import StockByWarehouseState
from .lots import ProductLotsState
from .serials import ProductSerialsState
from .visits import VisitsState
from .exchange_rates import ExchangeRatesState
from .catalog import ServicesState

__all__ = [
    "ResourceState",
    "StockByWarehouseState",
    "ProductLotsState",
    "ProductSerialsState",
    "VisitsState",
    "ExchangeRatesState",
    "ServicesState",
]
