"""
Main API Router - Consolidates all module routes
"""

from fastapi import APIRouter

from negobi.api.v1 import catalog, exchange_rates, lots, serials, stock, visits

api_router = APIRouter()

# Inventory routes
api_router.include_router(stock.router, prefix="/stock", tags=["stock"])
api_router.include_router(lots.router, prefix="/lots", tags=["product-lots"])
api_router.include_router(serials.router, prefix="/serials", tags=["product-serials"])

# Field visit routes
api_router.include_router(visits.router, prefix="/visits", tags=["visits"])

# Pricing routes
api_router.include_router(exchange_rates.router, prefix="/exchange-rates", tags=["exchange-rates"])
api_router.include_router(catalog.router, prefix="/services", tags=["services"])
