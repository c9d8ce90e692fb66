"""
Product Lot API Endpoints
Expiry tracking, quantity adjustments and lot consolidation
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from negobi.api.deps import get_lot_service
from negobi.schemas.lots import (
    ExpirationAlerts,
    LotAdjustmentRequest,
    LotConsolidationRequest,
    ProductLot,
    ProductLotStats,
)
from negobi.services.product_lots import ProductLotService

router = APIRouter()


@router.get("/expired", response_model=List[ProductLot])
def get_expired_lots(service: ProductLotService = Depends(get_lot_service)):
    return service.get_expired_product_lots()


@router.get("/expiring", response_model=List[ProductLot])
def get_expiring_lots(
    days: Optional[int] = Query(None, ge=0, description="Look-ahead window in days"),
    service: ProductLotService = Depends(get_lot_service),
):
    return service.get_expiring_product_lots(days)


@router.get("/alerts", response_model=ExpirationAlerts)
def get_expiration_alerts(
    days: Optional[int] = Query(None, ge=0),
    service: ProductLotService = Depends(get_lot_service),
):
    return service.get_expiration_alerts(days)


@router.post("/consolidate", response_model=ProductLot)
def consolidate_lots(
    request: LotConsolidationRequest,
    service: ProductLotService = Depends(get_lot_service),
):
    return service.consolidate_lots(request.target_lot_id, request.source_lot_ids, request.target_warehouse_id)


@router.get("/products/{product_id}/stats", response_model=ProductLotStats)
def get_lot_stats(product_id: int, service: ProductLotService = Depends(get_lot_service)):
    return service.get_product_lot_stats(product_id)


@router.post("/{lot_id}/adjust", response_model=ProductLot)
def adjust_lot_quantity(
    lot_id: int,
    request: LotAdjustmentRequest,
    service: ProductLotService = Depends(get_lot_service),
):
    """Add or subtract units; the quantity is floored at zero"""
    return service.adjust_product_lot_quantity(lot_id, request.adjustment)
