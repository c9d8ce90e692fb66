"""
Stock By Warehouse API Endpoints
Stock level analysis, replenishment lists and warehouse transfers
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query

from negobi.api.deps import get_stock_service
from negobi.schemas.stock import (
    ProductStockTotals,
    StockAnalysis,
    StockByWarehouse,
    StockTransferRequest,
    StockTransferResult,
    SyncStockByWarehouseData,
)
from negobi.services.stock_by_warehouse import StockByWarehouseService

router = APIRouter()


@router.get("/low-stock", response_model=List[StockByWarehouse])
def get_low_stock_items(
    warehouse_id: Optional[int] = Query(None, description="Limit to one warehouse"),
    service: StockByWarehouseService = Depends(get_stock_service),
):
    """Stock records that need replenishment"""
    return service.get_low_stock_items(warehouse_id)


@router.get("/out-of-stock", response_model=List[StockByWarehouse])
def get_out_of_stock_items(
    warehouse_id: Optional[int] = Query(None, description="Limit to one warehouse"),
    service: StockByWarehouseService = Depends(get_stock_service),
):
    return service.get_out_of_stock_items(warehouse_id)


@router.post("/transfer", response_model=StockTransferResult)
def transfer_stock(
    request: StockTransferRequest,
    service: StockByWarehouseService = Depends(get_stock_service),
):
    """
    Move units between two stock records.
    If the destination update fails the source is restored and 409 is returned.
    """
    return service.transfer_stock(request.from_stock_id, request.to_stock_id, request.quantity)


@router.post("/sync")
def sync_stock(
    sync_data: SyncStockByWarehouseData,
    service: StockByWarehouseService = Depends(get_stock_service),
) -> Any:
    result = service.sync_stock_by_warehouse(sync_data)
    return {"synced": len(sync_data.data), "result": result}


@router.get("/products/{product_id}/totals", response_model=ProductStockTotals)
def get_product_totals(
    product_id: int,
    service: StockByWarehouseService = Depends(get_stock_service),
):
    return service.get_product_totals(product_id)


@router.get("/{stock_id}/analysis", response_model=StockAnalysis)
def analyze_stock(
    stock_id: int,
    service: StockByWarehouseService = Depends(get_stock_service),
):
    return service.analyze_stock_level(service.get_by_id(stock_id))
