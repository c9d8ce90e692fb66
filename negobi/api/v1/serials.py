"""
Product Serial API Endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from negobi.api.deps import get_serial_service
from negobi.schemas.serials import (
    ProductSerial,
    ProductSerialStats,
    SerialAvailability,
    SerialStatusRequest,
    SerialTransferRequest,
    SerialValidationResult,
)
from negobi.services.product_serials import ProductSerialService

router = APIRouter()


@router.get("/availability/{serial_number}", response_model=SerialAvailability)
def check_availability(serial_number: str, service: ProductSerialService = Depends(get_serial_service)):
    return SerialAvailability(serial_number=serial_number, available=service.is_serial_available(serial_number))


@router.get("/validate/{serial_number}", response_model=SerialValidationResult)
def validate_serial(
    serial_number: str,
    product_id: Optional[int] = Query(None),
    service: ProductSerialService = Depends(get_serial_service),
):
    return service.validate_serial(serial_number, product_id)


@router.get("/products/{product_id}/stats", response_model=ProductSerialStats)
def get_serial_stats(product_id: int, service: ProductSerialService = Depends(get_serial_service)):
    return service.get_product_serial_stats(product_id)


@router.post("/{serial_id}/status", response_model=ProductSerial)
def change_status(
    serial_id: int,
    request: SerialStatusRequest,
    service: ProductSerialService = Depends(get_serial_service),
):
    return service.change_serial_status(serial_id, request.status)


@router.post("/{serial_id}/transfer", response_model=ProductSerial)
def transfer_serial(
    serial_id: int,
    request: SerialTransferRequest,
    service: ProductSerialService = Depends(get_serial_service),
):
    """Move the unit to another warehouse; it is left In Transit"""
    return service.transfer_serial_to_warehouse(serial_id, request.warehouse_id)
