"""
Service Catalog API Endpoints
"""

from fastapi import APIRouter, Depends, Query

from negobi.api.deps import get_catalog_service
from negobi.schemas.catalog import (
    ServiceCreate,
    ServicePriceAnalysis,
    ServiceStatistics,
    ServiceValidationResult,
)
from negobi.services.catalog import ServiceCatalogService

router = APIRouter()


@router.post("/validate", response_model=ServiceValidationResult)
def validate_service(service_data: ServiceCreate, service: ServiceCatalogService = Depends(get_catalog_service)):
    return service.validate_service_data(service_data)


@router.get("/statistics", response_model=ServiceStatistics)
def get_statistics(
    company_id: int = Query(...),
    service: ServiceCatalogService = Depends(get_catalog_service),
):
    return service.get_services_statistics(company_id)


@router.get("/{service_id}/price-analysis", response_model=ServicePriceAnalysis)
def analyze_prices(service_id: int, service: ServiceCatalogService = Depends(get_catalog_service)):
    return service.analyze_service_prices(service.get_by_id(service_id))
