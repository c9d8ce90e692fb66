"""Service catalog state"""
from typing import Any, Dict, Optional, Union

from negobi.schemas.catalog import Service, ServiceCreate, ServiceStatistics
from negobi.services.catalog import ServiceCatalogService
from .base import ResourceState


class ServicesState(ResourceState[Service]):
    """Catalog services of one company (``companyId`` default filter)"""

    service_class = ServiceCatalogService
    service: ServiceCatalogService

    def __init__(self, client=None, company_id: Optional[int] = None, default_filters=None, service=None):
        filters = dict(default_filters or {})
        if company_id is not None:
            filters.setdefault("companyId", company_id)
        super().__init__(client, filters, service)
        self.company_id = company_id
        self.statistics: Optional[ServiceStatistics] = None

    def create(self, data: Union[ServiceCreate, Dict[str, Any]]) -> Optional[Service]:
        self.error = None
        validation = self.service.validate_service_data(data)
        if not validation.is_valid:
            self._fail_validation(validation.errors)
            return None
        if self.company_id is not None:
            payload = self.service.as_payload(data)
            payload.setdefault("company_id", self.company_id)
            data = payload
        return super().create(data)

    def update_prices(self, service_id: int, prices) -> Optional[Service]:
        def action():
            record = self.service.update_service_prices(service_id, prices)
            self._replace(record)
            return record

        return self._run(action)

    def load_statistics(self) -> Optional[ServiceStatistics]:
        if self.company_id is None:
            self._fail_validation(["companyId is required"])
            return None
        self.statistics = self._run(lambda: self.service.get_services_statistics(self.company_id))
        return self.statistics
