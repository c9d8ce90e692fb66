"""
Service Catalog Service
Billable services of a company: price validation and analysis
"""
import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from negobi.core.exceptions import ValidationError
from negobi.schemas.catalog import (
    PriceRange,
    Service,
    ServiceCreate,
    ServiceOption,
    ServicePriceAnalysis,
    ServicePriceUpdate,
    ServiceStatistics,
    ServiceValidationResult,
)
from negobi.schemas.common import validation_messages
from .base import ResourceService

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 100
CODE_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 500
UNCATEGORIZED = "uncategorized"


def _prices(service) -> List[float]:
    return [service.price_level_1, service.price_level_2, service.price_level_3]


def _positive_prices(service) -> List[float]:
    return [price for price in _prices(service) if price and price > 0]


class ServiceCatalogService(ResourceService[Service]):
    """
    Company service catalog (``/services``)

    Lists always need a ``companyId``; ``categoryId`` is optional.
    """

    path = "/services"
    model = Service
    resource_name = "service"

    # Lookups

    def get_services(
        self,
        company_id: int,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[Service]:
        return self.fetch_all(search=search, companyId=company_id, categoryId=category_id)

    def check_service_code_exists(self, company_id: int, code: str) -> bool:
        return any(service.code == code for service in self.get_services(company_id, search=code))

    def check_service_name_exists(self, company_id: int, name: str) -> bool:
        return any(service.name == name for service in self.get_services(company_id, search=name))

    def get_services_for_select(self, company_id: int) -> List[ServiceOption]:
        return [
            ServiceOption(value=service.id, label=f"{service.code} - {service.name}", code=service.code)
            for service in self.get_services(company_id)
        ]

    def get_services_grouped_by_category(self, company_id: int) -> Dict[str, List[Service]]:
        groups: Dict[str, List[Service]] = defaultdict(list)
        for service in self.get_services(company_id):
            key = str(service.category_id) if service.category_id else UNCATEGORIZED
            groups[key].append(service)
        return dict(groups)

    # Validation

    @staticmethod
    def validate_service_data(data: Union[ServiceCreate, Dict[str, Any]]) -> ServiceValidationResult:
        """
        Check a catalog service before it is sent

        Text fields are required and bounded; prices cannot be negative and
        must not decrease from level 1 to level 3 (zero levels are skipped).
        """
        if not isinstance(data, ServiceCreate):
            try:
                data = ServiceCreate.model_validate(data)
            except PydanticValidationError as e:
                return ServiceValidationResult(is_valid=False, errors=validation_messages(e))
        errors: List[str] = []

        if not data.name or not data.name.strip():
            errors.append("Service name is required")
        elif len(data.name) > NAME_MAX_LENGTH:
            errors.append(f"Service name cannot exceed {NAME_MAX_LENGTH} characters")

        if not data.code or not data.code.strip():
            errors.append("Service code is required")
        elif len(data.code) > CODE_MAX_LENGTH:
            errors.append(f"Service code cannot exceed {CODE_MAX_LENGTH} characters")

        if not data.description or not data.description.strip():
            errors.append("Service description is required")
        elif len(data.description) > DESCRIPTION_MAX_LENGTH:
            errors.append(f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters")

        for level, price in enumerate(_prices(data), start=1):
            if price < 0:
                errors.append(f"Price level {level} cannot be negative")

        if data.price_level_1 > 0 and data.price_level_2 > 0 and data.price_level_1 > data.price_level_2:
            errors.append("Price level 1 cannot be greater than price level 2")
        if data.price_level_2 > 0 and data.price_level_3 > 0 and data.price_level_2 > data.price_level_3:
            errors.append("Price level 2 cannot be greater than price level 3")

        return ServiceValidationResult(is_valid=not errors, errors=errors)

    def create_validated_service(self, data: Union[ServiceCreate, Dict[str, Any]]) -> Service:
        result = self.validate_service_data(data)
        if not result.is_valid:
            raise ValidationError("; ".join(result.errors), errors=result.errors)
        return self.create(data)

    # Prices

    @staticmethod
    def calculate_average_price(service) -> float:
        prices = _positive_prices(service)
        return sum(prices) / len(prices) if prices else 0

    @classmethod
    def analyze_service_prices(cls, service: Service) -> ServicePriceAnalysis:
        """
        Spread of a service's price levels

        Competitive when the range is at most half the average. A service
        without any positive price analyses as zero and competitive.
        """
        prices = _positive_prices(service)
        average = cls.calculate_average_price(service)
        price_range = max(prices) - min(prices) if prices else 0
        return ServicePriceAnalysis(
            service=service,
            average_price=round(average, 2),
            price_range=round(price_range, 2),
            is_competitive=price_range <= average * 0.5,
            suggested_price=int(average + 0.5),
        )

    def update_service_prices(self, service_id: int, prices: ServicePriceUpdate) -> Service:
        return self.update(service_id, prices)

    def get_services_statistics(self, company_id: int) -> ServiceStatistics:
        services = self.get_services(company_id)
        prices = [price for service in services for price in _positive_prices(service)]
        average = sum(prices) / len(prices) if prices else 0
        return ServiceStatistics(
            total=len(services),
            with_category=sum(1 for service in services if service.category_id),
            without_category=sum(1 for service in services if not service.category_id),
            average_price=round(average, 2),
            price_range=PriceRange(min=min(prices) if prices else 0, max=max(prices) if prices else 0),
        )

    def create_multiple_services(self, company_id: int, items) -> List[Service]:
        """Sequential creation; each service defaults to ``company_id``"""
        payloads = []
        for item in items:
            payload = self.as_payload(item)
            payload.setdefault("company_id", company_id)
            payloads.append(payload)
        return self.create_many(payloads)
