"""Service Catalog Schemas"""

from typing import Optional

from pydantic import BaseModel, Field

from .common import BackendRecord, NegobiModel, ValidationResult


class ServiceFields(NegobiModel):
    name: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    price_level_1: float = 0
    price_level_2: float = 0
    price_level_3: float = 0
    category_id: Optional[int] = None
    company_id: Optional[int] = None
    erp_code_inst: Optional[str] = None


class Service(ServiceFields, BackendRecord):
    name: str
    code: str
    external_id: Optional[int] = Field(None, alias="externalId")


class ServiceCreate(ServiceFields):
    """Catalog service payload; checked locally before it is sent"""
    external_code: Optional[str] = None


class ServiceUpdate(NegobiModel):
    name: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    price_level_1: Optional[float] = None
    price_level_2: Optional[float] = None
    price_level_3: Optional[float] = None
    category_id: Optional[int] = None
    company_id: Optional[int] = None
    erp_code_inst: Optional[str] = None
    external_code: Optional[str] = None


class ServicePriceUpdate(NegobiModel):
    price_level_1: Optional[float] = Field(None, ge=0)
    price_level_2: Optional[float] = Field(None, ge=0)
    price_level_3: Optional[float] = Field(None, ge=0)


class ServiceValidationResult(ValidationResult):
    pass


class ServicePriceAnalysis(BaseModel):
    service: Service
    average_price: float
    price_range: float
    is_competitive: bool
    suggested_price: Optional[int] = None


class PriceRange(BaseModel):
    min: float = 0
    max: float = 0


class ServiceStatistics(BaseModel):
    total: int = 0
    with_category: int = 0
    without_category: int = 0
    average_price: float = 0
    price_range: PriceRange = PriceRange()


class ServiceOption(BaseModel):
    value: int
    label: str
    code: str
