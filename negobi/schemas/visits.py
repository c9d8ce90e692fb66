"""Field Visit Schemas"""

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from negobi.core.dates import parse_timestamp
from .common import BackendRecord, NegobiModel, ValidationResult


# Enums
class VisitStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class VisitLocation(BaseModel):
    """GeoJSON point; coordinates are ``[longitude, latitude]``"""
    type: Literal["Point"] = "Point"
    coordinates: List[float]

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]


class VisitFields(NegobiModel):
    date: Optional[datetime] = None
    location: Optional[VisitLocation] = None
    status: Optional[VisitStatus] = None
    description: Optional[str] = None
    client_id: Optional[int] = Field(None, alias="clientId")

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        return parse_timestamp(v)


class Visit(VisitFields, BackendRecord):
    pass


class VisitCreate(VisitFields):
    """
    Visit payload before local validation

    Fields stay optional so every broken rule can be reported at once by
    ``VisitService.validate_visit_data``.
    """
    external_code: Optional[str] = None


class VisitUpdate(VisitFields):
    external_code: Optional[str] = None
    sync_with_erp: Optional[bool] = None


class VisitValidationResult(ValidationResult):
    pass


class VisitStatistics(BaseModel):
    total: int = 0
    pending: int = 0
    completed: int = 0
    cancelled: int = 0
    today: int = 0
    this_week: int = 0
    this_month: int = 0


# Request Schemas
class ScheduleConflictRequest(BaseModel):
    date: datetime
    duration: Optional[int] = Field(None, gt=0, description="Minutes")
    exclude_visit_id: Optional[int] = None

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        return parse_timestamp(v)


class ScheduleConflictResponse(BaseModel):
    has_conflict: bool
    conflicts: List[Visit] = []


class RouteRequest(BaseModel):
    visit_ids: List[int] = Field(default_factory=list)


class RouteResponse(BaseModel):
    visits: List[Visit]
    total_distance_km: float


class DistanceRequest(BaseModel):
    origin: List[float] = Field(..., min_length=2, max_length=2, description="[lon, lat]")
    destination: List[float] = Field(..., min_length=2, max_length=2, description="[lon, lat]")


class DistanceResponse(BaseModel):
    distance_km: float
