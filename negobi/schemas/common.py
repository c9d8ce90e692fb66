"""
Negobi Common Schemas
Shared Pydantic models for the backend envelope and list pages
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from negobi.core.dates import parse_timestamp

# Generic type for paginated responses
T = TypeVar('T')


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class NegobiModel(BaseModel):
    """
    Base model for backend records

    Wire names (camelCase relations such as ``warehouseId``) are kept as
    aliases so records can be built from either spelling.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> Dict[str, Any]:
        """Body for POST/PATCH requests"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BackendRecord(NegobiModel):
    """System fields every backend entity carries"""
    id: int
    external_code: Optional[str] = None
    sync_with_erp: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at", "deleted_at", mode="before")
    @classmethod
    def parse_system_timestamps(cls, v):
        return parse_timestamp(v)


class ApiEnvelope(BaseModel):
    """
    Response envelope shared by every backend endpoint

    ``{"success": true, "data": ...}``; failures may carry ``message``.
    """
    model_config = ConfigDict(extra="allow")

    success: bool
    data: Any = None
    message: Optional[Any] = None


class PaginatedData(BaseModel):
    """Paginated list payload: ``{"data": [...], "totalPages": n, "total": n}``"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    data: List[Dict[str, Any]]
    total_pages: int = Field(1, alias="totalPages", ge=0)
    total: Optional[int] = Field(None, ge=0)


class Page(BaseModel, Generic[T]):
    """
    One page of a list endpoint

    ``paginated`` is False when the backend answered with a bare array, in
    which case the page is the whole result.
    """
    items: List[T] = Field(..., description="List of items for current page")
    page: int = Field(1, description="Current page number (1-based)")
    page_size: int = Field(..., description="Requested number of items per page")
    total: int = Field(..., description="Total number of items across all pages")
    total_pages: int = Field(..., description="Total number of pages")
    paginated: bool = Field(True, description="Whether the backend sent pagination metadata")

    @property
    def has_next(self) -> bool:
        return self.paginated and self.page < self.total_pages


class ValidationResult(BaseModel):
    """Outcome of a local validation: every violated rule is listed"""
    is_valid: bool
    errors: List[str] = []


def validation_messages(exc) -> List[str]:
    """Flatten a pydantic ValidationError into ``field: message`` strings"""
    return [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" if error["loc"] else error["msg"]
        for error in exc.errors()
    ]
