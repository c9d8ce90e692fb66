"""
Resource Service Base
Remote CRUD verbs shared by every backend resource
"""
import logging
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from negobi.core.api_client import ApiClient
from negobi.core.config import settings
from negobi.core.exceptions import BulkCreateError, MalformedResponseError, NegobiException
from negobi.schemas.common import NegobiModel, Page, SortOrder

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=NegobiModel)
Payload = Union[BaseModel, Dict[str, Any]]


class ResourceService(Generic[RecordT]):
    """
    One REST resource of the backend

    Subclasses set ``path`` and ``model``; list filters are passed through
    as query parameters under their wire names.
    """

    path: str = ""
    model: Type[RecordT]
    resource_name: str = "record"

    def __init__(self, client: ApiClient):
        self.client = client

    # Decoding

    def _parse(self, data: Any) -> RecordT:
        try:
            return self.model.model_validate(data)
        except PydanticValidationError as e:
            logger.error("Backend sent an invalid %s: %r", self.resource_name, data)
            raise MalformedResponseError(f"Backend sent an invalid {self.resource_name}") from e

    def _parse_many(self, rows: Iterable[Any]) -> List[RecordT]:
        return [self._parse(row) for row in rows]

    @staticmethod
    def as_payload(data: Payload) -> Dict[str, Any]:
        if isinstance(data, NegobiModel):
            return data.to_payload()
        if isinstance(data, BaseModel):
            return data.model_dump(mode="json", by_alias=True, exclude_none=True)
        return dict(data)

    @staticmethod
    def _list_params(
        page: int = 1,
        items_per_page: Optional[int] = None,
        search: Optional[str] = None,
        order: Optional[SortOrder] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "page": page,
            "itemsPerPage": items_per_page or settings.DEFAULT_PAGE_SIZE,
            "search": search,
            "order": order,
        }
        params.update(filters or {})
        return params

    # Reads

    def get_page(
        self,
        page: int = 1,
        items_per_page: Optional[int] = None,
        search: Optional[str] = None,
        order: Optional[SortOrder] = None,
        **filters: Any,
    ) -> Page[RecordT]:
        """One page of the resource, with pagination metadata"""
        raw = self.client.list_page(
            self.path, self._list_params(page, items_per_page, search, order, filters)
        )
        return Page[self.model](
            items=self._parse_many(raw.items),
            page=raw.page,
            page_size=raw.page_size,
            total=raw.total,
            total_pages=raw.total_pages,
            paginated=raw.paginated,
        )

    def get_all(
        self,
        page: int = 1,
        items_per_page: Optional[int] = None,
        search: Optional[str] = None,
        order: Optional[SortOrder] = None,
        **filters: Any,
    ) -> List[RecordT]:
        return self.get_page(page, items_per_page, search, order, **filters).items

    def fetch_all(
        self,
        search: Optional[str] = None,
        order: Optional[SortOrder] = None,
        **filters: Any,
    ) -> List[RecordT]:
        """Every record matching the filters, following all pages"""
        params = {"search": search, "order": order}
        params.update(filters)
        return self._parse_many(self.client.fetch_all(self.path, params))

    def get_by_id(self, record_id: int) -> RecordT:
        return self._parse(self.client.get(f"{self.path}/{record_id}"))

    # Writes

    def create(self, data: Payload) -> RecordT:
        record = self._parse(self.client.post(self.path, self.as_payload(data)))
        logger.info("Created %s %s", self.resource_name, record.id)
        return record

    def update(self, record_id: int, updates: Payload) -> RecordT:
        record = self._parse(self.client.patch(f"{self.path}/{record_id}", self.as_payload(updates)))
        logger.info("Updated %s %s", self.resource_name, record_id)
        return record

    def delete(self, record_id: int) -> None:
        self.client.delete(f"{self.path}/{record_id}")
        logger.info("Deleted %s %s", self.resource_name, record_id)

    def create_many(self, items: Iterable[Payload]) -> List[RecordT]:
        """
        Create records one after another

        The first failure stops the run. Records created before it are kept
        on the backend and reported through ``BulkCreateError.created``.
        """
        created: List[RecordT] = []
        for index, item in enumerate(items):
            try:
                created.append(self.create(item))
            except NegobiException as e:
                logger.error(
                    "Bulk creation of %s stopped at item %s after %s created: %s",
                    self.resource_name, index, len(created), e
                )
                raise BulkCreateError(
                    f"Could not create {self.resource_name} #{index + 1}: {e}",
                    created=created,
                    failed_index=index,
                ) from e
        return created
