"""
Resource State
Request-scoped query objects that turn failures into user-visible messages
"""
import logging
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from negobi.core.config import settings
from negobi.core.exceptions import NegobiException, ValidationError
from negobi.services.base import ResourceService

logger = logging.getLogger(__name__)

T = TypeVar("T")

LIST_OPTIONS = ("page", "items_per_page", "search", "order")


class ResourceState(Generic[T]):
    """
    List state of one resource plus its mutations

    Holds ``items``, ``loading``, ``error``, ``total`` and ``total_pages``.
    Service errors never escape: they are logged, kept in ``error`` and the
    operation returns its fallback value.
    """

    service_class = ResourceService

    def __init__(
        self,
        client=None,
        default_filters: Optional[Dict[str, Any]] = None,
        service: Optional[ResourceService] = None,
    ):
        if service is None and client is None:
            raise ValueError("Either a client or a service is required")
        self.service = service or self.service_class(client)
        self.default_filters: Dict[str, Any] = dict(default_filters or {})
        self.items: List[T] = []
        self.loading = False
        self.error: Optional[str] = None
        self.validation_errors: List[str] = []
        self.total = 0
        self.total_pages = 0
        self._last_filters: Dict[str, Any] = {}

    def _run(self, action: Callable[[], Any], fallback: Any = None) -> Any:
        self.loading = True
        self.error = None
        self.validation_errors = []
        try:
            return action()
        except ValidationError as e:
            self.validation_errors = list(e.errors)
            self.error = ", ".join(e.errors)
            return fallback
        except NegobiException as e:
            logger.warning("%s failed: %s", type(self).__name__, e)
            self.error = str(e)
            return fallback
        finally:
            self.loading = False

    def _fail_validation(self, errors: List[str]):
        """Short-circuit before any network call"""
        self.validation_errors = list(errors)
        self.error = ", ".join(errors)

    # Lists

    def load(self, **filters: Any) -> List[T]:
        """
        Load page 1 with the default filters overridden by ``filters``

        A failed load leaves ``items`` empty.
        """
        merged = {**self.default_filters, **filters}
        self._last_filters = dict(filters)
        options = {key: merged.pop(key) for key in LIST_OPTIONS if key in merged}
        options.setdefault("page", 1)
        options.setdefault("items_per_page", settings.DEFAULT_PAGE_SIZE)

        def fetch():
            page = self.service.get_page(**options, **merged)
            self.items = list(page.items)
            self.total = page.total
            self.total_pages = page.total_pages
            return self.items

        result = self._run(fetch)
        if result is None:
            self.items = []
            self.total = 0
            self.total_pages = 0
            return []
        return result

    def refetch(self) -> List[T]:
        return self.load(**self._last_filters)

    # Mutations

    def get_by_id(self, record_id: int) -> Optional[T]:
        return self._run(lambda: self.service.get_by_id(record_id))

    def create(self, data) -> Optional[T]:
        def action():
            record = self.service.create(data)
            self.items.append(record)
            return record

        return self._run(action)

    def update(self, record_id: int, updates) -> Optional[T]:
        def action():
            record = self.service.update(record_id, updates)
            self._replace(record)
            return record

        return self._run(action)

    def delete(self, record_id: int) -> bool:
        def action():
            self.service.delete(record_id)
            self.items = [item for item in self.items if item.id != record_id]
            return True

        return self._run(action, fallback=False)

    def _replace(self, record) -> None:
        self.items = [record if item.id == record.id else item for item in self.items]
