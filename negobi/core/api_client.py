"""
Backend API Client
Single HTTP boundary to the Negobi REST backend.

Every answer is decoded against the ``{"success": ..., "data": ...}``
envelope here, so services only ever see validated payloads. List endpoints
may answer with a bare array or with ``{"data": [...], "totalPages", "total"}``;
both shapes are normalised into a :class:`Page`.
"""
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from .config import settings
from .dates import utc_now
from .logging import get_logger
from .exceptions import (
    ApiError,
    AuthenticationError,
    IntegrationError,
    MalformedResponseError,
    NotFoundError,
)
from negobi.schemas.common import ApiEnvelope, Page, PaginatedData

logger = get_logger("http")


def build_query_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Drop empty values and send booleans the way the backend parses them"""
    query: Dict[str, Any] = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        elif hasattr(value, "value"):  # Enum members
            query[key] = value.value
        else:
            query[key] = value
    return query


class ApiClient:
    """
    Thin wrapper around a ``requests.Session``

    Any session object exposing ``headers`` and ``request(method, url, ...)``
    can be injected (the tests pass a FastAPI ``TestClient``).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        api_key: Optional[str] = None,
        language: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[Any] = None,
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.session = session if session is not None else requests.Session()
        self._owns_session = session is None
        self.session.headers.update(
            self._default_headers(
                token if token is not None else settings.API_TOKEN,
                api_key if api_key is not None else self._active_api_key(),
                language or settings.LANGUAGE,
            )
        )

    @staticmethod
    def _active_api_key() -> Optional[str]:
        """Configured API key, unless it has expired"""
        if not settings.API_KEY:
            return None
        expiration = settings.API_KEY_EXPIRATION
        if expiration is not None:
            if expiration.tzinfo is None:
                expired = expiration <= utc_now().replace(tzinfo=None)
            else:
                expired = expiration <= utc_now()
            if expired:
                logger.warning("Configured API key expired at %s; not sending it", expiration)
                return None
        return settings.API_KEY

    @staticmethod
    def _default_headers(token: Optional[str], api_key: Optional[str], language: str) -> Dict[str, str]:
        headers = {"language": language, "Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if api_key:
            headers["x-api-key"] = api_key
        return headers

    def close(self):
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        require_data: bool = True,
    ) -> Any:
        """
        Issue a request and return the envelope's ``data``

        Raises:
            IntegrationError: transport failure
            AuthenticationError / NotFoundError / ApiError: error answers
            MalformedResponseError: body is not an envelope
        """
        url = f"{self.base_url}{path}"
        query = build_query_params(params)
        logger.debug("%s %s params=%s", method, url, query)

        try:
            response = self.session.request(
                method, url, params=query or None, json=json, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise IntegrationError(f"Could not reach backend: {e}") from e

        if response.status_code >= 400:
            self._raise_for_status(method, url, response)

        if response.status_code == 204 or not response.content:
            if require_data:
                raise MalformedResponseError(f"{method} {path} returned an empty body")
            return None

        try:
            body = response.json()
        except ValueError as e:
            logger.error("%s %s returned non-JSON body", method, url)
            raise MalformedResponseError(f"{method} {path} returned a non-JSON body") from e

        envelope = self.decode_envelope(body, f"{method} {path}")
        if require_data and envelope.data is None:
            logger.error("%s %s returned an envelope without data", method, url)
            raise MalformedResponseError(f"{method} {path} returned no data")
        return envelope.data

    @staticmethod
    def decode_envelope(body: Any, context: str = "response") -> ApiEnvelope:
        try:
            envelope = ApiEnvelope.model_validate(body)
        except PydanticValidationError as e:
            logger.error("Malformed envelope from %s: %r", context, body)
            raise MalformedResponseError(f"Malformed envelope from {context}") from e
        if not envelope.success:
            message = _error_message(body) or f"{context} was rejected by the backend"
            raise ApiError(message)
        return envelope

    @staticmethod
    def _raise_for_status(method: str, url: str, response: Any):
        try:
            body = response.json()
        except ValueError:
            body = None
        message = _error_message(body) or f"{method} {url} failed with HTTP {response.status_code}"
        status_code = response.status_code

        if status_code == 401:
            logger.warning("Backend rejected credentials for %s %s", method, url)
            raise AuthenticationError(message, status_code)
        if status_code == 404:
            raise NotFoundError(message, status_code)
        logger.error("%s %s -> HTTP %s: %s", method, url, status_code, message)
        raise ApiError(message, status_code)

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Optional[Any] = None) -> Any:
        return self.request("POST", path, json=body)

    def patch(self, path: str, body: Optional[Any] = None) -> Any:
        return self.request("PATCH", path, json=body)

    def delete(self, path: str) -> None:
        self.request("DELETE", path, require_data=False)

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def list_page(self, path: str, params: Optional[Dict[str, Any]] = None) -> Page:
        """Fetch one page of a list endpoint"""
        params = dict(params or {})
        page = int(params.setdefault("page", 1))
        page_size = int(params.setdefault("itemsPerPage", settings.DEFAULT_PAGE_SIZE))
        data = self.get(path, params)
        return self.decode_page(data, page, page_size, f"GET {path}")

    @staticmethod
    def decode_page(data: Any, page: int, page_size: int, context: str = "list") -> Page:
        if isinstance(data, list):
            return Page(
                items=data,
                page=page,
                page_size=page_size,
                total=len(data),
                total_pages=1,
                paginated=False,
            )
        try:
            payload = PaginatedData.model_validate(data)
        except PydanticValidationError as e:
            logger.error("Malformed list payload from %s: %r", context, data)
            raise MalformedResponseError(f"Malformed list payload from {context}") from e
        return Page(
            items=payload.data,
            page=page,
            page_size=page_size,
            total=payload.total if payload.total is not None else len(payload.data),
            total_pages=payload.total_pages,
            paginated=True,
        )

    def fetch_all(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        page_size: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Follow a paginated list from page 1 to ``totalPages``

        A bare-array answer carries no pagination metadata and is treated as
        the complete result.
        """
        params = dict(params or {})
        page_size = page_size or settings.FETCH_ALL_PAGE_SIZE
        items: List[Dict[str, Any]] = []
        page_number = 1

        while True:
            params.update(page=page_number, itemsPerPage=page_size)
            page = self.list_page(path, params)
            items.extend(page.items)
            if not page.has_next or not page.items:
                break
            if page_number >= settings.FETCH_ALL_MAX_PAGES:
                logger.warning(
                    "Stopped following %s after %s pages (%s of %s items)",
                    path, page_number, len(items), page.total
                )
                break
            page_number += 1

        return items


def _error_message(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    for key in ("message", "detail", "error"):
        value = body.get(key)
        if isinstance(value, list):
            value = "; ".join(str(v) for v in value)
        if value:
            return str(value)
    return None
