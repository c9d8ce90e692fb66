"""
Custom Application Exceptions
"""
from typing import Any, List, Optional


class NegobiException(Exception):
    """Base exception for the negobi package"""
    pass


class ValidationError(NegobiException):
    """Raised when local data validation fails"""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors) if errors else [message]


class BusinessLogicError(NegobiException):
    """Raised when business rules are violated"""
    pass


class IntegrationError(NegobiException):
    """Raised when the remote backend cannot be reached or answers badly"""
    pass


class ApiError(IntegrationError):
    """Raised when the backend answers with an error status or success=false"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(ApiError):
    """Raised when the backend rejects the session (HTTP 401)"""
    pass


class NotFoundError(ApiError):
    """Raised when the requested record does not exist (HTTP 404)"""
    pass


class MalformedResponseError(IntegrationError):
    """Raised when a response body does not match the expected envelope"""
    pass


class StockTransferError(BusinessLogicError):
    """Raised when a stock transfer could not be completed"""

    def __init__(self, message: str, compensated: bool = False):
        super().__init__(message)
        self.compensated = compensated


class BulkCreateError(IntegrationError):
    """Raised when a sequential bulk creation stops part way"""

    def __init__(self, message: str, created: Optional[List[Any]] = None, failed_index: int = 0):
        super().__init__(message)
        self.created = list(created) if created else []
        self.failed_index = failed_index
