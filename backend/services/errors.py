"""
Battery Charging Log - Error Taxonomy
Version: 1.0.0

Raised by services, converted to HTTP responses at the route boundary.
"""

from typing import Dict, Optional


class ChargingLogError(Exception):
    """Base class for charging log service errors"""


class RecordValidationError(ChargingLogError, ValueError):
    """Record failed field validation. Never reaches persistence."""

    def __init__(self, errors: Dict, message: str = "Please fix the highlighted fields"):
        super().__init__(message)
        self.errors = errors
        self.message = message


class QueryValidationError(ChargingLogError, ValueError):
    """Admin query parameters are incomplete or inconsistent"""


class AuthorizationError(ChargingLogError):
    """Missing, invalid or expired session credentials"""

    def __init__(self, message: str = "Session expired. Please sign in again."):
        super().__init__(message)
        self.message = message


class ForbiddenError(AuthorizationError):
    """Authenticated, but the role may not run the operation"""

    def __init__(self, message: str = "Administrator access required"):
        super().__init__(message)


class TransportError(ChargingLogError):
    """Persistence collaborator failed; the operation is abandoned"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class EmptyResultError(ChargingLogError):
    """Valid query with zero rows where an artifact was required"""


class OperationInProgressError(ChargingLogError):
    """Same action already running for this session"""


class ResultLimitError(ChargingLogError):
    """More rows match than an on-screen search may return"""

    def __init__(self, limit: int):
        super().__init__(f"More than {limit} rows match. Narrow the search or download the CSV.")
        self.limit = limit
