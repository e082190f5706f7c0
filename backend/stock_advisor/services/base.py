"""
Service Contracts

Every analytics-layer service implements BaseService, and every failure
it raises is a ServiceError carrying the originating service name.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Typed request/response service.

    `execute` maps one validated request model to one result; `health_check`
    reports whether upstream dependencies (provider credentials, caches)
    are usable.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Name used in log lines and error payloads."""

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """Run the service's primary operation."""

    @abstractmethod
    async def health_check(self) -> bool:
        ...


# =============================================================================
# ERRORS
# =============================================================================


class ServiceError(Exception):
    """
    Base exception for service errors.

    `details` holds structured context (counts, HTTP status, offending
    values) that endpoints can return as-is.
    """

    def __init__(self, service_name: str, message: str, details: Optional[dict[str, Any]] = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "service": self.service_name,
            "error": self.message,
            **self.details,
        }


class ValidationError(ServiceError):
    """Malformed input, e.g. a candle series out of chronological order."""


class InsufficientDataError(ServiceError):
    """Series too short for the requested calculation."""


class ExternalAPIError(ServiceError):
    """Market data provider call failed or returned no usable data."""


class RateLimitError(ExternalAPIError):
    """Provider answered HTTP 429."""
