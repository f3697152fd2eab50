"""Device transport interface - Abstract base class and result types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class JsonResponse:
    """A successful response from the device.

    Attributes:
        status_code: HTTP status code (2xx)
        data: Decoded JSON object from the response body
    """

    status_code: int
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def message(self) -> Optional[str]:
        """Return the device-provided message, if any."""
        message = self.data.get("message")
        return message if isinstance(message, str) and message else None


@dataclass(frozen=True)
class TransportError:
    """Base class for failed requests.

    Failures are returned as values, never raised.

    Attributes:
        message: Human-readable failure description
    """

    message: str


@dataclass(frozen=True)
class NetworkError(TransportError):
    """The request could not reach the device at all."""


@dataclass(frozen=True)
class ApplicationError(TransportError):
    """The device answered but reported a failure.

    Attributes:
        status_code: HTTP status code of the response
    """

    status_code: int = 0


TransportResult = Union[JsonResponse, TransportError]


class DeviceTransport(ABC):
    """Abstract base class for device transport implementations.

    A transport issues one JSON request to a target address per call
    and reports the outcome as a typed result.
    """

    @abstractmethod
    async def send(
        self,
        target_address: str,
        path: str,
        method: str = "GET",
        body: Optional[dict[str, Any]] = None,
    ) -> TransportResult:
        """Send a request to the device.

        Args:
            target_address: Host (and optional port) of the device
            path: Request path relative to the device root, may carry a query
            method: HTTP method
            body: Optional JSON body

        Returns:
            JsonResponse on success, or a TransportError describing the failure
        """
