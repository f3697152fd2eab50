"""HTTP transport implementation using httpx."""

import logging
from typing import Any, Optional

import httpx

from redial_controller.interfaces.device_transport import (
    ApplicationError,
    DeviceTransport,
    JsonResponse,
    NetworkError,
    TransportResult,
)

logger = logging.getLogger(__name__)


class HttpTransport(DeviceTransport):
    """Transport that talks to the device's JSON/HTTP control API.

    Each call opens a short-lived client, so the transport holds no
    connection state and can be pointed at a new address on every request.
    """

    DEFAULT_TIMEOUT = 5.0
    JSON_HEADERS = {"Content-Type": "application/json"}

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize the HTTP transport.

        Args:
            timeout: Request timeout in seconds (default: 5.0)
        """
        self._timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT

    @property
    def timeout(self) -> float:
        """Get the configured timeout."""
        return self._timeout

    def _create_client(self) -> httpx.AsyncClient:
        """Create an HTTP client with configured timeout."""
        return httpx.AsyncClient(timeout=self._timeout)

    @staticmethod
    def build_url(target_address: str, path: str) -> str:
        """Build the request URL for a target address and path."""
        return f"http://{target_address}/{path.lstrip('/')}"

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
            JsonResponse on success, or NetworkError/ApplicationError
        """
        url = self.build_url(target_address, path)
        logger.debug(f"{method} {url} body={body}")

        try:
            async with self._create_client() as client:
                response = await client.request(
                    method, url, json=body, headers=self.JSON_HEADERS
                )
        except httpx.TimeoutException:
            return NetworkError(message=f"Request to {target_address} timed out")
        except httpx.ConnectError as e:
            return NetworkError(message=f"Cannot connect to {target_address}: {e}")
        except httpx.HTTPError as e:
            return NetworkError(message=str(e) or type(e).__name__)
        except httpx.InvalidURL as e:
            return NetworkError(message=f"Invalid device address: {e}")

        return self._parse_response(response)

    def _parse_response(self, response: httpx.Response) -> TransportResult:
        """Turn an HTTP response into a typed result."""
        status_line = f"{response.status_code} {response.reason_phrase}".strip()

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            error = data.get("error") if isinstance(data, dict) else None
            logger.warning(f"Device returned {status_line}: {error}")
            return ApplicationError(
                message=str(error) if error else status_line,
                status_code=response.status_code,
            )

        if not isinstance(data, dict):
            return ApplicationError(
                message="Invalid JSON response", status_code=response.status_code
            )

        # The firmware reports rejected commands with a 2xx and an error body
        if data.get("error") and not data.get("message"):
            return ApplicationError(
                message=str(data["error"]), status_code=response.status_code
            )

        return JsonResponse(status_code=response.status_code, data=data)
