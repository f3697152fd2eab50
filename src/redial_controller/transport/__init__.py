"""Transport module - Device transport implementations."""

from redial_controller.interfaces.device_transport import DeviceTransport
from redial_controller.transport.http_transport import HttpTransport

__all__ = [
    "DeviceTransport",
    "HttpTransport",
]
