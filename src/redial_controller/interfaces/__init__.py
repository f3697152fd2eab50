"""Interfaces module - Abstract base classes and dataclasses."""

from redial_controller.interfaces.device_transport import (
    ApplicationError,
    DeviceTransport,
    JsonResponse,
    NetworkError,
    TransportError,
    TransportResult,
)

__all__ = [
    "ApplicationError",
    "DeviceTransport",
    "JsonResponse",
    "NetworkError",
    "TransportError",
    "TransportResult",
]
