"""Redial Controller - remote control session for a Wi-Fi Bluetooth redial device."""

__version__ = "0.1.0"
