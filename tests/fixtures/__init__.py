"""Test fixtures for the device registry."""

from tests.fixtures.mocks import InMemoryDeviceRepository

__all__ = [
    "InMemoryDeviceRepository",
]
