"""
Database models for the device registry.

Import all models here so Alembic can detect them for migrations.
"""

from deviceregistry.database import Base
from deviceregistry.models.user import User
from deviceregistry.models.device import Device, DeviceState

__all__ = [
    "Base",
    "User",
    "Device",
    "DeviceState",
]
