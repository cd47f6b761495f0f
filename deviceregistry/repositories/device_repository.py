"""Device persistence: the repository contract and its SQLAlchemy implementation."""
from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session as DBSession

from deviceregistry.models.device import Device, DeviceState
from deviceregistry.services.exceptions import RecordNotFoundError


class DeviceRepository(ABC):
    """
    Storage operations the device service relies on.

    Implementations raise RecordNotFoundError when the targeted device does
    not exist. Any other storage error propagates unchanged.
    """

    @abstractmethod
    def get(self, device_id: UUID) -> Device:
        """Return the device with ``device_id``."""
        pass

    @abstractmethod
    def list(
        self,
        brand: Optional[str] = None,
        state: Optional[DeviceState] = None,
    ) -> List[Device]:
        """Return devices, newest first, optionally filtered by brand and state."""
        pass

    @abstractmethod
    def create(self, name: str, brand: str, state: DeviceState) -> Device:
        """Insert a device and return it with its id and timestamps."""
        pass

    @abstractmethod
    def update(self, device_id: UUID, name: str, brand: str, state: DeviceState) -> Device:
        """Overwrite name, brand and state of an existing device."""
        pass

    @abstractmethod
    def delete(self, device_id: UUID) -> None:
        """Remove a device."""
        pass


class SqlDeviceRepository(DeviceRepository):
    """DeviceRepository backed by a SQLAlchemy session."""

    def __init__(self, db: DBSession):
        self.db = db

    def get(self, device_id: UUID) -> Device:
        device = self.db.query(Device).filter(Device.id == device_id).first()
        if device is None:
            raise RecordNotFoundError("Device", device_id)
        return device

    def list(
        self,
        brand: Optional[str] = None,
        state: Optional[DeviceState] = None,
    ) -> List[Device]:
        query = self.db.query(Device)
        if brand is not None:
            query = query.filter(Device.brand == brand)
        if state is not None:
            query = query.filter(Device.state == state)
        return query.order_by(Device.created_at.desc(), Device.id).all()

    def create(self, name: str, brand: str, state: DeviceState) -> Device:
        device = Device(name=name, brand=brand, state=state)
        self.db.add(device)
        self.db.commit()
        self.db.refresh(device)
        return device

    def update(self, device_id: UUID, name: str, brand: str, state: DeviceState) -> Device:
        # Re-read inside this call; the row may have been deleted since the caller checked it
        device = self.db.query(Device).filter(Device.id == device_id).first()
        if device is None:
            raise RecordNotFoundError("Device", device_id)

        device.name = name
        device.brand = brand
        device.state = state
        self.db.commit()
        self.db.refresh(device)
        return device

    def delete(self, device_id: UUID) -> None:
        deleted = self.db.query(Device).filter(Device.id == device_id).delete()
        self.db.commit()
        if deleted == 0:
            raise RecordNotFoundError("Device", device_id)
