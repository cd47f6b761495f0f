"""Business rules for device creation, updates and deletion."""
import logging
from typing import List, Optional
from uuid import UUID

from deviceregistry.models.device import Device, DeviceState
from deviceregistry.repositories.device_repository import DeviceRepository
from deviceregistry.services.exceptions import (
    DeviceInUseError,
    DeviceNotFoundError,
    EmptyFieldError,
    ImmutableFieldViolationError,
    RecordNotFoundError,
)

logger = logging.getLogger(__name__)


class DeviceService:
    """
    Checks a device's persisted state before allowing it to be changed.

    While a device is IN_USE its name and brand are frozen and it cannot be
    deleted. State itself can always move to any value. All checks run
    before the repository is asked to write anything.

    The read and the write are not atomic: a concurrent writer can change
    the device between the check and the delegated call.
    """

    def __init__(self, repository: DeviceRepository):
        self.repository = repository

    def _load(self, device_id: UUID) -> Device:
        try:
            return self.repository.get(device_id)
        except RecordNotFoundError:
            raise DeviceNotFoundError(device_id) from None

    def get_device(self, device_id: UUID) -> Device:
        """Get a device by ID."""
        return self._load(device_id)

    def list_devices(
        self,
        brand: Optional[str] = None,
        state: Optional[DeviceState] = None,
    ) -> List[Device]:
        """List devices, newest first, optionally filtered by brand and/or state."""
        return self.repository.list(brand=brand, state=state)

    def validate_and_create(self, name: str, brand: str, state: DeviceState) -> Device:
        """
        Create a device after checking required fields.

        Raises:
            EmptyFieldError: name or brand is empty (name is checked first)
        """
        if name == "":
            raise EmptyFieldError("name")
        if brand == "":
            raise EmptyFieldError("brand")

        return self.repository.create(name=name, brand=brand, state=DeviceState.parse(state))

    def validate_and_update(
        self,
        device_id: UUID,
        name: str,
        brand: str,
        state: DeviceState,
    ) -> Device:
        """
        Replace a device's name, brand and state.

        Raises:
            DeviceNotFoundError: no device with this id
            ImmutableFieldViolationError: name or brand changed while IN_USE
            RecordNotFoundError: the device vanished before the write
        """
        current = self._load(device_id)

        if current.state == DeviceState.IN_USE:
            if name != current.name:
                logger.warning("Rejected name change on in-use device %s", device_id)
                raise ImmutableFieldViolationError("name")
            if brand != current.brand:
                logger.warning("Rejected brand change on in-use device %s", device_id)
                raise ImmutableFieldViolationError("brand")

        return self.repository.update(
            device_id, name=name, brand=brand, state=DeviceState.parse(state)
        )

    def validate_and_delete(self, device_id: UUID) -> None:
        """
        Delete a device unless it is in use.

        Raises:
            DeviceNotFoundError: no device with this id
            DeviceInUseError: the device is IN_USE
            RecordNotFoundError: the device vanished before the delete
        """
        current = self._load(device_id)

        if current.state == DeviceState.IN_USE:
            logger.warning("Rejected delete of in-use device %s", device_id)
            raise DeviceInUseError(device_id)

        self.repository.delete(device_id)
