from sqlalchemy import CheckConstraint, Column, String, DateTime, Integer, Index, Uuid
from sqlalchemy.sql import func
from sqlalchemy.types import TypeDecorator
import enum
import uuid

from deviceregistry.database import Base


class DeviceState(enum.IntEnum):
    """Operational state of a device.

    Stored as its ordinal; exchanged over the API as its label. Both forms
    are accepted on input so older clients sending integers keep working.
    """

    INACTIVE = 0
    AVAILABLE = 1
    IN_USE = 2

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, value) -> "DeviceState":
        """Parse a label ("in-use"), an ordinal (2 or "2") or a DeviceState."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"invalid device state: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ValueError(f"invalid device state: {value!r}") from None
        if isinstance(value, str):
            text = value.strip().lower()
            for state, label in _LABELS.items():
                if text == label:
                    return state
            if text.lstrip("-").isdigit():
                return cls.parse(int(text))
        raise ValueError(f"invalid device state: {value!r}")


_LABELS = {
    DeviceState.INACTIVE: "inactive",
    DeviceState.AVAILABLE: "available",
    DeviceState.IN_USE: "in-use",
}


class DeviceStateType(TypeDecorator):
    """Persist DeviceState as a plain integer column."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int(DeviceState.parse(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return DeviceState(value)


class Device(Base):
    """A registered physical device."""

    __tablename__ = "devices"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    brand = Column(String(255), nullable=False)
    state = Column(DeviceStateType(), nullable=False, default=DeviceState.INACTIVE)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_devices_brand", "brand"),
        Index("idx_devices_state", "state"),
        CheckConstraint("state IN (0, 1, 2)", name="ck_devices_state"),
    )

    def __repr__(self) -> str:
        return f"<Device {self.id} {self.name!r} {self.brand!r} {getattr(self.state, 'label', self.state)}>"
