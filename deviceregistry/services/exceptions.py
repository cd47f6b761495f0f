"""Errors raised by the device registry services."""


class DeviceRegistryError(Exception):
    """Base class for all device registry errors."""

    error_code = "device_registry_error"


# =============================================================================
# Storage
# =============================================================================


class RecordNotFoundError(DeviceRegistryError):
    """A repository could not find the requested row."""

    error_code = "record_not_found"

    def __init__(self, resource: str, resource_id):
        super().__init__(f"{resource} {resource_id} not found")
        self.resource = resource
        self.resource_id = resource_id


# =============================================================================
# Devices
# =============================================================================


class DeviceNotFoundError(DeviceRegistryError):
    """The device to validate against does not exist."""

    error_code = "device_not_found"

    def __init__(self, device_id):
        super().__init__(f"Device {device_id} not found")
        self.device_id = device_id


class DeviceInUseError(DeviceRegistryError):
    """The device is in use and cannot be deleted."""

    error_code = "device_in_use"

    def __init__(self, device_id):
        super().__init__(f"Cannot delete device {device_id}: device is currently in use")
        self.device_id = device_id


class ImmutableFieldViolationError(DeviceRegistryError):
    """An update tried to change a field that is frozen while the device is in use."""

    error_code = "immutable_field"

    def __init__(self, field: str):
        super().__init__(f"Cannot update {field}: device is currently in use")
        self.field = field


class EmptyFieldError(DeviceRegistryError):
    """A required device field was empty."""

    error_code = "empty_field"

    def __init__(self, field: str):
        super().__init__(f"Device {field} cannot be empty")
        self.field = field


# =============================================================================
# Auth
# =============================================================================


class SessionNotFoundOrExpiredError(DeviceRegistryError):
    """The session token is unknown or expired. The two cases are not told apart."""

    error_code = "invalid_session"

    def __init__(self):
        super().__init__("Invalid or expired session")


class UserAlreadyExistsError(DeviceRegistryError):
    """A user with this email is already registered."""

    error_code = "user_exists"

    def __init__(self, email: str):
        super().__init__(f"User with email {email} already exists")
        self.email = email
