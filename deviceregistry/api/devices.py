"""API endpoints for device registration and management."""
from datetime import datetime
from typing import Annotated, List, Optional
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from sqlalchemy.orm import Session

from deviceregistry.database import get_db
from deviceregistry.models.device import DeviceState
from deviceregistry.repositories.device_repository import SqlDeviceRepository
from deviceregistry.services.auth.dependencies import get_current_user
from deviceregistry.services.device_service import DeviceService
from deviceregistry.services.exceptions import (
    DeviceInUseError,
    DeviceNotFoundError,
    DeviceRegistryError,
    EmptyFieldError,
    ImmutableFieldViolationError,
    RecordNotFoundError,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/devices",
    tags=["devices"],
    dependencies=[Depends(get_current_user)],
)


# =============================================================================
# Request/Response Models
# =============================================================================

# Accepts "in-use" or 2 on input, always emits the label
StateField = Annotated[
    DeviceState,
    BeforeValidator(DeviceState.parse),
    PlainSerializer(lambda state: state.label, return_type=str),
]


class DeviceCreate(BaseModel):
    name: str = ""
    brand: str = ""
    state: StateField = DeviceState.INACTIVE


class DeviceUpdate(BaseModel):
    id: UUID
    name: str
    brand: str
    state: StateField


class DeviceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    brand: str
    state: StateField
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def get_device_service(db: Session = Depends(get_db)) -> DeviceService:
    return DeviceService(SqlDeviceRepository(db))


def _error_detail(error: DeviceRegistryError) -> dict:
    detail = {"error": error.error_code, "message": str(error)}
    field = getattr(error, "field", None)
    if field:
        detail["field"] = field
    return detail


# =============================================================================
# Endpoints
# =============================================================================


@router.post("", response_model=DeviceRead, status_code=status.HTTP_201_CREATED)
async def create_device(
    payload: DeviceCreate,
    service: DeviceService = Depends(get_device_service),
):
    """Register a new device."""
    try:
        device = service.validate_and_create(payload.name, payload.brand, payload.state)
    except EmptyFieldError as e:
        raise HTTPException(status_code=400, detail=_error_detail(e))

    logger.info("Device created: %s", device.id)
    return device


@router.put("", response_model=DeviceRead)
async def update_device(
    payload: DeviceUpdate,
    service: DeviceService = Depends(get_device_service),
):
    """
    Replace a device's name, brand and state.

    Name and brand cannot change while the device is in use; state always can.
    """
    try:
        return service.validate_and_update(
            payload.id, payload.name, payload.brand, payload.state
        )
    except (DeviceNotFoundError, RecordNotFoundError) as e:
        raise HTTPException(status_code=404, detail=_error_detail(e))
    except ImmutableFieldViolationError as e:
        raise HTTPException(status_code=409, detail=_error_detail(e))


@router.get("", response_model=List[DeviceRead])
async def list_devices(
    brand: Optional[str] = Query(None),
    state: Optional[str] = Query(None, description="inactive, available, in-use or 0-2"),
    service: DeviceService = Depends(get_device_service),
):
    """List devices, newest first, with optional brand and state filters."""
    state_filter = None
    if state:
        try:
            state_filter = DeviceState.parse(state)
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail={
                    "error": "invalid_state",
                    "message": "Invalid state parameter. Use: inactive, available, or in-use",
                },
            )

    return service.list_devices(brand=brand or None, state=state_filter)


@router.get("/{device_id}", response_model=DeviceRead)
async def get_device(
    device_id: UUID,
    service: DeviceService = Depends(get_device_service),
):
    try:
        return service.get_device(device_id)
    except DeviceNotFoundError as e:
        raise HTTPException(status_code=404, detail=_error_detail(e))


@router.delete("/{device_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_device(
    device_id: UUID,
    service: DeviceService = Depends(get_device_service),
):
    """Delete a device. Devices in use cannot be deleted."""
    try:
        service.validate_and_delete(device_id)
    except (DeviceNotFoundError, RecordNotFoundError) as e:
        raise HTTPException(status_code=404, detail=_error_detail(e))
    except DeviceInUseError as e:
        raise HTTPException(status_code=409, detail=_error_detail(e))

    logger.info("Device deleted: %s", device_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
