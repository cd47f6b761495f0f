"""Liveness and readiness probes."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from deviceregistry.database import get_db, ping

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/healthz")
async def healthz():
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(db: Session = Depends(get_db)):
    """Ready only when the database answers."""
    if not ping(db):
        return JSONResponse(status_code=503, content={"status": "[DB] not ready"})
    return {"status": "ok"}
