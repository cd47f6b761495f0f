import logging

from fastapi import FastAPI

from deviceregistry import __version__
from deviceregistry.api import auth, devices, health
from deviceregistry.config import settings
from deviceregistry.logging_config import RequestLoggingMiddleware, configure_logging
from deviceregistry.services.auth.session_directory import SessionDirectory

configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(title="Device Registry", version=__version__)

# One directory per process; tests swap in their own instance
app.state.session_directory = SessionDirectory(
    sweep_threshold=settings.session_sweep_threshold
)

app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(devices.router)

logger.info("Device Registry %s (%s)", __version__, settings.environment)
