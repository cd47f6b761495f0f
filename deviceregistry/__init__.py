"""Device Registry: track physical devices behind an authenticated HTTP API."""

__version__ = "0.1.0"
