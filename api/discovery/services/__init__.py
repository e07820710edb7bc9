"""Service-layer modules for the discovery pipeline."""
from . import discovery_service

__all__ = ["discovery_service"]
