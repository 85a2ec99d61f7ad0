"""Reconcile systemd service enablement and activation with an in-memory configuration."""

from .schema import ServiceRecord, StartMode
from .service import SystemdService

__all__ = ["ServiceRecord", "StartMode", "SystemdService"]
