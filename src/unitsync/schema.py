"""
Service state schema.

Typed contract between the listing parser, the loader and the service
session. Records are fixed-shape models with explicit defaults.
"""

from enum import Enum
from typing import Dict

from pydantic import BaseModel, Field


# --- Raw listings (parser output) ---


class UnitFileState(str, Enum):
    """Persistence states reported by list-unit-files that a service may be toggled between."""

    ENABLED = "enabled"
    DISABLED = "disabled"


SUPPORTED_STATES = (UnitFileState.ENABLED.value, UnitFileState.DISABLED.value)

LOADED = "loaded"
ACTIVE = "active"


class UnitState(BaseModel):
    """Single line from list-units."""

    load_state: str
    active: bool = False
    description: str = ""


class UnitListing(BaseModel):
    """Both listings, keyed by service name without the .service suffix."""

    unit_files: Dict[str, str] = Field(default_factory=dict)  # name -> enabled, disabled, static, masked, ...
    units: Dict[str, UnitState] = Field(default_factory=dict)


# --- Canonical table ---


class ServiceRecord(BaseModel):
    """One service in the session table."""

    enabled: bool = False  # starts at boot
    active: bool = False  # generalization of the SUB state
    loaded: bool = False  # unit definition was loaded by systemd
    description: str = ""
    modified: bool = False  # pending changes not yet written

    model_config = {"extra": "forbid"}


class StartMode(str, Enum):
    ON_BOOT = "on_boot"
    MANUAL = "manual"
