"""
Unit listing parser: systemctl list-unit-files and list-units output.

Both parsers are permissive. Any line that does not look like a service
entry (legend, summary, hints printed by newer systemd versions) is skipped.
"""

import os
import sys
from typing import Dict, List

from .executor import Executor
from .schema import ACTIVE, UnitListing, UnitState

_DEBUG = bool(os.environ.get("UNITSYNC_DEBUG", ""))

SERVICE_SUFFIX = ".service"

# Markers systemd prints in the first column for failed / not-found units.
_STATUS_MARKERS = ("●", "*", "×")

COMMAND_OPTIONS = ["--no-legend", "--no-pager", "--no-ask-password"]
TERM_ENV = {"LANG": "C", "TERM": "dumb", "COLUMNS": "1024"}

LIST_UNIT_FILES_COMMAND = ["systemctl", "list-unit-files", "--type", "service"] + COMMAND_OPTIONS
LIST_UNITS_COMMAND = ["systemctl", "list-units", "--all", "--type", "service"] + COMMAND_OPTIONS


def _debug(msg: str) -> None:
    if _DEBUG:
        print(f"[unitsync] listing: {msg}", file=sys.stderr)


def _split(line: str) -> List[str]:
    parts = line.split()
    if parts and parts[0] in _STATUS_MARKERS:
        parts = parts[1:]
    return parts


def _service_name(unit: str) -> str:
    """Strip .service from a unit name. Returns "" for anything that is not a service unit."""
    if not unit.endswith(SERVICE_SUFFIX):
        return ""
    return unit[: -len(SERVICE_SUFFIX)]


def parse_list_unit_files(stdout: str) -> Dict[str, str]:
    """Parse output of systemctl list-unit-files. Returns service -> state."""
    unit_files = {}
    for line in stdout.splitlines():
        parts = _split(line)
        if len(parts) < 2:
            continue
        name = _service_name(parts[0])
        if not name:
            continue
        unit_files[name] = parts[1]
    return unit_files


def parse_list_units(stdout: str) -> Dict[str, UnitState]:
    """Parse output of systemctl list-units. Columns: UNIT LOAD ACTIVE SUB DESCRIPTION..."""
    units = {}
    for line in stdout.splitlines():
        parts = _split(line)
        if len(parts) < 4:
            continue
        name = _service_name(parts[0])
        if not name:
            continue
        units[name] = UnitState(
            load_state=parts[1],
            active=parts[2] == ACTIVE,
            description=" ".join(parts[4:]),
        )
    return units


def list_unit_files(executor: Executor) -> Dict[str, str]:
    try:
        result = executor(LIST_UNIT_FILES_COMMAND, env=TERM_ENV)
    except Exception as e:
        _debug(f"list-unit-files raised: {e}")
        return {}
    if result.returncode != 0:
        _debug(f"list-unit-files failed ({result.returncode}): {result.stderr.strip()}")
        return {}
    return parse_list_unit_files(result.stdout)


def list_units(executor: Executor) -> Dict[str, UnitState]:
    try:
        result = executor(LIST_UNITS_COMMAND, env=TERM_ENV)
    except Exception as e:
        _debug(f"list-units raised: {e}")
        return {}
    if result.returncode != 0:
        _debug(f"list-units failed ({result.returncode}): {result.stderr.strip()}")
        return {}
    return parse_list_units(result.stdout)


def load_listing(executor: Executor) -> UnitListing:
    """Run both listing commands and return the parsed result."""
    listing = UnitListing(
        unit_files=list_unit_files(executor),
        units=list_units(executor),
    )
    _debug(f"{len(listing.unit_files)} unit files, {len(listing.units)} units")
    return listing
