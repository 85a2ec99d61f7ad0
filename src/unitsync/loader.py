"""
Service loader: merges the unit-files and units listings into one record per service.

Units come first and carry load/active/description. Unit files then set
`enabled`, creating a record for services systemd has not loaded (never
started) so they can still be toggled.
"""

from typing import Dict

from .schema import LOADED, SUPPORTED_STATES, ServiceRecord, UnitFileState, UnitListing, UnitState


class ServiceLoader:
    def __init__(self, listing: UnitListing):
        self.unit_files = listing.unit_files
        self.units = listing.units

    def read(self) -> Dict[str, ServiceRecord]:
        services: Dict[str, ServiceRecord] = {}
        self._update_from_units(services)
        self._update_from_unit_files(services)
        return {name: services[name] for name in sorted(services)}

    def supported_units(self) -> Dict[str, UnitState]:
        """Units not explicitly given another state (static, masked, ...) by list-unit-files."""
        supported = {}
        for name, unit in self.units.items():
            state = self.unit_files.get(name)
            if state is not None and state not in SUPPORTED_STATES:
                continue
            supported[name] = unit
        return supported

    def clean_units(self) -> Dict[str, UnitState]:
        return {
            name: unit
            for name, unit in self.supported_units().items()
            if unit.load_state == LOADED
        }

    def clean_unit_files(self) -> Dict[str, str]:
        return {
            name: state
            for name, state in self.unit_files.items()
            if state in SUPPORTED_STATES
        }

    def _update_from_units(self, services: Dict[str, ServiceRecord]) -> None:
        for name, unit in self.clean_units().items():
            services[name] = ServiceRecord(
                loaded=unit.load_state == LOADED,
                active=unit.active,
                description=unit.description,
            )

    def _update_from_unit_files(self, services: Dict[str, ServiceRecord]) -> None:
        for name, state in self.clean_unit_files().items():
            enabled = state == UnitFileState.ENABLED.value
            if name in services:
                services[name].enabled = enabled
            else:
                services[name] = ServiceRecord(enabled=enabled)
