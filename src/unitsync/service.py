"""
Systemd service session: in-memory edits of the service table and the two-phase save.

Edits (enable/disable, activate/deactivate) never touch systemd. `save()`
writes them back: first enablement for every modified service, then
start/stop, each phase only reached when the previous left no errors.
"""

import os
import sys
from typing import Dict, Iterable, List, Optional

from .executor import Executor, make_executor
from .listing import COMMAND_OPTIONS, SERVICE_SUFFIX, TERM_ENV, load_listing
from .loader import ServiceLoader
from .renderers import make_environment, render_changes
from .schema import ServiceRecord, StartMode

_DEBUG = bool(os.environ.get("UNITSYNC_DEBUG", ""))

STATUS_COMMAND = ["systemctl", "status"] + COMMAND_OPTIONS


def _debug(msg: str) -> None:
    if _DEBUG:
        print(f"[unitsync] service: {msg}", file=sys.stderr)


class SystemdService:
    """One configuration session over the services known to systemd."""

    def __init__(self, executor: Optional[Executor] = None, load: bool = True):
        self.executor: Executor = executor or make_executor()
        self.services: Dict[str, ServiceRecord] = {}
        self.errors: List[str] = []
        self.not_found: List[str] = []
        self._modified = False
        if load:
            self.read()

    @property
    def all(self) -> Dict[str, ServiceRecord]:
        return self.services

    # --- Loading ---

    def read(self) -> Dict[str, ServiceRecord]:
        """Replace the table with the current state reported by systemd."""
        self.services = ServiceLoader(load_listing(self.executor)).read()
        return self.services

    @property
    def modified(self) -> bool:
        return self._modified

    @modified.setter
    def modified(self, value: bool) -> None:
        # Going back to unmodified drops every pending edit.
        if not value:
            self.read()
        self._modified = value

    def reset(self) -> bool:
        self.errors = []
        self.modified = False
        return True

    # --- Lookup ---

    def lookup(self, name: str) -> Optional[ServiceRecord]:
        return self.services.get(name)

    def exists(self, name: str) -> bool:
        return name in self.services

    def is_active(self, name: str) -> bool:
        record = self.lookup(name)
        return record is not None and record.active

    def is_enabled(self, name: str) -> bool:
        record = self.lookup(name)
        return record is not None and record.enabled

    def description_for(self, name: str) -> str:
        record = self.lookup(name)
        return record.description if record else ""

    def modified_services(self) -> Dict[str, ServiceRecord]:
        return {name: record for name, record in self.services.items() if record.modified}

    # --- In-memory edits ---

    def _mark(self, name: str, **fields) -> bool:
        record = self.lookup(name)
        if record is None:
            return False
        for field, value in fields.items():
            setattr(record, field, value)
        record.modified = True
        self._modified = True
        return True

    def activate(self, name: str) -> bool:
        """Mark a service to be running after save."""
        if not self._mark(name, active=True):
            return False
        _debug(f"{name} has been marked for activation")
        return True

    def deactivate(self, name: str) -> bool:
        """Mark a service to be stopped after save."""
        return self._mark(name, active=False)

    def enable(self, name: str) -> bool:
        """Mark a service to start at boot (written on save)."""
        return self._mark(name, enabled=True)

    def disable(self, name: str) -> bool:
        """Mark a service not to start at boot (written on save)."""
        return self._mark(name, enabled=False)

    def switch(self, name: str) -> bool:
        return self.deactivate(name) if self.is_active(name) else self.activate(name)

    def toggle(self, name: str) -> bool:
        return self.disable(name) if self.is_enabled(name) else self.enable(name)

    def start_mode(self, name: str) -> Optional[StartMode]:
        record = self.lookup(name)
        if record is None:
            return None
        return StartMode.ON_BOOT if record.enabled else StartMode.MANUAL

    def set_start_mode(self, name: str, mode: StartMode) -> bool:
        mode = StartMode(mode)
        if mode == StartMode.ON_BOOT:
            return self.enable(name)
        return self.disable(name)

    # --- Export / import ---

    def export(self) -> List[str]:
        """Names of enabled services; everything else is expected to be disabled."""
        return [name for name, record in self.services.items() if record.enabled]

    def import_services(self, names: Iterable[str]) -> bool:
        """Enable the listed services and disable all others.

        Unknown names are collected in `not_found` and make the result False,
        but every known name is still applied.
        """
        if isinstance(names, str):
            names = [names]
        names = list(names)
        self.not_found = []
        if not names:
            _debug("no data for import provided")
            return False
        for name in names:
            if self.exists(name):
                _debug(f"enabling service {name}")
                self.enable(name)
            else:
                self.not_found.append(name)
                _debug(f"service {name} doesn't exist on this system")
        wanted = set(names)
        for name in list(self.services):
            if name not in wanted:
                _debug(f"disabling service {name}")
                self.disable(name)
        return not self.not_found

    # --- Talking to systemd ---

    def _systemctl(self, action: str, name: str) -> bool:
        try:
            result = self.executor(["systemctl", action, name + SERVICE_SUFFIX])
        except Exception as e:
            _debug(f"systemctl {action} {name} raised: {e}")
            return False
        if result.returncode != 0:
            _debug(f"systemctl {action} {name} failed ({result.returncode}): {result.stderr.strip()}")
            return False
        return True

    def status(self, name: str) -> str:
        """Full `systemctl status` text for the service, stderr included."""
        try:
            result = self.executor(STATUS_COMMAND + [name + SERVICE_SUFFIX], env=TERM_ENV)
        except Exception as e:
            return str(e)
        return result.stdout + result.stderr

    def toggle_now(self, name: str) -> bool:
        """Enable or disable the service in systemd according to the table."""
        return self._systemctl("enable" if self.is_enabled(name) else "disable", name)

    def switch_now(self, name: str) -> bool:
        """Start or stop the service in systemd according to the table."""
        return self._systemctl("start" if self.is_active(name) else "stop", name)

    # --- Save ---

    def toggle_services(self, names: Iterable[str]) -> List[str]:
        toggled = []
        for name in names:
            if self.toggle_now(name):
                toggled.append(name)
                continue
            change = "enable" if self.is_enabled(name) else "disable"
            state = "active" if self.is_active(name) else "inactive"
            message = f"Could not {change} {name} which is currently {state}. " + self.status(name)
            self.errors.append(message)
            _debug(f"error: {message}")
        return toggled

    def switch_services(self, names: Iterable[str]) -> List[str]:
        switched = []
        for name in names:
            if self.switch_now(name):
                switched.append(name)
                continue
            change = "start" if self.is_active(name) else "stop"
            state = "enabled" if self.is_enabled(name) else "disabled"
            message = f"Could not {change} {name} which is currently {state}. " + self.status(name)
            self.errors.append(message)
            _debug(f"error: {message}")
        return switched

    def save(self, reload: bool = False) -> bool:
        """Write pending changes to systemd. Returns False if anything failed; see `errors`."""
        _debug("saving systemd services...")
        if not self.modified:
            _debug("no service has been changed, nothing to do")
            return True

        names = sorted(self.modified_services())
        _debug(f"modified services: {', '.join(names)}")

        if self.errors:
            _debug("not saving the changes due to errors: " + ", ".join(self.errors))
            return False

        # Enablement first; start/stop may destabilize the system.
        self.toggle_services(names)
        if self.errors:
            _debug("there were some errors during saving: " + ", ".join(self.errors))
            return False

        self.switch_services(names)
        if self.errors:
            _debug("there were some errors during saving: " + ", ".join(self.errors))
            return False

        for name in names:
            self.services[name].modified = False
        self._modified = False
        if reload:
            self.read()
        return True

    def changes_summary(self) -> str:
        return render_changes(self.services, make_environment())
