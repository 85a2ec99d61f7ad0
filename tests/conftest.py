from pathlib import Path
from typing import List, Optional, Set

import pytest

from unitsync.executor import RunResult


FIXTURES = Path(__file__).parent / "fixtures"


class FixtureSystemctl:
    """Executor that answers listing commands from fixture files and records every call.

    Per-service actions succeed unless the service is listed in `failing`
    for that action, e.g. failing={"enable": {"cups"}}.
    """

    def __init__(self, unit_files: Optional[str] = None, units: Optional[str] = None, failing=None):
        if unit_files is None:
            unit_files = (FIXTURES / "systemctl_list_unit_files.txt").read_text()
        if units is None:
            units = (FIXTURES / "systemctl_list_units.txt").read_text()
        self.unit_files = unit_files
        self.units = units
        self.failing = failing or {}
        self.calls: List[List[str]] = []

    def __call__(self, cmd, *, env=None):
        self.calls.append(list(cmd))
        if "list-unit-files" in cmd:
            return RunResult(stdout=self.unit_files, stderr="", returncode=0)
        if "list-units" in cmd:
            return RunResult(stdout=self.units, stderr="", returncode=0)
        if "status" in cmd:
            return RunResult(stdout=f"{cmd[-1]} - status text\n", stderr="", returncode=3)
        action, unit = cmd[1], cmd[2]
        name = unit[: -len(".service")]
        if name in self.failing.get(action, set()):
            return RunResult(stdout="", stderr=f"Failed to {action} {unit}", returncode=1)
        return RunResult(stdout="", stderr="", returncode=0)

    def actions(self, *wanted: str) -> List[List[str]]:
        """Per-service action calls (enable/disable/start/stop), optionally filtered."""
        kinds: Set[str] = set(wanted or ("enable", "disable", "start", "stop"))
        return [c[1:] for c in self.calls if len(c) > 1 and c[1] in kinds]


@pytest.fixture
def systemctl() -> FixtureSystemctl:
    return FixtureSystemctl()
