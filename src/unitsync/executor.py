"""
Command execution abstraction.

The service engine never calls subprocess directly. It uses the provided
executor so that tests can inject fixture output instead of running systemctl.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol


@dataclass
class RunResult:
    """Result of running a command (or reading a fixture)."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Executor(Protocol):
    """Protocol for command execution. Implementations may run commands or read fixtures."""

    def __call__(self, cmd: List[str], *, env: Optional[Dict[str, str]] = None) -> RunResult:
        """Execute command with extra environment. Returns stdout, stderr, returncode."""
        ...


def subprocess_executor(
    cmd: List[str],
    *,
    env: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = 300,
) -> RunResult:
    """Default implementation: run the command via subprocess."""
    import subprocess
    full_env = None
    if env:
        full_env = dict(os.environ)
        full_env.update(env)
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            env=full_env,
            timeout=timeout,
        )
        return RunResult(
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )
    except subprocess.TimeoutExpired as e:
        stdout = e.stdout
        if isinstance(stdout, bytes):
            stdout = stdout.decode(errors="replace")
        return RunResult(
            stdout=stdout or "",
            stderr=f"Command timed out after {e.timeout}s",
            returncode=-1,
        )
    except FileNotFoundError:
        return RunResult(stdout="", stderr="Command not found", returncode=127)


def make_executor(
    extra_env: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = 300,
) -> Executor:
    """Create the default executor; extra_env is merged under any per-call env."""
    def run(cmd: List[str], *, env: Optional[Dict[str, str]] = None) -> RunResult:
        merged = dict(extra_env or {})
        merged.update(env or {})
        return subprocess_executor(cmd, env=merged or None, timeout=timeout)
    return run
