import math
import shlex
import subprocess
from dataclasses import dataclass

from storage_report.config import LookupConfig


@dataclass
class CommandResult:
    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def describe(self) -> str:
        if self.returncode < 0:
            status = f"killed by signal {-self.returncode}"
        else:
            status = f"exited with status {self.returncode}"
        stderr = self.stderr.strip()
        return f"{status}: {stderr}" if stderr else status


def run_command(lookup: LookupConfig, command: str) -> CommandResult:
    """Run `command` on the lookup host and wait for it to finish.

    Raises whatever the launch raises: OSError or UnicodeDecodeError locally,
    paramiko or invoke errors over SSH.
    """
    if lookup.is_local:
        result = subprocess.run(
            shlex.split(command),
            text=True,
            capture_output=True,
            check=False,
        )
        return CommandResult(result.stdout, result.stderr, result.returncode)

    remote = lookup.ssh.run(command, hide=True, warn=True)
    return CommandResult(remote.stdout, remote.stderr, remote.exited)


def round_half_away(value: float, digits: int = 0) -> float:
    """Round to `digits` decimals, halves going away from zero."""
    scale = 10**digits
    return math.copysign(math.floor(abs(value) * scale + 0.5), value) / scale
