"""Data models for check-procs."""

from dataclasses import dataclass
from enum import IntEnum


@dataclass(slots=True, frozen=True)
class ProcessSnapshot:
    """Immutable snapshot of a process state."""

    command: str
    user: str
    ppid: str
    pid: str
    vsz: int  # KiB
    rss: int  # KiB
    pcpu: float  # cpu time / elapsed time, percent
    thread_count: int
    state: str  # 'R', 'S', 'Z', 'D', etc.
    elapsed_seconds: int
    cpu_seconds: int


class Severity(IntEnum):
    """Check result severity, valued as the conventional plugin exit code."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


def worst(*severities: Severity) -> Severity:
    """Return the most severe of the given severities.

    UNKNOWN outranks everything; otherwise OK < WARNING < CRITICAL.
    """
    if Severity.UNKNOWN in severities:
        return Severity.UNKNOWN
    return max(severities, default=Severity.OK)


@dataclass(slots=True, frozen=True)
class CheckResult:
    """Final outcome of one check run."""

    severity: Severity
    message: str

    @property
    def exit_code(self) -> int:
        """Exit code for the plugin process."""
        return int(self.severity)
