"""Pattern evaluation and severity aggregation for check-procs."""

import logging
import os
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from check_procs.criteria import Criteria
from check_procs.errors import InvalidPatternError
from check_procs.matcher import matches
from check_procs.models import CheckResult, ProcessSnapshot, Severity, worst

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PatternResult:
    """Outcome of evaluating a single include pattern."""

    pattern: str
    count: int
    severity: Severity
    message: str


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidPatternError(pattern, f"invalid pattern {pattern!r}: {exc}") from exc


def compile_patterns(
    criteria: Criteria,
) -> tuple[list[re.Pattern[str]], re.Pattern[str] | None]:
    """
    Compile the include patterns and the exclude pattern.

    Returns:
        The compiled include patterns (the match-all pattern when none are
        configured) and the compiled exclude pattern, or None.

    Raises:
        InvalidPatternError: If any pattern fails to compile.
    """
    includes = [_compile(pattern) for pattern in criteria.include_patterns]
    exclude = _compile(criteria.cmd_exclude_pattern) if criteria.cmd_exclude_pattern else None
    log.debug(
        "Compiled %d include pattern(s), exclude=%r",
        len(includes),
        criteria.cmd_exclude_pattern,
    )
    return includes, exclude


def merge_status(count: int, criteria: Criteria) -> Severity:
    """Map a matched-process count to a severity. CRITICAL wins over WARNING."""
    if (criteria.critical_under and count < criteria.critical_under) or (
        criteria.critical_over is not None and count > criteria.critical_over
    ):
        return Severity.CRITICAL
    if (criteria.warning_under and count < criteria.warning_under) or (
        criteria.warning_over is not None and count > criteria.warning_over
    ):
        return Severity.WARNING
    return Severity.OK


def describe(count: int, pattern_text: str, criteria: Criteria) -> str:
    """Render the diagnostic message for one pattern."""
    msg = f"Found {count} matching processes"
    if criteria.cmd_patterns:
        msg += f"; cmd /{pattern_text}/"
    if criteria.state is not None:
        msg += f"; state /{criteria.state}/"
    if criteria.user is not None:
        msg += f"; user /{criteria.user}/"
    if criteria.user_not is not None:
        msg += f"; usernot /{criteria.user_not}/"
    if criteria.virtual_mem_size is not None:
        msg += f"; vsz < {criteria.virtual_mem_size}"
    if criteria.resident_set_size is not None:
        msg += f"; rss < {criteria.resident_set_size}"
    if criteria.proportional_cpu is not None:
        msg += f"; pcpu < {criteria.proportional_cpu:f}"
    if criteria.thread_count is not None:
        msg += f"; thcount < {criteria.thread_count}"
    if criteria.elapsed_seconds_under is not None:
        msg += f"; esec < {criteria.elapsed_seconds_under}"
    if criteria.elapsed_seconds_over is not None:
        msg += f"; esec > {criteria.elapsed_seconds_over}"
    if criteria.cpu_seconds_under is not None:
        msg += f"; csec < {criteria.cpu_seconds_under}"
    if criteria.cpu_seconds_over is not None:
        msg += f"; csec > {criteria.cpu_seconds_over}"
    if criteria.parent_pid is not None:
        msg += f"; ppid {criteria.parent_pid}"
    if criteria.file_pid is not None:
        msg += f"; pid {criteria.file_pid}"
    return msg


def evaluate_pattern(
    processes: Iterable[ProcessSnapshot],
    include_pattern: re.Pattern[str],
    criteria: Criteria,
    self_pid: str,
    parent_pid: str,
    exclude_pattern: re.Pattern[str] | None = None,
) -> PatternResult:
    """Count the processes matching one include pattern and grade the count."""
    count = sum(
        1
        for proc in processes
        if matches(proc, include_pattern, criteria, self_pid, parent_pid, exclude_pattern)
    )
    severity = merge_status(count, criteria)
    log.debug("Pattern %r matched %d process(es): %s", include_pattern.pattern, count, severity.name)
    return PatternResult(
        pattern=include_pattern.pattern,
        count=count,
        severity=severity,
        message=describe(count, include_pattern.pattern, criteria),
    )


def run_check(
    processes: Sequence[ProcessSnapshot],
    criteria: Criteria,
    self_pid: str | None = None,
    parent_pid: str | None = None,
) -> CheckResult:
    """
    Evaluate every include pattern against one process snapshot.

    Args:
        processes: Snapshot of the process table.
        criteria: Resolved criteria for the run.
        self_pid: Pid of the checking process. Defaults to this process.
        parent_pid: Pid of the checking process's parent. Defaults to the
            parent of this process.

    Returns:
        The worst severity across patterns and the concatenated messages.
        An invalid pattern yields UNKNOWN and nothing is counted.
    """
    try:
        includes, exclude = compile_patterns(criteria)
    except InvalidPatternError as exc:
        log.error("%s", exc)
        return CheckResult(Severity.UNKNOWN, exc.reason)

    if self_pid is None:
        self_pid = str(os.getpid())
    if parent_pid is None:
        parent_pid = str(os.getppid())

    results = [
        evaluate_pattern(processes, pattern, criteria, self_pid, parent_pid, exclude)
        for pattern in includes
    ]
    severity = worst(*(result.severity for result in results))
    message = "".join(f"\n{result.message}" for result in results)
    return CheckResult(severity, message)
