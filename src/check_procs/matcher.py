"""Process match predicate."""

import re

from check_procs.criteria import Criteria
from check_procs.models import ProcessSnapshot


def matches(
    proc: ProcessSnapshot,
    include_pattern: re.Pattern[str],
    criteria: Criteria,
    self_pid: str,
    parent_pid: str,
    exclude_pattern: re.Pattern[str] | None = None,
) -> bool:
    """
    Check whether a process satisfies one include pattern and all criteria.

    Every clause is skipped when its criterion is unset. ``parent_pid`` is
    the parent of the checking process, not of ``proc``.

    Args:
        proc: Process to test.
        include_pattern: Compiled command pattern for the current pass.
        criteria: Resolved criteria for the run.
        self_pid: Pid of the checking process.
        parent_pid: Pid of the checking process's parent.
        exclude_pattern: Compiled exclude pattern. When omitted, the
            configured exclude text is compiled here.
    """
    if exclude_pattern is None and criteria.cmd_exclude_pattern:
        exclude_pattern = re.compile(criteria.cmd_exclude_pattern)
    return (
        (not criteria.cmd_patterns or include_pattern.search(proc.command) is not None)
        and (
            not criteria.cmd_exclude_pattern
            or exclude_pattern is None
            or exclude_pattern.search(proc.command) is None
        )
        and (criteria.match_self or proc.pid != self_pid)
        and (criteria.match_parent or proc.pid != parent_pid)
        and (criteria.parent_pid is None or proc.ppid == criteria.parent_pid)
        and (criteria.file_pid is None or proc.pid == criteria.file_pid)
        and (criteria.virtual_mem_size is None or proc.vsz <= criteria.virtual_mem_size)
        and (criteria.resident_set_size is None or proc.rss <= criteria.resident_set_size)
        and (criteria.proportional_cpu is None or proc.pcpu <= criteria.proportional_cpu)
        and (criteria.thread_count is None or proc.thread_count <= criteria.thread_count)
        and (criteria.state is None or proc.state == criteria.state)
        and (criteria.user is None or proc.user == criteria.user)
        and (criteria.user_not is None or proc.user != criteria.user_not)
        and (
            criteria.elapsed_seconds_under is None
            or proc.elapsed_seconds < criteria.elapsed_seconds_under
        )
        and (
            criteria.elapsed_seconds_over is None
            or proc.elapsed_seconds > criteria.elapsed_seconds_over
        )
        and (criteria.cpu_seconds_under is None or proc.cpu_seconds < criteria.cpu_seconds_under)
        and (criteria.cpu_seconds_over is None or proc.cpu_seconds > criteria.cpu_seconds_over)
    )
