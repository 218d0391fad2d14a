"""Filter and threshold options for a check run.

`RawCriteria` mirrors the command line, deprecated aliases included.
`resolve_deprecated` folds the aliases into their canonical fields and
returns the immutable `Criteria` every other component consumes.

Unset filters are ``None``. A default of 1 for the under-bounds means a
pattern with no matching process is reported, which makes the check
usable as "process must be running".
"""

from dataclasses import dataclass, field

DEFAULT_WARNING_UNDER = 1
DEFAULT_CRITICAL_UNDER = 1

MATCH_ALL_PATTERN = ".*"


@dataclass(slots=True, frozen=True)
class Criteria:
    """Resolved, immutable criteria for one run."""

    warning_over: int | None = None
    critical_over: int | None = None
    warning_under: int | None = DEFAULT_WARNING_UNDER
    critical_under: int | None = DEFAULT_CRITICAL_UNDER

    match_self: bool = False
    match_parent: bool = False

    cmd_patterns: tuple[str, ...] = ()
    cmd_exclude_pattern: str | None = None

    parent_pid: str | None = None
    file_pid: str | None = None
    virtual_mem_size: int | None = None
    resident_set_size: int | None = None
    proportional_cpu: float | None = None
    thread_count: int | None = None
    state: str | None = None
    user: str | None = None
    user_not: str | None = None
    elapsed_seconds_over: int | None = None
    elapsed_seconds_under: int | None = None
    cpu_seconds_over: int | None = None
    cpu_seconds_under: int | None = None

    @property
    def include_patterns(self) -> tuple[str, ...]:
        """Configured include patterns, or the implicit match-all pattern."""
        return self.cmd_patterns or (MATCH_ALL_PATTERN,)


@dataclass(slots=True)
class RawCriteria:
    """Criteria as parsed from the command line, before alias resolution."""

    warning_over: int | None = None
    warn_over: int | None = None  # deprecated alias of warning_over
    critical_over: int | None = None
    warning_under: int | None = DEFAULT_WARNING_UNDER
    warn_under: int | None = DEFAULT_WARNING_UNDER  # deprecated alias of warning_under
    critical_under: int | None = DEFAULT_CRITICAL_UNDER

    match_self: bool = False
    match_parent: bool = False

    cmd_patterns: list[str] = field(default_factory=list)
    cmd_exclude_pattern: str | None = None

    parent_pid: str | None = None
    file_pid: str | None = None
    virtual_mem_size: int | None = None
    resident_set_size: int | None = None
    proportional_cpu: float | None = None
    thread_count: int | None = None
    state: str | None = None
    user: str | None = None
    user_not: str | None = None
    elapsed_seconds_over: int | None = None
    elapsed_seconds_under: int | None = None
    cpu_seconds_over: int | None = None
    cpu_seconds_under: int | None = None


def resolve_deprecated(raw: RawCriteria) -> Criteria:
    """
    Fold deprecated aliases into their canonical fields.

    ``warn_under`` applies only when it was changed from its default and
    ``warning_under`` was not. An explicit ``--warning-under 1`` cannot be
    told apart from the default, so it does not block the alias.
    ``warn_over`` applies only when ``warning_over`` is unset.
    """
    warning_under = raw.warning_under
    if (
        raw.warn_under is not None
        and raw.warn_under != DEFAULT_WARNING_UNDER
        and warning_under == DEFAULT_WARNING_UNDER
    ):
        warning_under = raw.warn_under

    warning_over = raw.warning_over
    if raw.warn_over is not None and warning_over is None:
        warning_over = raw.warn_over

    return Criteria(
        warning_over=warning_over,
        critical_over=raw.critical_over,
        warning_under=warning_under,
        critical_under=raw.critical_under,
        match_self=raw.match_self,
        match_parent=raw.match_parent,
        cmd_patterns=tuple(raw.cmd_patterns),
        cmd_exclude_pattern=raw.cmd_exclude_pattern,
        parent_pid=raw.parent_pid,
        file_pid=raw.file_pid,
        virtual_mem_size=raw.virtual_mem_size,
        resident_set_size=raw.resident_set_size,
        proportional_cpu=raw.proportional_cpu,
        thread_count=raw.thread_count,
        state=raw.state,
        user=raw.user,
        user_not=raw.user_not,
        elapsed_seconds_over=raw.elapsed_seconds_over,
        elapsed_seconds_under=raw.elapsed_seconds_under,
        cpu_seconds_over=raw.cpu_seconds_over,
        cpu_seconds_under=raw.cpu_seconds_under,
    )
