"""check-procs - command-line entry point."""

import argparse
import logging
import sys
from collections.abc import Sequence

from check_procs import __version__
from check_procs.criteria import (
    DEFAULT_CRITICAL_UNDER,
    DEFAULT_WARNING_UNDER,
    Criteria,
    RawCriteria,
    resolve_deprecated,
)
from check_procs.errors import ProcessEnumerationError
from check_procs.evaluator import run_check
from check_procs.models import CheckResult, Severity
from check_procs.monitor import collect_processes

log = logging.getLogger(__name__)

CHECKER_NAME = "Procs"

# Exit status for unusable arguments
USAGE_ERROR = 1

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser exiting with status 1 on bad arguments."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(USAGE_ERROR, f"{self.prog}: error: {message}\n")


def build_parser() -> ArgumentParser:
    """Build the argument parser."""
    parser = ArgumentParser(
        prog="check-procs",
        description="Check the number of processes matching a set of criteria.",
    )
    add = parser.add_argument

    add("-w", "--warning-over", type=int, metavar="N",
        help="Trigger a warning if over a number")
    add("--warn-over", type=int, metavar="N",
        help="(DEPRECATED) Trigger a warning if over a number")
    add("-c", "--critical-over", type=int, metavar="N",
        help="Trigger a critical if over a number")
    add("-W", "--warning-under", type=int, metavar="N", default=DEFAULT_WARNING_UNDER,
        help="Trigger a warning if under a number (default: %(default)s)")
    add("--warn-under", type=int, metavar="N", default=DEFAULT_WARNING_UNDER,
        help="(DEPRECATED) Trigger a warning if under a number")
    add("-C", "--critical-under", type=int, metavar="N", default=DEFAULT_CRITICAL_UNDER,
        help="Trigger a critical if under a number (default: %(default)s)")
    add("-m", "--match-self", action="store_true", help="Match itself")
    add("-M", "--match-parent", action="store_true", help="Match parent")
    add("-p", "--pattern", dest="patterns", action="append", default=[], metavar="PATTERN",
        help="Match a command against these patterns (repeatable)")
    add("-x", "--exclude-pattern", default="", metavar="PATTERN",
        help="Don't match against a pattern to prevent false positives")
    add("--ppid", default="", metavar="PPID", help="Check against a specific PPID")
    add("-f", "--file-pid", default="", metavar="PID", help="Check against a specific PID")
    add("-z", "--virtual-memory-size", type=int, default=0, metavar="VSZ",
        help="Match processes whose virtual memory size (KiB) is at most this")
    add("-r", "--resident-set-size", type=int, default=0, metavar="RSS",
        help="Match processes whose resident set size (KiB) is at most this")
    add("-P", "--proportional-set-size", type=float, default=0.0, metavar="PCPU",
        help="Match processes whose CPU usage (percent) is at most this")
    add("-T", "--thread-count", type=int, default=0, metavar="THCOUNT",
        help="Match processes with at most this many threads")
    add("-s", "--state", default="", metavar="STATE",
        help="Match a specific state, example: Z for zombie")
    add("-u", "--user", default="", metavar="USER", help="Match a specific user")
    add("-U", "--user-not", default="", metavar="USER",
        help="Match processes not owned by a specific user")
    add("-e", "--esec-over", type=int, default=0, metavar="SECONDS",
        help="Match processes older than this, in SECONDS")
    add("-E", "--esec-under", type=int, default=0, metavar="SECONDS",
        help="Match processes younger than this, in SECONDS")
    add("-i", "--cpu-over", type=int, default=0, metavar="SECONDS",
        help="Match processes with more CPU time than this, in SECONDS")
    add("-I", "--cpu-under", type=int, default=0, metavar="SECONDS",
        help="Match processes with less CPU time than this, in SECONDS")
    add("-v", "--verbose", action="count", default=0,
        help="Log to stderr; repeat for debug output")
    add("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _unset_if_zero(value):
    """Map the command-line "disabled" values 0 and "" to None."""
    return value if value else None


def raw_criteria_from_args(args: argparse.Namespace) -> RawCriteria:
    """Convert parsed arguments to RawCriteria."""
    return RawCriteria(
        warning_over=args.warning_over,
        warn_over=args.warn_over,
        critical_over=args.critical_over,
        warning_under=args.warning_under,
        warn_under=args.warn_under,
        critical_under=args.critical_under,
        match_self=args.match_self,
        match_parent=args.match_parent,
        cmd_patterns=list(args.patterns),
        cmd_exclude_pattern=_unset_if_zero(args.exclude_pattern),
        parent_pid=_unset_if_zero(args.ppid),
        file_pid=_unset_if_zero(args.file_pid),
        virtual_mem_size=_unset_if_zero(args.virtual_memory_size),
        resident_set_size=_unset_if_zero(args.resident_set_size),
        proportional_cpu=_unset_if_zero(args.proportional_set_size),
        thread_count=_unset_if_zero(args.thread_count),
        state=_unset_if_zero(args.state),
        user=_unset_if_zero(args.user),
        user_not=_unset_if_zero(args.user_not),
        elapsed_seconds_over=_unset_if_zero(args.esec_over),
        elapsed_seconds_under=_unset_if_zero(args.esec_under),
        cpu_seconds_over=_unset_if_zero(args.cpu_over),
        cpu_seconds_under=_unset_if_zero(args.cpu_under),
    )


def parse_criteria(argv: Sequence[str] | None = None) -> tuple[Criteria, int]:
    """
    Parse command-line arguments.

    Returns:
        The resolved criteria and the verbosity count.
    """
    args = build_parser().parse_args(argv)
    return resolve_deprecated(raw_criteria_from_args(args)), args.verbose


def setup_logging(verbosity: int) -> None:
    """Send log records to stderr; stdout carries the check result."""
    level = LOG_LEVELS[min(verbosity, len(LOG_LEVELS) - 1)]
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def format_result(result: CheckResult, name: str = CHECKER_NAME) -> str:
    """Render a result as a one-line plugin status."""
    return f"{name} {result.severity.name}: {result.message}"


def report(result: CheckResult) -> int:
    """Print the result and return the plugin exit code."""
    print(format_result(result))
    return result.exit_code


def check(criteria: Criteria) -> CheckResult:
    """Enumerate processes and evaluate them against the criteria."""
    try:
        processes = collect_processes()
    except ProcessEnumerationError as exc:
        log.error("%s", exc)
        return CheckResult(Severity.UNKNOWN, str(exc))
    return run_check(processes, criteria)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for check-procs."""
    criteria, verbosity = parse_criteria(argv)
    setup_logging(verbosity)
    log.info("Checking %d pattern(s)", len(criteria.include_patterns))
    return report(check(criteria))


if __name__ == "__main__":
    sys.exit(main())
