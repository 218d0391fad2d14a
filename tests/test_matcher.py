"""Tests for the process match predicate."""

import re

import pytest

from check_procs.criteria import MATCH_ALL_PATTERN, Criteria
from check_procs.matcher import matches

SELF_PID = "1000"
PARENT_PID = "999"
MATCH_ALL = re.compile(MATCH_ALL_PATTERN)


def check(proc, criteria, include=MATCH_ALL, exclude=None):
    return matches(proc, include, criteria, SELF_PID, PARENT_PID, exclude)


class TestUnsetCriteria:
    """Tests with every filter unset."""

    def test_matches_ordinary_process(self, proc_factory):
        """Test any ordinary process matches."""
        assert check(proc_factory(), Criteria())

    def test_excludes_self(self, proc_factory):
        """Test the checking process is excluded."""
        assert not check(proc_factory(pid=SELF_PID), Criteria())

    def test_excludes_parent(self, proc_factory):
        """Test the checking process's parent is excluded."""
        assert not check(proc_factory(pid=PARENT_PID), Criteria())

    def test_match_self_and_parent_flags(self, proc_factory):
        """Test the flags re-include self and parent."""
        criteria = Criteria(match_self=True, match_parent=True)
        assert check(proc_factory(pid=SELF_PID), criteria)
        assert check(proc_factory(pid=PARENT_PID), criteria)

    def test_parent_check_uses_checker_parent_not_candidate_parent(self, proc_factory):
        """Test a child of the checker's parent is still matched."""
        assert check(proc_factory(pid="4242", ppid=PARENT_PID), Criteria())


class TestCommandPatterns:
    """Tests for include and exclude patterns."""

    def test_include_pattern_searches_command(self, proc_factory):
        """Test the include pattern matches anywhere in the command."""
        criteria = Criteria(cmd_patterns=("sshd",))
        assert check(proc_factory(command="/usr/sbin/sshd -D"), criteria, re.compile("sshd"))
        assert not check(proc_factory(command="/usr/sbin/cron"), criteria, re.compile("sshd"))

    def test_include_pattern_ignored_without_configured_patterns(self, proc_factory):
        """Test a non-matching include pattern is ignored if no patterns are configured."""
        assert check(proc_factory(command="cron"), Criteria(), re.compile("sshd"))

    def test_exclude_pattern(self, proc_factory):
        """Test the exclude pattern removes matching commands."""
        criteria = Criteria(cmd_exclude_pattern="-D")
        exclude = re.compile("-D")
        assert not check(proc_factory(command="/usr/sbin/sshd -D"), criteria, exclude=exclude)
        assert check(proc_factory(command="/usr/sbin/sshd"), criteria, exclude=exclude)

    def test_exclude_pattern_needs_configured_text(self, proc_factory):
        """Test a compiled exclude pattern is ignored when no exclude text is configured."""
        assert check(proc_factory(), Criteria(), exclude=re.compile(".*"))
        assert check(proc_factory(), Criteria(cmd_exclude_pattern=""), exclude=re.compile(".*"))

    def test_exclude_pattern_compiled_from_criteria(self, proc_factory):
        """Test configured exclude text applies even without a compiled pattern."""
        criteria = Criteria(cmd_exclude_pattern="sshd")
        assert not check(proc_factory(command="/usr/sbin/sshd -D"), criteria, exclude=None)
        assert check(proc_factory(command="/usr/sbin/cron -f"), criteria, exclude=None)

    def test_exclude_pattern_with_five_argument_call(self, proc_factory):
        """Test the exclude pattern applies when matches is called without one."""
        proc = proc_factory(command="/usr/sbin/sshd -D")
        criteria = Criteria(cmd_exclude_pattern="sshd")
        assert not matches(proc, MATCH_ALL, criteria, SELF_PID, PARENT_PID)


class TestAttributeFilters:
    """Tests for the attribute filters."""

    @pytest.mark.parametrize(
        ("field", "attr", "bound"),
        [
            ("virtual_mem_size", "vsz", 100),
            ("resident_set_size", "rss", 100),
            ("thread_count", "thread_count", 4),
        ],
    )
    def test_upper_bounds_are_inclusive(self, proc_factory, field, attr, bound):
        """Test size and count filters match at or below the bound."""
        criteria = Criteria(**{field: bound})
        assert check(proc_factory(**{attr: bound}), criteria)
        assert check(proc_factory(**{attr: bound - 1}), criteria)
        assert not check(proc_factory(**{attr: bound + 1}), criteria)

    def test_pcpu_bound(self, proc_factory):
        """Test proportional CPU filter."""
        criteria = Criteria(proportional_cpu=2.5)
        assert check(proc_factory(pcpu=2.5), criteria)
        assert not check(proc_factory(pcpu=2.6), criteria)

    def test_state(self, proc_factory):
        """Test state must match exactly."""
        criteria = Criteria(state="Z")
        assert check(proc_factory(state="Z"), criteria)
        assert not check(proc_factory(state="S"), criteria)

    def test_user(self, proc_factory):
        """Test user must match exactly."""
        criteria = Criteria(user="www-data")
        assert check(proc_factory(user="www-data"), criteria)
        assert not check(proc_factory(user="root"), criteria)

    def test_user_not(self, proc_factory):
        """Test user_not excludes exactly that user."""
        criteria = Criteria(user_not="root")
        assert not check(proc_factory(user="root"), criteria)
        assert check(proc_factory(user="rooter"), criteria)
        assert check(proc_factory(user="nobody"), criteria)

    def test_parent_pid(self, proc_factory):
        """Test parent pid string comparison."""
        criteria = Criteria(parent_pid="1")
        assert check(proc_factory(ppid="1"), criteria)
        assert not check(proc_factory(ppid="2"), criteria)

    def test_file_pid(self, proc_factory):
        """Test pid string comparison."""
        criteria = Criteria(file_pid="42")
        assert check(proc_factory(pid="42"), criteria)
        assert not check(proc_factory(pid="43"), criteria)

    def test_elapsed_seconds_bounds_are_strict(self, proc_factory):
        """Test esec filters use strict comparisons."""
        assert not check(proc_factory(elapsed_seconds=60), Criteria(elapsed_seconds_over=60))
        assert check(proc_factory(elapsed_seconds=61), Criteria(elapsed_seconds_over=60))
        assert not check(proc_factory(elapsed_seconds=60), Criteria(elapsed_seconds_under=60))
        assert check(proc_factory(elapsed_seconds=59), Criteria(elapsed_seconds_under=60))

    def test_cpu_seconds_bounds_are_strict(self, proc_factory):
        """Test csec filters use strict comparisons."""
        assert not check(proc_factory(cpu_seconds=10), Criteria(cpu_seconds_over=10))
        assert check(proc_factory(cpu_seconds=11), Criteria(cpu_seconds_over=10))
        assert not check(proc_factory(cpu_seconds=10), Criteria(cpu_seconds_under=10))
        assert check(proc_factory(cpu_seconds=9), Criteria(cpu_seconds_under=10))

    def test_zero_threshold_is_expressible(self, proc_factory):
        """Test a programmatic 0 bound is applied rather than ignored."""
        assert not check(proc_factory(thread_count=1), Criteria(thread_count=0))

    def test_all_clauses_must_hold(self, proc_factory):
        """Test a single failing clause rejects the process."""
        criteria = Criteria(user="root", state="S", thread_count=1)
        assert check(proc_factory(), criteria)
        assert not check(proc_factory(thread_count=2), criteria)
