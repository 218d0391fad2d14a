"""Shared fixtures for check-procs tests."""

import pytest

from check_procs.models import ProcessSnapshot


def make_proc(**overrides) -> ProcessSnapshot:
    """Build a ProcessSnapshot with neutral defaults."""
    fields = {
        "command": "/usr/sbin/sshd -D",
        "user": "root",
        "ppid": "1",
        "pid": "42",
        "vsz": 10000,
        "rss": 5000,
        "pcpu": 1.5,
        "thread_count": 1,
        "state": "S",
        "elapsed_seconds": 3600,
        "cpu_seconds": 12,
    }
    fields.update(overrides)
    return ProcessSnapshot(**fields)


@pytest.fixture
def proc_factory():
    """Factory fixture returning make_proc."""
    return make_proc
