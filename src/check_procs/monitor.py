"""Process table enumeration for check-procs."""

import logging
import time

import psutil

from check_procs.errors import ProcessEnumerationError
from check_procs.models import ProcessSnapshot

log = logging.getLogger(__name__)

# psutil status string -> ps(1) state letter
STATE_CODES: dict[str, str] = {
    "running": "R",
    "sleeping": "S",
    "disk-sleep": "D",
    "stopped": "T",
    "tracing-stop": "t",
    "zombie": "Z",
    "dead": "X",
    "wake-kill": "K",
    "waking": "W",
    "idle": "I",
    "locked": "L",
    "waiting": "W",
    "parked": "P",
}

# Attributes fetched for every process
PROCESS_ATTRS = [
    "pid",
    "ppid",
    "name",
    "username",
    "status",
    "memory_info",
    "num_threads",
    "create_time",
    "cpu_times",
    "cmdline",
]


def state_code(status: str | None) -> str:
    """Translate a psutil status string to the single-letter ps state."""
    if not status:
        return "?"
    return STATE_CODES.get(status, "?")


def snapshot_from_info(info: dict, now: float) -> ProcessSnapshot:
    """
    Build a ProcessSnapshot from a psutil ``Process.info`` dict.

    Attributes that could not be read (``None``) fall back to safe defaults.
    Memory sizes are reported in KiB and pcpu as lifetime CPU time over
    elapsed time, matching ps(1).
    """
    cmdline = info.get("cmdline") or []
    command = " ".join(cmdline) if cmdline else info.get("name") or ""

    mem_info = info.get("memory_info")
    vsz = mem_info.vms // 1024 if mem_info else 0
    rss = mem_info.rss // 1024 if mem_info else 0

    create_time = info.get("create_time")
    elapsed = max(0.0, now - create_time) if create_time else 0.0

    cpu_times = info.get("cpu_times")
    cpu_seconds = cpu_times.user + cpu_times.system if cpu_times else 0.0
    pcpu = cpu_seconds / elapsed * 100.0 if elapsed >= 1.0 else 0.0

    return ProcessSnapshot(
        command=command,
        user=info.get("username") or "",
        ppid=str(info.get("ppid") or 0),
        pid=str(info.get("pid", 0)),
        vsz=vsz,
        rss=rss,
        pcpu=round(pcpu, 1),
        thread_count=info.get("num_threads") or 0,
        state=state_code(info.get("status")),
        elapsed_seconds=int(elapsed),
        cpu_seconds=int(cpu_seconds),
    )


def collect_processes() -> list[ProcessSnapshot]:
    """
    Collect snapshots of all running processes.

    Uses psutil.process_iter() with oneshot() for efficiency. Processes that
    exit or deny access mid-scan are skipped.

    Raises:
        ProcessEnumerationError: If the process table cannot be listed.
    """
    processes: list[ProcessSnapshot] = []
    now = time.time()

    try:
        iterator = psutil.process_iter(attrs=PROCESS_ATTRS, ad_value=None)
        for proc in iterator:
            try:
                with proc.oneshot():
                    processes.append(snapshot_from_info(proc.info, now))
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess) as exc:
                log.debug("Skipping process %s: %s", proc.pid, exc)
                continue
    except (psutil.Error, OSError) as exc:
        raise ProcessEnumerationError(f"failed to list processes: {exc}") from exc

    log.debug("Collected %d process(es)", len(processes))
    return processes
