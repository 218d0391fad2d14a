"""check-procs - process count health check."""

__version__ = "0.1.0"
