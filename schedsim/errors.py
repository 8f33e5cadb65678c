from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by the simulator."""


class EmptyWorkload(SchedulerError):
    """There are no processes to schedule, so metrics are undefined."""


class IncompletePass(SchedulerError):
    """Metrics were requested before every process finished."""


class InvariantViolation(SchedulerError):
    """A finished process carries inconsistent timestamps or metrics."""


class InvalidQuantum(SchedulerError, ValueError):
    """Round Robin was given a non-positive time quantum."""


class MalformedWorkload(SchedulerError, ValueError):
    """A workload descriptor is short, inconsistent or has invalid fields."""
