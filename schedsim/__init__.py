"""
schedsim package.

Event-driven simulation of FCFS and Round-Robin CPU scheduling with context
switch overhead, plus a command-line driver for reporting the results.
"""

from .algorithms import ALGORITHMS, run_algorithm, schedule_fcfs, schedule_rr, simulate
from .config import DEFAULT_QUANTUM, SWITCH_TIME, SimulationConfig
from .errors import (
    EmptyWorkload,
    IncompletePass,
    InvalidQuantum,
    InvariantViolation,
    MalformedWorkload,
    SchedulerError,
)
from .models import PassMetrics, Process, ScheduledSlice, ScheduleResult, Snapshot

__all__ = [
    "ALGORITHMS",
    "DEFAULT_QUANTUM",
    "SWITCH_TIME",
    "EmptyWorkload",
    "IncompletePass",
    "InvalidQuantum",
    "InvariantViolation",
    "MalformedWorkload",
    "PassMetrics",
    "Process",
    "ScheduleResult",
    "ScheduledSlice",
    "SchedulerError",
    "SimulationConfig",
    "Snapshot",
    "run_algorithm",
    "schedule_fcfs",
    "schedule_rr",
    "simulate",
]
