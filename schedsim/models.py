from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .errors import MalformedWorkload

_STATIC_FIELDS = ("process_number", "arrival_time", "service_time")


@dataclass
class Process:
    """
    One workload entry plus the state a scheduler pass mutates.

    ``process_number``, ``arrival_time`` and ``service_time`` are fixed once
    the record is built; everything else is cleared by ``reset()``.
    """

    process_number: int
    arrival_time: int
    service_time: int
    remaining_service: int = field(default=None, compare=False)
    start_time: Optional[int] = field(default=None, compare=False)
    execution_time: Optional[int] = field(default=None, compare=False)
    finish_time: Optional[int] = field(default=None, compare=False)
    waiting_time: Optional[int] = field(default=None, compare=False)
    turnaround_time: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        if self.arrival_time < 0:
            raise MalformedWorkload(
                f"Process {self.process_number}: arrival_time must be >= 0, got {self.arrival_time}"
            )
        if self.service_time <= 0:
            raise MalformedWorkload(
                f"Process {self.process_number}: service_time must be > 0, got {self.service_time}"
            )
        if self.remaining_service is None:
            self.remaining_service = self.service_time

    def __setattr__(self, name, value):
        if name in _STATIC_FIELDS and name in self.__dict__:
            raise AttributeError(f"{name} cannot be changed after construction")
        super().__setattr__(name, value)

    @property
    def finished(self) -> bool:
        return self.remaining_service == 0

    def reset(self) -> None:
        self.remaining_service = self.service_time
        self.start_time = None
        self.execution_time = None
        self.finish_time = None
        self.waiting_time = None
        self.turnaround_time = None

    def copy(self) -> "Process":
        return Process(self.process_number, self.arrival_time, self.service_time)


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    process_number: int
    start_time: int
    end_time: int


@dataclass(frozen=True)
class Snapshot:
    """
    Ready and finished membership observed at one event instant.
    """

    time: int
    event: str
    ready: Tuple[int, ...]
    finished: Tuple[int, ...]


@dataclass
class PassMetrics:
    total_time: int
    total_switch_time: int
    average_waiting_time: float
    average_turnaround_time: float
    cpu_efficiency: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    switch_time: int
    processes: List[Process] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    trace: List[Snapshot] = field(default_factory=list)
    total_switch_time: int = 0
    metrics: Optional[PassMetrics] = None
