from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Iterable, List

from .models import Process, ScheduledSlice, Snapshot

logger = logging.getLogger(__name__)


class SimulationContext:
    """
    Clock, queues and bookkeeping owned by a single scheduler pass.

    Building the context sorts the workload by arrival (stable, so ties keep
    their input order) and resets every record. Nothing here is shared with
    any other pass.
    """

    def __init__(self, processes: Iterable[Process], switch_time: int):
        self.order: List[Process] = sorted(processes, key=lambda p: p.arrival_time)
        for p in self.order:
            p.reset()

        self.switch_time = switch_time
        self.clock = 0
        self.total_switch_time = 0
        self.cursor = 0
        self.ready: Deque[Process] = deque()
        self.finished: List[Process] = []
        self.timeline: List[ScheduledSlice] = []
        self.trace: List[Snapshot] = []

    def advance(self, dt: int) -> None:
        self.clock += dt

    def advance_to(self, t: int) -> None:
        if self.clock < t:
            logger.debug("CPU idle from %d to %d", self.clock, t)
            self.clock = t

    def charge_switch(self) -> None:
        self.clock += self.switch_time
        self.total_switch_time += self.switch_time

    def admit_arrivals(self) -> int:
        """
        Move every not-yet-admitted record with ``arrival_time <= clock`` to
        the ready queue, in arrival order. Returns how many were admitted.
        """
        admitted = 0
        while self.cursor < len(self.order) and self.order[self.cursor].arrival_time <= self.clock:
            self.ready.append(self.order[self.cursor])
            self.cursor += 1
            admitted += 1
        return admitted

    def all_finished(self) -> bool:
        return len(self.finished) == len(self.order)

    def record_slice(self, process: Process, start_time: int, end_time: int) -> None:
        self.timeline.append(
            ScheduledSlice(process_number=process.process_number, start_time=start_time, end_time=end_time)
        )

    def rescan(self) -> None:
        # Rebuild both sets from the records themselves.
        self.ready = deque(p for p in self.order if not p.finished and p.arrival_time <= self.clock)
        self.finished = [p for p in self.order if p.finished and p.finish_time <= self.clock]

    def snapshot(self, event: str) -> Snapshot:
        snap = Snapshot(
            time=self.clock,
            event=event,
            ready=tuple(p.process_number for p in self.ready),
            finished=tuple(p.process_number for p in self.finished),
        )
        self.trace.append(snap)
        return snap
