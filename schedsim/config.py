from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidQuantum

# Fixed cost charged to the clock whenever dispatch moves to another job.
SWITCH_TIME = 2

DEFAULT_QUANTUM = 50


def check_quantum(quantum) -> int:
    if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
        raise InvalidQuantum(f"Round Robin requires a positive integer quantum, got {quantum!r}")
    return quantum


def check_switch_time(switch_time) -> int:
    if isinstance(switch_time, bool) or not isinstance(switch_time, int) or switch_time < 0:
        raise ValueError(f"Switch time must be a non-negative integer, got {switch_time!r}")
    return switch_time


@dataclass(frozen=True)
class SimulationConfig:
    """
    Knobs shared by every pass of a simulation run.
    """

    quantum: int = DEFAULT_QUANTUM
    switch_time: int = SWITCH_TIME

    def validate(self) -> "SimulationConfig":
        check_quantum(self.quantum)
        check_switch_time(self.switch_time)
        return self
