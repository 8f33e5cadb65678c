from __future__ import annotations

from typing import Sequence

from .errors import EmptyWorkload, IncompletePass, InvariantViolation
from .models import PassMetrics, Process


def _check_complete(processes: Sequence[Process]) -> None:
    if not processes:
        raise EmptyWorkload("No processes were scheduled")

    pending = [p.process_number for p in processes if not p.finished]
    if pending:
        raise IncompletePass(f"Processes not finished yet: {pending}")

    for p in processes:
        if p.finish_time < p.arrival_time:
            raise InvariantViolation(
                f"Process {p.process_number}: finished at {p.finish_time} before arriving at {p.arrival_time}"
            )
        if p.turnaround_time != p.finish_time - p.arrival_time:
            raise InvariantViolation(
                f"Process {p.process_number}: turnaround {p.turnaround_time} != "
                f"finish {p.finish_time} - arrival {p.arrival_time}"
            )
        if p.waiting_time != p.turnaround_time - p.service_time or p.waiting_time < 0:
            raise InvariantViolation(
                f"Process {p.process_number}: waiting time {p.waiting_time} is inconsistent "
                f"with turnaround {p.turnaround_time} and service {p.service_time}"
            )


def average_waiting_time(processes: Sequence[Process]) -> float:
    if not processes:
        raise EmptyWorkload("Average waiting time is undefined for an empty workload")
    return sum(p.waiting_time for p in processes) / len(processes)


def cpu_efficiency(processes: Sequence[Process], total_switch_time: int) -> float:
    """
    Percentage of elapsed service-plus-switch time spent in actual service.
    """
    if not processes:
        raise EmptyWorkload("CPU efficiency is undefined for an empty workload")
    service = sum(p.service_time for p in processes)
    return service / (service + total_switch_time) * 100


def compute_pass_metrics(processes: Sequence[Process], total_switch_time: int) -> PassMetrics:
    """
    Reduce the records of a completed pass into its aggregate metrics.

    Raises ``EmptyWorkload`` for no records and ``IncompletePass`` if any
    record still has service left.
    """
    _check_complete(processes)

    n = len(processes)
    return PassMetrics(
        total_time=max(p.finish_time for p in processes),
        total_switch_time=total_switch_time,
        average_waiting_time=average_waiting_time(processes),
        average_turnaround_time=sum(p.turnaround_time for p in processes) / n,
        cpu_efficiency=cpu_efficiency(processes, total_switch_time),
    )

