from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from .config import DEFAULT_QUANTUM, SWITCH_TIME, SimulationConfig, check_quantum, check_switch_time
from .context import SimulationContext
from .errors import EmptyWorkload
from .metrics import compute_pass_metrics
from .models import Process, ScheduleResult

logger = logging.getLogger(__name__)


def _require_workload(processes: Iterable[Process]) -> List[Process]:
    processes = list(processes)
    if not processes:
        raise EmptyWorkload("Cannot schedule an empty workload")
    return processes


def _finish_pass(ctx: SimulationContext, algorithm: str, quantum: Optional[int]) -> ScheduleResult:
    result = ScheduleResult(
        algorithm=algorithm,
        quantum=quantum,
        switch_time=ctx.switch_time,
        processes=list(ctx.order),
        timeline=ctx.timeline,
        trace=ctx.trace,
        total_switch_time=ctx.total_switch_time,
    )
    result.metrics = compute_pass_metrics(result.processes, ctx.total_switch_time)
    logger.info(
        "%s finished %d processes at t=%d (switch overhead %d)",
        algorithm,
        len(result.processes),
        result.metrics.total_time,
        ctx.total_switch_time,
    )
    return result


def schedule_fcfs(
    processes: Iterable[Process],
    quantum: Optional[int] = None,
    switch_time: int = SWITCH_TIME,
) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Records run to completion in arrival order; a switch delay separates
    consecutive jobs but does not follow the last one. ``quantum`` is
    accepted for a uniform signature and ignored.
    """
    processes = _require_workload(processes)
    check_switch_time(switch_time)

    ctx = SimulationContext(processes, switch_time)
    last = len(ctx.order) - 1

    for i, p in enumerate(ctx.order):
        ctx.advance_to(p.arrival_time)

        # The ready/finished views are informational; they never change the order.
        ctx.rescan()
        ctx.snapshot("dispatch")

        p.start_time = p.execution_time = ctx.clock
        p.waiting_time = ctx.clock - p.arrival_time
        logger.debug("t=%d dispatch P%s", ctx.clock, p.process_number)

        ctx.advance(p.service_time)
        p.remaining_service = 0
        p.finish_time = ctx.clock
        p.turnaround_time = p.finish_time - p.arrival_time
        ctx.record_slice(p, p.execution_time, p.finish_time)
        logger.debug("t=%d finish P%s", ctx.clock, p.process_number)

        ctx.rescan()
        ctx.snapshot("finish")

        if i != last:
            ctx.charge_switch()

    return _finish_pass(ctx, "First Come First Serve (non-preemptive)", None)


def schedule_rr(
    processes: Iterable[Process],
    quantum: Optional[int] = DEFAULT_QUANTUM,
    switch_time: int = SWITCH_TIME,
) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    The ready queue head runs for at most one quantum. Arrivals admitted at
    the instant a slice ends are queued ahead of the preempted process. A
    switch is charged after every slice unless the process finished and
    nothing else is ready. An idle CPU skips straight to the next arrival.
    """
    processes = _require_workload(processes)
    if quantum is None:
        quantum = DEFAULT_QUANTUM
    check_quantum(quantum)
    check_switch_time(switch_time)

    ctx = SimulationContext(processes, switch_time)
    ctx.admit_arrivals()

    while not ctx.all_finished():
        if not ctx.ready:
            # Nothing arrives before the next admission, so skip the idle ticks.
            ctx.advance_to(ctx.order[ctx.cursor].arrival_time)
            ctx.admit_arrivals()
            continue

        job = ctx.ready.popleft()
        if job.start_time is None:
            job.start_time = ctx.clock
        job.execution_time = ctx.clock
        ctx.snapshot("dispatch")
        logger.debug("t=%d dispatch P%s (remaining %d)", ctx.clock, job.process_number, job.remaining_service)

        time_spent = min(quantum, job.remaining_service)
        job.remaining_service -= time_spent
        ctx.advance(time_spent)
        ctx.record_slice(job, job.execution_time, ctx.clock)
        ctx.admit_arrivals()

        if job.remaining_service > 0:
            ctx.ready.append(job)
        else:
            job.finish_time = ctx.clock
            job.turnaround_time = job.finish_time - job.arrival_time
            job.waiting_time = job.turnaround_time - job.service_time
            ctx.finished.append(job)
            ctx.snapshot("finish")
            logger.debug("t=%d finish P%s", ctx.clock, job.process_number)

        if ctx.ready or job.remaining_service > 0:
            ctx.charge_switch()
            ctx.admit_arrivals()

    return _finish_pass(ctx, "Round Robin (preemptive)", quantum)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "rr": schedule_rr,
}


def run_algorithm(
    name: str,
    processes: Iterable[Process],
    quantum: Optional[int] = None,
    switch_time: int = SWITCH_TIME,
) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum only matters for round-robin,
    where ``None`` means ``DEFAULT_QUANTUM``.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum, switch_time=switch_time)


def simulate(
    processes: Sequence[Process],
    algorithms: Sequence[str] = ("fcfs", "rr"),
    config: Optional[SimulationConfig] = None,
) -> List[ScheduleResult]:
    """
    Run each algorithm in turn, every one on its own fresh copy of the
    workload, so no pass can observe another pass's state.
    """
    config = (config or SimulationConfig()).validate()
    _require_workload(processes)
    unknown = [name for name in algorithms if name.lower() not in ALGORITHMS]
    if unknown:
        raise ValueError(f"Unknown algorithm(s): {', '.join(unknown)}")

    results = []
    for name in algorithms:
        workload = [p.copy() for p in processes]
        results.append(run_algorithm(name, workload, quantum=config.quantum, switch_time=config.switch_time))
    return results
