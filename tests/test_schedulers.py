import pytest

from schedsim.algorithms import run_algorithm, schedule_fcfs, schedule_rr, simulate
from schedsim.config import SimulationConfig
from schedsim.errors import EmptyWorkload, InvalidQuantum
from schedsim.models import Process


def _procs():
    return [
        Process(1, arrival_time=0, service_time=5),
        Process(2, arrival_time=0, service_time=3),
    ]


def _mixed():
    return [
        Process(4, arrival_time=30, service_time=12),
        Process(1, arrival_time=0, service_time=75),
        Process(2, arrival_time=10, service_time=40),
        Process(3, arrival_time=10, service_time=25),
        Process(7, arrival_time=200, service_time=60),
    ]


def _slices(res):
    return [(s.process_number, s.start_time, s.end_time) for s in res.timeline]


def test_fcfs_simultaneous_arrivals():
    res = schedule_fcfs(_procs(), switch_time=2)
    p1, p2 = res.processes
    assert p1.finish_time == 5
    assert p2.execution_time == 7
    assert p2.finish_time == 10
    assert p2.waiting_time == 7
    assert res.total_switch_time == 2
    assert res.metrics.total_time == 10
    assert res.metrics.average_waiting_time == 3.5
    assert res.metrics.cpu_efficiency == pytest.approx(80.0)


def test_fcfs_sorts_by_arrival_keeping_input_order_on_ties():
    procs = [
        Process(3, arrival_time=4, service_time=2),
        Process(1, arrival_time=0, service_time=3),
        Process(2, arrival_time=0, service_time=1),
    ]
    res = schedule_fcfs(procs)
    assert [p.process_number for p in res.processes] == [1, 2, 3]
    assert _slices(res) == [(1, 0, 3), (2, 5, 6), (3, 8, 10)]
    assert [p.waiting_time for p in res.processes] == [0, 5, 4]


def test_fcfs_idle_gap_jumps_to_arrival():
    procs = [Process(1, 0, 3), Process(2, 10, 4)]
    res = schedule_fcfs(procs)
    assert _slices(res) == [(1, 0, 3), (2, 10, 14)]
    assert res.processes[1].waiting_time == 0
    assert res.total_switch_time == 2
    assert res.metrics.cpu_efficiency == pytest.approx(7 / 9 * 100)


def test_fcfs_trace_matches_record_state():
    res = schedule_fcfs(_procs())
    assert [(s.time, s.event, s.ready, s.finished) for s in res.trace] == [
        (0, "dispatch", (1, 2), ()),
        (5, "finish", (2,), (1,)),
        (7, "dispatch", (2,), (1,)),
        (10, "finish", (), (1, 2)),
    ]


def test_rr_quantum_4_short_job_not_starved():
    procs = [Process(1, 0, 10), Process(2, 0, 4)]
    res = schedule_rr(procs, quantum=4, switch_time=2)
    assert _slices(res) == [(1, 0, 4), (2, 6, 10), (1, 12, 16), (1, 18, 20)]

    p1, p2 = res.processes
    # One quantum of P1 plus one switch, then P2's own four units.
    assert p2.finish_time == 4 + 2 + 4
    assert p2.waiting_time == 6
    assert p1.finish_time == 20
    assert p1.waiting_time == 10
    assert res.total_switch_time == 6
    assert res.metrics.cpu_efficiency == pytest.approx(14 / 20 * 100)


def test_rr_new_arrival_goes_ahead_of_preempted_process():
    procs = [Process(1, 0, 4), Process(2, 2, 2)]
    res = schedule_rr(procs, quantum=2, switch_time=0)
    assert _slices(res) == [(1, 0, 2), (2, 2, 4), (1, 4, 6)]


def test_rr_arrival_during_switch_queues_behind_preempted_process():
    procs = [Process(1, 0, 4), Process(2, 0, 2), Process(3, 3, 1)]
    res = schedule_rr(procs, quantum=2, switch_time=2)
    assert _slices(res) == [(1, 0, 2), (2, 4, 6), (1, 8, 10), (3, 12, 13)]
    p1, p2, p3 = res.processes
    assert (p1.finish_time, p1.waiting_time) == (10, 6)
    assert (p2.finish_time, p2.waiting_time) == (6, 4)
    assert (p3.finish_time, p3.waiting_time) == (13, 9)
    assert res.total_switch_time == 6


def test_rr_preempted_process_pays_switch_even_when_alone():
    res = schedule_rr([Process(1, 0, 10)], quantum=3, switch_time=2)
    assert _slices(res) == [(1, 0, 3), (1, 5, 8), (1, 10, 13), (1, 15, 16)]
    assert res.total_switch_time == 6
    assert res.processes[0].finish_time == 16
    assert res.processes[0].waiting_time == 6


def test_rr_idle_until_first_arrival():
    res = schedule_rr([Process(1, 5, 3)], quantum=50)
    p = res.processes[0]
    assert p.start_time == 5
    assert p.finish_time == 8
    assert res.total_switch_time == 0


def test_rr_long_idle_gap_jumps_to_next_arrival():
    procs = [Process(1, 0, 2), Process(2, 10**9, 3)]
    res = schedule_rr(procs, quantum=4)
    assert _slices(res) == [(1, 0, 2), (2, 10**9, 10**9 + 3)]
    assert res.processes[1].waiting_time == 0
    assert res.total_switch_time == 0


def test_rr_trace_records_queue_membership():
    procs = [Process(1, 0, 10), Process(2, 0, 4)]
    res = schedule_rr(procs, quantum=4)
    first = res.trace[0]
    assert (first.time, first.event, first.ready, first.finished) == (0, "dispatch", (2,), ())
    finish = [s for s in res.trace if s.event == "finish"]
    assert [(s.time, s.finished) for s in finish] == [(10, (2,)), (20, (2, 1))]


@pytest.mark.parametrize("algorithm", ["fcfs", "rr"])
def test_single_process(algorithm):
    res = run_algorithm(algorithm, [Process(9, 7, 4)], quantum=4)
    p = res.processes[0]
    assert p.finish_time == 11
    assert p.waiting_time == 0
    assert p.turnaround_time == 4
    assert res.metrics.cpu_efficiency == 100.0


@pytest.mark.parametrize("quantum", [1, 7, 50, 500])
def test_rr_time_accounting(quantum):
    res = schedule_rr(_mixed(), quantum=quantum)
    for p in res.processes:
        assert p.finished
        assert p.turnaround_time >= p.service_time
        assert p.waiting_time + p.service_time == p.turnaround_time
    assert sum(s.end_time - s.start_time for s in res.timeline) == sum(p.service_time for p in res.processes)


def test_fcfs_time_accounting():
    res = schedule_fcfs(_mixed())
    last = res.processes[-1]
    assert last.finish_time >= last.arrival_time + last.service_time

    busy = sum(p.service_time for p in res.processes) + res.total_switch_time
    idle = res.metrics.total_time - busy
    assert idle == 200 - (75 + 2 + 40 + 2 + 25 + 2 + 12 + 2)
    assert res.total_switch_time == 2 * (len(res.processes) - 1)


@pytest.mark.parametrize("algorithm", ["fcfs", "rr"])
def test_rerun_is_idempotent(algorithm):
    procs = _mixed()
    first = run_algorithm(algorithm, procs, quantum=10)
    finish_first = [p.finish_time for p in first.processes]
    second = run_algorithm(algorithm, procs, quantum=10)
    assert first.metrics == second.metrics
    assert [p.finish_time for p in second.processes] == finish_first


def test_simulate_runs_each_pass_on_fresh_copies():
    procs = _mixed()
    fcfs, rr = simulate(procs, config=SimulationConfig(quantum=10))

    assert fcfs.algorithm.startswith("First Come")
    assert rr.algorithm.startswith("Round Robin")
    assert rr.quantum == 10
    assert not set(map(id, fcfs.processes)) & set(map(id, rr.processes))
    assert fcfs.metrics == schedule_fcfs(_mixed()).metrics
    assert rr.metrics == schedule_rr(_mixed(), quantum=10).metrics

    for p in procs:
        assert p.finish_time is None
        assert p.remaining_service == p.service_time


def test_empty_workload_rejected():
    with pytest.raises(EmptyWorkload):
        schedule_fcfs([])
    with pytest.raises(EmptyWorkload):
        schedule_rr([], quantum=4)
    with pytest.raises(EmptyWorkload):
        simulate([])


@pytest.mark.parametrize("quantum", [0, -3])
def test_rr_rejects_non_positive_quantum(quantum):
    with pytest.raises(InvalidQuantum):
        schedule_rr(_procs(), quantum=quantum)


def test_rejected_pass_leaves_records_untouched():
    res = schedule_fcfs(_procs())
    finish = [p.finish_time for p in res.processes]
    with pytest.raises(ValueError):
        schedule_rr(res.processes, quantum=0)
    assert [p.finish_time for p in res.processes] == finish
    assert all(p.finished for p in res.processes)


def test_unknown_algorithm():
    with pytest.raises(ValueError):
        run_algorithm("sjf", _procs())
    with pytest.raises(ValueError):
        simulate(_procs(), algorithms=("fcfs", "mlfq"))
