from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, run_algorithm, simulate
from .config import DEFAULT_QUANTUM, SWITCH_TIME, SimulationConfig
from .errors import SchedulerError
from .gantt import build_rich_gantt
from .models import Process, ScheduleResult
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def _add_timing_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (ignored by FCFS, default: {DEFAULT_QUANTUM}).",
    )
    parser.add_argument(
        "--switch-time",
        "-s",
        type=int,
        default=SWITCH_TIME,
        help=f"Context switch cost charged between jobs (default: {SWITCH_TIME}).",
    )


def _add_report_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Show the ready and finished queues at every dispatch/finish event.",
    )
    parser.add_argument(
        "--gantt",
        action="store_true",
        help="Show a Gantt chart of the pass.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="Event-driven CPU scheduling simulator (FCFS and Round Robin).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every dispatch, finish and idle event.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    simulate_parser = subparsers.add_parser(
        "simulate",
        help="Run FCFS and then Round Robin on a workload and report both.",
    )
    simulate_parser.add_argument(
        "--workload",
        "-w",
        default="processes.txt",
        help="Path to a text, JSON or CSV workload file (default: processes.txt).",
    )
    _add_timing_args(simulate_parser)
    _add_report_args(simulate_parser)

    run_parser = subparsers.add_parser("run", help="Run one scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=sorted(ALGORITHMS),
        help="Algorithm to use.",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a text, JSON or CSV workload file.",
    )
    _add_timing_args(run_parser)
    _add_report_args(run_parser)

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run several algorithms on the same workload and compare aggregate metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a text, JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=["fcfs", "rr"],
        choices=sorted(ALGORITHMS),
        help="Algorithms to compare (default: fcfs rr).",
    )
    _add_timing_args(compare_parser)

    list_parser = subparsers.add_parser("list", help="Show the processes of a workload file.")
    list_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a text, JSON or CSV workload file.",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("schedsim")
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False, log_time_format="[%X]")
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)


def _print_workload(processes: List[Process], console: Console) -> None:
    table = Table(title=f"Total number of processes: {len(processes)}", box=box.SIMPLE_HEAVY)
    table.add_column("Process", justify="center")
    table.add_column("Arrival", justify="right")
    table.add_column("Service", justify="right")
    for p in processes:
        table.add_row(str(p.process_number), str(p.arrival_time), str(p.service_time))
    console.print(table)


def _print_trace(result: ScheduleResult, console: Console) -> None:
    table = Table(title="Event trace", box=box.SIMPLE_HEAVY)
    table.add_column("Time", justify="right")
    table.add_column("Event")
    table.add_column("Ready queue")
    table.add_column("Finish queue")
    for snap in result.trace:
        table.add_row(
            str(snap.time),
            snap.event,
            " ".join(f"P{n}" for n in snap.ready),
            " ".join(f"P{n}" for n in snap.finished),
        )
    console.print(table)


def _print_result(result: ScheduleResult, console: Console, trace: bool = False, gantt: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")
    console.print(f"[bold]Switch time:[/bold] {result.switch_time}")
    console.print()

    if trace:
        _print_trace(result, console)
        console.print()

    if gantt:
        panel, time_marks = build_rich_gantt(result.timeline, max_width=max(10, console.width - 4))
        console.print(panel)
        if time_marks:
            console.print(time_marks)
        console.print()

    metrics = result.metrics
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")
    sys_table.add_row("Total time", f"{metrics.total_time} time units")
    sys_table.add_row("Total switch time", f"{metrics.total_switch_time} time units")
    sys_table.add_row("Average waiting time", f"{metrics.average_waiting_time:.2f} time units")
    sys_table.add_row("Average turnaround time", f"{metrics.average_turnaround_time:.2f} time units")
    sys_table.add_row("CPU efficiency", f"{metrics.cpu_efficiency:.2f}%")
    console.print(sys_table)

    headers = ["Process", "Arrive", "Service", "Start", "Finish", "Wait", "Turnaround"]
    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h == "Process" else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            str(p.process_number),
            str(p.arrival_time),
            str(p.service_time),
            str(p.start_time),
            str(p.finish_time),
            str(p.waiting_time),
            str(p.turnaround_time),
        )

    console.print(proc_table)
    console.print()


def _print_comparison(results: List[ScheduleResult], title: str, console: Console) -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Total time", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("CPU efficiency", justify="right")

    for result in results:
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            str(result.metrics.total_time),
            f"{result.metrics.average_waiting_time:.2f}",
            f"{result.metrics.average_turnaround_time:.2f}",
            f"{result.metrics.cpu_efficiency:.2f}%",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    console = Console()

    try:
        processes = load_workload(Path(args.workload))

        if args.command == "list":
            _print_workload(processes, console)
            return 0

        config = SimulationConfig(quantum=args.quantum, switch_time=args.switch_time).validate()

        if args.command == "simulate":
            for result in simulate(processes, config=config):
                _print_result(result, console, trace=args.trace, gantt=args.gantt)
            return 0

        if args.command == "run":
            result = run_algorithm(
                args.algorithm,
                processes,
                quantum=config.quantum,
                switch_time=config.switch_time,
            )
            _print_result(result, console, trace=args.trace, gantt=args.gantt)
            return 0

        if args.command == "compare":
            results = simulate(processes, algorithms=args.algorithms, config=config)
            _print_comparison(results, f"Algorithm comparison: {args.workload}", console)
            return 0
    except (SchedulerError, ValueError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
