from __future__ import annotations

import math
from typing import Dict, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice


def _scale(slices: List[ScheduledSlice], max_width: int) -> int:
    makespan = max(s.end_time for s in slices)
    return max(1, math.ceil(makespan / max_width))


def build_rich_gantt(slices: List[ScheduledSlice], max_width: int = 100) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    slices = sorted(slices, key=lambda s: (s.start_time, s.end_time))
    scale = _scale(slices, max_width)

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    color_by_number: Dict[int, str] = {}

    def number_color(number: int) -> str:
        if number not in color_by_number:
            idx = len(color_by_number) % len(colors)
            color_by_number[number] = colors[idx]
        return color_by_number[number]

    timeline = Text()
    labels = Text()
    time_marks = "0"
    last_col = 0

    for sl in slices:
        start_col = sl.start_time // scale
        gap = start_col - last_col
        if gap > 0:
            timeline.append(" " * gap)
            labels.append(" " * gap)
            time_marks += f" {sl.start_time}"

        width = max(1, sl.end_time // scale - start_col)
        color = number_color(sl.process_number)

        timeline.append(" " * width, style=f"on {color}")
        labels.append(f"P{sl.process_number}"[:width].ljust(width), style="bold")

        last_col = start_col + width
        time_marks += f" {sl.end_time}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    title = "Gantt Chart" if scale == 1 else f"Gantt Chart (1 column = {scale} time units)"
    panel = Panel.fit(table, title=title)
    return panel, time_marks
