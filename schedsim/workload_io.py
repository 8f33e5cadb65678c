from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Mapping

from .errors import MalformedWorkload
from .models import Process

logger = logging.getLogger(__name__)

_FIELDS = ("process_number", "arrival_time", "service_time")


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON, CSV or plain text file into Process records.

    Any suffix other than ``.json`` and ``.csv`` is read as the text format:
    a process count followed by that many
    ``process_number arrival_time service_time`` triples.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
        _check_unique(processes)
    elif suffix == ".csv":
        processes = _load_csv(path)
        _check_unique(processes)
    else:
        processes = parse_workload_text(path.read_text(encoding="utf-8"))

    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def parse_workload_text(text: str) -> List[Process]:
    tokens = text.split()
    if not tokens:
        raise MalformedWorkload("Workload is empty; expected a process count first")

    count = _as_int(tokens[0], "process count")
    if count < 0:
        raise MalformedWorkload(f"Process count must be non-negative, got {count}")

    body = tokens[1:]
    expected = count * len(_FIELDS)
    if len(body) < expected:
        raise MalformedWorkload(
            f"Expected {count} processes ({expected} values) but found only {len(body)} values"
        )
    if len(body) > expected:
        raise MalformedWorkload(
            f"Found {len(body) - expected} values after the {count} declared processes"
        )

    processes: List[Process] = []
    for i in range(count):
        triple = body[i * 3 : i * 3 + 3]
        processes.append(_process_from_mapping(dict(zip(_FIELDS, triple))))

    _check_unique(processes)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise MalformedWorkload(f"Invalid JSON workload: {exc}") from exc

    if not isinstance(raw, list):
        raise MalformedWorkload("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _as_int(value, what: str) -> int:
    if isinstance(value, bool):
        raise MalformedWorkload(f"{what} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedWorkload(f"{what} must be a number, got {value!r}") from exc
    if not number.is_integer():
        raise MalformedWorkload(f"{what} must be a whole number of time units, got {value!r}")
    return int(number)


def _process_from_mapping(mapping: Mapping) -> Process:
    if not isinstance(mapping, Mapping):
        raise MalformedWorkload(f"Invalid process entry: {mapping!r}")

    try:
        values = {name: _as_int(mapping[name], name) for name in _FIELDS}
    except KeyError as exc:
        raise MalformedWorkload(f"Invalid process entry {mapping!r}: missing {exc.args[0]}") from exc
    except MalformedWorkload as exc:
        raise MalformedWorkload(f"Invalid process entry {mapping!r}: {exc}") from exc

    if values["arrival_time"] < 0:
        raise MalformedWorkload(f"Invalid process entry {mapping!r}: arrival_time must be >= 0")
    if values["service_time"] <= 0:
        raise MalformedWorkload(f"Invalid process entry {mapping!r}: service_time must be > 0")

    return Process(**values)


def _check_unique(processes: List[Process]) -> None:
    seen = set()
    for p in processes:
        if p.process_number in seen:
            raise MalformedWorkload(f"Duplicate process_number {p.process_number}")
        seen.add(p.process_number)
