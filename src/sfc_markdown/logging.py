"""Run records: one JSON line per converted file, one CSV row per batch."""

from __future__ import annotations

import csv
import json
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Iterator

STAGES = ("read", "extract", "transform", "write")
SUMMARY_HEADER = ["batch_id", "timestamp", "total", "successes", "failures", "warnings"]


def _isoformat(epoch: float) -> str:
    return datetime.fromtimestamp(epoch, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(slots=True)
class StageTimings:
    """Milliseconds per pipeline stage.

    ``current`` keeps the name of a stage that raised, so failure records can
    say where a file stopped.
    """

    durations: dict[str, float] = field(default_factory=dict)
    current: str | None = None

    @contextmanager
    def measure(self, stage: str) -> Iterator[None]:
        self.current = stage
        start = time.perf_counter()
        try:
            yield
        finally:
            self.durations[stage] = round((time.perf_counter() - start) * 1000, 3)
        self.current = None

    def as_dict(self) -> dict[str, float]:
        return {f"{stage}_ms": self.durations.get(stage, 0.0) for stage in STAGES}


@dataclass(slots=True)
class RunLogEntry:
    run_id: str
    source: str
    status: str
    timings: StageTimings
    warnings: list[str] = field(default_factory=list)
    error_code: str | None = None
    error_message: str | None = None
    output_path: str | None = None
    size_bytes: int = 0
    logged_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "logged_at": _isoformat(self.logged_at),
            "run_id": self.run_id,
            "source": self.source,
            "status": self.status,
            "failed_stage": self.timings.current if self.status == "failure" else None,
            "warnings": list(self.warnings),
            "error_code": self.error_code,
            "error_message": self.error_message,
            "timings": self.timings.as_dict(),
            "output_path": self.output_path,
            "size_bytes": self.size_bytes,
        }


class RunLogger:
    """Append-only JSON-lines log shared by the workers of one run."""

    def __init__(self, log_file: Path) -> None:
        self._log_file = log_file
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._log_file

    def append(self, entry: RunLogEntry) -> None:
        line = json.dumps(entry.to_dict(), ensure_ascii=False)
        with self._lock:
            self._log_file.parent.mkdir(parents=True, exist_ok=True)
            with self._log_file.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")


@dataclass(slots=True)
class BatchSummary:
    started: float = field(default_factory=time.time)
    total: int = 0
    successes: int = 0
    failures: int = 0
    warnings: dict[str, int] = field(default_factory=dict)

    def record(self, ok: bool, warnings: Iterable[str] = ()) -> None:
        if ok:
            self.successes += 1
        else:
            self.failures += 1
        for warning in warnings:
            self.record_warning(warning)

    def record_warning(self, warning: str) -> None:
        self.warnings[warning] = self.warnings.get(warning, 0) + 1

    def as_row(self, batch_id: str) -> list[str]:
        return [
            batch_id,
            _isoformat(self.started),
            str(self.total),
            str(self.successes),
            str(self.failures),
            json.dumps(self.warnings, sort_keys=True),
        ]


def append_summary_row(path: Path, batch_id: str, summary: BatchSummary) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    is_new = not path.exists() or path.stat().st_size == 0
    with path.open("a", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        if is_new:
            writer.writerow(SUMMARY_HEADER)
        writer.writerow(summary.as_row(batch_id))


__all__ = [
    "BatchSummary",
    "RunLogEntry",
    "RunLogger",
    "StageTimings",
    "append_summary_row",
]
