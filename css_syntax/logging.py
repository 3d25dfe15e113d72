"""Structured logging: per-item render logs with timing metrics.

Every item of a rendering run gets an ``ItemLog`` recording when it started,
how long it took, how much HTML it produced and why it failed or was
skipped. ``BatchLog`` aggregates them for reports and JSON output.
"""

from __future__ import annotations

import json
import threading
import time
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum


class ItemStatus(str, Enum):
    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


_ICONS = {
    ItemStatus.COMPLETED: "✅",
    ItemStatus.FAILED: "❌",
    ItemStatus.SKIPPED: "⏭️",
    ItemStatus.STARTED: "…",
}


@dataclass
class ItemLog:
    """Log entry for a single rendered item."""
    item: str
    status: ItemStatus = ItemStatus.STARTED
    timestamp: float = field(default_factory=time.time)
    duration_ms: float | None = None
    output_size: int | None = None
    error: str | None = None
    reason: str | None = None

    def to_dict(self) -> dict:
        d = {"item": self.item, "status": self.status.value, "timestamp": self.timestamp}
        if self.duration_ms is not None:
            d["duration_ms"] = round(self.duration_ms, 3)
        for key in ("output_size", "error", "reason"):
            value = getattr(self, key)
            if value is not None:
                d[key] = value
        return d


@dataclass
class BatchLog:
    """Aggregated log for a rendering run."""
    name: str
    started_at: float = field(default_factory=time.time)
    finished_at: float | None = None
    status: str = "running"
    items: list[ItemLog] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def total_duration_ms(self) -> float | None:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at) * 1000

    def counts(self) -> Counter:
        return Counter(log.status for log in self.items)

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def success_count(self) -> int:
        return self.counts()[ItemStatus.COMPLETED]

    @property
    def error_count(self) -> int:
        return self.counts()[ItemStatus.FAILED]

    @property
    def skip_count(self) -> int:
        return self.counts()[ItemStatus.SKIPPED]

    def finish(self, status: str) -> None:
        self.finished_at = time.time()
        self.status = status

    def to_dict(self) -> dict:
        d = {
            "name": self.name,
            "status": self.status,
            "started_at": self.started_at,
            "counts": {status.value: n for status, n in self.counts().items()},
            "items": [log.to_dict() for log in self.items],
        }
        if self.total_duration_ms is not None:
            d["finished_at"] = self.finished_at
            d["total_duration_ms"] = round(self.total_duration_ms, 3)
        if self.errors:
            d["errors"] = list(self.errors)
        return d

    def to_json(self, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), indent=2 if pretty else None, ensure_ascii=False)

    def summary(self) -> str:
        """Human-readable report, one line per item."""
        elapsed = self.total_duration_ms
        out = [
            f"Batch: {self.name} [{self.status}]",
            f"Duration: {elapsed:.1f}ms" if elapsed is not None else "Duration: running",
            f"Items: {self.success_count}/{self.item_count} rendered, {self.skip_count} skipped",
            "─" * 50,
        ]
        for log in self.items:
            took = "-" if log.duration_ms is None else f"{log.duration_ms:.1f}ms"
            out.append(f"  {_ICONS[log.status]} {log.item} [{took}]")
            note = log.error or log.reason
            if note:
                out.append(f"     └─ {note}")
        return "\n".join(out)


class RenderLogger:
    """Tracks item renders in a batch; safe to call from worker threads."""

    def __init__(self, name: str):
        self.batch = BatchLog(name=name)
        self._open: dict[str, list[ItemLog]] = {}
        self._lock = threading.Lock()

    def start_item(self, item: str) -> None:
        with self._lock:
            log = ItemLog(item=item)
            self._open.setdefault(item, []).append(log)
            self.batch.items.append(log)

    def complete_item(self, item: str, output: str | None = None) -> None:
        with self._lock:
            log = self._close(item, ItemStatus.COMPLETED)
            if output is not None:
                log.output_size = len(output)

    def fail_item(self, item: str, error: str) -> None:
        with self._lock:
            self._close(item, ItemStatus.FAILED).error = error
            self.batch.errors.append(f"{item}: {error}")

    def skip_item(self, item: str, reason: str | None = None) -> None:
        with self._lock:
            self._close(item, ItemStatus.SKIPPED).reason = reason or None

    def finish(self, status: str | None = None) -> BatchLog:
        with self._lock:
            if status is None:
                status = "failed" if self.batch.errors else "completed"
            self.batch.finish(status)
            return self.batch

    def _close(self, item: str, status: ItemStatus) -> ItemLog:
        # Items that never started are logged on the spot, without a duration.
        pending = self._open.get(item)
        log = pending.pop(0) if pending else None
        if pending is not None and not pending:
            del self._open[item]
        if log is None:
            log = ItemLog(item=item)
            self.batch.items.append(log)
        else:
            log.duration_ms = (time.time() - log.timestamp) * 1000
        log.status = status
        return log
