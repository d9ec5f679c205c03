from __future__ import annotations

import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class QueryLedgerEntry:
    timestamp: str
    query_name: str
    record_type: str
    status: str
    answers: int = 0
    error: str | None = None
    duration_ms: int = 0


@dataclass
class QueryLedger:
    entries: list[QueryLedgerEntry] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def add(self, **kwargs: Any) -> None:
        entry = QueryLedgerEntry(timestamp=datetime.now(timezone.utc).isoformat(), **kwargs)
        with self._lock:
            self.entries.append(entry)

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            entries = [e.__dict__ for e in self.entries]
        return {"entries": entries, "totals": self.totals()}

    def totals(self) -> dict[str, Any]:
        counts = defaultdict(int)
        errors = defaultdict(int)
        duration_ms = 0
        with self._lock:
            entries = list(self.entries)
        for entry in entries:
            counts[entry.record_type] += 1
            if entry.status != "ok":
                errors[entry.record_type] += 1
            duration_ms += entry.duration_ms
        return {
            "counts": dict(counts),
            "errors": dict(errors),
            "duration_ms": duration_ms,
            "total_entries": len(entries),
        }
