from __future__ import annotations

import sqlite3
import threading
from collections import defaultdict
from pathlib import Path
from typing import Optional

from ..models.results import AlertRecord, DiffResult, ScanResult


class ScanStore:
    def save(self, domain_id: str, scan: ScanResult) -> None:
        raise NotImplementedError

    def load_previous(self, domain_id: str) -> Optional[ScanResult]:
        raise NotImplementedError

    def save_alert(self, alert: AlertRecord) -> None:
        raise NotImplementedError

    def alerts(self, domain_id: str) -> list[AlertRecord]:
        raise NotImplementedError

    def save_diff(self, domain_id: str, diff: DiffResult) -> None:
        raise NotImplementedError

    def diffs(self, domain_id: str) -> list[DiffResult]:
        raise NotImplementedError


class MemoryScanStore(ScanStore):
    def __init__(self) -> None:
        self._scans: dict[str, list[ScanResult]] = defaultdict(list)
        self._alerts: dict[str, list[AlertRecord]] = defaultdict(list)
        self._diffs: dict[str, list[DiffResult]] = defaultdict(list)
        self._lock = threading.Lock()

    def save(self, domain_id: str, scan: ScanResult) -> None:
        with self._lock:
            self._scans[domain_id].append(scan)

    def load_previous(self, domain_id: str) -> Optional[ScanResult]:
        with self._lock:
            history = self._scans.get(domain_id)
            return history[-1] if history else None

    def history(self, domain_id: str) -> list[ScanResult]:
        with self._lock:
            return list(self._scans.get(domain_id, []))

    def save_alert(self, alert: AlertRecord) -> None:
        with self._lock:
            self._alerts[alert.domain_id].append(alert)

    def alerts(self, domain_id: str) -> list[AlertRecord]:
        with self._lock:
            return list(self._alerts.get(domain_id, []))

    def save_diff(self, domain_id: str, diff: DiffResult) -> None:
        with self._lock:
            self._diffs[domain_id].append(diff)

    def diffs(self, domain_id: str) -> list[DiffResult]:
        with self._lock:
            return list(self._diffs.get(domain_id, []))


class SqliteScanStore(ScanStore):
    def __init__(self, path: str) -> None:
        self.path = path
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        with sqlite3.connect(self.path) as conn:
            conn.execute(
                "CREATE TABLE IF NOT EXISTS scans ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, domain_id TEXT NOT NULL, scanned_at TEXT, payload TEXT)"
            )
            conn.execute("CREATE INDEX IF NOT EXISTS scans_domain ON scans (domain_id, id)")
            conn.execute(
                "CREATE TABLE IF NOT EXISTS alerts ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, domain_id TEXT NOT NULL, created_at TEXT, payload TEXT)"
            )
            conn.execute(
                "CREATE TABLE IF NOT EXISTS diffs ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, domain_id TEXT NOT NULL, severity TEXT, payload TEXT)"
            )
            conn.commit()

    def save(self, domain_id: str, scan: ScanResult) -> None:
        with sqlite3.connect(self.path) as conn:
            conn.execute(
                "INSERT INTO scans (domain_id, scanned_at, payload) VALUES (?, ?, ?)",
                (domain_id, scan.scanned_at.isoformat(), scan.model_dump_json()),
            )
            conn.commit()

    def load_previous(self, domain_id: str) -> Optional[ScanResult]:
        with sqlite3.connect(self.path) as conn:
            row = conn.execute(
                "SELECT payload FROM scans WHERE domain_id=? ORDER BY id DESC LIMIT 1", (domain_id,)
            ).fetchone()
        if not row:
            return None
        return ScanResult.model_validate_json(row[0])

    def save_alert(self, alert: AlertRecord) -> None:
        with sqlite3.connect(self.path) as conn:
            conn.execute(
                "INSERT INTO alerts (domain_id, created_at, payload) VALUES (?, ?, ?)",
                (alert.domain_id, alert.created_at.isoformat(), alert.model_dump_json()),
            )
            conn.commit()

    def alerts(self, domain_id: str) -> list[AlertRecord]:
        with sqlite3.connect(self.path) as conn:
            rows = conn.execute(
                "SELECT payload FROM alerts WHERE domain_id=? ORDER BY id", (domain_id,)
            ).fetchall()
        return [AlertRecord.model_validate_json(r[0]) for r in rows]

    def save_diff(self, domain_id: str, diff: DiffResult) -> None:
        with sqlite3.connect(self.path) as conn:
            conn.execute(
                "INSERT INTO diffs (domain_id, severity, payload) VALUES (?, ?, ?)",
                (domain_id, diff.severity.value, diff.model_dump_json()),
            )
            conn.commit()

    def diffs(self, domain_id: str) -> list[DiffResult]:
        with sqlite3.connect(self.path) as conn:
            rows = conn.execute(
                "SELECT payload FROM diffs WHERE domain_id=? ORDER BY id", (domain_id,)
            ).fetchall()
        return [DiffResult.model_validate_json(r[0]) for r in rows]


def build_store(store_mode: str, path: str) -> ScanStore:
    if store_mode == "sqlite":
        return SqliteScanStore(path)
    if store_mode == "memory":
        return MemoryScanStore()
    raise ValueError(f"unknown store mode: {store_mode}")
