from __future__ import annotations

import json
from typing import Optional

from ..models.results import FieldChange, ScanResult

MISSING = "none"


def _dkim_value(scan: ScanResult) -> str:
    return json.dumps([s.model_dump(mode="json") for s in scan.dkim.selectors], sort_keys=True)


def _compare(changes: list[FieldChange], record_type: str, old: Optional[str], new: Optional[str]) -> None:
    if old != new:
        changes.append(FieldChange(record_type=record_type, old_value=old or MISSING, new_value=new or MISSING))


def detect_changes(old: ScanResult, new: ScanResult) -> list[FieldChange]:
    """Field-level comparison of two scans, one entry per changed record family."""
    changes: list[FieldChange] = []
    _compare(changes, "SPF", old.spf.record, new.spf.record)
    _compare(changes, "DKIM", _dkim_value(old), _dkim_value(new))
    _compare(changes, "DMARC", old.dmarc.record, new.dmarc.record)
    _compare(changes, "BIMI", old.bimi.record, new.bimi.record)
    _compare(changes, "MX", old.mx.record, new.mx.record)
    return changes
