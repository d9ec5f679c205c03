from __future__ import annotations

from typing import Iterable

from ..models.results import DiffResult, NormalizedRecord, RecordChange, Severity, Verdict


def _keyed(records: Iterable[NormalizedRecord]) -> dict[tuple[str, str], NormalizedRecord]:
    return {record.key: record for record in records}


def _severity(records: list[NormalizedRecord], changed: list[RecordChange]) -> Severity:
    severity = Severity.info
    for record in records:
        if record.verdict == Verdict.FAIL:
            severity = Severity.fail
            break
        if record.verdict == Verdict.WARN:
            severity = Severity.warn
    if changed and severity == Severity.info:
        severity = Severity.warn
    return severity


def diff_records(old_records: list[NormalizedRecord], new_records: list[NormalizedRecord]) -> DiffResult:
    """Compare two record sets of the same domain by (record_type, selector)."""
    old_map = _keyed(old_records)
    new_map = _keyed(new_records)

    added: list[RecordChange] = []
    removed: list[RecordChange] = []
    changed: list[RecordChange] = []

    for key, new in new_map.items():
        old = old_map.get(key)
        if old is None:
            added.append(RecordChange(record_type=new.record_type, selector=new.selector, new_value=new.raw_value))
        elif old.value_hash != new.value_hash:
            changed.append(
                RecordChange(
                    record_type=new.record_type,
                    selector=new.selector,
                    old_value=old.raw_value,
                    new_value=new.raw_value,
                )
            )

    for key, old in old_map.items():
        if key not in new_map:
            removed.append(RecordChange(record_type=old.record_type, selector=old.selector, old_value=old.raw_value))

    severity = _severity(list(old_records) + list(new_records), changed)
    return DiffResult(added=added, removed=removed, changed=changed, severity=severity)
