from __future__ import annotations

import hashlib
import re

from ..models.results import NormalizedRecord, ScanResult, Verdict

DOMAIN_RE = re.compile(r"^(?!-)[A-Za-z0-9.-]{1,253}(?<!-)$")


def normalize_domain(domain: str) -> str:
    value = domain.strip().lower()
    value = value.rstrip(".")
    return value


def is_valid_domain(name: str) -> bool:
    if not DOMAIN_RE.match(name):
        return False
    if ".." in name or "." not in name:
        return False
    return True


def hash_value(value: str) -> str:
    """Short content fingerprint used for change detection, not integrity."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:16]


def _record(record_type: str, selector: str | None, value: str | None, verdict: Verdict) -> NormalizedRecord:
    raw = value or ""
    return NormalizedRecord(
        record_type=record_type,
        selector=selector,
        value_hash=hash_value(raw),
        raw_value=raw,
        verdict=verdict,
    )


def _split_mx(record: str | None) -> list[tuple[str, str]]:
    exchanges = []
    for item in (record or "").split(","):
        item = item.strip()
        if not item:
            continue
        parts = item.split(None, 1)
        host = parts[-1].lower()
        exchanges.append((host, item))
    return exchanges


def normalize_records(scan: ScanResult) -> list[NormalizedRecord]:
    """Flatten a scan into diffable records keyed by (record_type, selector)."""
    records = [_record("spf", None, scan.spf.record, scan.spf.status)]
    for sel in scan.dkim.selectors:
        records.append(_record("dkim", sel.selector, sel.record, sel.status))
    records.append(_record("dmarc", None, scan.dmarc.record, scan.dmarc.status))
    records.append(_record("bimi", None, scan.bimi.record, scan.bimi.status))

    exchanges = _split_mx(scan.mx.record)
    if exchanges:
        for host, value in exchanges:
            records.append(_record("mx", host, value, scan.mx.status))
    else:
        records.append(_record("mx", None, None, scan.mx.status))

    seen = set()
    out = []
    for record in records:
        if record.key in seen:
            continue
        seen.add(record.key)
        out.append(record)
    return out
