from __future__ import annotations

import asyncio
from typing import List

from ..models.results import RecordStatus, Verdict
from ..utils.dns import Resolver

DMARC_PREFIX = "v=DMARC1"


def validate(txt_records: List[str], domain: str) -> RecordStatus:
    dmarc_records = [r for r in txt_records if r.startswith(DMARC_PREFIX)]

    if not dmarc_records:
        return RecordStatus(
            status=Verdict.FAIL,
            issues=["No DMARC record found"],
            suggestions=[
                f"Add a DMARC record: v=DMARC1; p=quarantine; rua=mailto:dmarc@{domain}",
                "Start with p=none to monitor, then move to p=quarantine or p=reject",
            ],
        )

    record = dmarc_records[0]
    issues: list[str] = []
    suggestions: list[str] = []

    if "p=none" in record:
        issues.append("DMARC policy is set to 'none' (monitoring only)")
        suggestions.append("Change policy to 'quarantine' or 'reject' for enforcement")

    if "rua=" not in record:
        issues.append("No aggregate reporting address (rua) configured")
        suggestions.append(f"Add rua=mailto:dmarc@{domain} to receive reports")

    if "ruf=" not in record and "rua=" not in record:
        suggestions.append("Consider adding ruf= for forensic reports")

    if issues:
        return RecordStatus(status=Verdict.WARN, record=record, issues=issues, suggestions=suggestions)
    return RecordStatus(status=Verdict.PASS, record=record)


async def run(domain: str, resolver: Resolver) -> RecordStatus:
    records = await asyncio.to_thread(resolver.resolve_txt, f"_dmarc.{domain}")
    return validate(records, domain)
