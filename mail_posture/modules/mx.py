from __future__ import annotations

import asyncio
from typing import List

from ..models.results import RecordStatus, Verdict
from ..utils.dns import Resolver


def validate(mx_records: List[str]) -> RecordStatus:
    if not mx_records:
        return RecordStatus(
            status=Verdict.FAIL,
            issues=["No MX records found - cannot receive mail"],
            suggestions=["Add MX records to receive email for this domain"],
        )
    return RecordStatus(status=Verdict.PASS, record=", ".join(mx_records))


async def run(domain: str, resolver: Resolver) -> RecordStatus:
    records = await asyncio.to_thread(resolver.resolve_mx, domain)
    return validate(records)
