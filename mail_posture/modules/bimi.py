from __future__ import annotations

import asyncio
from typing import List

from ..models.results import RecordStatus, Verdict
from ..utils.dns import Resolver

BIMI_PREFIX = "v=BIMI1"


def validate(txt_records: List[str]) -> RecordStatus:
    # BIMI is optional, so a missing record never fails the scan
    bimi_records = [r for r in txt_records if r.startswith(BIMI_PREFIX)]
    if not bimi_records:
        return RecordStatus(
            status=Verdict.WARN,
            issues=["No BIMI record found"],
            suggestions=[
                "BIMI is optional but displays your logo in supported email clients",
                "Requires verified mark certificate (VMC) from authorized providers",
            ],
        )
    return RecordStatus(status=Verdict.PASS, record=bimi_records[0])


async def run(domain: str, resolver: Resolver) -> RecordStatus:
    records = await asyncio.to_thread(resolver.resolve_txt, f"default._bimi.{domain}")
    return validate(records)
