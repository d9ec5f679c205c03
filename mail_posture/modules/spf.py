from __future__ import annotations

import asyncio
import re
from typing import List

from ..models.results import RecordStatus, Verdict
from ..utils.dns import Resolver

SPF_PREFIX = "v=spf1"
MAX_DNS_LOOKUPS = 10

INCLUDE_RE = re.compile(r"include:")


def validate(txt_records: List[str]) -> RecordStatus:
    spf_records = [r for r in txt_records if r.startswith(SPF_PREFIX)]

    if not spf_records:
        return RecordStatus(
            status=Verdict.FAIL,
            issues=["No SPF record found"],
            suggestions=[
                "Add an SPF record: v=spf1 include:_spf.google.com ~all",
                "Consult your email provider for their recommended SPF configuration",
            ],
        )

    if len(spf_records) > 1:
        return RecordStatus(
            status=Verdict.FAIL,
            record=spf_records[0],
            issues=["Multiple SPF records found - only one is allowed"],
            suggestions=["Combine all SPF records into a single record"],
        )

    record = spf_records[0]
    issues: list[str] = []
    suggestions: list[str] = []

    if not any(mech in record for mech in ("include:", "ip4:", "ip6:")):
        issues.append("SPF record doesn't specify any authorized senders")
        suggestions.append("Add include: or ip4:/ip6: mechanisms to authorize senders")

    if record.endswith("+all"):
        issues.append("SPF record ends with +all (allows all senders)")
        suggestions.append("Change +all to ~all (soft fail) or -all (hard fail)")

    if record.endswith("?all"):
        issues.append("SPF record ends with ?all (neutral policy)")
        suggestions.append("Change ?all to ~all (soft fail) or -all (hard fail)")

    lookups = len(INCLUDE_RE.findall(record))
    if lookups > MAX_DNS_LOOKUPS:
        issues.append(f"SPF record has {lookups} DNS lookups (max {MAX_DNS_LOOKUPS} allowed)")
        suggestions.append(f"Reduce the number of include: statements to stay under the {MAX_DNS_LOOKUPS} lookup limit")

    if issues:
        return RecordStatus(status=Verdict.WARN, record=record, issues=issues, suggestions=suggestions)
    return RecordStatus(status=Verdict.PASS, record=record)


async def run(domain: str, resolver: Resolver) -> RecordStatus:
    records = await asyncio.to_thread(resolver.resolve_txt, domain)
    return validate(records)
