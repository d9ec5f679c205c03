from __future__ import annotations

import asyncio
import re
from typing import Dict, Iterable, List

from ..models.config import DEFAULT_DKIM_SELECTORS
from ..models.results import DkimResult, DkimSelectorResult, Verdict
from ..utils.dns import Resolver

PUBLIC_KEY_RE = re.compile(r"(?:^|[;\s])p=\s*([A-Za-z0-9+/]*)")

# base64 payload length of a 1024-bit RSA key falls in this band; 2048-bit keys are ~390 chars
WEAK_KEY_MIN = 100
WEAK_KEY_MAX = 200


def public_key_length(record: str) -> int:
    match = PUBLIC_KEY_RE.search(record)
    if not match:
        return 0
    return len(match.group(1))


def is_weak_key(record: str) -> bool:
    return "k=rsa" in record and WEAK_KEY_MIN <= public_key_length(record) < WEAK_KEY_MAX


def check_selector(selector: str, records: List[str]) -> DkimSelectorResult:
    record = records[0]
    issues: list[str] = []
    suggestions: list[str] = []
    if is_weak_key(record):
        issues.append("Weak key size detected (likely 1024-bit)")
        suggestions.append("Upgrade to 2048-bit RSA key for better security")
    return DkimSelectorResult(
        selector=selector,
        status=Verdict.WARN if issues else Verdict.PASS,
        record=record,
        issues=issues,
        suggestions=suggestions,
    )


def missing_result(issue: str = "No DKIM records found") -> DkimResult:
    return DkimResult(
        status=Verdict.FAIL,
        selectors=[
            DkimSelectorResult(
                selector="none",
                status=Verdict.FAIL,
                issues=[issue],
                suggestions=[
                    "Add DKIM signing to your email infrastructure",
                    "Check with your email provider for DKIM setup instructions",
                    "Common selectors: default, google, k1, s1, selector1",
                ],
            )
        ],
    )


def validate(selector_records: Dict[str, List[str]]) -> DkimResult:
    """Build the DKIM verdict from probe answers, keeping the probe order."""
    selectors = [check_selector(name, recs) for name, recs in selector_records.items() if recs]
    if not selectors:
        return missing_result()
    has_warnings = any(s.status == Verdict.WARN for s in selectors)
    return DkimResult(status=Verdict.WARN if has_warnings else Verdict.PASS, selectors=selectors)


async def probe(
    domain: str,
    resolver: Resolver,
    selectors: Iterable[str] = DEFAULT_DKIM_SELECTORS,
    concurrent: bool = True,
) -> Dict[str, List[str]]:
    names = list(selectors)
    if concurrent:
        answers = await asyncio.gather(
            *(asyncio.to_thread(resolver.resolve_txt, f"{s}._domainkey.{domain}") for s in names)
        )
    else:
        answers = []
        for s in names:
            answers.append(await asyncio.to_thread(resolver.resolve_txt, f"{s}._domainkey.{domain}"))
    return dict(zip(names, answers))


async def run(
    domain: str,
    resolver: Resolver,
    selectors: Iterable[str] = DEFAULT_DKIM_SELECTORS,
    concurrent: bool = True,
) -> DkimResult:
    return validate(await probe(domain, resolver, selectors, concurrent))
