from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from ..models.config import ScanConfig
from ..models.results import DkimResult, RecordStatus, ScanResult, ScanSummary, Verdict
from ..modules import bimi, dkim, dmarc, mx, spf
from ..utils.dns import DnsClient, Resolver
from ..utils.normalize import normalize_domain

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "internal scan error"

FamilyResult = Union[RecordStatus, DkimResult]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _internal_error(family: str) -> FamilyResult:
    if family == "dkim":
        return dkim.missing_result(INTERNAL_ERROR)
    return RecordStatus(status=Verdict.FAIL, issues=[INTERNAL_ERROR])


async def _wrap_family(family: str, domain: str, coro) -> FamilyResult:
    try:
        return await coro
    except Exception:
        logger.exception("validator failed", extra={"domain": domain, "family": family})
        return _internal_error(family)


def summarize(spf_status: RecordStatus, dkim_result: DkimResult, dmarc_status: RecordStatus, mx_status: RecordStatus) -> ScanSummary:
    # BIMI never counts, and MX only counts when it fails
    critical = sum(1 for s in (spf_status, dkim_result, dmarc_status, mx_status) if s.status == Verdict.FAIL)
    has_warnings = any(s.status == Verdict.WARN for s in (spf_status, dkim_result, dmarc_status))
    if critical > 0:
        overall = Verdict.FAIL
    elif has_warnings:
        overall = Verdict.WARN
    else:
        overall = Verdict.PASS
    return ScanSummary(overall=overall, critical_issues=critical)


async def scan_async(
    domain: str,
    resolver: Optional[Resolver] = None,
    config: Optional[ScanConfig] = None,
    clock: Callable[[], datetime] = _utcnow,
) -> ScanResult:
    config = config or ScanConfig()
    resolver = resolver or DnsClient(timeout_seconds=config.timeout_seconds)
    domain = normalize_domain(domain)

    families = {
        "spf": spf.run(domain, resolver),
        "dkim": dkim.run(domain, resolver, config.dkim_selectors, config.concurrent),
        "dmarc": dmarc.run(domain, resolver),
        "bimi": bimi.run(domain, resolver),
        "mx": mx.run(domain, resolver),
    }
    wrapped = [_wrap_family(name, domain, coro) for name, coro in families.items()]
    if config.concurrent:
        results = await asyncio.gather(*wrapped)
    else:
        results = [await w for w in wrapped]
    out = dict(zip(families.keys(), results))

    summary = summarize(out["spf"], out["dkim"], out["dmarc"], out["mx"])
    logger.debug("scan complete", extra={"domain": domain, "overall": summary.overall.value})
    return ScanResult(
        domain=domain,
        scanned_at=clock(),
        spf=out["spf"],
        dkim=out["dkim"],
        dmarc=out["dmarc"],
        bimi=out["bimi"],
        mx=out["mx"],
        summary=summary,
    )


def scan(
    domain: str,
    resolver: Optional[Resolver] = None,
    config: Optional[ScanConfig] = None,
    clock: Callable[[], datetime] = _utcnow,
) -> ScanResult:
    """Synchronous entry point for on-demand scans."""
    return asyncio.run(scan_async(domain, resolver, config, clock))
