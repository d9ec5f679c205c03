from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from ..models.results import (
    AlertRecord,
    CycleReport,
    DomainOutcome,
    FieldChange,
    MonitoredDomain,
    ScanResult,
)
from ..modules.change_detect import detect_changes
from ..modules.diff import diff_records
from ..modules.scoring import calculate_score
from ..utils.normalize import normalize_records
from .context import MonitorContext
from .scanner import scan

logger = logging.getLogger(__name__)

PlanCheck = Callable[[str], bool]


class MonitorError(RuntimeError):
    pass


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class MonitoringLoop:
    """Re-scans monitored domains on a fixed cadence and alerts on record changes.

    Domains are processed one at a time. A failure while handling one domain is
    logged and recorded in the cycle report; the remaining domains still run.
    ``stop()`` takes effect between domains, never in the middle of one.
    """

    def __init__(self, context: MonitorContext, plan_check: Optional[PlanCheck] = None) -> None:
        self.context = context
        self.plan_check = plan_check
        self._stop = threading.Event()

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def run_cycle(self, domains: Iterable[MonitoredDomain]) -> CycleReport:
        report = CycleReport(started_at=self.context.clock())
        domains = list(domains)
        logger.info("monitoring cycle started", extra={"domains": len(domains)})
        for domain in domains:
            if self.stopped:
                report.stopped_early = True
                logger.info("monitoring cycle stopped", extra={"processed": len(report.outcomes)})
                break
            report.outcomes.append(self._process(domain))
        report.finished_at = self.context.clock()
        logger.info(
            "monitoring cycle completed",
            extra={
                "scanned": report.count("scanned"),
                "skipped": report.count("skipped"),
                "failed": report.count("failed"),
                "alerts": report.alerts,
            },
        )
        return report

    def run_forever(
        self,
        domains_provider: Callable[[], Iterable[MonitoredDomain]],
        max_cycles: Optional[int] = None,
    ) -> list[CycleReport]:
        if max_cycles is None and self.context.config.interval_seconds <= 0:
            raise MonitorError("interval_hours must be positive when max_cycles is not set")
        reports: list[CycleReport] = []
        while not self.stopped:
            reports.append(self.run_cycle(domains_provider()))
            if max_cycles is not None and len(reports) >= max_cycles:
                break
            self._stop.wait(self.context.config.interval_seconds)
        return reports

    def _skip_reason(self, domain: MonitoredDomain) -> Optional[str]:
        if not domain.monitoring_enabled:
            return "monitoring disabled"
        if not domain.owner_id:
            return "no owner"
        if self.plan_check is not None and not self.plan_check(domain.owner_id):
            return "plan does not include monitoring"
        return None

    def _scanned_recently(self, previous: Optional[ScanResult]) -> bool:
        if previous is None:
            return False
        window = timedelta(seconds=self.context.config.interval_seconds)
        return _as_utc(self.context.clock()) - _as_utc(previous.scanned_at) < window

    def _process(self, domain: MonitoredDomain) -> DomainOutcome:
        outcome = DomainOutcome(domain_id=domain.id, domain=domain.name, status="scanned")
        try:
            previous = None
            reason = self._skip_reason(domain)
            if not reason:
                # loaded before saving so a new scan is never compared with itself
                previous = self.context.store.load_previous(domain.id)
                if self._scanned_recently(previous):
                    reason = "scanned within interval"
            if reason:
                logger.info("skipping domain", extra={"domain": domain.name, "reason": reason})
                outcome.status = "skipped"
                outcome.error = reason
                return outcome

            result = scan(domain.name, self.context.resolver, self.context.config.scan, self.context.clock)
            outcome.score = calculate_score(result).score
            self.context.store.save(domain.id, result)
            logger.info("scan stored", extra={"domain": domain.name, "score": outcome.score})

            if previous is None:
                return outcome

            diff = diff_records(normalize_records(previous), normalize_records(result))
            if not diff.is_empty:
                outcome.severity = diff.severity
                outcome.diff = diff
                self.context.store.save_diff(domain.id, diff)
                logger.warning("record diff detected", extra={"domain": domain.name, "severity": diff.severity.value})

            for change in detect_changes(previous, result):
                if self._alert(domain, change):
                    outcome.alerts += 1
            return outcome
        except Exception as exc:
            logger.exception("monitoring failed for domain", extra={"domain": domain.name})
            outcome.status = "failed"
            outcome.error = str(exc)
            return outcome

    def _alert(self, domain: MonitoredDomain, change: FieldChange) -> bool:
        alert = AlertRecord(
            domain_id=domain.id,
            domain=domain.name,
            record_type=change.record_type,
            old_value=change.old_value,
            new_value=change.new_value,
            created_at=self.context.clock(),
        )
        try:
            self.context.store.save_alert(alert)
            self.context.notifier.dispatch(domain.id, change.record_type, change.old_value, change.new_value)
        except Exception:
            logger.exception(
                "alert dispatch failed", extra={"domain": domain.name, "record_type": change.record_type}
            )
            return False
        return True


def run_monitoring_cycle(
    domains: Iterable[MonitoredDomain],
    plan_check: Optional[PlanCheck],
    context: MonitorContext,
) -> CycleReport:
    return MonitoringLoop(context, plan_check).run_cycle(domains)
