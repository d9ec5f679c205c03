from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Verdict(str, Enum):
    PASS = "PASS"
    WARN = "WARN"
    FAIL = "FAIL"
    INFO = "INFO"


class Severity(str, Enum):
    info = "info"
    warn = "warn"
    fail = "fail"


class RecordStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Verdict
    record: Optional[str] = None
    issues: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()


class DkimSelectorResult(RecordStatus):
    selector: str


class DkimResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Verdict
    selectors: tuple[DkimSelectorResult, ...] = ()


class ScanSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall: Verdict
    critical_issues: int = Field(0, ge=0)


class ScanResult(BaseModel):
    """Point-in-time snapshot of one domain's mail authentication records."""

    model_config = ConfigDict(frozen=True)

    domain: str
    scanned_at: datetime
    spf: RecordStatus
    dkim: DkimResult
    dmarc: RecordStatus
    bimi: RecordStatus
    mx: RecordStatus
    summary: ScanSummary


class NormalizedRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    record_type: str
    selector: Optional[str] = None
    value_hash: str
    raw_value: str
    verdict: Verdict

    @property
    def key(self) -> tuple[str, str]:
        return (self.record_type, self.selector or "")


class RecordChange(BaseModel):
    record_type: str
    selector: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None


class DiffResult(BaseModel):
    added: list[RecordChange] = Field(default_factory=list)
    removed: list[RecordChange] = Field(default_factory=list)
    changed: list[RecordChange] = Field(default_factory=list)
    severity: Severity = Severity.info

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.changed)


class ScoreBreakdown(BaseModel):
    spf_pass: int = 0
    spf_alignment: int = 0
    dkim_pass: int = 0
    dkim_key_strength: int = 0
    dmarc_policy: int = 0
    bimi_present: int = 0
    bimi_valid: int = 0
    mx_sane: int = 0
    warning_count: int = 0
    warning_penalty: int = 0
    fail_count: int = 0
    fail_penalty: int = 0
    total: int = 0


class ScoreResult(BaseModel):
    score: int = Field(ge=0, le=100)
    breakdown: ScoreBreakdown


class FieldChange(BaseModel):
    record_type: str
    old_value: str
    new_value: str


class AlertRecord(BaseModel):
    domain_id: str
    domain: str
    record_type: str
    old_value: str
    new_value: str
    created_at: datetime


class MonitoredDomain(BaseModel):
    id: str
    name: str
    owner_id: Optional[str] = None
    monitoring_enabled: bool = True


class DomainOutcome(BaseModel):
    domain_id: str
    domain: str
    status: str
    score: Optional[int] = None
    severity: Optional[Severity] = None
    diff: Optional[DiffResult] = None
    alerts: int = 0
    error: Optional[str] = None


class CycleReport(BaseModel):
    started_at: datetime
    finished_at: Optional[datetime] = None
    outcomes: list[DomainOutcome] = Field(default_factory=list)
    stopped_early: bool = False

    def count(self, status: str) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def alerts(self) -> int:
        return sum(o.alerts for o in self.outcomes)


class TemplateLintResult(BaseModel):
    score: int
    warnings: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
