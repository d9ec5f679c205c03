from datetime import datetime, timezone

from mail_posture.models.results import (
    DkimResult,
    DkimSelectorResult,
    RecordStatus,
    ScanResult,
    ScanSummary,
    Verdict,
)
from mail_posture.modules.change_detect import detect_changes


def _scan(spf="v=spf1 include:_spf.google.com -all", dkim_record="v=DKIM1; k=rsa; p=AAAA", mx="10 mx.example.com"):
    return ScanResult(
        domain="example.com",
        scanned_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        spf=RecordStatus(status=Verdict.PASS if spf else Verdict.FAIL, record=spf),
        dkim=DkimResult(
            status=Verdict.PASS,
            selectors=[DkimSelectorResult(selector="google", status=Verdict.PASS, record=dkim_record)],
        ),
        dmarc=RecordStatus(status=Verdict.PASS, record="v=DMARC1; p=reject; rua=mailto:x@y.com"),
        bimi=RecordStatus(status=Verdict.WARN),
        mx=RecordStatus(status=Verdict.PASS, record=mx),
        summary=ScanSummary(overall=Verdict.PASS),
    )


def test_identical_scans_have_no_changes():
    assert detect_changes(_scan(), _scan()) == []


def test_scan_time_alone_is_not_a_change():
    later = _scan().model_copy(update={"scanned_at": datetime(2026, 1, 2, tzinfo=timezone.utc)})
    assert detect_changes(_scan(), later) == []


def test_removed_spf_reports_none():
    changes = detect_changes(_scan(), _scan(spf=None))
    assert len(changes) == 1
    assert changes[0].record_type == "SPF"
    assert changes[0].old_value == "v=spf1 include:_spf.google.com -all"
    assert changes[0].new_value == "none"


def test_dkim_and_mx_changes_in_family_order():
    changes = detect_changes(_scan(), _scan(dkim_record="v=DKIM1; k=rsa; p=BBBB", mx="10 mx2.example.com"))
    assert [c.record_type for c in changes] == ["DKIM", "MX"]
    assert "p=AAAA" in changes[0].old_value
    assert "p=BBBB" in changes[0].new_value
