from datetime import datetime, timezone

from mail_posture.models.results import RecordStatus, ScanResult, ScanSummary, Verdict
from mail_posture.modules.dkim import missing_result
from mail_posture.utils.normalize import hash_value, is_valid_domain, normalize_domain, normalize_records


def _scan(mx_record=None):
    return ScanResult(
        domain="example.com",
        scanned_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        spf=RecordStatus(status=Verdict.FAIL),
        dkim=missing_result(),
        dmarc=RecordStatus(status=Verdict.FAIL),
        bimi=RecordStatus(status=Verdict.WARN),
        mx=RecordStatus(status=Verdict.PASS if mx_record else Verdict.FAIL, record=mx_record),
        summary=ScanSummary(overall=Verdict.FAIL, critical_issues=4),
    )


def test_normalize_domain():
    assert normalize_domain(" Example.COM. ") == "example.com"
    assert is_valid_domain("mail.example.com")
    assert not is_valid_domain("bad..example.com")
    assert not is_valid_domain("localhost")


def test_hash_value_is_short_sha256_prefix():
    assert hash_value("") == "e3b0c44298fc1c14"
    assert len(hash_value("v=spf1 -all")) == 16
    assert hash_value("a") != hash_value("b")


def test_normalize_empty_scan():
    records = normalize_records(_scan())
    assert [r.key for r in records] == [("spf", ""), ("dkim", "none"), ("dmarc", ""), ("bimi", ""), ("mx", "")]
    assert all(r.raw_value == "" for r in records)
    assert records[1].verdict == Verdict.FAIL


def test_normalize_splits_mx_per_exchange_and_dedupes():
    records = normalize_records(_scan("10 mx1.example.com, 20 mx2.example.com, 30 MX1.example.com"))
    mx = [r for r in records if r.record_type == "mx"]
    assert [(r.selector, r.raw_value) for r in mx] == [
        ("mx1.example.com", "10 mx1.example.com"),
        ("mx2.example.com", "20 mx2.example.com"),
    ]
    assert len({r.key for r in records}) == len(records)
