from mail_posture.models.results import Verdict
from mail_posture.modules import bimi, mx


def test_bimi_missing_is_warning_not_failure():
    result = bimi.validate([])
    assert result.status == Verdict.WARN
    assert result.issues == ("No BIMI record found",)
    assert any("VMC" in s for s in result.suggestions)


def test_bimi_present_passes():
    record = "v=BIMI1; l=https://example.com/logo.svg; a=https://example.com/vmc.pem"
    result = bimi.validate(["unrelated", record])
    assert result.status == Verdict.PASS
    assert result.record == record


def test_mx_missing_fails():
    result = mx.validate([])
    assert result.status == Verdict.FAIL
    assert "cannot receive mail" in result.issues[0]


def test_mx_records_joined():
    result = mx.validate(["10 mx1.example.com", "20 mx2.example.com"])
    assert result.status == Verdict.PASS
    assert result.record == "10 mx1.example.com, 20 mx2.example.com"
