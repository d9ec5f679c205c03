from mail_posture.models.results import NormalizedRecord, Severity, Verdict
from mail_posture.modules.diff import diff_records
from mail_posture.utils.normalize import hash_value


def _rec(record_type, value, selector=None, verdict=Verdict.PASS):
    return NormalizedRecord(
        record_type=record_type,
        selector=selector,
        value_hash=hash_value(value),
        raw_value=value,
        verdict=verdict,
    )


def _baseline():
    return [
        _rec("spf", "v=spf1 include:_spf.google.com -all"),
        _rec("dkim", "v=DKIM1; k=rsa; p=AAAA", selector="google"),
        _rec("dmarc", "v=DMARC1; p=reject; rua=mailto:x@y.com"),
        _rec("mx", "10 mx.example.com", selector="mx.example.com"),
    ]


def test_diff_against_itself_is_empty():
    records = _baseline()
    result = diff_records(records, records)
    assert result.added == []
    assert result.removed == []
    assert result.changed == []
    assert result.severity == Severity.info
    assert result.is_empty


def test_removed_record_is_not_reported_as_changed():
    old = _baseline()
    new = [r for r in old if r.selector != "google"]
    result = diff_records(old, new)
    assert [(c.record_type, c.selector) for c in result.removed] == [("dkim", "google")]
    assert result.removed[0].old_value == "v=DKIM1; k=rsa; p=AAAA"
    assert result.removed[0].new_value is None
    assert result.changed == []
    assert result.severity == Severity.info


def test_added_record():
    old = _baseline()
    new = old + [_rec("dkim", "v=DKIM1; k=rsa; p=BBBB", selector="s1")]
    result = diff_records(old, new)
    assert [(c.record_type, c.selector, c.new_value) for c in result.added] == [("dkim", "s1", "v=DKIM1; k=rsa; p=BBBB")]
    assert result.removed == []


def test_changed_value_bumps_severity_to_warn():
    old = _baseline()
    new = [_rec("spf", "v=spf1 include:mailgun.org -all")] + old[1:]
    result = diff_records(old, new)
    assert len(result.changed) == 1
    change = result.changed[0]
    assert change.record_type == "spf"
    assert change.old_value == "v=spf1 include:_spf.google.com -all"
    assert change.new_value == "v=spf1 include:mailgun.org -all"
    assert result.severity == Severity.warn


def test_any_fail_verdict_wins():
    old = _baseline() + [_rec("bimi", "", verdict=Verdict.WARN)]
    new = _baseline() + [_rec("bimi", "", verdict=Verdict.FAIL)]
    result = diff_records(old, new)
    assert result.is_empty
    assert result.severity == Severity.fail


def test_warn_verdict_without_changes():
    records = _baseline() + [_rec("bimi", "", verdict=Verdict.WARN)]
    result = diff_records(records, records)
    assert result.is_empty
    assert result.severity == Severity.warn


def test_empty_selector_and_none_share_a_key():
    old = [NormalizedRecord(record_type="spf", selector="", value_hash=hash_value("a"), raw_value="a", verdict=Verdict.PASS)]
    new = [_rec("spf", "a")]
    result = diff_records(old, new)
    assert result.is_empty
