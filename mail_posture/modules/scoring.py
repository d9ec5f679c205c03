from __future__ import annotations

from ..models.results import ScanResult, ScoreBreakdown, ScoreResult, Verdict

SCORING_RUBRIC = {
    "spf_pass": {"points": 10, "rule": "SPF status is PASS"},
    "spf_alignment": {"points": 10, "rule": "SPF PASS and record has -all (5 for ~all)"},
    "dkim_pass": {"points": 20, "rule": "DKIM status is PASS"},
    "dkim_key_strength": {"points": 10, "rule": "a PASS selector record has k=rsa and is over 400 chars"},
    "dmarc_policy": {"points": 20, "rule": "p=reject (10 for p=quarantine)"},
    "bimi_present": {"points": 5, "rule": "BIMI record present"},
    "bimi_valid": {"points": 5, "rule": "BIMI record present and PASS"},
    "mx_sane": {"points": 10, "rule": "MX status is not FAIL"},
}

STRONG_KEY_RECORD_LENGTH = 400
WARNING_PENALTY = 5
FAIL_PENALTY = 10


def _issue_weight(status: Verdict, issues: tuple[str, ...], verdict: Verdict) -> int:
    return len(issues) if status == verdict else 0


def _flag_weight(status: Verdict, verdict: Verdict) -> int:
    return 1 if status == verdict else 0


def _clamped_penalty(count: int, per_item: int) -> int:
    # min(..., 0) is 0 for any non-negative count: penalties never lower the score
    # TODO: decide real penalty weights and switch this to max(..., 0)
    return min(count * per_item, 0)


def calculate_score(scan: ScanResult) -> ScoreResult:
    b = ScoreBreakdown()

    if scan.spf.status == Verdict.PASS:
        b.spf_pass = 10
        record = scan.spf.record or ""
        if "-all" in record:
            b.spf_alignment = 10
        elif "~all" in record:
            b.spf_alignment = 5

    if scan.dkim.status == Verdict.PASS:
        b.dkim_pass = 20
        for selector in scan.dkim.selectors:
            if selector.status != Verdict.PASS or not selector.record:
                continue
            if "k=rsa" in selector.record and len(selector.record) > STRONG_KEY_RECORD_LENGTH:
                b.dkim_key_strength = 10
                break

    if scan.dmarc.record:
        if "p=reject" in scan.dmarc.record:
            b.dmarc_policy = 20
        elif "p=quarantine" in scan.dmarc.record:
            b.dmarc_policy = 10

    if scan.bimi.record:
        b.bimi_present = 5
        if scan.bimi.status == Verdict.PASS:
            b.bimi_valid = 5

    if scan.mx.status != Verdict.FAIL:
        b.mx_sane = 10

    b.warning_count = (
        _issue_weight(scan.spf.status, scan.spf.issues, Verdict.WARN)
        + _flag_weight(scan.dkim.status, Verdict.WARN)
        + _issue_weight(scan.dmarc.status, scan.dmarc.issues, Verdict.WARN)
        + _flag_weight(scan.bimi.status, Verdict.WARN)
        + _flag_weight(scan.mx.status, Verdict.WARN)
    )
    b.fail_count = (
        _issue_weight(scan.spf.status, scan.spf.issues, Verdict.FAIL)
        + _flag_weight(scan.dkim.status, Verdict.FAIL)
        + _issue_weight(scan.dmarc.status, scan.dmarc.issues, Verdict.FAIL)
        + _flag_weight(scan.bimi.status, Verdict.FAIL)
        + _flag_weight(scan.mx.status, Verdict.FAIL)
    )
    b.warning_penalty = _clamped_penalty(b.warning_count, WARNING_PENALTY)
    b.fail_penalty = _clamped_penalty(b.fail_count, FAIL_PENALTY)

    raw = (
        b.spf_pass
        + b.spf_alignment
        + b.dkim_pass
        + b.dkim_key_strength
        + b.dmarc_policy
        + b.bimi_present
        + b.bimi_valid
        + b.mx_sane
        - b.warning_penalty
        - b.fail_penalty
    )
    b.total = max(0, min(100, raw))
    return ScoreResult(score=b.total, breakdown=b)


def score_badge(score: int) -> dict:
    if score >= 85:
        return {"label": "Excellent", "variant": "success"}
    if score >= 70:
        return {"label": "Good", "variant": "default"}
    if score >= 50:
        return {"label": "Needs Work", "variant": "warning"}
    return {"label": "Poor", "variant": "destructive"}
