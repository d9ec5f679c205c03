from __future__ import annotations

from ..models.results import RecordStatus, ScanResult, ScoreResult
from ..modules.scoring import score_badge


def _family_lines(title: str, status: RecordStatus) -> list[str]:
    lines = [f"### {title}: {status.status.value}"]
    if status.record:
        lines.append(f"- Record: `{status.record}`")
    for issue in status.issues:
        lines.append(f"- Issue: {issue}")
    for suggestion in status.suggestions:
        lines.append(f"- Suggestion: {suggestion}")
    lines.append("")
    return lines


def build_summary(scan: ScanResult, score: ScoreResult) -> str:
    badge = score_badge(score.score)
    lines = [
        f"# Mail Posture Summary: {scan.domain}",
        "",
        f"Scanned: {scan.scanned_at.isoformat()}",
        "",
        "## Overview",
        f"- Overall: {scan.summary.overall.value}",
        f"- Critical issues: {scan.summary.critical_issues}",
        f"- Deliverability score: {score.score}/100 ({badge['label']})",
        "",
        "## Records",
    ]
    lines.extend(_family_lines("SPF", scan.spf))

    lines.append(f"### DKIM: {scan.dkim.status.value}")
    for sel in scan.dkim.selectors:
        lines.append(f"- Selector `{sel.selector}`: {sel.status.value}")
        for issue in sel.issues:
            lines.append(f"  - Issue: {issue}")
        for suggestion in sel.suggestions:
            lines.append(f"  - Suggestion: {suggestion}")
    lines.append("")

    lines.extend(_family_lines("DMARC", scan.dmarc))
    lines.extend(_family_lines("BIMI", scan.bimi))
    lines.extend(_family_lines("MX", scan.mx))

    lines.append("## Score Breakdown")
    for key, value in score.breakdown.model_dump().items():
        lines.append(f"- {key}: {value}")

    return "\n".join(lines)
