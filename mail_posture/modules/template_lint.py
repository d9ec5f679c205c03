from __future__ import annotations

import re

from ..models.results import TemplateLintResult

SPAM_WORDS = [
    "FREE",
    "CLICK HERE",
    "WINNER",
    "CONGRATULATIONS",
    "URGENT",
    "ACT NOW",
    "LIMITED TIME",
    "GUARANTEED",
    "NO OBLIGATION",
    "RISK FREE",
    "CASH BONUS",
    "MILLION DOLLARS",
]

SPAM_PATTERNS = [
    (re.compile(r"!!!+"), "Multiple exclamation marks"),
    (re.compile(r"\$\$\$"), "Multiple dollar signs"),
    (re.compile(r"[A-Z]{10,}"), "Excessive use of capital letters"),
]

URL_RE = re.compile(r"https?://\S+")
MAX_SUBJECT_LENGTH = 60
MIN_SUBJECT_LENGTH = 10
MAX_LINKS = 10


def lint_template(subject: str, body: str = "", html: str = "") -> TemplateLintResult:
    """Score an email template for common spam-filter triggers (100 is clean)."""
    warnings: list[str] = []
    suggestions: list[str] = []
    score = 100

    full_text = f"{subject} {body}"
    upper_text = full_text.upper()

    if subject and subject.upper() == subject:
        warnings.append("Subject line is in ALL CAPS")
        score -= 15

    for word in SPAM_WORDS:
        if word in upper_text:
            warnings.append(f'Contains spam trigger word: "{word}"')
            score -= 10

    for pattern, message in SPAM_PATTERNS:
        if pattern.search(full_text):
            warnings.append(message)
            score -= 10

    http_links = full_text.count("http://")
    if http_links:
        warnings.append(f"Contains {http_links} non-HTTPS link(s)")
        score -= 10

    if len(subject) > MAX_SUBJECT_LENGTH:
        suggestions.append(f"Subject line is {len(subject)} characters (consider keeping under {MAX_SUBJECT_LENGTH})")
        score -= 5

    if 0 < len(subject) < MIN_SUBJECT_LENGTH:
        suggestions.append(f"Subject line is very short (under {MIN_SUBJECT_LENGTH} characters)")
        score -= 5

    links = URL_RE.findall(full_text)
    if len(links) > MAX_LINKS:
        warnings.append(f"Contains {len(links)} links (high link count can trigger spam filters)")
        score -= 15

    if html:
        if "<script" in html:
            warnings.append("Contains <script> tags (will be stripped by most email clients)")
            score -= 20
        if "javascript:" in html:
            warnings.append("Contains javascript: protocol (security risk)")
            score -= 20

    if "<img" in html and len(full_text) < 100:
        warnings.append("Image-heavy email with little text (can trigger spam filters)")
        score -= 10

    if "unsubscribe" not in full_text and len(full_text) > 50:
        suggestions.append("Consider adding an unsubscribe link (required for bulk email)")

    if not warnings and not suggestions:
        suggestions.append("Template looks good! No issues detected.")

    return TemplateLintResult(score=max(0, min(100, score)), warnings=warnings, suggestions=suggestions)
