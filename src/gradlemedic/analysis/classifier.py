"""Keyword classification of free-text category analyses."""

import re

from gradlemedic.core.models import SectionStatus, SubagentResult

FALLBACK_SUMMARY = "Analysis complete"

# Evaluated in order; the first matching pattern decides the status.
STATUS_RULES: list[tuple[re.Pattern[str], SectionStatus]] = [
    (re.compile(r"error|critical|fail", re.IGNORECASE), SectionStatus.ERROR),
    (re.compile(r"warning|caution|consider", re.IGNORECASE), SectionStatus.WARNING),
]


def classify_status(text: str) -> SectionStatus:
    """Map analysis text to a status using STATUS_RULES."""
    for pattern, status in STATUS_RULES:
        if pattern.search(text):
            return status
    return SectionStatus.OK


def classify(text: str, category: str) -> SubagentResult:
    """Turn one free-text analysis into a structured result.

    The summary is the first line; details are the remaining non-blank lines
    in order. Empty input yields an ``ok`` result with the fallback summary.

    Args:
        text: Analysis text, possibly empty.
        category: Category label. Carried for context only.

    Returns:
        Structured category result.
    """
    lines = text.split("\n")
    summary = lines[0].strip() or FALLBACK_SUMMARY
    details = [line.rstrip() for line in lines[1:] if line.strip()]

    return SubagentResult(
        status=classify_status(text),
        summary=summary,
        details=details,
    )
