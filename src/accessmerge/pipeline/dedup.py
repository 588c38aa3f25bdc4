"""Fingerprinting and cross-engine deduplication of canonical issues."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from accessmerge.schemas.issues import CanonicalIssue, Severity

logger = logging.getLogger(__name__)

FINGERPRINT_SEPARATOR = "|"
MESSAGE_PREFIX_LEN = 50


def fingerprint(issue: CanonicalIssue) -> str:
    """Content key: rule, criterion, location anchor and message prefix.

    Two issues with the same fingerprint are the same defect no matter
    which engine reported them.
    """
    location = issue.location
    return FINGERPRINT_SEPARATOR.join([
        issue.rule_id,
        issue.wcag.criterion if issue.wcag else "no-wcag",
        location.selector or location.file or "no-location",
        issue.message[:MESSAGE_PREFIX_LEN],
    ])


def _replaces(incoming: CanonicalIssue, kept: CanonicalIssue) -> bool:
    incoming_critical = incoming.severity is Severity.CRITICAL
    kept_critical = kept.severity is Severity.CRITICAL
    if incoming_critical and not kept_critical:
        return True
    if kept_critical and not incoming_critical:
        return False
    return incoming.confidence > kept.confidence


def deduplicate(issues: Iterable[CanonicalIssue]) -> list[CanonicalIssue]:
    """Single pass in input order; returns a new list.

    On a fingerprint collision an incoming critical issue displaces a
    non-critical one, a kept critical issue is never displaced by a
    non-critical one, and otherwise strictly higher confidence wins. Ties
    keep the first issue seen. The output keeps first-seen slot order.
    """
    kept: dict[str, CanonicalIssue] = {}
    for issue in issues:
        key = fingerprint(issue)
        current = kept.get(key)
        if current is None or _replaces(issue, current):
            kept[key] = issue
    return list(kept.values())


def group_by_wcag(issues: Iterable[CanonicalIssue]) -> dict[str, list[CanonicalIssue]]:
    """Group issues by success criterion; ``"unknown"`` when absent."""
    groups: dict[str, list[CanonicalIssue]] = {}
    for issue in issues:
        key = issue.wcag.criterion if issue.wcag else "unknown"
        groups.setdefault(key, []).append(issue)
    return groups
