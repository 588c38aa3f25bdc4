"""Summary counts over a final issue list."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence

from accessmerge.schemas.issues import CanonicalIssue, Severity, WcagPrinciple
from accessmerge.schemas.pipeline import IssueSummary


def summarize(
    issues: Sequence[CanonicalIssue],
    *,
    engines: Iterable[str] = (),
    before_dedup: int | None = None,
) -> IssueSummary:
    """Count ``issues`` by severity, principle, engine and rule.

    Severity and principle maps always carry all four keys. Engines listed
    in ``engines`` appear in ``by_engine`` even with no issues. Principles
    are counted only for issues with a WCAG reference.
    """
    by_severity = {s.value: 0 for s in Severity}
    by_principle = {p.value: 0 for p in WcagPrinciple}
    by_engine = {engine: 0 for engine in engines}
    by_rule: Counter[str] = Counter()

    for issue in issues:
        by_severity[issue.severity.value] += 1
        if issue.wcag:
            by_principle[issue.wcag.principle.value] += 1
        by_engine[issue.source_engine] = by_engine.get(issue.source_engine, 0) + 1
        by_rule[issue.rule_id] += 1

    before = len(issues) if before_dedup is None else before_dedup
    return IssueSummary(
        total=len(issues),
        by_severity=by_severity,
        by_principle=by_principle,
        by_engine=by_engine,
        by_rule=dict(by_rule),
        before_dedup=before,
        duplicates_removed=before - len(issues),
    )


def sort_by_severity(issues: Iterable[CanonicalIssue]) -> list[CanonicalIssue]:
    """Most severe first; stable for equal severities."""
    return sorted(issues, key=lambda i: i.severity.rank, reverse=True)
