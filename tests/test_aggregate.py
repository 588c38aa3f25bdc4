"""Tests for report summary counts."""

from __future__ import annotations

from accessmerge.pipeline.aggregate import sort_by_severity, summarize
from accessmerge.schemas.issues import Severity


class TestSummarize:
    def test_empty_has_every_key(self) -> None:
        summary = summarize([])
        assert summary.total == 0
        assert summary.by_severity == {"minor": 0, "moderate": 0, "serious": 0, "critical": 0}
        assert summary.by_principle == {"perceivable": 0, "operable": 0, "understandable": 0, "robust": 0}
        assert summary.by_engine == {}
        assert summary.by_rule == {}

    def test_counts(self, make_issue) -> None:
        issues = [
            make_issue(id="1", severity=Severity.CRITICAL),
            make_issue(id="2", rule_id="color-contrast", criterion="1.4.3", engine="contrast-analyzer"),
            make_issue(id="3", rule_id="color-contrast", criterion=None, engine="pa11y", severity=Severity.MINOR),
        ]
        summary = summarize(issues, engines=["axe-core", "pa11y", "contrast-analyzer", "eslint-vuejs-a11y"])

        assert summary.total == 3
        assert summary.by_severity["critical"] == 1
        assert summary.by_severity["serious"] == 1
        assert summary.by_severity["minor"] == 1
        assert summary.by_severity["moderate"] == 0
        # make_issue always files references under perceivable
        assert summary.by_principle["perceivable"] == 2
        assert summary.by_engine == {
            "axe-core": 1,
            "pa11y": 1,
            "contrast-analyzer": 1,
            "eslint-vuejs-a11y": 0,
        }
        assert summary.by_rule == {"image-alt": 1, "color-contrast": 2}

    def test_severity_counts_sum_to_total(self, make_issue) -> None:
        issues = [make_issue(id=str(n), severity=s) for n, s in enumerate(Severity)]
        summary = summarize(issues)
        assert sum(summary.by_severity.values()) == summary.total == 4

    def test_dedup_counts(self, make_issue) -> None:
        summary = summarize([make_issue()], before_dedup=3)
        assert summary.before_dedup == 3
        assert summary.duplicates_removed == 2

    def test_no_dedup_by_default(self, make_issue) -> None:
        summary = summarize([make_issue(), make_issue(id="2")])
        assert summary.before_dedup == 2
        assert summary.duplicates_removed == 0


class TestSortBySeverity:
    def test_most_severe_first_and_stable(self, make_issue) -> None:
        issues = [
            make_issue(id="a", severity=Severity.MINOR),
            make_issue(id="b", severity=Severity.CRITICAL),
            make_issue(id="c", severity=Severity.MINOR),
            make_issue(id="d", severity=Severity.SERIOUS),
        ]
        assert [i.id for i in sort_by_severity(issues)] == ["b", "d", "a", "c"]
