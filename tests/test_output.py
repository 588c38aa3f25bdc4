"""Tests for Markdown report generation."""

from __future__ import annotations

import json

from accessmerge.contrast.analyzer import analyze_samples
from accessmerge.output.markdown import render_contrast_report, render_markdown_report, write_reports
from accessmerge.pipeline.aggregate import summarize
from accessmerge.pipeline.dedup import group_by_wcag
from accessmerge.schemas.contrast import ElementSample
from accessmerge.schemas.issues import Severity
from accessmerge.schemas.pipeline import CombinedReport


def _make_report(make_issue, **kwargs) -> CombinedReport:
    issues = [
        make_issue(id="a", severity=Severity.MINOR, message="Minor thing"),
        make_issue(id="b", severity=Severity.CRITICAL, selector="img.logo", message="Critical | thing"),
        make_issue(id="c", engine="eslint-vuejs-a11y", selector=None, criterion=None, confidence=0.5),
    ]
    return CombinedReport(
        success=True,
        target="https://example.com",
        engines_used=["axe-core", "eslint-vuejs-a11y"],
        issues=issues,
        issues_by_wcag_criterion=group_by_wcag(issues),
        summary=summarize(issues, engines=["axe-core", "eslint-vuejs-a11y"], before_dedup=4),
        duplicates_removed_count=1,
        **kwargs,
    )


class TestRenderMarkdown:
    def test_contains_sections(self, make_issue) -> None:
        md = render_markdown_report(_make_report(make_issue))
        assert md.startswith("# Accessibility Report: https://example.com")
        assert "## Summary" in md
        assert "duplicates removed: 1" in md
        assert "| eslint-vuejs-a11y | 1 |" in md
        assert "## Issues by WCAG Criterion" in md
        assert "| unknown | 1 |" in md

    def test_most_severe_first(self, make_issue) -> None:
        md = render_markdown_report(_make_report(make_issue))
        assert md.index("Critical | thing") < md.index("Minor thing")

    def test_file_location_and_confidence(self, make_issue) -> None:
        md = render_markdown_report(_make_report(make_issue))
        assert "`src/App.vue`" in md
        assert "**Confidence:** 50%" in md

    def test_engine_errors_listed(self, make_issue) -> None:
        md = render_markdown_report(_make_report(make_issue, partial_errors=["pa11y: boom"]))
        assert "## Engine Errors" in md
        assert "- pa11y: boom" in md

    def test_failed_run(self) -> None:
        md = render_markdown_report(CombinedReport(success=False, engines_used=["axe-core"]))
        assert "every engine failed" in md
        assert "## Issues\n" not in md


class TestRenderContrast:
    def test_table(self) -> None:
        result = analyze_samples([
            ElementSample(selector="p.a|b", foreground="#999999", background="#cccccc"),
        ])
        md = render_contrast_report(result)
        assert "# Contrast Report (ratio, AA)" in md
        assert "`p.a\\|b`" in md
        assert "| 1.77 | 4.5 |" in md

    def test_empty(self) -> None:
        md = render_contrast_report(analyze_samples([]))
        assert "No contrast issues found." in md


class TestWriteReports:
    def test_writes_both_files(self, tmp_path, make_issue) -> None:
        json_path, md_path = write_reports(_make_report(make_issue), tmp_path / "out")
        data = json.loads(json_path.read_text())
        assert data["summary"]["total"] == 3
        assert data["duplicates_removed_count"] == 1
        assert md_path.read_text(encoding="utf-8").startswith("# Accessibility Report")
