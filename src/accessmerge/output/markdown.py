"""Markdown report builder — renders combined and contrast reports."""

from __future__ import annotations

from pathlib import Path

from accessmerge.pipeline.aggregate import sort_by_severity
from accessmerge.schemas.contrast import ContrastAnalysisResult
from accessmerge.schemas.issues import CanonicalIssue
from accessmerge.schemas.pipeline import CombinedReport

SEVERITY_ICONS = {"critical": "🔴", "serious": "🟠", "moderate": "🟡", "minor": "🟢"}


def _escape(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def _where(issue: CanonicalIssue) -> str:
    loc = issue.location
    if loc.file:
        return f"{loc.file}:{loc.line}" if loc.line else loc.file
    return loc.selector or loc.xpath or ""


def _render_issue(issue: CanonicalIssue) -> list[str]:
    icon = SEVERITY_ICONS.get(issue.severity.value, "⚪")
    lines = [f"#### {icon} {issue.message}\n"]
    lines.append(f"- **Rule:** `{issue.rule_id}` ({issue.source_engine})")
    lines.append(f"- **Severity:** {issue.severity.value}")
    if issue.wcag:
        title = f" {issue.wcag.title}" if issue.wcag.title else ""
        lines.append(f"- **WCAG:** {issue.wcag.criterion}{title} (level {issue.wcag.level.value})")
    lines.append(f"- **Location:** `{_where(issue)}`")
    if issue.confidence < 1.0:
        lines.append(f"- **Confidence:** {issue.confidence:.0%}")
    if issue.human_context:
        lines.append(f"\n{issue.human_context}")
    if issue.suggested_actions:
        lines.append("\n**Suggested actions:**")
        for action in issue.suggested_actions:
            lines.append(f"- {action}")
    lines.append("")
    return lines


def render_markdown_report(report: CombinedReport) -> str:
    """Render a CombinedReport into a Markdown string."""
    sections: list[str] = []
    summary = report.summary

    sections.append(f"# Accessibility Report: {report.target or 'unknown target'}\n")
    sections.append(f"*Generated: {report.timestamp} in {report.duration_ms} ms*\n")

    sections.append("## Summary\n")
    sections.append(f"- **Engines:** {', '.join(report.engines_used)}")
    sections.append(f"- **Issues:** {summary.total} (before dedup: {summary.before_dedup}, duplicates removed: {report.duplicates_removed_count})")
    if not report.success:
        sections.append("- **Status:** every engine failed")
    sections.append("")

    sections.append("| Severity | Count |")
    sections.append("|----------|-------|")
    for severity in ("critical", "serious", "moderate", "minor"):
        sections.append(f"| {SEVERITY_ICONS[severity]} {severity} | {summary.by_severity.get(severity, 0)} |")
    sections.append("")

    sections.append("| Engine | Issues |")
    sections.append("|--------|--------|")
    for engine, count in summary.by_engine.items():
        sections.append(f"| {engine} | {count} |")
    sections.append("")

    if report.partial_errors:
        sections.append("## Engine Errors\n")
        for error in report.partial_errors:
            sections.append(f"- {error}")
        sections.append("")

    if report.issues_by_wcag_criterion:
        sections.append("## Issues by WCAG Criterion\n")
        sections.append("| Criterion | Issues |")
        sections.append("|-----------|--------|")
        for criterion in sorted(report.issues_by_wcag_criterion):
            sections.append(f"| {criterion} | {len(report.issues_by_wcag_criterion[criterion])} |")
        sections.append("")

    if report.issues:
        sections.append("## Issues\n")
        for issue in sort_by_severity(report.issues):
            sections.extend(_render_issue(issue))

    return "\n".join(sections)


def render_contrast_report(result: ContrastAnalysisResult) -> str:
    """Render a contrast run as a table of failing (and optionally passing) pairs."""
    summary = result.summary
    sections: list[str] = []

    sections.append(f"# Contrast Report ({result.metric.value}, {result.wcag_level_used.value})\n")
    sections.append(f"- **Checked:** {summary.total}")
    sections.append(f"- **Passing:** {summary.passing}")
    sections.append(f"- **Failing:** {summary.failing}")
    if summary.skipped:
        sections.append(f"- **Skipped (unparseable colors):** {summary.skipped}")
    normal = summary.by_text_size.normal_text
    large = summary.by_text_size.large_text
    sections.append(f"- **Normal text:** {normal.passing} passing / {normal.failing} failing")
    sections.append(f"- **Large text:** {large.passing} passing / {large.failing} failing")
    sections.append("")

    if not result.issues:
        sections.append("No contrast issues found.")
        return "\n".join(sections)

    sections.append("| Severity | Element | Foreground | Background | Current | Required | Suggested |")
    sections.append("|----------|---------|------------|------------|---------|----------|-----------|")
    for issue in sort_by_severity(result.issues):
        data = issue.contrast_data
        if data is None:
            continue
        fix = data.suggested_fix
        suggested = f"{fix.foreground} ({fix.new_value})" if fix else "—"
        sections.append(
            f"| {SEVERITY_ICONS.get(issue.severity.value, '⚪')} {issue.severity.value} "
            f"| `{_escape(issue.location.selector or '')}` | {data.foreground} | {data.background} "
            f"| {data.current_value} | {data.required_value} | {suggested} |"
        )
    sections.append("")
    return "\n".join(sections)


def write_reports(report: CombinedReport, out_dir: str | Path) -> tuple[Path, Path]:
    """Write ``report.json`` and ``report.md`` into ``out_dir``."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    json_path = out_dir / "report.json"
    json_path.write_text(report.model_dump_json(indent=2), encoding="utf-8")
    md_path = out_dir / "report.md"
    md_path.write_text(render_markdown_report(report), encoding="utf-8")
    return json_path, md_path
