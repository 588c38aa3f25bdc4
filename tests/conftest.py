"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from accessmerge.schemas.issues import (
    CanonicalIssue,
    IssueLocation,
    Severity,
    WcagLevel,
    WcagPrinciple,
    WcagReference,
)


@pytest.fixture
def html_file(tmp_path: Path) -> Path:
    page = tmp_path / "page.html"
    page.write_text("<html><body><p style='color:#999'>Hello</p></body></html>")
    return page


@pytest.fixture
def tmp_config(tmp_path: Path, html_file: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    cfg = tmp_path / "config.yml"
    cfg.write_text(
        """\
target_html_file: "{target}"
engines:
  - "contrast-analyzer"
output_directory: "{out}"
""".format(target=str(html_file), out=str(tmp_path / "output"))
    )
    return cfg


@pytest.fixture
def make_issue() -> Callable[..., CanonicalIssue]:
    """Factory for canonical issues with sensible defaults."""

    def _make(
        *,
        id: str = "issue-1",
        rule_id: str = "image-alt",
        engine: str = "axe-core",
        severity: Severity = Severity.SERIOUS,
        criterion: str | None = "1.1.1",
        selector: str | None = "img.hero",
        message: str = "Images must have alternate text",
        confidence: float = 1.0,
    ) -> CanonicalIssue:
        wcag = None
        if criterion:
            wcag = WcagReference(
                criterion=criterion,
                level=WcagLevel.A,
                principle=WcagPrinciple.PERCEIVABLE,
            )
        return CanonicalIssue(
            id=id,
            rule_id=rule_id,
            source_engine=engine,
            severity=severity,
            wcag=wcag,
            location=IssueLocation(selector=selector, file=None if selector else "src/App.vue"),
            message=message,
            confidence=confidence,
        )

    return _make


@pytest.fixture
def axe_results() -> dict[str, Any]:
    """A trimmed axe-core results object with one violation and one incomplete."""
    return {
        "violations": [
            {
                "id": "image-alt",
                "impact": "critical",
                "tags": ["cat.text-alternatives", "wcag2a", "wcag111", "section508"],
                "description": "Ensures <img> elements have alternate text",
                "help": "Images must have alternate text",
                "helpUrl": "https://dequeuniversity.com/rules/axe/4.9/image-alt",
                "nodes": [
                    {
                        "target": ["img.hero"],
                        "html": "<img class=\"hero\" src=\"hero.png\">",
                        "any": [{"message": "Element does not have an alt attribute"}],
                        "all": [],
                        "none": [{"message": "Element has role=presentation"}],
                    },
                    {
                        "target": ["#logo"],
                        "html": "<img id=\"logo\">",
                        "any": [],
                        "all": [],
                        "none": [],
                    },
                ],
            }
        ],
        "incomplete": [
            {
                "id": "color-contrast",
                "impact": "serious",
                "tags": ["cat.color", "wcag2aa", "wcag143"],
                "description": "Ensures the contrast between foreground and background colors meets WCAG 2 AA",
                "help": "Elements must meet minimum color contrast ratio thresholds",
                "nodes": [
                    {
                        "target": ["p.muted"],
                        "xpath": ["/html/body/p[2]"],
                        "html": "<p class=\"muted\">Muted</p>",
                    }
                ],
            }
        ],
    }
