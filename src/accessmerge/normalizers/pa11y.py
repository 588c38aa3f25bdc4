"""Pa11y normalizer — HTML_CodeSniffer issues to canonical issues."""

from __future__ import annotations

import logging
import re
from typing import Any

from accessmerge.normalizers.base import BaseNormalizer, NormalizerContext, generate_issue_id
from accessmerge.schemas.issues import CanonicalIssue, IssueLocation, Severity, WcagLevel, WcagPrinciple, WcagReference

logger = logging.getLogger(__name__)

WCAG_PATTERN = re.compile(r"WCAG2(A{1,3})\.(Principle\d)\.Guideline\d+_\d+\.(\d+_\d+_\d+)")

_PRINCIPLES = {
    "Principle1": WcagPrinciple.PERCEIVABLE,
    "Principle2": WcagPrinciple.OPERABLE,
    "Principle3": WcagPrinciple.UNDERSTANDABLE,
    "Principle4": WcagPrinciple.ROBUST,
}

_TYPE_TO_SEVERITY = {
    "error": Severity.SERIOUS,
    "warning": Severity.MODERATE,
    "notice": Severity.MINOR,
}


def parse_wcag_code(code: str) -> WcagReference | None:
    """``WCAG2AA.Principle1.Guideline1_4.1_4_3.G18.Fail`` -> 1.4.3 / AA."""
    m = WCAG_PATTERN.search(code)
    if not m:
        return None
    level, principle, raw_criterion = m.groups()
    if principle not in _PRINCIPLES:
        return None
    return WcagReference(
        criterion=raw_criterion.replace("_", "."),
        level=WcagLevel(level),
        principle=_PRINCIPLES[principle],
        version="2.1",
    )


class Pa11yNormalizer(BaseNormalizer):
    """Accepts Pa11y's JSON reporter output or a bare list of issues."""

    @property
    def name(self) -> str:
        return "pa11y"

    def normalize(self, raw: Any, context: NormalizerContext) -> list[CanonicalIssue]:
        if isinstance(raw, dict):
            raw = raw.get("issues", [])
        if not isinstance(raw, list):
            raise ValueError(f"pa11y results must be a list of issues, got {type(raw).__name__}")

        issues = []
        for item in raw:
            selector = item.get("selector") or None
            if not selector and not context.target_file:
                logger.warning("Skipping pa11y issue %s without a selector", item.get("code"))
                continue
            issues.append(self._build(item, selector, context))
        return issues

    def _build(self, item: dict[str, Any], selector: str | None, context: NormalizerContext) -> CanonicalIssue:
        code = item["code"]
        issue_type = item.get("type", "error")
        snippet = item.get("context")
        return CanonicalIssue(
            id=generate_issue_id(self.name, code, selector),
            rule_id=code,
            source_engine=self.name,
            severity=_TYPE_TO_SEVERITY.get(issue_type, Severity.MODERATE),
            wcag=parse_wcag_code(code),
            location=IssueLocation(
                selector=selector,
                file=context.target_file,
                snippet=snippet[:500] if snippet else None,
            ),
            message=item.get("message") or code,
            confidence=1.0 if issue_type == "error" else 0.8,
            engine_payload={"type": issue_type, "runner": item.get("runner")},
        )
