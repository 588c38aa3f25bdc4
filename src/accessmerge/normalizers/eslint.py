"""ESLint normalizer for eslint-plugin-vuejs-accessibility results."""

from __future__ import annotations

from typing import Any

from accessmerge.normalizers.base import BaseNormalizer, NormalizerContext, generate_issue_id
from accessmerge.schemas.issues import CanonicalIssue, IssueLocation, Severity, WcagLevel, WcagReference
from accessmerge.shared.wcag import principle_for

RULE_PREFIX = "vuejs-accessibility/"

# Rule name -> success criterion. Every mapped rule is level A.
RULE_CRITERIA: dict[str, str] = {
    "alt-text": "1.1.1",
    "anchor-has-content": "2.4.4",
    "aria-props": "4.1.2",
    "aria-role": "4.1.2",
    "aria-unsupported-elements": "4.1.2",
    "click-events-have-key-events": "2.1.1",
    "form-control-has-label": "1.3.1",
    "heading-has-content": "1.3.1",
    "iframe-has-title": "2.4.1",
    "interactive-supports-focus": "2.1.1",
    "label-has-for": "1.3.1",
    "media-has-caption": "1.2.2",
    "mouse-events-have-key-events": "2.1.1",
    "no-access-key": "2.1.1",
    "no-autofocus": "2.4.3",
    "no-distracting-elements": "2.2.2",
    "no-onchange": "3.2.2",
    "no-redundant-roles": "4.1.2",
    "no-static-element-interactions": "4.1.2",
    "role-has-required-aria-props": "4.1.2",
    "tabindex-no-positive": "2.4.3",
}


def wcag_for_rule(rule_id: str) -> WcagReference | None:
    if not rule_id.startswith(RULE_PREFIX):
        return None
    criterion = RULE_CRITERIA.get(rule_id[len(RULE_PREFIX):])
    if criterion is None:
        return None
    return WcagReference(
        criterion=criterion,
        level=WcagLevel.A,
        principle=principle_for(criterion),
        version="2.1",
    )


class ESLintNormalizer(BaseNormalizer):
    """Normalizes the ``eslint --format json`` file result list."""

    @property
    def name(self) -> str:
        return "eslint-vuejs-a11y"

    def normalize(self, raw: Any, context: NormalizerContext) -> list[CanonicalIssue]:
        if not isinstance(raw, list):
            raise ValueError(f"ESLint results must be a list of file results, got {type(raw).__name__}")

        issues = []
        for file_result in raw:
            path = file_result["filePath"]
            for message in file_result.get("messages", []):
                # Parse errors carry no rule id.
                if not message.get("ruleId"):
                    continue
                issues.append(self._build(path, message))
        return issues

    def _build(self, path: str, message: dict[str, Any]) -> CanonicalIssue:
        rule_id = message["ruleId"]
        line = message.get("line")
        column = message.get("column")
        source = message.get("source")
        return CanonicalIssue(
            id=generate_issue_id(self.name, rule_id, f"{path}:{line}:{column}"),
            rule_id=rule_id,
            source_engine=self.name,
            severity=Severity.SERIOUS if message.get("severity") == 2 else Severity.MODERATE,
            wcag=wcag_for_rule(rule_id),
            location=IssueLocation(
                file=path,
                line=line or None,
                column=column,
                snippet=source[:500] if source else None,
            ),
            message=message.get("message") or rule_id,
            confidence=1.0,
        )
