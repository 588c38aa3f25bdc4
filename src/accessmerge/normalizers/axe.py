"""axe-core normalizer — violations and incomplete results to canonical issues."""

from __future__ import annotations

import logging
import re
from typing import Any

from accessmerge.normalizers.base import BaseNormalizer, NormalizerContext, map_impact_to_severity
from accessmerge.schemas.issues import CanonicalIssue, IssueLocation, Severity, WcagLevel, WcagReference
from accessmerge.shared.wcag import principle_for

logger = logging.getLogger(__name__)

_SC_TAG = re.compile(r"^wcag(\d{3,})$")
_LEVEL_TAG = re.compile(r"^wcag2\d?(a{1,3})$")

REVIEW_PREFIX = "[Requires review] "


def parse_wcag_tags(tags: list[str]) -> WcagReference | None:
    """Build a reference from axe tags such as ``wcag143`` and ``wcag2aa``."""
    criterion = None
    level = WcagLevel.A
    version = "2.0"

    for tag in tags:
        if m := _SC_TAG.match(tag):
            digits = m.group(1)
            criterion = f"{digits[0]}.{digits[1]}.{digits[2:]}"
        if m := _LEVEL_TAG.match(tag):
            level = WcagLevel(m.group(1).upper())
        if "21" in tag:
            version = "2.1"
        if "22" in tag:
            version = "2.2"

    if criterion is None:
        return None
    return WcagReference(
        criterion=criterion,
        level=level,
        principle=principle_for(criterion),
        version=version,
    )


def infer_affected_users(rule_id: str, tags: list[str]) -> list[str]:
    """Guess the affected audiences from the rule id and tags."""
    users: list[str] = []

    def add(*names: str) -> None:
        users.extend(n for n in names if n not in users)

    joined = " ".join(tags).lower()
    rid = rule_id.lower()
    if "aria" in joined or any(k in rid for k in ("aria", "label", "alt")):
        add("screen-reader")
    if any(k in rid for k in ("keyboard", "focus", "tabindex")):
        add("keyboard-only", "motor-impaired")
    if "color" in rid or "contrast" in rid:
        add("low-vision", "color-blind")
    if any(k in rid for k in ("heading", "landmark", "link")):
        add("screen-reader", "cognitive")
    return users or ["screen-reader"]


def _selector(target: list[Any]) -> str:
    # Shadow DOM / iframe targets come through as nested lists.
    parts = [" >>> ".join(t) if isinstance(t, list) else str(t) for t in target]
    return " ".join(parts)


def _suggested_actions(node: dict[str, Any]) -> list[str]:
    actions = [c["message"] for c in node.get("any", []) + node.get("all", []) if c.get("message")]
    actions += [f"Avoid: {c['message']}" for c in node.get("none", []) if c.get("message")]
    return actions


class AxeNormalizer(BaseNormalizer):
    """Normalizes an axe-core ``AxeResults`` JSON object."""

    def __init__(self, *, include_incomplete: bool = True) -> None:
        self.include_incomplete = include_incomplete

    @property
    def name(self) -> str:
        return "axe-core"

    def normalize(self, raw: Any, context: NormalizerContext) -> list[CanonicalIssue]:
        if not isinstance(raw, dict):
            raise ValueError(f"axe-core results must be a JSON object, got {type(raw).__name__}")

        issues: list[CanonicalIssue] = []
        index = 0
        for result in raw.get("violations", []):
            for node in result.get("nodes", []):
                issues.append(self._build(result, node, index, review=False))
                index += 1

        if self.include_incomplete:
            for result in raw.get("incomplete", []):
                for node in result.get("nodes", []):
                    issues.append(self._build(result, node, index, review=True))
                    index += 1

        return issues

    def _build(self, result: dict[str, Any], node: dict[str, Any], index: int, *, review: bool) -> CanonicalIssue:
        tags = result.get("tags", [])
        xpath = node.get("xpath")
        html = node.get("html")
        location = IssueLocation(
            selector=_selector(node.get("target", [])) or None,
            xpath=" ".join(xpath) if xpath else None,
            snippet=html[:500] if html else None,
        )
        help_text = result.get("help") or result["id"]

        return CanonicalIssue(
            id=f"axe-incomplete-{index}" if review else f"axe-{index}",
            rule_id=result["id"],
            source_engine=self.name,
            severity=Severity.MINOR if review else map_impact_to_severity(result.get("impact")),
            wcag=parse_wcag_tags(tags),
            location=location,
            message=f"{REVIEW_PREFIX}{help_text}" if review else help_text,
            human_context=result.get("description"),
            suggested_actions=_suggested_actions(node),
            affected_users=infer_affected_users(result["id"], tags),
            confidence=0.5 if review else 1.0,
            engine_payload={"result_type": "incomplete" if review else "violation", "help_url": result.get("helpUrl")},
        )
