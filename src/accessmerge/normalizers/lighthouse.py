"""Lighthouse normalizer — failing accessibility audits to canonical issues."""

from __future__ import annotations

import logging
import re
from typing import Any

from accessmerge.normalizers.base import BaseNormalizer, NormalizerContext
from accessmerge.schemas.issues import CanonicalIssue, IssueLocation, Severity, WcagLevel, WcagReference
from accessmerge.shared.wcag import principle_for

logger = logging.getLogger(__name__)

# Audits that apply to the whole document carry no node; anchor them on <html>.
DOCUMENT_SELECTOR = "html"

_MD_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")

_SKIPPED_MODES = {"manual", "notApplicable"}

# Audit id -> (criterion, level)
AUDIT_CRITERIA: dict[str, tuple[str, str]] = {
    "aria-allowed-attr": ("4.1.2", "A"),
    "aria-command-name": ("4.1.2", "A"),
    "aria-hidden-body": ("4.1.2", "A"),
    "aria-hidden-focus": ("4.1.2", "A"),
    "aria-input-field-name": ("4.1.2", "A"),
    "aria-required-attr": ("4.1.2", "A"),
    "aria-required-children": ("1.3.1", "A"),
    "aria-required-parent": ("1.3.1", "A"),
    "aria-roles": ("4.1.2", "A"),
    "aria-toggle-field-name": ("4.1.2", "A"),
    "aria-valid-attr": ("4.1.2", "A"),
    "aria-valid-attr-value": ("4.1.2", "A"),
    "button-name": ("4.1.2", "A"),
    "bypass": ("2.4.1", "A"),
    "color-contrast": ("1.4.3", "AA"),
    "definition-list": ("1.3.1", "A"),
    "dlitem": ("1.3.1", "A"),
    "document-title": ("2.4.2", "A"),
    "form-field-multiple-labels": ("3.3.2", "A"),
    "frame-title": ("4.1.2", "A"),
    "html-has-lang": ("3.1.1", "A"),
    "html-lang-valid": ("3.1.1", "A"),
    "image-alt": ("1.1.1", "A"),
    "input-image-alt": ("1.1.1", "A"),
    "label": ("4.1.2", "A"),
    "link-in-text-block": ("1.4.1", "A"),
    "link-name": ("2.4.4", "A"),
    "list": ("1.3.1", "A"),
    "listitem": ("1.3.1", "A"),
    "meta-refresh": ("2.2.1", "A"),
    "meta-viewport": ("1.4.4", "AA"),
    "object-alt": ("1.1.1", "A"),
    "tabindex": ("2.4.3", "A"),
    "tap-targets": ("2.5.5", "AAA"),
    "target-size": ("2.5.8", "AA"),
    "td-headers-attr": ("1.3.1", "A"),
    "th-has-data-cells": ("1.3.1", "A"),
    "valid-lang": ("3.1.2", "AA"),
    "video-caption": ("1.2.2", "A"),
}


def wcag_for_audit(audit_id: str) -> WcagReference | None:
    mapping = AUDIT_CRITERIA.get(audit_id)
    if mapping is None:
        return None
    criterion, level = mapping
    return WcagReference(
        criterion=criterion,
        level=WcagLevel(level),
        principle=principle_for(criterion),
        version="2.1",
    )


def map_score_to_severity(score: float | None) -> Severity:
    """0 (or no score) is critical; <0.5 serious; <0.9 moderate; else minor."""
    if not score:
        return Severity.CRITICAL
    if score < 0.5:
        return Severity.SERIOUS
    if score < 0.9:
        return Severity.MODERATE
    return Severity.MINOR


def clean_description(description: str) -> str:
    """Strip Markdown links (``[Learn more](https://...)`` -> ``Learn more``)."""
    return _MD_LINK.sub(r"\1", description or "").strip()


def infer_affected_users(audit_id: str) -> list[str]:
    users: list[str] = []

    def add(*names: str) -> None:
        users.extend(n for n in names if n not in users)

    aid = audit_id.lower()
    if any(k in aid for k in ("aria", "label", "alt", "image", "role")):
        add("screen-reader")
    if any(k in aid for k in ("keyboard", "focus", "tabindex")) or aid == "accesskeys":
        add("keyboard-only", "motor-impaired")
    if "color" in aid or "contrast" in aid:
        add("low-vision", "color-blind")
    if aid in ("font-size", "meta-viewport"):
        add("low-vision")
    if aid in ("tap-targets", "target-size"):
        add("motor-impaired")
    if any(k in aid for k in ("heading", "landmark", "link")) or aid == "document-title":
        add("screen-reader", "cognitive")
    return users or ["screen-reader"]


class LighthouseNormalizer(BaseNormalizer):
    """Normalizes a Lighthouse report (``lighthouse --output json``).

    Accepts the bare LHR or a runner result wrapping it under ``lhr``. Only
    audits referenced by the accessibility category are read when that
    category is present; passing, manual and not-applicable audits are
    skipped.
    """

    @property
    def name(self) -> str:
        return "lighthouse"

    def normalize(self, raw: Any, context: NormalizerContext) -> list[CanonicalIssue]:
        if isinstance(raw, dict) and "lhr" in raw:
            raw = raw["lhr"]
        if not isinstance(raw, dict) or not isinstance(raw.get("audits"), dict):
            raise ValueError("Lighthouse results must be a JSON object with an 'audits' mapping")

        audits: dict[str, Any] = raw["audits"]
        category = (raw.get("categories") or {}).get("accessibility")
        audit_ids = [ref["id"] for ref in category.get("auditRefs", [])] if category else list(audits)
        if category and category.get("score") is not None:
            logger.info("Lighthouse accessibility score: %d", round(category["score"] * 100))

        issues: list[CanonicalIssue] = []
        for audit_id in audit_ids:
            audit = audits.get(audit_id)
            if audit is None:
                continue
            score = audit.get("score")
            if score is None or score == 1 or audit.get("scoreDisplayMode") in _SKIPPED_MODES:
                continue

            items = (audit.get("details") or {}).get("items") or []
            for item in items or [None]:
                issues.append(self._build(audit, item, len(issues)))
        return issues

    def _build(self, audit: dict[str, Any], item: dict[str, Any] | None, index: int) -> CanonicalIssue:
        score = audit.get("score")
        title = audit.get("title") or audit["id"]
        description = clean_description(audit.get("description", ""))
        node = (item or {}).get("node") or {}
        snippet = node.get("snippet")

        actions: list[str] = []
        if node.get("explanation"):
            actions.append(node["explanation"])
        if item is not None and description and description != title:
            actions.append(description)

        return CanonicalIssue(
            id=f"lighthouse-{index}",
            rule_id=audit["id"],
            source_engine=self.name,
            severity=map_score_to_severity(score),
            wcag=wcag_for_audit(audit["id"]),
            location=IssueLocation(
                selector=node.get("selector") or DOCUMENT_SELECTOR,
                snippet=snippet[:500] if snippet else None,
            ),
            message=title,
            human_context=description or None,
            suggested_actions=actions,
            affected_users=infer_affected_users(audit["id"]),
            confidence=1 - score if score is not None else 0.8,
            engine_payload={"score": score, "score_display_mode": audit.get("scoreDisplayMode")},
        )
