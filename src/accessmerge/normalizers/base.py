"""Normalizer ABC — the contract every engine adapter satisfies."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from accessmerge.schemas.issues import CanonicalIssue, Severity
from accessmerge.shared.wcag import enrich_issue

logger = logging.getLogger(__name__)

_IMPACT_TO_SEVERITY = {s.value: s for s in Severity}


class NormalizerContext(BaseModel):
    """What a normalizer knows about the run besides the raw payload."""

    engine: str
    target_url: str | None = None
    target_file: str | None = None


def check_issue_contract(record: CanonicalIssue | Mapping[str, Any]) -> CanonicalIssue:
    """Re-validate a record against the canonical issue model.

    Accepts an existing issue or a plain mapping; raises
    ``pydantic.ValidationError`` when the severity, WCAG criterion,
    location or confidence is out of contract.
    """
    if isinstance(record, CanonicalIssue):
        record = record.model_dump()
    return CanonicalIssue.model_validate(record)


def _string_hash(text: str) -> int:
    """32-bit rolling hash (``h * 31 + c``) so ids stay stable across runs."""
    h = 0
    for ch in text:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def generate_issue_id(engine: str, rule_id: str, anchor: str | None = None) -> str:
    """``engine:rule`` plus a hex hash of the location anchor, if any."""
    base = f"{engine}:{rule_id}"
    if anchor:
        return f"{base}:{_string_hash(anchor):x}"
    return base


def map_impact_to_severity(impact: str | None) -> Severity:
    """Engine impact strings onto the shared tiers; unknown maps to moderate."""
    return _IMPACT_TO_SEVERITY.get((impact or "").lower(), Severity.MODERATE)


class BaseNormalizer(ABC):
    """Abstract base class for engine normalizers.

    Subclasses implement:
    - ``name`` — the engine name stamped on every issue
    - ``normalize(raw, context)`` — maps the engine's native output to issues
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Engine name used as ``source_engine``."""

    @abstractmethod
    def normalize(self, raw: Any, context: NormalizerContext) -> list[CanonicalIssue]:
        """Map raw engine output into canonical issues."""

    def process(self, raw: Any, context: NormalizerContext | None = None) -> list[CanonicalIssue]:
        """Normalize, then fill gaps from the WCAG criteria table."""
        context = context or NormalizerContext(engine=self.name)
        issues = [enrich_issue(issue) for issue in self.normalize(raw, context)]
        logger.info("%s: normalized %d issue(s)", self.name, len(issues))
        return issues
