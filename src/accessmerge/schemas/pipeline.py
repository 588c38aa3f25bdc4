"""Multi-engine pipeline results and the combined report."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from accessmerge.schemas.issues import CanonicalIssue


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class EngineResult(BaseModel):
    """What a single engine task hands back to the runner."""

    engine: str
    issues: list[CanonicalIssue] = []
    raw: Any = None  # engine-native payload, kept for debugging
    duration_ms: int = 0


class IssueSummary(BaseModel):
    """Counts over the final (deduplicated) issue list."""

    total: int = 0
    by_severity: dict[str, int] = Field(default_factory=dict)
    by_principle: dict[str, int] = Field(default_factory=dict)
    by_engine: dict[str, int] = Field(default_factory=dict)
    by_rule: dict[str, int] = Field(default_factory=dict)
    before_dedup: int = 0
    duplicates_removed: int = 0


class CombinedReport(BaseModel):
    """The merged output of a multi-engine run."""

    success: bool
    timestamp: str = Field(default_factory=_now)
    duration_ms: int = 0
    target: str = ""
    engines_used: list[str] = []
    issues: list[CanonicalIssue] = []
    issues_by_wcag_criterion: dict[str, list[CanonicalIssue]] = Field(default_factory=dict)
    summary: IssueSummary = IssueSummary()
    raw_results_per_engine: dict[str, Any] = Field(default_factory=dict)
    duplicates_removed_count: int = 0
    partial_errors: list[str] = []
