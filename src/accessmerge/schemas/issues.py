"""Canonical issue model shared by every engine normalizer and the contrast builder."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Severity(str, Enum):
    """Ordered impact tiers: minor < moderate < serious < critical."""

    MINOR = "minor"
    MODERATE = "moderate"
    SERIOUS = "serious"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.MINOR: 0,
    Severity.MODERATE: 1,
    Severity.SERIOUS: 2,
    Severity.CRITICAL: 3,
}


class WcagLevel(str, Enum):
    A = "A"
    AA = "AA"
    AAA = "AAA"


class WcagPrinciple(str, Enum):
    PERCEIVABLE = "perceivable"
    OPERABLE = "operable"
    UNDERSTANDABLE = "understandable"
    ROBUST = "robust"


class ContrastMetric(str, Enum):
    """Which contrast formula drives pass/fail."""

    RATIO = "ratio"  # WCAG 2.x luminance ratio, 1..21
    LIGHTNESS = "lightness"  # APCA Lc, signed, about -108..106


class ConformanceLevel(str, Enum):
    AA = "AA"
    AAA = "AAA"


class TextClass(str, Enum):
    NORMAL = "normal"
    LARGE = "large"


class WcagReference(BaseModel):
    """Pointer to a single WCAG success criterion."""

    model_config = ConfigDict(frozen=True)

    criterion: str = Field(pattern=r"^\d+\.\d+\.\d+$")
    level: WcagLevel = WcagLevel.A
    principle: WcagPrinciple
    version: str | None = None  # "2.0", "2.1", "2.2"
    title: str | None = None
    url: str | None = None


class IssueLocation(BaseModel):
    """Where an issue lives: a DOM node, a source file position, or both."""

    model_config = ConfigDict(frozen=True)

    selector: str | None = None
    xpath: str | None = None
    file: str | None = None
    line: int | None = Field(default=None, gt=0)
    column: int | None = Field(default=None, ge=0)
    snippet: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def check_has_anchor(self) -> "IssueLocation":
        if not (self.selector or self.file or self.xpath):
            raise ValueError("location needs at least one of 'selector', 'file' or 'xpath'")
        return self


class SuggestedFix(BaseModel):
    model_config = ConfigDict(frozen=True)

    foreground: str
    background: str
    new_value: float


class ContrastData(BaseModel):
    """Measurements attached to a contrast issue."""

    model_config = ConfigDict(frozen=True)

    foreground: str
    background: str
    metric: ContrastMetric = ContrastMetric.RATIO
    current_value: float
    required_value: float
    text_class: TextClass
    font_size_px: float | None = None
    font_weight: int | None = None
    suggested_fix: SuggestedFix | None = None


class CanonicalIssue(BaseModel):
    """A single defect instance, normalized from any source engine.

    Instances are frozen. Deduplication and enrichment build new records
    with ``model_copy(update=...)`` instead of editing in place.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    rule_id: str = Field(min_length=1)
    source_engine: str = Field(min_length=1)
    severity: Severity
    wcag: WcagReference | None = None
    location: IssueLocation
    message: str = Field(min_length=1)
    human_context: str | None = None
    suggested_actions: list[str] | None = None
    affected_users: list[str] | None = None
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    engine_payload: dict[str, Any] | None = None
    contrast_data: ContrastData | None = None
