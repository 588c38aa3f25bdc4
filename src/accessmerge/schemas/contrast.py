"""Pydantic models for contrast analysis input, options and results."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from accessmerge.schemas.issues import CanonicalIssue, ConformanceLevel, ContrastMetric


class ElementSample(BaseModel):
    """One visible text-bearing element, as extracted from the page.

    ``background`` is already resolved through ancestor inheritance and
    defaults to white when every ancestor is transparent.
    """

    selector: str
    snippet: str = ""
    foreground: str
    background: str = "rgb(255, 255, 255)"
    font_size_px: float = 16.0
    font_weight: int = 400

    @field_validator("snippet", mode="before")
    @classmethod
    def truncate_snippet(cls, v: object) -> str:
        text = "" if v is None else str(v)
        return text[:300]

    @field_validator("font_weight", mode="before")
    @classmethod
    def coerce_font_weight(cls, v: object) -> int:
        # Computed styles report weights as strings ("700") or keywords.
        if isinstance(v, str):
            keywords = {"normal": 400, "bold": 700, "lighter": 300, "bolder": 700}
            if v.strip().lower() in keywords:
                return keywords[v.strip().lower()]
            try:
                return int(float(v))
            except ValueError:
                return 400
        return v  # type: ignore[return-value]


class ContrastOptions(BaseModel):
    """Knobs for a contrast run. Unknown levels or metrics fail validation."""

    conformance_level: ConformanceLevel = ConformanceLevel.AA
    metric: ContrastMetric = ContrastMetric.RATIO
    suggest_fixes: bool = True
    include_passing_elements: bool = False
    scope_selector: str | None = None

    @field_validator("conformance_level", mode="before")
    @classmethod
    def upper_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @field_validator("metric", mode="before")
    @classmethod
    def lower_metric(cls, v: object) -> object:
        return v.lower() if isinstance(v, str) else v


class PassFailCounts(BaseModel):
    passing: int = 0
    failing: int = 0


class TextSizeBreakdown(BaseModel):
    normal_text: PassFailCounts = PassFailCounts()
    large_text: PassFailCounts = PassFailCounts()


class ContrastSummary(BaseModel):
    total: int = 0
    passing: int = 0
    failing: int = 0
    skipped: int = 0  # samples whose colors could not be parsed
    by_severity: dict[str, int] = Field(default_factory=dict)
    by_text_size: TextSizeBreakdown = TextSizeBreakdown()


class ContrastAnalysisResult(BaseModel):
    """Full output of one contrast run over a batch of samples."""

    issues: list[CanonicalIssue] = []
    summary: ContrastSummary = ContrastSummary()
    wcag_level_used: ConformanceLevel = ConformanceLevel.AA
    metric: ContrastMetric = ContrastMetric.RATIO
