"""Contrast issue builder — turns element samples into canonical issues."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from accessmerge.contrast.colors import RGB, parse_color
from accessmerge.contrast.metrics import measure
from accessmerge.contrast.solver import meets_target, suggest_fix
from accessmerge.contrast.thresholds import (
    classify_severity,
    classify_text_size,
    passes,
    required_value,
)
from accessmerge.schemas.contrast import (
    ContrastAnalysisResult,
    ContrastOptions,
    ContrastSummary,
    ElementSample,
    PassFailCounts,
    TextSizeBreakdown,
)
from accessmerge.schemas.issues import (
    CanonicalIssue,
    ConformanceLevel,
    ContrastData,
    ContrastMetric,
    IssueLocation,
    Severity,
    SuggestedFix,
    TextClass,
    WcagLevel,
    WcagPrinciple,
    WcagReference,
)
from accessmerge.shared.wcag import criterion_url

logger = logging.getLogger(__name__)

ENGINE_NAME = "contrast-analyzer"
RULE_ID = "color-contrast"
AFFECTED_USERS = ["low-vision", "color-blind"]


def round_value(value: float, metric: ContrastMetric) -> float:
    """Ratios keep two decimals, lightness values one."""
    return round(value, 1) if metric is ContrastMetric.LIGHTNESS else round(value, 2)


def build_suggested_fix(
    fg: RGB,
    bg: RGB,
    target: float,
    metric: ContrastMetric,
) -> SuggestedFix | None:
    """Solver result as a fix, or ``None`` when no color reaches ``target``."""
    fixed = suggest_fix(fg, bg, target, metric)
    if not meets_target(fixed, bg, target, metric):
        logger.debug("No compliant foreground for %s on %s (target %s)", fg.hex, bg.hex, target)
        return None
    new_value = abs(measure(fixed, bg, metric))
    return SuggestedFix(
        foreground=fixed.hex,
        background=bg.hex,
        new_value=round_value(new_value, metric),
    )


def _wcag_reference(metric: ContrastMetric, level: ConformanceLevel) -> WcagReference:
    if metric is ContrastMetric.LIGHTNESS:
        return WcagReference(
            criterion="1.4.3",
            level=WcagLevel.AA,
            principle=WcagPrinciple.PERCEIVABLE,
            title="Contrast (APCA - WCAG 3.0 Draft)",
            url=criterion_url("1.4.3"),
        )
    if level is ConformanceLevel.AAA:
        return WcagReference(
            criterion="1.4.6",
            level=WcagLevel.AAA,
            principle=WcagPrinciple.PERCEIVABLE,
            version="2.1",
            title="Contrast (Enhanced)",
            url=criterion_url("1.4.6"),
        )
    return WcagReference(
        criterion="1.4.3",
        level=WcagLevel.AA,
        principle=WcagPrinciple.PERCEIVABLE,
        version="2.1",
        title="Contrast (Minimum)",
        url=criterion_url("1.4.3"),
    )


def _describe(data: ContrastData, level: ConformanceLevel, passed: bool) -> tuple[str, str | None, list[str] | None]:
    """Return (message, human_context, suggested_actions) for one sample."""
    size = "large" if data.text_class is TextClass.LARGE else "normal"

    if data.metric is ContrastMetric.LIGHTNESS:
        current = f"{data.current_value}Lc"
        required = f"{data.required_value}Lc"
        verb = "meets" if passed else "does not meet"
        message = f"APCA lightness {current} {verb} requirements ({required} required for {size} text)"
        fallback_action = "Adjust the text or background color to increase contrast"
        increase = f"Increase APCA lightness to at least {required}"
        threshold = f"threshold of {required}"
        measured = f"APCA lightness of {current}"
    else:
        current = f"{data.current_value}:1"
        required = f"{data.required_value}:1"
        verb = "meets" if passed else "does not meet"
        message = f"Contrast ratio {current} {verb} {level.value} requirements ({required} required for {size} text)"
        fallback_action = "Darken the text color or lighten the background"
        increase = f"Increase contrast ratio to at least {required}"
        threshold = f"{level.value} threshold of {required}"
        measured = f"contrast of {current}"

    if passed:
        return message, None, None

    human_context = (
        "Users with low vision or color blindness may have difficulty reading this text. "
        f"The current {measured} is below the {threshold}."
    )
    actions = [
        increase,
        f"Consider using {data.suggested_fix.foreground} as the text color"
        if data.suggested_fix
        else fallback_action,
    ]
    return message, human_context, actions


def build_contrast_issue(
    index: int,
    sample: ElementSample,
    options: ContrastOptions,
) -> tuple[CanonicalIssue, bool] | None:
    """Analyze one sample; returns ``(issue, passed)`` or ``None`` if unparseable."""
    fg = parse_color(sample.foreground)
    bg = parse_color(sample.background)
    if fg is None or bg is None:
        logger.debug(
            "Could not parse colors for %s (fg=%r, bg=%r)",
            sample.selector, sample.foreground, sample.background,
        )
        return None

    metric = options.metric
    level = options.conformance_level
    text_class = classify_text_size(sample.font_size_px, sample.font_weight)
    value = measure(fg, bg, metric)
    required = required_value(metric, level, text_class)
    passed = passes(value, metric, level, text_class)
    current = round_value(value, metric)

    fix = None
    if not passed and options.suggest_fixes:
        fix = build_suggested_fix(fg, bg, required, metric)

    data = ContrastData(
        foreground=sample.foreground,
        background=sample.background,
        metric=metric,
        current_value=current,
        required_value=required,
        text_class=text_class,
        font_size_px=sample.font_size_px,
        font_weight=sample.font_weight,
        suggested_fix=fix,
    )
    severity = Severity.MINOR if passed else classify_severity(current, required, metric)
    message, human_context, actions = _describe(data, level, passed)

    issue = CanonicalIssue(
        id=f"contrast-{index}",
        rule_id=RULE_ID,
        source_engine=ENGINE_NAME,
        severity=severity,
        wcag=_wcag_reference(metric, level),
        location=IssueLocation(selector=sample.selector, snippet=sample.snippet or None),
        message=message,
        human_context=human_context,
        suggested_actions=actions,
        affected_users=None if passed else list(AFFECTED_USERS),
        confidence=1.0,
        contrast_data=data,
    )
    return issue, passed


def analyze_samples(
    samples: Iterable[ElementSample],
    options: ContrastOptions | None = None,
) -> ContrastAnalysisResult:
    """Run the contrast checks over a batch of samples.

    Samples with unparseable colors are skipped and counted, never raised.
    Passing samples are only included as issues when
    ``options.include_passing_elements`` is set.
    """
    options = options or ContrastOptions()
    issues: list[CanonicalIssue] = []
    by_severity = {s.value: 0 for s in Severity}
    normal = PassFailCounts()
    large = PassFailCounts()
    passing = failing = skipped = 0

    for index, sample in enumerate(samples):
        built = build_contrast_issue(index, sample, options)
        if built is None:
            skipped += 1
            continue

        issue, passed = built
        bucket = large if issue.contrast_data.text_class is TextClass.LARGE else normal
        if passed:
            passing += 1
            bucket.passing += 1
            if not options.include_passing_elements:
                continue
        else:
            failing += 1
            bucket.failing += 1

        by_severity[issue.severity.value] += 1
        issues.append(issue)

    logger.info(
        "Contrast analysis: %d passing, %d failing, %d skipped (%s, %s)",
        passing, failing, skipped, options.metric.value, options.conformance_level.value,
    )

    return ContrastAnalysisResult(
        issues=issues,
        summary=ContrastSummary(
            total=passing + failing,
            passing=passing,
            failing=failing,
            skipped=skipped,
            by_severity=by_severity,
            by_text_size=TextSizeBreakdown(normal_text=normal, large_text=large),
        ),
        wcag_level_used=options.conformance_level,
        metric=options.metric,
    )
