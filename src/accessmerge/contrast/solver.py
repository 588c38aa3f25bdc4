"""Suggested-fix solver: find a nearby foreground that meets a contrast target.

The foreground's OKLCH hue and chroma are kept fixed and only OKLCH
lightness moves, so the suggestion reads as "the same color, darker" or
"the same color, lighter".

The search direction is fixed before the first iteration:

* a foreground lighter than the background is darkened, one darker than
  the background is lightened;
* if that direction cannot reach the target even at its extreme (L=0 or
  L=1), the opposite direction is used instead.

Saturated colors clip at the gamut edge, so their lightness extremes are not
black and white. When neither extreme reaches the target the chroma is
scaled down step by step, ending at a neutral grey ramp.

Within a direction the acceptance test is a single monotonic predicate:
"the candidate sits on the chosen side of the background's luminance and
meets the target". A candidate that crosses the background simply fails the
predicate, which moves the same bound as any other failing candidate.
"""

from __future__ import annotations

import logging
from enum import Enum

import colour
import numpy as np

from accessmerge.contrast.colors import RGB
from accessmerge.contrast.metrics import measure, relative_luminance
from accessmerge.schemas.issues import ContrastMetric

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 50
# Chroma multipliers tried in order; the last step is achromatic.
CHROMA_STEPS = (1.0, 0.75, 0.5, 0.25, 0.0)
TOLERANCE = {
    ContrastMetric.RATIO: 0.01,
    ContrastMetric.LIGHTNESS: 0.5,
}


class Direction(str, Enum):
    DARKEN = "darken"
    LIGHTEN = "lighten"

    @property
    def opposite(self) -> "Direction":
        return Direction.LIGHTEN if self is Direction.DARKEN else Direction.DARKEN

    @property
    def extreme(self) -> float:
        return 0.0 if self is Direction.DARKEN else 1.0


def rgb_to_oklch(rgb: RGB) -> tuple[float, float, float]:
    """sRGB (0-255) -> OKLCH as (lightness 0-1, chroma, hue degrees)."""
    srgb = np.asarray(rgb, dtype=float) / 255
    oklab = colour.XYZ_to_Oklab(colour.sRGB_to_XYZ(srgb))
    lightness, chroma, hue = colour.Lab_to_LCHab(oklab)
    return float(lightness), float(chroma), float(hue)


def oklch_to_rgb(lightness: float, chroma: float, hue: float) -> RGB:
    """OKLCH -> sRGB (0-255), clipping out-of-gamut channels."""
    oklab = colour.LCHab_to_Lab(np.array([lightness, chroma, hue], dtype=float))
    srgb = np.nan_to_num(colour.XYZ_to_sRGB(colour.Oklab_to_XYZ(oklab)))
    srgb = np.clip(srgb, 0.0, 1.0) * 255
    return RGB.clamped(*srgb.tolist())


class _Search:
    """Evaluates candidates for one (foreground, background, target) problem.

    ``chroma_scale`` shrinks the foreground's OKLCH chroma; at 0 the
    extremes are pure black and white.
    """

    def __init__(
        self,
        fg: RGB,
        bg: RGB,
        target: float,
        metric: ContrastMetric,
        chroma_scale: float = 1.0,
    ) -> None:
        self.bg = bg
        self.target = abs(target)
        self.metric = metric
        self.bg_luminance = relative_luminance(bg)
        _, chroma, self.hue = rgb_to_oklch(fg)
        self.chroma = chroma * chroma_scale

    def candidate(self, lightness: float) -> RGB:
        return oklch_to_rgb(lightness, self.chroma, self.hue)

    def score(self, rgb: RGB) -> float:
        return abs(measure(rgb, self.bg, self.metric))

    def accepts(self, rgb: RGB, direction: Direction) -> bool:
        lum = relative_luminance(rgb)
        on_side = lum < self.bg_luminance if direction is Direction.DARKEN else lum > self.bg_luminance
        return on_side and self.score(rgb) >= self.target

    def reachable(self, preferred: Direction) -> Direction | None:
        """First of ``preferred`` / its opposite whose extreme meets the target."""
        for direction in (preferred, preferred.opposite):
            if self.accepts(self.candidate(direction.extreme), direction):
                return direction
        return None


def choose_direction(fg: RGB, bg: RGB) -> Direction:
    """Darken a foreground that is lighter than its background, else lighten."""
    return Direction.DARKEN if relative_luminance(fg) > relative_luminance(bg) else Direction.LIGHTEN


def meets_target(rgb: RGB, bg: RGB, target: float, metric: ContrastMetric) -> bool:
    """True when ``rgb`` on ``bg`` reaches ``target`` within the metric's tolerance."""
    return abs(measure(rgb, bg, metric)) >= abs(target) - TOLERANCE[metric]


def _bisect(search: _Search, direction: Direction) -> tuple[RGB, float]:
    """Lightness bisection; the chosen extreme must already be accepted."""
    tolerance = TOLERANCE[search.metric]
    low, high = 0.0, 1.0
    best_lightness = direction.extreme
    best = search.candidate(best_lightness)

    for _ in range(MAX_ITERATIONS):
        mid = (low + high) / 2
        rgb = search.candidate(mid)
        if search.accepts(rgb, direction):
            best_lightness, best = mid, rgb
            if search.score(rgb) - search.target < tolerance:
                break
            # Accepted: move toward the background to stay close to the original.
            if direction is Direction.DARKEN:
                low = mid
            else:
                high = mid
        elif direction is Direction.DARKEN:
            high = mid
        else:
            low = mid

    return best, best_lightness


def suggest_fix(
    fg: RGB,
    bg: RGB,
    target: float,
    metric: ContrastMetric = ContrastMetric.RATIO,
) -> RGB:
    """Return a foreground color that meets ``target`` against ``bg``.

    ``target`` is compared as a magnitude for the lightness metric. Chroma
    is kept when possible and reduced in ``CHROMA_STEPS`` only when neither
    lightness extreme reaches the target. A pair that already meets the
    target comes back unchanged; an unreachable target returns the best
    achromatic extreme, which callers check with :func:`meets_target`.
    """
    if abs(measure(fg, bg, metric)) >= abs(target):
        return fg

    preferred = choose_direction(fg, bg)
    for scale in CHROMA_STEPS:
        search = _Search(fg, bg, target, metric, chroma_scale=scale)
        direction = search.reachable(preferred)
        if direction is None:
            continue
        best, lightness = _bisect(search, direction)
        logger.debug(
            "Suggested %s for %s on %s (L=%.4f, chroma x%.2f, %s)",
            best.hex, fg.hex, bg.hex, lightness, scale, direction.value,
        )
        return best

    search = _Search(fg, bg, target, metric, chroma_scale=0.0)
    extremes = [search.candidate(d.extreme) for d in (preferred, preferred.opposite)]
    best = max(extremes, key=search.score)
    logger.debug(
        "Target %.2f unreachable for %s on %s; returning %s",
        target, fg.hex, bg.hex, best.hex,
    )
    return best
