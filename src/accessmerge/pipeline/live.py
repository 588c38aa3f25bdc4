"""Engine tasks that drive a live page through the browser collaborator."""

from __future__ import annotations

import logging

from accessmerge.contrast.analyzer import ENGINE_NAME as CONTRAST_ENGINE
from accessmerge.contrast.analyzer import analyze_samples
from accessmerge.normalizers.axe import AxeNormalizer
from accessmerge.normalizers.base import NormalizerContext
from accessmerge.pipeline.runner import EngineTask
from accessmerge.schemas.config import AuditConfig
from accessmerge.schemas.contrast import ContrastOptions
from accessmerge.schemas.pipeline import EngineResult
from accessmerge.shared.browser import BrowserManager

logger = logging.getLogger(__name__)


def axe_task(browser: BrowserManager, target: str, *, level: str = "AA") -> EngineTask:
    normalizer = AxeNormalizer()

    async def _task() -> EngineResult:
        raw = await browser.run_axe(target, level=level)
        context = NormalizerContext(engine=normalizer.name, target_url=target)
        return EngineResult(engine=normalizer.name, issues=normalizer.process(raw, context), raw=raw)

    return _task


def contrast_task(browser: BrowserManager, target: str, options: ContrastOptions) -> EngineTask:
    async def _task() -> EngineResult:
        samples = await browser.extract_color_samples(target, scope_selector=options.scope_selector)
        result = analyze_samples(samples, options)
        return EngineResult(
            engine=CONTRAST_ENGINE,
            issues=result.issues,
            raw=result.summary.model_dump(),
        )

    return _task


def build_live_engines(config: AuditConfig, browser: BrowserManager) -> dict[str, EngineTask]:
    """Map each configured engine name to its task, in config order."""
    tasks: dict[str, EngineTask] = {}
    for engine in config.engines:
        match engine:
            case "axe-core":
                tasks[engine] = axe_task(browser, config.target, level=config.contrast.conformance_level.value)
            case "contrast-analyzer":
                tasks[engine] = contrast_task(browser, config.target, config.contrast)
            case _:
                raise ValueError(f"No live runner for engine '{engine}'")
    logger.debug("Live engines: %s", ", ".join(tasks))
    return tasks
