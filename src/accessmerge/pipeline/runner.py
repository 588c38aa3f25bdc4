"""Multi-engine runner — concurrent fan-out, isolated failures, then merge."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path
from typing import Any

from accessmerge.normalizers.base import NormalizerContext
from accessmerge.normalizers.registry import get_normalizer
from accessmerge.pipeline.aggregate import summarize
from accessmerge.pipeline.dedup import deduplicate, group_by_wcag
from accessmerge.schemas.issues import CanonicalIssue
from accessmerge.schemas.pipeline import CombinedReport, EngineResult
from accessmerge.shared.progress import PipelineProgress

logger = logging.getLogger(__name__)

EngineTask = Callable[[], Awaitable[EngineResult]]


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _coerce_result(engine: str, result: Any) -> EngineResult:
    """Accept an EngineResult (or its dict form); anything else is malformed."""
    if isinstance(result, EngineResult):
        return result
    if isinstance(result, dict):
        return EngineResult.model_validate(result)
    raise TypeError(f"engine returned {type(result).__name__}, expected EngineResult")


async def run_engines(
    engines: Mapping[str, EngineTask],
    *,
    target: str = "",
    dedup: bool = True,
    progress: PipelineProgress | None = None,
) -> CombinedReport:
    """Run every engine task concurrently and merge their issues.

    Each task is awaited to completion; a task that raises (or returns
    something that is not an ``EngineResult``) contributes no issues and
    adds ``"<engine>: <message>"`` to ``partial_errors``. Siblings are never
    cancelled. Issues are merged in request order, so deduplication is
    deterministic for a fixed engine order. ``success`` is false only when
    every engine failed.
    """
    if not engines:
        raise ValueError("At least one engine is required")

    start = time.perf_counter()
    names = list(engines)
    results: dict[str, EngineResult] = {}
    errors: dict[str, str] = {}

    async def _run(name: str) -> None:
        if progress:
            progress.start_engine(name)
        task_start = time.perf_counter()
        try:
            result = _coerce_result(name, await engines[name]())
        except Exception as exc:
            logger.exception("Engine %s failed", name)
            errors[name] = f"{name}: {exc}"
            if progress:
                progress.fail_engine(name, str(exc))
            return

        if not result.duration_ms:
            result = result.model_copy(update={"duration_ms": _elapsed_ms(task_start)})
        results[name] = result
        logger.info("Engine %s finished: %d issue(s) in %dms", name, len(result.issues), result.duration_ms)
        if progress:
            progress.finish_engine(name, len(result.issues))

    await asyncio.gather(*(_run(name) for name in names), return_exceptions=True)

    merged: list[CanonicalIssue] = []
    for name in names:
        if name in results:
            merged.extend(results[name].issues)

    issues = deduplicate(merged) if dedup else merged
    summary = summarize(issues, engines=names, before_dedup=len(merged))
    if summary.duplicates_removed:
        logger.info("Removed %d duplicate issue(s)", summary.duplicates_removed)

    return CombinedReport(
        success=bool(results),
        duration_ms=_elapsed_ms(start),
        target=target,
        engines_used=names,
        issues=issues,
        issues_by_wcag_criterion=group_by_wcag(issues),
        summary=summary,
        raw_results_per_engine={name: results[name].raw for name in names if name in results},
        duplicates_removed_count=summary.duplicates_removed,
        partial_errors=[errors[name] for name in names if name in errors],
    )


def load_engine_output(path: str | Path) -> Any:
    """Read a saved engine JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Engine output not found: {path}")
    return json.loads(path.read_text())


def file_engine(engine: str, path: str | Path, *, target_url: str | None = None) -> EngineTask:
    """Build a task that normalizes a saved engine output file."""
    normalizer = get_normalizer(engine)

    async def _task() -> EngineResult:
        raw = await asyncio.to_thread(load_engine_output, path)
        context = NormalizerContext(engine=normalizer.name, target_url=target_url)
        issues = normalizer.process(raw, context)
        return EngineResult(engine=normalizer.name, issues=issues, raw=raw)

    return _task
