"""Typer CLI — ``accessmerge`` validate, pair, contrast, merge and audit commands."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import httpx
import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console

from accessmerge.config import load_config
from accessmerge.contrast.analyzer import analyze_samples
from accessmerge.normalizers.registry import canonical_engine_name
from accessmerge.output.markdown import render_contrast_report, write_reports
from accessmerge.pipeline.runner import EngineTask, file_engine, run_engines
from accessmerge.schemas.config import AuditConfig
from accessmerge.schemas.contrast import ContrastOptions, ElementSample
from accessmerge.schemas.pipeline import CombinedReport
from accessmerge.shared.progress import PipelineProgress

# Load .env file from project root (if it exists)
load_dotenv()

app = typer.Typer(
    name="accessmerge",
    help="accessmerge — contrast analysis and merged multi-engine accessibility reports.",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _contrast_options(level: str, metric: str, **kwargs: object) -> ContrastOptions:
    try:
        return ContrastOptions(conformance_level=level, metric=metric, **kwargs)
    except ValidationError as exc:
        console.print(f"[red]Invalid contrast options:[/] {exc}")
        raise typer.Exit(code=1)


@app.command()
def validate(
    config: Path = typer.Option(..., "--config", "-c", help="Path to audit-config.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate a configuration file without running the audit."""
    _setup_logging(verbose)

    try:
        cfg = load_config(config)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)

    console.print("[green]Config is valid![/]\n")
    console.print(f"  Target URL:   {cfg.target_url or '(none)'}")
    console.print(f"  Target file:  {cfg.target_html_file or '(none)'}")
    console.print(f"  Engines:      {', '.join(cfg.engines)}")
    console.print(f"  Contrast:     {cfg.contrast.metric.value} / {cfg.contrast.conformance_level.value}")
    if cfg.contrast.scope_selector:
        console.print(f"  Scope:        {cfg.contrast.scope_selector}")
    console.print(f"  Deduplicate:  {cfg.deduplicate}")
    console.print(f"  Output dir:   {cfg.output_directory}")


@app.command()
def pair(
    foreground: str = typer.Argument(..., help="Text color, e.g. '#777' or 'rgb(119, 119, 119)'"),
    background: str = typer.Argument("#ffffff", help="Background color"),
    size: float = typer.Option(16.0, "--size", help="Font size in px"),
    weight: int = typer.Option(400, "--weight", help="Font weight"),
    level: str = typer.Option("AA", "--level", help="AA or AAA"),
    metric: str = typer.Option("ratio", "--metric", help="ratio (WCAG 2) or lightness (APCA)"),
) -> None:
    """Check a single foreground/background pair and suggest a fix."""
    options = _contrast_options(level, metric, include_passing_elements=True)
    sample = ElementSample(
        selector="pair",
        foreground=foreground,
        background=background,
        font_size_px=size,
        font_weight=weight,
    )
    result = analyze_samples([sample], options)
    if not result.issues:
        console.print(f"[red]Could not parse colors:[/] {foreground!r} on {background!r}")
        raise typer.Exit(code=1)

    issue = result.issues[0]
    data = issue.contrast_data
    passed = result.summary.passing == 1
    status = "[green]PASS[/]" if passed else f"[red]FAIL[/] ({issue.severity.value})"
    console.print(f"{status} {issue.message}")
    console.print(f"  Text class:  {data.text_class.value}")
    if data.suggested_fix:
        fix = data.suggested_fix
        console.print(f"  Suggested:   {fix.foreground} on {fix.background} -> {fix.new_value}")


@app.command()
def contrast(
    samples: Path = typer.Option(..., "--samples", "-s", help="JSON file with extracted element samples"),
    level: str = typer.Option("AA", "--level", help="AA or AAA"),
    metric: str = typer.Option("ratio", "--metric", help="ratio (WCAG 2) or lightness (APCA)"),
    no_fixes: bool = typer.Option(False, "--no-fixes", help="Skip suggested-fix search."),
    include_passing: bool = typer.Option(False, "--include-passing", help="Report passing elements too."),
    output: Path = typer.Option(None, "--output", "-o", help="Write the full result as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Run the contrast analyzer over previously extracted samples."""
    _setup_logging(verbose)
    options = _contrast_options(
        level, metric, suggest_fixes=not no_fixes, include_passing_elements=include_passing,
    )

    try:
        raw = json.loads(samples.read_text())
        items = raw.get("samples", []) if isinstance(raw, dict) else raw
        parsed = [ElementSample.model_validate(item) for item in items]
    except (OSError, ValueError) as exc:
        console.print(f"[red]Could not read samples:[/] {exc}")
        raise typer.Exit(code=1)

    result = analyze_samples(parsed, options)
    console.print(render_contrast_report(result), markup=False)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.model_dump_json(indent=2), encoding="utf-8")
        console.print(f"\n[green]Contrast result written to:[/] {output}")


def _parse_result_args(results: list[str]) -> dict[str, Path]:
    parsed: dict[str, Path] = {}
    for item in results:
        name, sep, path = item.partition("=")
        engine = canonical_engine_name(name)
        if not sep or not engine or not path:
            raise typer.BadParameter(f"expected ENGINE=PATH, got {item!r}", param_hint="--result")
        if engine in parsed:
            raise typer.BadParameter(f"engine {name!r} given twice", param_hint="--result")
        parsed[engine] = Path(path)
    return parsed


@app.command()
def merge(
    results: list[str] = typer.Option(..., "--result", "-r", help="ENGINE=path to a saved engine JSON output (repeatable)"),
    output_dir: Path = typer.Option(Path("./output"), "--output-dir", "-o"),
    target: str = typer.Option("", "--target", help="Target label for the report"),
    no_dedup: bool = typer.Option(False, "--no-dedup", help="Keep duplicate issues across engines."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Normalize saved engine outputs, deduplicate and write a combined report."""
    _setup_logging(verbose)
    paths = _parse_result_args(results)

    try:
        engines: dict[str, EngineTask] = {
            engine: file_engine(engine, path, target_url=target or None) for engine, path in paths.items()
        }
    except ValueError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1)

    with PipelineProgress() as progress:
        progress.print_phase("Normalizing engine results")
        report = asyncio.run(run_engines(engines, target=target, dedup=not no_dedup, progress=progress))

    _finish(report, output_dir)


def _preflight(cfg: AuditConfig) -> None:
    """Fail fast when the target URL is unreachable."""
    if not cfg.target_url:
        return
    try:
        response = httpx.get(
            cfg.target_url,
            follow_redirects=True,
            timeout=cfg.browser.timeout_ms / 1000,
            verify=not cfg.browser.ignore_https_errors,
        )
    except httpx.HTTPError as exc:
        console.print(f"[red]Target unreachable:[/] {cfg.target_url} ({exc})")
        raise typer.Exit(code=1)
    if response.status_code >= 400:
        console.print(f"[yellow]Target answered HTTP {response.status_code}; auditing anyway.[/]")


@app.command()
def audit(
    config: Path = typer.Option(..., "--config", "-c", help="Path to audit-config.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Validate and show the plan without launching a browser."),
) -> None:
    """Run the configured engines against a live page and write reports."""
    _setup_logging(verbose)

    try:
        cfg = load_config(config)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)

    if dry_run:
        console.print("[yellow]DRY-RUN mode — no browser will be launched.[/]\n")
        console.print(f"  Target:   {cfg.target}")
        console.print(f"  Engines:  {', '.join(cfg.engines)}")
        console.print(f"  Output:   {cfg.output_directory}")
        return

    _preflight(cfg)
    console.print(f"[bold]Starting audit for:[/] {cfg.target}\n")
    report = asyncio.run(_run_audit(cfg))
    _finish(report, Path(cfg.output_directory))


async def _run_audit(cfg: AuditConfig) -> CombinedReport:
    from accessmerge.pipeline.live import build_live_engines
    from accessmerge.shared.browser import BrowserManager

    async with BrowserManager(cfg.browser) as browser:
        with PipelineProgress() as progress:
            progress.print_phase("Running engines")
            return await run_engines(
                build_live_engines(cfg, browser),
                target=cfg.target,
                dedup=cfg.deduplicate,
                progress=progress,
            )


def _finish(report: CombinedReport, out_dir: Path) -> None:
    json_path, md_path = write_reports(report, out_dir)
    summary = report.summary
    console.print(
        f"\n[bold]{summary.total} issue(s)[/] "
        f"({summary.duplicates_removed} duplicate(s) removed) across {', '.join(report.engines_used)}"
    )
    for error in report.partial_errors:
        console.print(f"  [red]✗[/] {error}")
    console.print(f"[green]JSON report written to:[/] {json_path}")
    console.print(f"[green]Markdown report written to:[/] {md_path}")
    if not report.success:
        raise typer.Exit(code=1)
