"""Configuration schema — validates audit-config.yml."""

from pathlib import Path

from pydantic import BaseModel, model_validator

from accessmerge.schemas.contrast import ContrastOptions

# Engines the live ``audit`` command knows how to drive.
LIVE_ENGINES = ("axe-core", "contrast-analyzer")

AXE_SCRIPT_URL = "https://cdn.jsdelivr.net/npm/axe-core@4/axe.min.js"


class Viewport(BaseModel):
    width: int = 1280
    height: int = 800


class BrowserConfig(BaseModel):
    """Settings for the Playwright collaborator.

    Two configs that compare equal describe the same browser, so callers can
    use ``model_dump_json()`` as a cache key if they want to reuse handles.
    """

    headless: bool = True
    timeout_ms: int = 30_000
    ignore_https_errors: bool = False
    viewport: Viewport = Viewport()
    axe_script_url: str = AXE_SCRIPT_URL


class AuditConfig(BaseModel):
    """Top-level configuration loaded from audit-config.yml.

    Exactly one of ``target_url`` or ``target_html_file`` must be provided,
    and at least one engine is required.
    """

    target_url: str = ""
    target_html_file: str = ""

    engines: list[str] = list(LIVE_ENGINES)
    contrast: ContrastOptions = ContrastOptions()
    browser: BrowserConfig = BrowserConfig()

    deduplicate: bool = True
    output_directory: str = "./output"

    @model_validator(mode="after")
    def check_has_target(self) -> "AuditConfig":
        if not self.target_url and not self.target_html_file:
            raise ValueError(
                "One of 'target_url' or 'target_html_file' must be provided"
            )
        if self.target_url and self.target_html_file:
            raise ValueError("Provide either 'target_url' or 'target_html_file', not both")
        return self

    @model_validator(mode="after")
    def check_engines(self) -> "AuditConfig":
        if not self.engines:
            raise ValueError("At least one engine is required")
        unknown = [e for e in self.engines if e not in LIVE_ENGINES]
        if unknown:
            raise ValueError(
                f"Unknown engine(s): {', '.join(unknown)}. Choose from: {', '.join(LIVE_ENGINES)}"
            )
        return self

    @model_validator(mode="after")
    def check_html_file_exists(self) -> "AuditConfig":
        if self.target_html_file and not Path(self.target_html_file).exists():
            raise ValueError(f"target_html_file does not exist: {self.target_html_file}")
        return self

    @property
    def target(self) -> str:
        return self.target_url or self.target_html_file
