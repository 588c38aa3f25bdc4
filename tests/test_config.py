"""Tests for config loading and validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from accessmerge.config import load_config
from accessmerge.schemas.config import AuditConfig, BrowserConfig
from accessmerge.schemas.issues import ConformanceLevel, ContrastMetric


class TestAuditConfig:
    """Test the AuditConfig Pydantic model directly."""

    def test_valid_minimal_with_file(self, html_file: Path) -> None:
        cfg = AuditConfig(target_html_file=str(html_file))
        assert cfg.target == str(html_file)
        assert cfg.engines == ["axe-core", "contrast-analyzer"]

    def test_valid_minimal_with_url(self) -> None:
        cfg = AuditConfig(target_url="https://example.com")
        assert cfg.target == "https://example.com"

    def test_requires_a_target(self) -> None:
        with pytest.raises(ValidationError, match="target_url.*target_html_file"):
            AuditConfig()

    def test_rejects_both_targets(self, html_file: Path) -> None:
        with pytest.raises(ValidationError, match="not both"):
            AuditConfig(target_url="https://example.com", target_html_file=str(html_file))

    def test_html_file_must_exist(self) -> None:
        with pytest.raises(ValidationError, match="does not exist"):
            AuditConfig(target_html_file="/nonexistent/page.html")

    def test_requires_an_engine(self) -> None:
        with pytest.raises(ValidationError, match="At least one engine"):
            AuditConfig(target_url="https://example.com", engines=[])

    def test_rejects_unknown_engine(self) -> None:
        with pytest.raises(ValidationError, match="Unknown engine"):
            AuditConfig(target_url="https://example.com", engines=["pa11y"])

    def test_defaults(self) -> None:
        cfg = AuditConfig(target_url="https://example.com")
        assert cfg.deduplicate is True
        assert cfg.output_directory == "./output"
        assert cfg.browser == BrowserConfig()
        assert cfg.contrast.conformance_level is ConformanceLevel.AA
        assert cfg.contrast.metric is ContrastMetric.RATIO

    def test_browser_configs_compare_by_value(self) -> None:
        assert BrowserConfig(headless=False) == BrowserConfig(headless=False)
        assert BrowserConfig(headless=False) != BrowserConfig()


class TestLoadConfig:
    """Test YAML file loading."""

    def test_load_valid_file(self, tmp_config: Path) -> None:
        cfg = load_config(tmp_config)
        assert cfg.engines == ["contrast-analyzer"]

    def test_file_not_found(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/config.yml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yml"
        bad.write_text("just a string")
        with pytest.raises(ValueError, match="YAML mapping"):
            load_config(bad)

    def test_nested_sections(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "config.yml"
        cfg_file.write_text(
            """\
target_url: "https://example.com"
contrast:
  conformance_level: aaa
  metric: LIGHTNESS
  scope_selector: "main"
browser:
  headless: false
  viewport:
    width: 375
    height: 667
"""
        )
        cfg = load_config(cfg_file)
        assert cfg.contrast.conformance_level is ConformanceLevel.AAA
        assert cfg.contrast.metric is ContrastMetric.LIGHTNESS
        assert cfg.contrast.scope_selector == "main"
        assert cfg.browser.headless is False
        assert cfg.browser.viewport.width == 375

    def test_null_sections_use_defaults(self, tmp_path: Path) -> None:
        """YAML files with commented-out items load as None."""
        cfg_file = tmp_path / "config.yml"
        cfg_file.write_text(
            """\
target_url: "https://example.com"
engines:
  # - "axe-core"
contrast:
browser:
"""
        )
        cfg = load_config(cfg_file)
        assert cfg.engines == ["axe-core", "contrast-analyzer"]
        assert cfg.browser == BrowserConfig()

    def test_invalid_metric(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "config.yml"
        cfg_file.write_text('target_url: "https://example.com"\ncontrast:\n  metric: delta-e\n')
        with pytest.raises(ValidationError):
            load_config(cfg_file)
