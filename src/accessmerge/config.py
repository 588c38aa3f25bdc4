"""YAML config loader — reads audit-config.yml into AuditConfig."""

from pathlib import Path

import yaml

from accessmerge.schemas.config import AuditConfig


def load_config(path: str | Path) -> AuditConfig:
    """Load and validate an audit config file.

    Raises ``FileNotFoundError`` if the path doesn't exist and
    ``pydantic.ValidationError`` if the YAML content is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = yaml.safe_load(path.read_text())
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    # An ``engines:`` key with every item commented out loads as None.
    if "engines" in raw:
        if raw["engines"] is None:
            raw.pop("engines")
        elif isinstance(raw["engines"], list):
            raw["engines"] = [item for item in raw["engines"] if item]

    for section in ("contrast", "browser"):
        if section in raw and raw[section] is None:
            raw.pop(section)

    return AuditConfig(**raw)
