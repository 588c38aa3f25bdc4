"""Engine name -> normalizer lookup."""

from __future__ import annotations

from accessmerge.normalizers.axe import AxeNormalizer
from accessmerge.normalizers.base import BaseNormalizer
from accessmerge.normalizers.contrast import ContrastNormalizer
from accessmerge.normalizers.eslint import ESLintNormalizer
from accessmerge.normalizers.lighthouse import LighthouseNormalizer
from accessmerge.normalizers.pa11y import Pa11yNormalizer

_ALIASES = {
    "axe": "axe-core",
    "eslint": "eslint-vuejs-a11y",
    "contrast": "contrast-analyzer",
    "lh": "lighthouse",
}


def _build_registry() -> dict[str, BaseNormalizer]:
    normalizers: list[BaseNormalizer] = [
        AxeNormalizer(),
        Pa11yNormalizer(),
        ESLintNormalizer(),
        ContrastNormalizer(),
        LighthouseNormalizer(),
    ]
    return {n.name: n for n in normalizers}


NORMALIZERS = _build_registry()


def canonical_engine_name(name: str) -> str:
    key = name.strip().lower()
    return _ALIASES.get(key, key)


def get_normalizer(name: str) -> BaseNormalizer:
    """Return the normalizer for ``name`` (aliases such as ``axe`` accepted)."""
    key = canonical_engine_name(name)
    if key not in NORMALIZERS:
        raise ValueError(
            f"Unknown engine '{name}'. Choose from: {', '.join(sorted(NORMALIZERS))}"
        )
    return NORMALIZERS[key]
