"""Normalizer for saved contrast-analyzer output (``accessmerge contrast -o``)."""

from __future__ import annotations

from typing import Any

from accessmerge.contrast.analyzer import ENGINE_NAME
from accessmerge.normalizers.base import BaseNormalizer, NormalizerContext, check_issue_contract
from accessmerge.schemas.contrast import ContrastAnalysisResult
from accessmerge.schemas.issues import CanonicalIssue


class ContrastNormalizer(BaseNormalizer):
    """Issues are already canonical; this only re-validates them."""

    @property
    def name(self) -> str:
        return ENGINE_NAME

    def normalize(self, raw: Any, context: NormalizerContext) -> list[CanonicalIssue]:
        if isinstance(raw, list):
            return [check_issue_contract(item) for item in raw]
        return ContrastAnalysisResult.model_validate(raw).issues
