"""Level normalization.

Literal step numbers are compressed into a dense ``1..K`` sequence so that
gaps in the author's numbering ("Step 1", "Step 5", "Step 9") do not leave
empty rows. Continuation references are re-resolved under the new numbering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..core.exceptions import DuplicateStepError
from ..utils.logging import get_logger
from .parser import RawStep, step_id

logger = get_logger(__name__)


@dataclass(frozen=True)
class NormalizedStep:
    id: str
    text: str
    level: int
    literal_level: int
    literal_id: str
    branch: Optional[str] = None
    continues_from_ids: Tuple[str, ...] = ()
    unresolved_ids: Tuple[str, ...] = ()
    line_number: int = 0
    structured: bool = True

    @property
    def is_parallel(self) -> bool:
        return self.branch is not None


def build_level_map(steps: List[RawStep]) -> Dict[int, int]:
    """Map each distinct literal level to its dense rank, starting at 1."""

    distinct = sorted({step.literal_level for step in steps})
    return {literal: rank for rank, literal in enumerate(distinct, start=1)}


def _group_by_literal_level(steps: List[RawStep]) -> Dict[int, List[RawStep]]:
    groups: Dict[int, List[RawStep]] = {}
    for step in steps:
        groups.setdefault(step.literal_level, []).append(step)
    return groups


def _normalize_step(step: RawStep, level_map: Dict[int, int]) -> NormalizedStep:
    resolved: List[str] = []
    unresolved: List[str] = []
    for token in step.continues_from_tokens:
        # Unknown literal levels pass through unchanged.
        target_level = level_map.get(token.literal_level, token.literal_level)
        target_id = step_id(target_level, token.branch)
        resolved.append(target_id)
        if token.literal_level not in level_map:
            unresolved.append(target_id)

    return NormalizedStep(
        id=step_id(level_map[step.literal_level], step.branch),
        text=step.text,
        level=level_map[step.literal_level],
        literal_level=step.literal_level,
        literal_id=step.literal_id,
        branch=step.branch,
        continues_from_ids=tuple(resolved),
        unresolved_ids=tuple(unresolved),
        line_number=step.line_number,
        structured=step.structured,
    )


def _resolve_duplicates(steps: List[NormalizedStep], policy: str) -> List[NormalizedStep]:
    counts: Dict[str, int] = {}
    for step in steps:
        counts[step.id] = counts.get(step.id, 0) + 1
    duplicates = sorted(sid for sid, count in counts.items() if count > 1)
    if not duplicates:
        return steps

    if policy == "error":
        raise DuplicateStepError(
            "Plan declares the same step more than once",
            context={"step_ids": duplicates},
        )
    logger.warning(
        "Duplicate step identities in plan",
        extra={"step_ids": duplicates, "policy": policy},
    )
    if policy == "keep":
        return steps

    if policy == "first":
        seen: set[str] = set()
        kept = []
        for step in steps:
            if step.id in seen:
                continue
            seen.add(step.id)
            kept.append(step)
        return kept

    last_index = {step.id: idx for idx, step in enumerate(steps)}
    return [step for idx, step in enumerate(steps) if last_index[step.id] == idx]


def normalize_levels(steps: List[RawStep], *, duplicate_policy: str = "keep") -> List[NormalizedStep]:
    """Renumber raw steps onto dense levels.

    Output is ordered by new level, then by input order within a level.

    Args:
        steps: Parser output.
        duplicate_policy: What to do when two steps end up with the same id:
            ``keep`` both, keep the ``first`` or ``last``, or raise on ``error``.
    """
    level_map = build_level_map(steps)
    groups = _group_by_literal_level(steps)

    normalized: List[NormalizedStep] = []
    for literal_level in sorted(groups):
        for step in groups[literal_level]:
            normalized.append(_normalize_step(step, level_map))

    logger.debug(
        "Normalized plan levels",
        extra={"levels": len(level_map), "steps": len(normalized)},
    )
    return _resolve_duplicates(normalized, duplicate_policy)
