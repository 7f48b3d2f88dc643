"""Flowchart construction from plan text."""

from __future__ import annotations

from typing import Optional

from ..config.settings import Settings
from ..core.exceptions import EmptyPlanError
from ..utils.logging import get_logger
from .model import Flowchart
from .normalize import normalize_levels
from .parser import parse_lines
from .synthesizer import EMPTY_PLAN_MESSAGE, synthesize

logger = get_logger(__name__)


def generate_flowchart(
    text: str,
    *,
    page_id: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> Flowchart:
    """Parse, normalize and synthesize ``text`` in one pass.

    ``page_id``, when given, prefixes every node and edge id so charts from
    several pages can be merged without collisions.

    Raises:
        EmptyPlanError: if ``text`` holds no non-blank lines.
    """
    settings = settings or Settings()
    raw_steps = parse_lines(text)
    if not raw_steps:
        raise EmptyPlanError(EMPTY_PLAN_MESSAGE, context={"page_id": page_id} if page_id else None)

    steps = normalize_levels(raw_steps, duplicate_policy=settings.duplicate_policy)
    flowchart = synthesize(steps, settings=settings, page_id=page_id)
    logger.info(
        "Generated flowchart",
        extra={"nodes": len(flowchart.nodes), "edges": len(flowchart.edges), "page_id": page_id},
    )
    return flowchart
