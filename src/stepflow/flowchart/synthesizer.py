"""Graph synthesis: normalized steps to positioned nodes and styled edges.

Edges only ever join consecutive levels, unless a step names its sources
explicitly with a continuation clause:

- one previous node: it feeds every current node (fan-out when several)
- several previous nodes, one current node: fan-in
- several to several: full bipartite (``many_to_many_policy="bipartite"``)
  or rejected (``"strict"``)
- a continuation clause replaces the default sources for that step
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..config.settings import Settings
from ..core.exceptions import (
    AmbiguousTransitionError,
    EmptyPlanError,
    UnresolvedContinuationError,
)
from ..utils.logging import get_logger
from .layout import place_levels
from .model import Flowchart, FlowEdge, FlowNode, Marker, PageOrigin
from .normalize import NormalizedStep

logger = get_logger(__name__)

EMPTY_PLAN_MESSAGE = "Please enter a valid plan with steps"


def namespaced(node_id: str, page_id: Optional[str]) -> str:
    return f"{page_id}-{node_id}" if page_id else node_id


def group_levels(steps: Sequence[NormalizedStep]) -> List[List[NormalizedStep]]:
    groups: Dict[int, List[NormalizedStep]] = {}
    for step in steps:
        groups.setdefault(step.level, []).append(step)
    return [groups[level] for level in sorted(groups)]


class _EdgeCollector:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.edges: List[FlowEdge] = []
        self._seen: set[str] = set()

    def add(self, source: str, target: str, kind: str, style: Optional[str] = None) -> None:
        stroke, width = self._style(style or kind)
        edge = FlowEdge(
            source=source,
            target=target,
            kind=kind,
            stroke=stroke,
            stroke_width=width,
            type=self.settings.edge_type,
        )
        if edge.id in self._seen:
            return
        self._seen.add(edge.id)
        self.edges.append(edge)

    def _style(self, style: str) -> tuple[str, float]:
        settings = self.settings
        if style == "fan":
            return settings.fan_stroke, settings.fan_stroke_width
        if style == "bipartite":
            return settings.bipartite_stroke, settings.bipartite_stroke_width
        return settings.simple_stroke, settings.simple_stroke_width


def _build_nodes(
    levels: List[List[NormalizedStep]], settings: Settings, page_id: Optional[str]
) -> List[FlowNode]:
    positions = place_levels([len(group) for group in levels], settings)
    page = PageOrigin(page_id) if page_id else None
    last_index = len(levels) - 1

    nodes: List[FlowNode] = []
    for level_index, (group, points) in enumerate(zip(levels, positions)):
        parallel = len(group) > 1
        for step_index, (step, (x, y)) in enumerate(zip(group, points)):
            start = level_index == 0 and step_index == 0
            nodes.append(
                FlowNode(
                    id=namespaced(step.id, page_id),
                    label=step.text,
                    x=x,
                    y=y,
                    background=settings.parallel_background if parallel else settings.single_background,
                    border_color=settings.parallel_border if parallel else settings.single_border,
                    width=settings.node_width,
                    height=settings.node_height,
                    level=step.level,
                    branch=step.branch,
                    start_marker=Marker("start", settings.start_glyph) if start else None,
                    end_marker=Marker("end", settings.end_glyph) if level_index == last_index else None,
                    page=page,
                )
            )
    return nodes


def _continuation_sources(
    step: NormalizedStep,
    known_ids: set[str],
    settings: Settings,
    page_id: Optional[str],
) -> List[str]:
    sources: List[str] = []
    for raw_id in step.continues_from_ids:
        source = namespaced(raw_id, page_id)
        if source not in known_ids:
            context = {"step": step.id, "reference": raw_id, "line": step.line_number}
            if settings.continuation_policy == "error":
                raise UnresolvedContinuationError(
                    f"Step {step.literal_id} continues from unknown step {raw_id}",
                    context=context,
                )
            logger.warning(
                "Continuation references an unknown step",
                extra={**context, "policy": settings.continuation_policy},
            )
            if settings.continuation_policy == "drop":
                continue
        sources.append(source)
    return sources


def _build_edges(
    levels: List[List[NormalizedStep]], settings: Settings, page_id: Optional[str]
) -> List[FlowEdge]:
    collector = _EdgeCollector(settings)
    known_ids = {namespaced(step.id, page_id) for group in levels for step in group}

    for previous, current in zip(levels, levels[1:]):
        previous_ids = [namespaced(step.id, page_id) for step in previous]
        warned = False
        for step in current:
            target = namespaced(step.id, page_id)

            if step.continues_from_ids:
                sources = _continuation_sources(step, known_ids, settings, page_id)
                style = "fan" if len(sources) > 1 else "simple"
                for source in sources:
                    collector.add(source, target, "continuation", style)
                continue

            if len(previous) == 1:
                collector.add(previous_ids[0], target, "fan" if len(current) > 1 else "simple")
            elif len(current) == 1:
                for source in previous_ids:
                    collector.add(source, target, "fan")
            else:
                context = {"from_level": previous[0].level, "to_level": step.level}
                if settings.many_to_many_policy == "strict":
                    raise AmbiguousTransitionError(
                        "Parallel steps follow parallel steps without a continuation clause",
                        context=context,
                    )
                if not warned:
                    logger.warning("Implicit many-to-many transition; connecting every pair", extra=context)
                    warned = True
                for source in previous_ids:
                    collector.add(source, target, "bipartite")

    return collector.edges


def synthesize(
    steps: Sequence[NormalizedStep],
    *,
    settings: Optional[Settings] = None,
    page_id: Optional[str] = None,
) -> Flowchart:
    """Lay out normalized steps and derive their connecting edges.

    Raises:
        EmptyPlanError: if ``steps`` is empty.
    """
    if not steps:
        raise EmptyPlanError(EMPTY_PLAN_MESSAGE)

    settings = settings or Settings()
    levels = group_levels(steps)
    nodes = _build_nodes(levels, settings, page_id)
    edges = _build_edges(levels, settings, page_id)

    logger.debug(
        "Synthesized flowchart",
        extra={"levels": len(levels), "nodes": len(nodes), "edges": len(edges), "page_id": page_id},
    )
    return Flowchart(nodes=nodes, edges=edges)
