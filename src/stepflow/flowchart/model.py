"""Flowchart schema and normalization."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

NODE_VARIANTS = {"editable", "plain"}
MARKER_KINDS = {"start", "end"}
EDGE_KINDS = {"simple", "fan", "bipartite", "continuation", "manual"}

DEFAULT_BACKGROUND = "#dbeafe"
DEFAULT_BORDER = "#3b82f6"
DEFAULT_STROKE = "#6b7280"


def _coerce_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def _unique_id(prefix: str, used: set[str]) -> str:
    idx = 1
    base = prefix or "node"
    candidate = f"{base}_{idx}"
    while candidate in used:
        idx += 1
        candidate = f"{base}_{idx}"
    used.add(candidate)
    return candidate


def edge_id(source: str, target: str) -> str:
    return f"e-{source}-{target}"


@dataclass(frozen=True)
class Marker:
    """Start or end glyph shown on a node; the user may edit or hide it."""

    kind: str
    glyph: str
    visible: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"glyph": self.glyph, "visible": self.visible}


@dataclass(frozen=True)
class PageOrigin:
    """Marks a node or edge as generated for a named page."""

    page_id: str


@dataclass
class FlowNode:
    id: str
    label: str
    x: float = 0.0
    y: float = 0.0
    type: str = "editable"
    background: str = DEFAULT_BACKGROUND
    border_color: str = DEFAULT_BORDER
    width: float = 200
    height: float = 60
    level: Optional[int] = None
    branch: Optional[str] = None
    start_marker: Optional[Marker] = None
    end_marker: Optional[Marker] = None
    page: Optional[PageOrigin] = None
    source_position: str = "bottom"
    target_position: str = "top"

    @property
    def is_start(self) -> bool:
        return self.start_marker is not None

    @property
    def is_end(self) -> bool:
        return self.end_marker is not None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "label": self.label,
            "backgroundColor": self.background,
            "borderColor": self.border_color,
            "level": self.level,
            "branch": self.branch,
        }
        if self.start_marker is not None:
            data["startMarker"] = self.start_marker.to_dict()
        if self.end_marker is not None:
            data["endMarker"] = self.end_marker.to_dict()
        if self.page is not None:
            data["pageId"] = self.page.page_id
        return {
            "id": self.id,
            "type": self.type,
            "position": {"x": self.x, "y": self.y},
            "data": data,
            "style": {
                "width": self.width,
                "height": self.height,
                "background": self.background,
                "borderColor": self.border_color,
            },
            "sourcePosition": self.source_position,
            "targetPosition": self.target_position,
        }


@dataclass
class FlowEdge:
    source: str
    target: str
    id: str = ""
    kind: str = "simple"
    stroke: str = DEFAULT_STROKE
    stroke_width: float = 2
    type: str = "smoothstep"

    def __post_init__(self) -> None:
        if not self.id:
            self.id = edge_id(self.source, self.target)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "kind": self.kind,
            "style": {"stroke": self.stroke, "strokeWidth": self.stroke_width},
        }


@dataclass
class Flowchart:
    nodes: List[FlowNode] = field(default_factory=list)
    edges: List[FlowEdge] = field(default_factory=list)

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def edge_ids(self) -> List[str]:
        return [edge.id for edge in self.edges]

    def get_node(self, node_id: str) -> Optional[FlowNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def copy(self) -> "Flowchart":
        return Flowchart(
            nodes=[replace(node) for node in self.nodes],
            edges=[replace(edge) for edge in self.edges],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Flowchart":
        nodes_raw = data.get("nodes") or []
        edges_raw = data.get("edges") or []

        nodes: List[FlowNode] = []
        used_ids: set[str] = set()

        for idx, node in enumerate(nodes_raw):
            if not isinstance(node, dict):
                continue
            raw_id = str(node.get("id") or f"node-{idx + 1}")
            node_id = raw_id
            if node_id in used_ids:
                node_id = _unique_id(raw_id, used_ids)
            else:
                used_ids.add(node_id)
            nodes.append(_node_from_dict(node_id, node))

        node_ids = {node.id for node in nodes}
        edges: List[FlowEdge] = []
        seen_edges: set[str] = set()
        for edge in edges_raw:
            if not isinstance(edge, dict):
                continue
            source = edge.get("source") or edge.get("from")
            target = edge.get("target") or edge.get("to")
            if not source or not target:
                continue
            if source not in node_ids or target not in node_ids:
                continue
            style = edge.get("style") if isinstance(edge.get("style"), dict) else {}
            kind = str(edge.get("kind") or "manual")
            if kind not in EDGE_KINDS:
                kind = "manual"
            parsed = FlowEdge(
                source=str(source),
                target=str(target),
                id=str(edge.get("id") or ""),
                kind=kind,
                stroke=str(style.get("stroke") or DEFAULT_STROKE),
                stroke_width=_coerce_float(style.get("strokeWidth")) or 2,
                type=str(edge.get("type") or "smoothstep"),
            )
            if parsed.id in seen_edges:
                continue
            seen_edges.add(parsed.id)
            edges.append(parsed)

        return cls(nodes=nodes, edges=edges)


def _marker_from_dict(kind: str, raw: Any) -> Optional[Marker]:
    if not isinstance(raw, dict):
        return None
    return Marker(kind=kind, glyph=str(raw.get("glyph") or ""), visible=bool(raw.get("visible", True)))


def _node_from_dict(node_id: str, node: Dict[str, Any]) -> FlowNode:
    data = node.get("data") if isinstance(node.get("data"), dict) else {}
    style = node.get("style") if isinstance(node.get("style"), dict) else {}
    position = node.get("position") if isinstance(node.get("position"), dict) else node

    node_type = str(node.get("type") or "editable").lower()
    if node_type not in NODE_VARIANTS:
        node_type = "editable"

    label = data.get("label", node.get("label", ""))
    level = data.get("level", node.get("level"))
    page_id = data.get("pageId") or node.get("pageId")

    return FlowNode(
        id=node_id,
        label=str(label if label is not None else ""),
        x=_coerce_float(position.get("x")) or 0.0,
        y=_coerce_float(position.get("y")) or 0.0,
        type=node_type,
        background=str(data.get("backgroundColor") or style.get("background") or DEFAULT_BACKGROUND),
        border_color=str(data.get("borderColor") or style.get("borderColor") or DEFAULT_BORDER),
        width=_coerce_float(style.get("width")) or 200,
        height=_coerce_float(style.get("height")) or 60,
        level=level if isinstance(level, int) and not isinstance(level, bool) else None,
        branch=data.get("branch") or None,
        start_marker=_marker_from_dict("start", data.get("startMarker")),
        end_marker=_marker_from_dict("end", data.get("endMarker")),
        page=PageOrigin(str(page_id)) if page_id else None,
    )
