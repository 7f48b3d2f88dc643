"""Pure edit commands over a flowchart.

Every command returns a new `Flowchart`; the input is never mutated, so a
host can keep old snapshots for undo or replay commands elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Tuple, Type

from ..core.exceptions import (
    AmbiguousNodeError,
    EdgeNotFoundError,
    InvalidCommandError,
    NodeNotFoundError,
)
from ..flowchart.model import (
    DEFAULT_BACKGROUND,
    DEFAULT_BORDER,
    MARKER_KINDS,
    Flowchart,
    FlowEdge,
    FlowNode,
    Marker,
)

PALETTE: Dict[str, Tuple[str, str]] = {
    "blue": ("#dbeafe", "#3b82f6"),
    "yellow": ("#fef3c7", "#f59e0b"),
    "green": ("#dcfce7", "#16a34a"),
    "red": ("#fde2e8", "#e11d48"),
    "purple": ("#f3e8ff", "#9333ea"),
    "cyan": ("#e0f2fe", "#0891b2"),
    "orange": ("#fff7ed", "#ea580c"),
    "gray": ("#f1f5f9", "#475569"),
}

DEFAULT_GLYPHS = {"start": "▶", "end": "🏁"}


def resolve_node_ref(identifier: str, nodes: List[FlowNode]) -> str:
    """Resolve a node reference that may be an id or a label.

    An exact id match wins; otherwise a case-insensitive label match is
    attempted. Raises on zero or ambiguous matches.
    """
    if any(node.id == identifier for node in nodes):
        return identifier

    normalised = (identifier or "").strip().lower()
    matches = [node for node in nodes if node.label.strip().lower() == normalised]
    if len(matches) == 1:
        return matches[0].id
    if len(matches) > 1:
        raise AmbiguousNodeError(
            f"Ambiguous label '{identifier}' matches {len(matches)} nodes. Use the node id.",
            context={"node_ids": [node.id for node in matches]},
        )
    raise NodeNotFoundError(f"Node not found: '{identifier}'", context={"available": [n.id for n in nodes]})


def _update_node(flowchart: Flowchart, ref: str, **changes: Any) -> Flowchart:
    result = flowchart.copy()
    node_id = resolve_node_ref(ref, result.nodes)
    result.nodes = [replace(node, **changes) if node.id == node_id else node for node in result.nodes]
    return result


def _invalid_argument(op: str, name: str, expected: str, value: Any) -> InvalidCommandError:
    return InvalidCommandError(
        f"Invalid argument '{name}' for '{op}': expected {expected}",
        context={"value": repr(value)},
    )


class EditCommand:
    """Base class for edit commands; subclasses set ``op``.

    Arguments are checked against the dataclass field annotations on
    construction, so a command decoded from JSON fails with
    `InvalidCommandError` before it touches a chart.
    """

    op: ClassVar[str] = ""

    def __post_init__(self) -> None:
        for item in fields(self):  # type: ignore[arg-type]
            value = getattr(self, item.name)
            optional = str(item.type).startswith("Optional[")
            if value is None and optional:
                continue
            kind = str(item.type).removeprefix("Optional[").removesuffix("]")
            if kind == "str" and not isinstance(value, str):
                raise _invalid_argument(self.op, item.name, "a string", value)
            if kind == "bool" and not isinstance(value, bool):
                raise _invalid_argument(self.op, item.name, "a boolean", value)
            if kind == "float":
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise _invalid_argument(self.op, item.name, "a number", value)
                object.__setattr__(self, item.name, float(value))

    def apply(self, flowchart: Flowchart) -> Flowchart:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"op": self.op}
        for item in fields(self):  # type: ignore[arg-type]
            payload[item.name] = getattr(self, item.name)
        return payload


@dataclass(frozen=True)
class EditLabel(EditCommand):
    op: ClassVar[str] = "edit_label"

    node: str
    label: str

    def apply(self, flowchart: Flowchart) -> Flowchart:
        label = (self.label or "").strip()
        if not label:
            resolve_node_ref(self.node, flowchart.nodes)
            return flowchart.copy()
        return _update_node(flowchart, self.node, label=label)


@dataclass(frozen=True)
class DeleteNode(EditCommand):
    op: ClassVar[str] = "delete_node"

    node: str

    def apply(self, flowchart: Flowchart) -> Flowchart:
        result = flowchart.copy()
        node_id = resolve_node_ref(self.node, result.nodes)
        result.nodes = [node for node in result.nodes if node.id != node_id]
        result.edges = [
            edge for edge in result.edges if edge.source != node_id and edge.target != node_id
        ]
        return result


@dataclass(frozen=True)
class ChangeColor(EditCommand):
    op: ClassVar[str] = "change_color"

    node: str
    background: Optional[str] = None
    border: Optional[str] = None
    palette: Optional[str] = None

    def apply(self, flowchart: Flowchart) -> Flowchart:
        background, border = self.background, self.border
        if self.palette:
            try:
                background, border = PALETTE[self.palette.strip().lower()]
            except KeyError:
                raise InvalidCommandError(
                    f"Unknown palette color '{self.palette}'",
                    context={"available": sorted(PALETTE)},
                ) from None
        if not background or not border:
            raise InvalidCommandError("change_color needs a palette name or both colors")
        return _update_node(flowchart, self.node, background=background, border_color=border)


@dataclass(frozen=True)
class MoveNode(EditCommand):
    op: ClassVar[str] = "move_node"

    node: str
    x: float
    y: float

    def apply(self, flowchart: Flowchart) -> Flowchart:
        return _update_node(flowchart, self.node, x=float(self.x), y=float(self.y))


@dataclass(frozen=True)
class AddNode(EditCommand):
    op: ClassVar[str] = "add_node"

    label: str = "New Node"
    x: float = 0.0
    y: float = 0.0

    def apply(self, flowchart: Flowchart) -> Flowchart:
        result = flowchart.copy()
        used = set(result.node_ids())
        idx = len(result.nodes) + 1
        while f"node-{idx}" in used:
            idx += 1
        result.nodes.append(
            FlowNode(
                id=f"node-{idx}",
                label=self.label,
                x=float(self.x),
                y=float(self.y),
                background=DEFAULT_BACKGROUND,
                border_color=DEFAULT_BORDER,
            )
        )
        return result


@dataclass(frozen=True)
class Connect(EditCommand):
    op: ClassVar[str] = "connect"

    source: str
    target: str

    def apply(self, flowchart: Flowchart) -> Flowchart:
        result = flowchart.copy()
        source = resolve_node_ref(self.source, result.nodes)
        target = resolve_node_ref(self.target, result.nodes)
        edge = FlowEdge(source=source, target=target, kind="manual")
        if edge.id not in result.edge_ids():
            result.edges.append(edge)
        return result


@dataclass(frozen=True)
class DeleteEdge(EditCommand):
    op: ClassVar[str] = "delete_edge"

    edge_id: str

    def apply(self, flowchart: Flowchart) -> Flowchart:
        if self.edge_id not in flowchart.edge_ids():
            raise EdgeNotFoundError(f"Edge not found: '{self.edge_id}'")
        result = flowchart.copy()
        result.edges = [edge for edge in result.edges if edge.id != self.edge_id]
        return result


@dataclass(frozen=True)
class SetMarker(EditCommand):
    """Edit, show or hide the start/end marker of one node."""

    op: ClassVar[str] = "set_marker"

    node: str
    kind: str
    visible: Optional[bool] = None
    glyph: Optional[str] = None

    def apply(self, flowchart: Flowchart) -> Flowchart:
        if self.kind not in MARKER_KINDS:
            raise InvalidCommandError(f"Unknown marker kind '{self.kind}'")
        node_id = resolve_node_ref(self.node, flowchart.nodes)
        node = flowchart.get_node(node_id)
        attr = f"{self.kind}_marker"
        current: Optional[Marker] = getattr(node, attr)
        marker = current or Marker(self.kind, DEFAULT_GLYPHS[self.kind])
        if self.glyph is not None:
            marker = replace(marker, glyph=self.glyph)
        if self.visible is not None:
            marker = replace(marker, visible=self.visible)
        return _update_node(flowchart, node_id, **{attr: marker})


COMMANDS: Dict[str, Type[EditCommand]] = {
    cls.op: cls
    for cls in (EditLabel, DeleteNode, ChangeColor, MoveNode, AddNode, Connect, DeleteEdge, SetMarker)
}


def command_from_dict(payload: Dict[str, Any]) -> EditCommand:
    if not isinstance(payload, dict):
        raise InvalidCommandError("Command must be a JSON object")
    op = payload.get("op")
    command_cls = COMMANDS.get(str(op))
    if command_cls is None:
        raise InvalidCommandError(f"Unknown command '{op}'", context={"available": sorted(COMMANDS)})
    args = {key: value for key, value in payload.items() if key != "op"}
    try:
        return command_cls(**args)
    except TypeError as exc:
        raise InvalidCommandError(f"Invalid arguments for '{op}': {exc}") from exc


def apply_command(flowchart: Flowchart, command: EditCommand) -> Flowchart:
    return command.apply(flowchart)


def apply_commands(flowchart: Flowchart, commands: Iterable[EditCommand]) -> Flowchart:
    result = flowchart
    for command in commands:
        result = command.apply(result)
    return result
