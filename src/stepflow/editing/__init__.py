"""Flowchart editing commands."""

from .commands import (
    COMMANDS,
    PALETTE,
    AddNode,
    ChangeColor,
    Connect,
    DeleteEdge,
    DeleteNode,
    EditCommand,
    EditLabel,
    MoveNode,
    SetMarker,
    apply_command,
    apply_commands,
    command_from_dict,
    resolve_node_ref,
)
from .history import EditHistory

__all__ = [
    "COMMANDS",
    "PALETTE",
    "AddNode",
    "ChangeColor",
    "Connect",
    "DeleteEdge",
    "DeleteNode",
    "EditCommand",
    "EditHistory",
    "EditLabel",
    "MoveNode",
    "SetMarker",
    "apply_command",
    "apply_commands",
    "command_from_dict",
    "resolve_node_ref",
]
