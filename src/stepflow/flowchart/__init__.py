"""Plan text to flowchart compiler."""

from .builder import generate_flowchart
from .layout import group_rows, place_levels, row_positions
from .model import Flowchart, FlowEdge, FlowNode, Marker, PageOrigin, edge_id
from .normalize import NormalizedStep, normalize_levels
from .parser import ContinuationToken, RawStep, parse_lines
from .synthesizer import synthesize

__all__ = [
    "ContinuationToken",
    "Flowchart",
    "FlowEdge",
    "FlowNode",
    "Marker",
    "NormalizedStep",
    "PageOrigin",
    "RawStep",
    "edge_id",
    "generate_flowchart",
    "group_rows",
    "normalize_levels",
    "parse_lines",
    "place_levels",
    "row_positions",
    "synthesize",
]
