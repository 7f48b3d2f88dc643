"""Project documents.

A saved project is a JSON document holding the generated nodes and edges,
the plan text they came from, and any pages. Loading a document replays the
stored chart as-is; `reconstruct_prompt` rebuilds step text from a chart
when the original prompt was lost or the chart was edited by hand.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from string import ascii_lowercase
from typing import Any, Dict, Iterable, List, Union

from pydantic import BaseModel, Field, ValidationError

from ..core.exceptions import DocumentFormatError
from ..flowchart.layout import group_rows
from ..flowchart.model import Flowchart
from ..pages.models import PageItem, utc_now
from ..utils.logging import get_logger

logger = get_logger(__name__)

DOCUMENT_VERSION = 1


class ProjectDocument(BaseModel):
    version: int = DOCUMENT_VERSION
    prompt: str = ""
    nodes: List[Dict[str, Any]] = Field(default_factory=list)
    edges: List[Dict[str, Any]] = Field(default_factory=list)
    pages: List[PageItem] = Field(default_factory=list)
    exported_at: datetime = Field(default_factory=utc_now)

    def flowchart(self) -> Flowchart:
        return Flowchart.from_dict({"nodes": self.nodes, "edges": self.edges})


def build_document(
    flowchart: Flowchart, prompt: str = "", pages: Iterable[PageItem] = ()
) -> ProjectDocument:
    data = flowchart.to_dict()
    return ProjectDocument(prompt=prompt, nodes=data["nodes"], edges=data["edges"], pages=list(pages))


def export_document(
    flowchart: Flowchart, prompt: str = "", pages: Iterable[PageItem] = ()
) -> str:
    return build_document(flowchart, prompt, pages).model_dump_json(indent=2)


def load_document(text: Union[str, bytes]) -> ProjectDocument:
    try:
        document = ProjectDocument.model_validate_json(text)
    except ValidationError as exc:
        raise DocumentFormatError(
            "Invalid project document",
            context={"errors": [error["msg"] for error in exc.errors(include_url=False)]},
        ) from exc
    if document.version > DOCUMENT_VERSION:
        logger.warning(
            "Project document is newer than this reader",
            extra={"document_version": document.version, "supported": DOCUMENT_VERSION},
        )
    return document


def parse_document(data: Dict[str, Any]) -> ProjectDocument:
    """Validate an already-decoded document payload."""
    try:
        return ProjectDocument.model_validate(data)
    except ValidationError as exc:
        raise DocumentFormatError(
            "Invalid project document",
            context={"errors": [error["msg"] for error in exc.errors(include_url=False)]},
        ) from exc


def save_document(path: Path, flowchart: Flowchart, prompt: str = "", pages: Iterable[PageItem] = ()) -> Path:
    path.write_text(export_document(flowchart, prompt, pages), encoding="utf-8")
    return path


def read_document(path: Path) -> ProjectDocument:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentFormatError(f"Cannot read project document: {path}", context={"error": str(exc)}) from exc
    return load_document(text)


def reconstruct_prompt(flowchart: Flowchart) -> str:
    """Rebuild ``Step N:`` text from node rows.

    Lossy: rows come from node y positions, branches from left-to-right order,
    and manual edges are not represented. Branch letters stop at `z`; nodes
    past the 26th in a row all get `z` and would regenerate as duplicates.
    """
    lines: List[str] = []
    for level, row in enumerate(group_rows(flowchart.nodes), start=1):
        if len(row) > len(ascii_lowercase):
            logger.warning(
                "Row has more nodes than branch letters",
                extra={"row": level, "nodes": len(row), "letters": len(ascii_lowercase)},
            )
        if len(row) == 1:
            lines.append(f"Step {level}: {row[0].label}".rstrip())
            continue
        for idx, node in enumerate(row):
            lines.append(f"Step {level}{_branch_letter(idx)}: {node.label}".rstrip())
    return "\n".join(lines)


def _branch_letter(index: int) -> str:
    return ascii_lowercase[min(index, len(ascii_lowercase) - 1)]
