"""Project document storage."""

from .document import (
    DOCUMENT_VERSION,
    ProjectDocument,
    build_document,
    export_document,
    load_document,
    parse_document,
    read_document,
    reconstruct_prompt,
    save_document,
)

__all__ = [
    "DOCUMENT_VERSION",
    "ProjectDocument",
    "build_document",
    "export_document",
    "load_document",
    "parse_document",
    "read_document",
    "reconstruct_prompt",
    "save_document",
]
