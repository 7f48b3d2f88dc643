"""Multi-page projects."""

from .bulk import infer_page_style, parse_bulk_prompt
from .models import PAGE_TEMPLATES, PageItem, PageTemplate, PageType, find_template, generate_page_id
from .store import PageStore

__all__ = [
    "PAGE_TEMPLATES",
    "PageItem",
    "PageStore",
    "PageTemplate",
    "PageType",
    "find_template",
    "generate_page_id",
    "infer_page_style",
    "parse_bulk_prompt",
]
