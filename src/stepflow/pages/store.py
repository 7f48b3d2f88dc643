"""In-memory page store.

Holds the pages of one project, tracks the active page, and regenerates a
page's flowchart whenever its prompt is saved.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from ..config.settings import Settings
from ..core.exceptions import PageNotFoundError
from ..flowchart.builder import generate_flowchart
from ..flowchart.model import Flowchart
from ..utils.logging import get_logger
from .bulk import parse_bulk_prompt
from .models import PageItem, PageType, find_template, utc_now

logger = get_logger(__name__)


class PageStore:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self._pages: Dict[str, PageItem] = {}
        self._active: Optional[str] = None

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def active_page_id(self) -> Optional[str]:
        return self._active

    @property
    def active_page(self) -> Optional[PageItem]:
        return self._pages.get(self._active) if self._active else None

    def get(self, page_id: str) -> PageItem:
        page = self._pages.get(page_id)
        if page is None:
            raise PageNotFoundError(f"Page not found: {page_id}")
        return page

    def exists(self, page_id: str) -> bool:
        return page_id in self._pages

    def list(self) -> List[PageItem]:
        return list(self._pages.values())

    def __len__(self) -> int:
        return len(self._pages)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_page(self, name: str = "", *, template: Optional[str] = None) -> PageItem:
        """Add a custom page, or one built from a named template.

        The first page added becomes the active page.
        """
        if template:
            spec = find_template(template)
            page = PageItem(name=spec.name, type=spec.type, icon=spec.icon, color=spec.color)
        else:
            if not name.strip():
                raise ValueError("Page name is required")
            page = PageItem(name=name.strip(), type=PageType.PAGE)
        return self.save(page)

    def save(self, page: PageItem) -> PageItem:
        page.last_modified = utc_now()
        self._pages[page.id] = page
        if self._active is None:
            self._active = page.id
        return page

    def delete(self, page_id: str) -> bool:
        if page_id not in self._pages:
            return False
        del self._pages[page_id]
        if self._active == page_id:
            self._active = None
        return True

    def switch_to(self, page_id: str) -> PageItem:
        page = self.get(page_id)
        self._active = page_id
        return page

    def set_prompt(self, page_id: str, prompt: str) -> PageItem:
        """Store a page's prompt and regenerate its flowchart.

        A blank prompt is stored without touching the existing chart.
        """
        page = self.get(page_id)
        page.prompt = prompt
        page.last_modified = utc_now()
        if prompt.strip():
            self._generate(page)
        return page

    def import_bulk(self, text: str, *, generate: bool = True) -> List[PageItem]:
        pages = parse_bulk_prompt(text)
        for page in pages:
            self.save(page)
            if generate and page.has_prompt:
                self._generate(page)
        logger.info("Imported pages", extra={"count": len(pages)})
        return pages

    def load(self, pages: Iterable[PageItem]) -> None:
        """Insert stored pages as-is; unlike `save`, `last_modified` is kept."""
        for page in pages:
            self._pages[page.id] = page
            if self._active is None:
                self._active = page.id

    # ------------------------------------------------------------------
    # Flowcharts
    # ------------------------------------------------------------------

    def page_flowchart(self, page_id: str) -> Flowchart:
        return self.get(page_id).flowchart()

    def merged(self) -> Flowchart:
        """Union of every page's flowchart; page prefixes keep ids distinct."""
        merged = Flowchart()
        for page in self._pages.values():
            chart = page.flowchart()
            merged.nodes.extend(chart.nodes)
            merged.edges.extend(chart.edges)
        return merged

    def _generate(self, page: PageItem) -> None:
        chart = generate_flowchart(page.prompt, page_id=page.id, settings=self.settings)
        data = chart.to_dict()
        page.nodes = data["nodes"]
        page.edges = data["edges"]
