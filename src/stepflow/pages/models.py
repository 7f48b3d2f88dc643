"""Page models for multi-page projects.

A project may hold several named pages (screens, modals, ...), each with its
own plan text and generated flowchart. Node and edge ids on a page are
prefixed with the page id so every page can share one canvas.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List
from uuid import uuid4

from pydantic import BaseModel, Field

from ..flowchart.model import Flowchart


def generate_page_id(prefix: str = "page") -> str:
    return f"{prefix}-{uuid4().hex[:12]}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PageType(str, Enum):
    SCREEN = "screen"
    PAGE = "page"
    MODAL = "modal"
    COMPONENT = "component"


class PageTemplate(BaseModel):
    name: str
    icon: str
    type: PageType
    color: str


PAGE_TEMPLATES: List[PageTemplate] = [
    PageTemplate(name="Home Page", icon="Home", type=PageType.PAGE, color="#3b82f6"),
    PageTemplate(name="Login Page", icon="LogIn", type=PageType.PAGE, color="#10b981"),
    PageTemplate(name="Settings", icon="Settings", type=PageType.PAGE, color="#6b7280"),
    PageTemplate(name="Profile Page", icon="User", type=PageType.PAGE, color="#8b5cf6"),
    PageTemplate(name="Dashboard", icon="Monitor", type=PageType.PAGE, color="#f59e0b"),
    PageTemplate(name="Search Page", icon="Search", type=PageType.PAGE, color="#06b6d4"),
    PageTemplate(name="Shopping Cart", icon="ShoppingCart", type=PageType.PAGE, color="#ef4444"),
    PageTemplate(name="Notifications", icon="Bell", type=PageType.PAGE, color="#f97316"),
    PageTemplate(name="About Page", icon="FileText", type=PageType.PAGE, color="#84cc16"),
    PageTemplate(name="Splash Screen", icon="Monitor", type=PageType.SCREEN, color="#ec4899"),
]


def find_template(name: str) -> PageTemplate:
    normalised = name.strip().lower()
    for template in PAGE_TEMPLATES:
        if template.name.lower() == normalised:
            return template
    raise ValueError(f"Unknown page template '{name}'")


class PageItem(BaseModel):
    """One page of a project."""

    id: str = Field(default_factory=generate_page_id)
    name: str
    type: PageType = PageType.PAGE
    icon: str = "FileText"
    color: str = "#6b7280"
    prompt: str = ""
    nodes: List[Dict[str, Any]] = Field(default_factory=list)
    edges: List[Dict[str, Any]] = Field(default_factory=list)
    last_modified: datetime = Field(default_factory=utc_now)

    @property
    def has_prompt(self) -> bool:
        return bool(self.prompt.strip())

    def flowchart(self) -> Flowchart:
        return Flowchart.from_dict({"nodes": self.nodes, "edges": self.edges})
