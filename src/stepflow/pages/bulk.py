"""Bulk page creation from one block of text.

Format::

    Homepage:
    Step 1: User lands on homepage
    Step 2: Show hero section

    Login Page:
    Step 1: Show login form
"""

from __future__ import annotations

import re
from typing import List, Tuple

from .models import PageItem, generate_page_id

_BLOCK_SPLIT = re.compile(r"\n(?=[A-Za-z \t]+:)")
_HEADER = re.compile(r"^([^:]+):\s*(.*)$")

_NAME_STYLES: List[Tuple[str, str, str]] = [
    ("home", "Home", "#3b82f6"),
    ("login", "LogIn", "#10b981"),
    ("dashboard", "Monitor", "#f59e0b"),
    ("profile", "User", "#8b5cf6"),
    ("settings", "Settings", "#6b7280"),
    ("search", "Search", "#06b6d4"),
]


def infer_page_style(name: str) -> Tuple[str, str]:
    """Pick an icon and color from keywords in the page name."""

    lower = name.lower()
    for keyword, icon, color in _NAME_STYLES:
        if keyword in lower:
            return icon, color
    return "FileText", "#6b7280"


def parse_bulk_prompt(text: str) -> List[PageItem]:
    clean = (text or "").replace("\r\n", "\n").replace("\r", "\n").strip()
    if not clean:
        return []

    pages: List[PageItem] = []
    batch = generate_page_id("page-bulk")
    for index, block in enumerate(_BLOCK_SPLIT.split(clean)):
        lines = block.strip().split("\n")
        match = _HEADER.match(lines[0])
        if not match:
            continue
        name, first_step = match.groups()
        prompt = "\n".join([first_step, *lines[1:]]).strip()
        icon, color = infer_page_style(name)
        pages.append(
            PageItem(
                id=f"{batch}-{index}",
                name=name.strip(),
                icon=icon,
                color=color,
                prompt=prompt,
            )
        )
    return pages
