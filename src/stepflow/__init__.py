"""stepflow - structured plan text to editable flowcharts."""

from typing import TYPE_CHECKING

__all__ = ["Settings", "generate_flowchart"]
__version__ = "0.1.0"

if TYPE_CHECKING:
    from .config.settings import Settings
    from .flowchart.builder import generate_flowchart


def __getattr__(name: str):
    if name == "Settings":
        from .config.settings import Settings

        return Settings
    if name == "generate_flowchart":
        from .flowchart.builder import generate_flowchart

        return generate_flowchart
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
