"""Custom exception hierarchy for stepflow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class StepflowException(Exception):
    """Base exception type for all stepflow errors."""

    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return f"{self.message} | context={self.context}"


class ConfigurationError(StepflowException):
    """Raised when configuration is missing or invalid."""


# -----------------------------------------------------------------------------
# Plan compilation
# -----------------------------------------------------------------------------


class PlanError(StepflowException):
    """Raised when a plan cannot be turned into a flowchart."""


class EmptyPlanError(PlanError):
    """Raised when no steps could be parsed from the input text."""


class UnresolvedContinuationError(PlanError):
    """Raised when a "from X" reference names a step that does not exist."""


class AmbiguousTransitionError(PlanError):
    """Raised when two adjacent parallel levels have no continuation hints."""


class DuplicateStepError(PlanError):
    """Raised when two lines declare the same level and branch."""


# -----------------------------------------------------------------------------
# Editing
# -----------------------------------------------------------------------------


class EditError(StepflowException):
    """Raised when an edit command cannot be applied."""


class NodeNotFoundError(EditError):
    """Raised when a node reference matches no node."""


class AmbiguousNodeError(EditError):
    """Raised when a label reference matches more than one node."""


class EdgeNotFoundError(EditError):
    """Raised when an edge id matches no edge."""


class InvalidCommandError(EditError):
    """Raised when a command payload is malformed."""


# -----------------------------------------------------------------------------
# Pages and documents
# -----------------------------------------------------------------------------


class PageNotFoundError(StepflowException):
    """Raised when a page is not found in the page store."""


class DocumentFormatError(StepflowException):
    """Raised when a saved project document cannot be loaded."""
