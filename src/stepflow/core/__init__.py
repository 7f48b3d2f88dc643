"""Core types shared across stepflow."""

from .exceptions import (
    AmbiguousNodeError,
    AmbiguousTransitionError,
    ConfigurationError,
    DocumentFormatError,
    DuplicateStepError,
    EdgeNotFoundError,
    EditError,
    EmptyPlanError,
    InvalidCommandError,
    NodeNotFoundError,
    PageNotFoundError,
    PlanError,
    StepflowException,
    UnresolvedContinuationError,
)

__all__ = [
    "AmbiguousNodeError",
    "AmbiguousTransitionError",
    "ConfigurationError",
    "DocumentFormatError",
    "DuplicateStepError",
    "EdgeNotFoundError",
    "EditError",
    "EmptyPlanError",
    "InvalidCommandError",
    "NodeNotFoundError",
    "PageNotFoundError",
    "PlanError",
    "StepflowException",
    "UnresolvedContinuationError",
]
