"""
metamatch/core/exceptions.py
============================
Custom exception hierarchy for MetaMatch.

All exceptions carry structured context so callers can
programmatically handle different failure modes.

Branch-local unsolvability (a clash, a conflicting binding) is NOT an
exception: it simply removes that branch from the solution sequence.
"""

from __future__ import annotations
from typing import Optional


class MatchingError(Exception):
    """Base exception for all MetaMatch errors."""

    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message)
        self.context = context or {}


class ConstructionError(MatchingError):
    """Raised when data of the wrong shape is used to build a Problem,
    Constraint or Substitution. Fatal; never retried."""

    pass


class MalformedPatternError(ConstructionError):
    """Raised for an expression-function application that has no
    arguments or whose head is not a metavariable."""

    def __init__(self, message: str, pattern=None, context: Optional[dict] = None):
        super().__init__(message, context)
        self.pattern = pattern


class InvalidSubstitution(ConstructionError):
    """Raised when a substitution's left side is not a metavariable,
    or its replacement refers back to that metavariable."""

    def __init__(self, message: str, metavariable: str, context: Optional[dict] = None):
        super().__init__(message, context)
        self.metavariable = metavariable


class InternalInvariantError(MatchingError):
    """Raised when constraint classification yields an impossible value.

    Indicates a defect in the engine, never a property of the input.
    """

    pass
