"""
metamatch/core/validators.py
============================
Input validation utilities for MetaMatch.

Validates:
    - Term structure (only term variants, non-empty applications,
      binders only in head position of a binding)
    - Pattern structure (every EFA has a metavariable head and at
      least one argument)

These validators run at API boundaries (Problem.add), not in the
search loop. ``validate_*`` functions return a list of error strings;
``assert_valid_*`` raise typed exceptions with structured context.
"""
from __future__ import annotations

from typing import List

from metamatch.core.exceptions import ConstructionError, MalformedPatternError
from metamatch.core.types import (
    EFA,
    Application,
    Binder,
    Term,
    is_efa,
    is_metavariable,
    is_term,
    subterms,
)


# ─── TERM VALIDATION ──────────────────────────────────────────────

def validate_term(term: Term) -> List[str]:
    """Validate the shape of a term. Returns list of error strings."""
    if not is_term(term):
        return [f"{term!r} is not a term"]

    errors: List[str] = []
    stack = [term]
    while stack:
        current = stack.pop()
        if not isinstance(current, Application):
            continue
        if not current.children:
            errors.append("Application with no children")
            continue
        for i, child in enumerate(current.children):
            if not is_term(child):
                errors.append(f"Child {i} of {current} is not a term: {child!r}")
            elif isinstance(child, Binder) and (i != 0 or len(current.children) < 2):
                errors.append(f"Binder {child} must head a binding with a body")
            else:
                stack.append(child)
    if isinstance(term, Binder):
        errors.append(f"Binder {term} cannot stand alone")
    return errors


def validate_pattern(pattern: Term) -> List[str]:
    """Validate a pattern: term shape plus well-formed EFAs."""
    errors = validate_term(pattern)
    if errors:
        return errors
    for t in subterms(pattern):
        if not is_efa(t):
            continue
        head, args = t.children[1], t.children[2:]
        if not is_metavariable(head):
            errors.append(f"Head of expression function application {t} is not a metavariable")
        if not args:
            errors.append(f"Expression function application {t} has no arguments")
    if pattern == EFA:
        errors.append("The EFA marker cannot be used as a pattern on its own")
    return errors


# ─── CONVENIENCE VALIDATORS ──────────────────────────────────────

def assert_valid_term(term: Term) -> None:
    """Validate term and raise ConstructionError on any violation."""
    errors = validate_term(term)
    if errors:
        raise ConstructionError(
            f"Invalid term: {'; '.join(errors)}",
            context={"term": term, "error_count": len(errors)},
        )


def assert_valid_pattern(pattern: Term) -> None:
    """Validate pattern and raise on any violation.

    Malformed EFAs raise MalformedPatternError; other shape
    problems raise ConstructionError.
    """
    assert_valid_term(pattern)
    errors = validate_pattern(pattern)
    if errors:
        raise MalformedPatternError(
            f"Invalid pattern {pattern}: {'; '.join(errors)}",
            pattern=pattern,
            context={"error_count": len(errors)},
        )
