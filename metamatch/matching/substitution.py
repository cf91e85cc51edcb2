"""
metamatch/matching/substitution.py
==================================
A single metavariable binding ``?M ↦ term``.

Applying a substitution replaces every occurrence of the metavariable
verbatim (no index shifting; the search only keeps instantiations
without free de Bruijn indices). Beta reduction is a separate step.
"""

from __future__ import annotations

from dataclasses import dataclass

from metamatch.core.exceptions import InvalidSubstitution
from metamatch.core.types import (
    Symbol,
    Term,
    contains_metavariable_named,
    is_metavariable,
    is_term,
    replace_metavariable,
)


@dataclass(frozen=True)
class Substitution:
    metavariable: Symbol
    replacement: Term

    def __post_init__(self):
        if not is_metavariable(self.metavariable):
            raise InvalidSubstitution(
                f"Left side of a substitution must be a metavariable, got {self.metavariable}",
                metavariable=str(self.metavariable),
            )
        if not is_term(self.replacement):
            raise InvalidSubstitution(
                f"Replacement for {self.metavariable} is not a term: {self.replacement!r}",
                metavariable=self.metavariable.text,
            )
        if contains_metavariable_named(self.replacement, self.metavariable.text):
            raise InvalidSubstitution(
                f"Substitution {self} refers to its own metavariable",
                metavariable=self.metavariable.text,
                context={"replacement": self.replacement},
            )

    @classmethod
    def from_constraint(cls, constraint) -> "Substitution":
        """Build ``pattern ↦ expression`` from a complexity-2 constraint."""
        return cls(constraint.pattern, constraint.expression)

    @property
    def name(self) -> str:
        return self.metavariable.text

    def applies_to(self, term: Term) -> bool:
        return contains_metavariable_named(term, self.metavariable.text)

    def apply_to(self, term: Term) -> Term:
        return replace_metavariable(term, self.metavariable.text, self.replacement)

    def __str__(self) -> str:
        return f"{self.metavariable} ↦ {self.replacement}"
