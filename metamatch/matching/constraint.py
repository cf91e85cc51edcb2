"""
metamatch/matching/constraint.py
================================
A single matching constraint: a (pattern, expression) pair.

Complexity classes drive which rule the search driver applies:

    0  clash              no metavariable can fix a mismatch
    1  satisfied          pattern == expression, nothing to do
    2  instantiation      pattern is a bare metavariable
    3  decomposition      both compound, same arity, pattern not an EFA
    4  constant-only EFA  (@ ?P args) where no argument occurs in the expression
    5  general EFA        (@ ?P args) needing projection / imitation search

Constraints are immutable; every transformation returns a new one.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import List, Tuple

from metamatch.core.exceptions import ConstructionError
from metamatch.core.types import (
    Application,
    Term,
    contains_metavariable,
    is_efa,
    is_metavariable,
    is_term,
)
from metamatch.matching.debruijn import decode, encode, occurrences, structurally_equal

CLASH = 0
SATISFIED = 1
INSTANTIATION = 2
DECOMPOSITION = 3
CONSTANT_EFA = 4
GENERAL_EFA = 5


@dataclass(frozen=True)
class Constraint:
    """A pattern that must be made structurally equal to an expression.

    Equality compares both sides structurally; in de Bruijn form this
    is equality up to renaming of bound variables.
    """
    pattern: Term
    expression: Term

    def __post_init__(self):
        for side in ("pattern", "expression"):
            value = getattr(self, side)
            if not is_term(value):
                raise ConstructionError(
                    f"Constraint {side} must be a term, got {type(value).__name__}",
                    context={side: value},
                )

    # ─── CLASSIFICATION ────────────────────────────────────────────

    def complexity(self) -> int:
        return self._complexity

    @cached_property
    def _complexity(self) -> int:
        pattern, expression = self.pattern, self.expression
        if is_metavariable(pattern):
            return INSTANTIATION
        if not contains_metavariable(pattern):
            return SATISFIED if pattern == expression else CLASH
        if self.is_efa():
            return CONSTANT_EFA if self.can_be_only_constant_efa() else GENERAL_EFA
        if (
            isinstance(pattern, Application)
            and isinstance(expression, Application)
            and len(pattern.children) == len(expression.children)
        ):
            return DECOMPOSITION
        return CLASH

    def is_efa(self) -> bool:
        """Pattern is ``(@ ?P arg ...)`` with a metavariable head."""
        return (
            is_efa(self.pattern)
            and len(self.pattern.children) >= 3
            and is_metavariable(self.pattern.children[1])
        )

    @property
    def head(self) -> Term:
        return self.pattern.children[1]

    @property
    def arguments(self) -> Tuple[Term, ...]:
        return self.pattern.children[2:]

    def can_be_only_constant_efa(self) -> bool:
        """True iff no argument can appear in the expression.

        An argument containing a metavariable might be instantiated to
        something that does occur, so it never rules out other solutions.
        """
        if not self.is_efa():
            return False
        for arg in self.arguments:
            if contains_metavariable(arg):
                return False
            if occurrences(arg, self.expression):
                return False
        return True

    def can_be_a_projection_efa(self, index: int) -> bool:
        """Could projecting onto argument ``index`` produce the expression?

        A projection reduces to the argument itself, so the only position
        that must hold an occurrence of it is the whole expression.
        """
        if not self.is_efa():
            return False
        arg = self.arguments[index]
        if contains_metavariable(arg):
            return True
        return structurally_equal(arg, self.expression)

    # ─── DECOMPOSITION ─────────────────────────────────────────────

    def children(self) -> List["Constraint"]:
        """One constraint per aligned child pair. Only for complexity 3."""
        if self.complexity() != DECOMPOSITION:
            raise ValueError(f"Constraint {self} cannot be decomposed")
        return [
            Constraint(p, e)
            for p, e in zip(self.pattern.children, self.expression.children)
        ]

    # ─── TRANSFORMATIONS ───────────────────────────────────────────

    def after_substituting(self, substitution) -> "Constraint":
        return Constraint(substitution.apply_to(self.pattern), self.expression)

    def encoded(self) -> "Constraint":
        return Constraint(encode(self.pattern), encode(self.expression))

    def decoded(self) -> "Constraint":
        return Constraint(decode(self.pattern), decode(self.expression))

    def equals(self, other: "Constraint") -> bool:
        return self == other

    def __str__(self) -> str:
        return f"({self.pattern}, {self.expression})"
