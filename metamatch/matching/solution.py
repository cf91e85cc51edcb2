"""
metamatch/matching/solution.py
==============================
Accumulated metavariable bindings for one branch of the search.

Invariant: no bound metavariable occurs in any bound value. Adding a
binding instantiates the new value with the existing ones and the
existing values with the new one, then beta-reduces everything, so
imitation metavariables introduced mid-search disappear from the
values of the metavariables the caller asked about.

Solutions are extended by copying (``add`` never mutates ``self``),
so a branch can keep its unextended version.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Iterable, Optional, Set, Union

from metamatch.core.types import (
    Symbol,
    Term,
    contains_metavariable_named,
    metavariable_names,
    replace_metavariable,
)
from metamatch.matching.debruijn import adjust_indices, decode, encode, has_free_index
from metamatch.matching.expression_functions import beta_reduce
from metamatch.matching.substitution import Substitution

logger = logging.getLogger(__name__)


def _name_of(metavariable: Union[str, Symbol]) -> str:
    return metavariable.text if isinstance(metavariable, Symbol) else metavariable


class Solution:
    """Mapping from metavariable names to terms.

    Args:
        problem:       Problem whose pattern metavariables define the
                       domain kept by ``restricted()``; its encoding
                       state is inherited.
        metavariables: Explicit domain, when no problem is given.
        encoded:       Whether values are in de Bruijn form.
    """

    def __init__(
        self,
        problem=None,
        metavariables: Optional[Iterable[str]] = None,
        encoded: bool = False,
    ):
        self._bindings: Dict[str, Term] = {}
        if problem is not None:
            names: Set[str] = set()
            for constraint in problem.constraints:
                names |= metavariable_names(constraint.pattern)
            self._metavariables: FrozenSet[str] = frozenset(names)
            self._encoded = problem.encoded
        else:
            self._metavariables = frozenset(metavariables or ())
            self._encoded = encoded

    # ─── QUERIES ───────────────────────────────────────────────────

    @property
    def encoded(self) -> bool:
        return self._encoded

    @property
    def metavariables(self) -> FrozenSet[str]:
        """Metavariables of the originating problem."""
        return self._metavariables

    def domain(self) -> Set[str]:
        return set(self._bindings)

    def get(self, metavariable: Union[str, Symbol]) -> Optional[Term]:
        return self._bindings.get(_name_of(metavariable))

    def as_dict(self) -> Dict[str, Term]:
        return dict(self._bindings)

    def __contains__(self, metavariable: Union[str, Symbol]) -> bool:
        return _name_of(metavariable) in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def has_capture(self) -> bool:
        """Would some value drag a bound variable out of its binder?"""
        return any(has_free_index(value) for value in self._bindings.values())

    # ─── DERIVED SOLUTIONS ─────────────────────────────────────────

    def copy(self) -> "Solution":
        result = Solution(metavariables=self._metavariables, encoded=self._encoded)
        result._bindings = dict(self._bindings)
        return result

    def add(self, substitution: Substitution) -> Optional["Solution"]:
        """Extend with ``substitution``; ``None`` if it conflicts.

        Conflicts: the metavariable is already bound to a different
        value, or instantiating the new value makes it self-referential.
        """
        name = substitution.name
        value = beta_reduce(self._substitute_into(substitution.replacement))
        if contains_metavariable_named(value, name):
            logger.debug("Rejected %s: self-reference after instantiation", substitution)
            return None
        existing = self._bindings.get(name)
        if existing is not None:
            if existing == value:
                return self.copy()
            logger.debug("Rejected %s: already bound to %s", substitution, existing)
            return None
        result = self.copy()
        for key, term in result._bindings.items():
            result._bindings[key] = beta_reduce(replace_metavariable(term, name, value))
        result._bindings[name] = value
        return result

    def restricted(self) -> "Solution":
        """Copy keeping only the originating problem's metavariables."""
        result = self.copy()
        result._bindings = {
            k: v for k, v in self._bindings.items() if k in self._metavariables
        }
        return result

    def adjusted(self, names: Iterable[str], delta: int, cutoff: int = 0) -> "Solution":
        """Copy with the indices of the given bound values shifted."""
        result = self.copy()
        for name in names:
            if name in result._bindings:
                result._bindings[name] = adjust_indices(result._bindings[name], delta, cutoff)
        return result

    def decoded(self) -> "Solution":
        if not self._encoded:
            return self.copy()
        result = Solution(metavariables=self._metavariables, encoded=False)
        result._bindings = {k: decode(v) for k, v in self._bindings.items()}
        return result

    def encoded_copy(self) -> "Solution":
        if self._encoded:
            return self.copy()
        result = Solution(metavariables=self._metavariables, encoded=True)
        result._bindings = {k: encode(v) for k, v in self._bindings.items()}
        return result

    def instantiate(self, term: Term) -> Term:
        """Apply every binding to ``term`` and beta-reduce.

        ``term`` is taken to be in the same form as this solution; a
        named-form term is encoded for the reduction and decoded after.
        """
        if self._encoded:
            return self._substitute_into(term, reduce=True)
        return decode(self.encoded_copy()._substitute_into(encode(term), reduce=True))

    def _substitute_into(self, term: Term, reduce: bool = False) -> Term:
        for name, value in self._bindings.items():
            term = replace_metavariable(term, name, value)
        return beta_reduce(term) if reduce else term

    # ─── COMPARISON ────────────────────────────────────────────────

    def _canonical(self, name: str) -> Term:
        value = self._bindings[name]
        return value if self._encoded else encode(value)

    def equals(self, other: "Solution") -> bool:
        """Same domain and alpha-equivalent values."""
        if self.domain() != other.domain():
            return False
        return all(self._canonical(k) == other._canonical(k) for k in self._bindings)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Solution):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __str__(self) -> str:
        body = ", ".join(
            f"?{name} ↦ {self._bindings[name]}" for name in sorted(self._bindings)
        )
        return "{" + body + "}"

    def __repr__(self) -> str:
        return f"Solution({self})"
