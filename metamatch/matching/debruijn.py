"""
metamatch/matching/debruijn.py
==============================
De Bruijn encoding of bound variables.

Before search, every bound occurrence ``x`` inside ``(λx ...)`` becomes an
Index counting the binders between the occurrence and its binder:

    (forall (λx (λy (R x y))))   →   (forall (λx (λy (R #1 #0))))

Binders keep their variable names only for decoding; Binder and Index
equality ignore names, so plain ``==`` on encoded terms is equality up to
alpha-equivalence.

All functions here are pure: they return new terms and never signal
failure. Malformed input is a programming error.
"""

from __future__ import annotations

from typing import List, Sequence, Set

from metamatch.core.types import (
    Address,
    Application,
    Binder,
    Index,
    Symbol,
    Term,
    is_binding,
)


# ─────────────────────────────────────────────
#  ENCODING / DECODING
# ─────────────────────────────────────────────

def encode(term: Term) -> Term:
    """Named form → de Bruijn form. Metavariables are never bound."""
    return _encode(term, ())


def _encode(term: Term, bound: Sequence[str]) -> Term:
    if isinstance(term, Symbol):
        if term.metavariable:
            return term
        for distance, name in enumerate(reversed(bound)):
            if name == term.text:
                return Index(distance, name)
        return term
    if isinstance(term, Application):
        if is_binding(term):
            inner = tuple(bound) + (term.children[0].variable,)
            return Application(
                (term.children[0],)
                + tuple(_encode(c, inner) for c in term.children[1:])
            )
        return Application(tuple(_encode(c, bound) for c in term.children))
    return term


def decode(term: Term) -> Term:
    """De Bruijn form → named form.

    A binder is renamed (by appending primes) if its name is already
    bound by an enclosing binder or appears as a free symbol in its
    scope, so decoding never captures. Free indices are left as they are.
    """
    return _decode(term, [])


def _decode(term: Term, names: List[str]) -> Term:
    if isinstance(term, Index):
        if 0 <= term.value < len(names):
            return Symbol(names[-1 - term.value])
        return term
    if isinstance(term, Application):
        if is_binding(term):
            binder = term.children[0]
            taken: Set[str] = set(names)
            for child in term.children[1:]:
                taken |= _free_symbol_texts(child)
            name = binder.variable or "x"
            while name in taken:
                name += "'"
            names.append(name)
            try:
                body = tuple(_decode(c, names) for c in term.children[1:])
            finally:
                names.pop()
            return Application((Binder(name),) + body)
        return Application(tuple(_decode(c, names) for c in term.children))
    return term


def _free_symbol_texts(term: Term) -> Set[str]:
    return {t.text for t in _leaves(term) if isinstance(t, Symbol) and not t.metavariable}


def _leaves(term: Term):
    if isinstance(term, Application):
        for child in term.children:
            yield from _leaves(child)
    else:
        yield term


# ─────────────────────────────────────────────
#  INDEX ARITHMETIC
# ─────────────────────────────────────────────

def adjust_indices(term: Term, delta: int, cutoff: int = 0) -> Term:
    """Add ``delta`` to every index ``>= cutoff``.

    The cutoff grows by one inside each binding, so only indices that
    are free relative to ``term`` (shifted by the original cutoff) move.
    """
    if delta == 0:
        return term
    if isinstance(term, Index):
        if term.value >= cutoff:
            return Index(term.value + delta, term.name)
        return term
    if isinstance(term, Application):
        if is_binding(term):
            return Application(
                (term.children[0],)
                + tuple(adjust_indices(c, delta, cutoff + 1) for c in term.children[1:])
            )
        return Application(tuple(adjust_indices(c, delta, cutoff) for c in term.children))
    return term


def binding_depth(term: Term, address: Address) -> int:
    """Number of bindings strictly enclosing the subterm at ``address``."""
    depth = 0
    for i in address:
        if is_binding(term):
            depth += 1
        term = term.children[i]
    return depth


def is_free(term: Term, address: Address) -> bool:
    """Whether the index at ``address`` refers outside ``term``."""
    target = term
    for i in address:
        target = target.children[i]
    if not isinstance(target, Index):
        return False
    return target.value < 0 or target.value >= binding_depth(term, address)


def has_free_index(term: Term, depth: int = 0) -> bool:
    """Whether some index in ``term`` is not bound within it.

    Negative indices count as free: they refer to a binder that was
    stripped off the expression side during decomposition.
    """
    if isinstance(term, Index):
        return term.value >= depth or term.value < 0
    if isinstance(term, Application):
        inner = depth + 1 if is_binding(term) else depth
        return any(has_free_index(c, inner) for c in term.children)
    return False


# ─────────────────────────────────────────────
#  EQUALITY & OCCURRENCES
# ─────────────────────────────────────────────

def structurally_equal(a: Term, b: Term, shift: int = 0) -> bool:
    """Equality of encoded terms, after shifting ``a``'s free indices by ``shift``.

    ``shift`` is the number of binders ``b`` sits under relative to ``a``.
    """
    return adjust_indices(a, shift) == b


def occurrences(target: Term, term: Term) -> List[Address]:
    """Addresses in ``term`` of subterms equal to ``target``.

    ``target`` is shifted by one each time the walk descends through a
    binding. A found occurrence is not searched further.
    """
    found: List[Address] = []
    _collect_occurrences(target, term, (), found)
    return found


def _collect_occurrences(target: Term, term: Term, address: Address, found: List[Address]) -> None:
    if target == term:
        found.append(address)
        return
    if isinstance(term, Application):
        if is_binding(term):
            target = adjust_indices(target, 1)
        for i, child in enumerate(term.children):
            _collect_occurrences(target, child, address + (i,), found)

