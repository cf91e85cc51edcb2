"""
metamatch/matching/expression_functions.py
==========================================
Expression functions (EFs) and beta reduction, in de Bruijn form.

An EF of arity n is n nested bindings around a body:

    λv0. λv1. body       →   (λv0 (λv1 body))

Inside the body, parameter i is the index ``n - 1 - i``.  The search
driver instantiates the metavariable head of an EFA with one of:

  constant_ef(n, e)        λ... e          ignores every argument
  projection_ef(n, i)      λ... v_i        returns argument i
  application_ef(n, Ms)    λ... ((@ M1 v...) ... (@ Mk v...))
                           one fresh metavariable per child of the target

Applying an EF to arguments and beta-reducing gives an ordinary term:

    (@ (λv (g #0 a)) b)    →β   (g b a)
"""

from __future__ import annotations

from typing import Optional, Sequence

from metamatch.core.types import (
    Application,
    Binder,
    Index,
    Symbol,
    Term,
    efa,
    is_binding,
    is_efa,
)
from metamatch.matching.debruijn import adjust_indices


# ─────────────────────────────────────────────
#  CONSTRUCTION
# ─────────────────────────────────────────────

def new_ef(variables: Sequence[str], body: Term) -> Term:
    """Wrap an encoded ``body`` in one binding per variable, outermost first."""
    result = body
    for variable in reversed(list(variables)):
        result = Application((Binder(variable), result))
    return result


def constant_ef(arity: int, body: Term, variables: Sequence[str]) -> Term:
    """EF returning ``body`` whatever its arguments."""
    _check_arity(arity, variables)
    return new_ef(variables, adjust_indices(body, arity))


def projection_ef(arity: int, index: int, variables: Sequence[str]) -> Term:
    """EF returning its ``index``-th argument."""
    _check_arity(arity, variables)
    if not 0 <= index < arity:
        raise ValueError(f"Projection index {index} out of range for arity {arity}")
    return new_ef(variables, Index(arity - 1 - index, variables[index]))


def application_ef(
    arity: int,
    metavariables: Sequence[Symbol],
    variables: Sequence[str],
    binding_marker: Optional[Binder] = None,
) -> Term:
    """Imitation EF: one EFA of a fresh metavariable per child position.

    If ``binding_marker`` is given the target is a binding: its marker is
    kept in position 0 instead of being synthesized, and the remaining
    children sit one binder deeper.
    """
    _check_arity(arity, variables)
    children = []
    for position, metavar in enumerate(metavariables):
        if binding_marker is not None and position == 0:
            children.append(binding_marker)
            continue
        depth = 1 if binding_marker is not None else 0
        params = tuple(
            Index(arity - 1 - i + depth, variables[i]) for i in range(arity)
        )
        children.append(efa(metavar, *params))
    return new_ef(variables, Application(tuple(children)))


def _check_arity(arity: int, variables: Sequence[str]) -> None:
    if arity < 1:
        raise ValueError("Expression functions need arity >= 1")
    if len(variables) != arity:
        raise ValueError(f"Expected {arity} variable names, got {len(variables)}")


# ─────────────────────────────────────────────
#  INSPECTION
# ─────────────────────────────────────────────

def is_expression_function(term: Term) -> bool:
    return is_binding(term) and len(term.children) == 2


def arity(term: Term) -> int:
    """Number of leading single-variable bindings."""
    n = 0
    while is_expression_function(term):
        n += 1
        term = term.children[1]
    return n


def body(term: Term) -> Term:
    while is_expression_function(term):
        term = term.children[1]
    return term


# ─────────────────────────────────────────────
#  BETA REDUCTION
# ─────────────────────────────────────────────

def apply_ef(ef: Term, args: Sequence[Term]) -> Term:
    """Apply ``ef`` to ``args`` and fully beta-reduce the result."""
    return beta_reduce(efa(ef, *args))


def beta_reduce(term: Term) -> Term:
    """Reduce every ``(@ EF args...)`` redex, innermost first."""
    if not isinstance(term, Application):
        return term
    children = tuple(beta_reduce(c) for c in term.children)
    if all(a is b for a, b in zip(children, term.children)):
        reduced = term
    else:
        reduced = Application(children)
    if is_efa(reduced) and is_expression_function(reduced.children[1]):
        return beta_reduce(_apply(reduced.children[1], reduced.children[2:]))
    return reduced


def _apply(ef: Term, args: Sequence[Term]) -> Term:
    result = ef
    for i, arg in enumerate(args):
        if not is_expression_function(result):
            # more arguments than parameters; leave the rest applied
            return efa(result, *args[i:])
        result = _instantiate(result.children[1], arg, 0)
    return result


def _instantiate(term: Term, value: Term, depth: int) -> Term:
    """Replace the index bound at ``depth`` with ``value`` and drop that binder."""
    if isinstance(term, Index):
        if term.value == depth:
            return adjust_indices(value, depth)
        if term.value > depth:
            return Index(term.value - 1, term.name)
        return term
    if isinstance(term, Application):
        if is_binding(term):
            return Application(
                (term.children[0],)
                + tuple(_instantiate(c, value, depth + 1) for c in term.children[1:])
            )
        return Application(tuple(_instantiate(c, value, depth) for c in term.children))
    return term
