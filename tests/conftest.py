"""
tests/conftest.py
==================
Shared pytest fixtures for all metamatch tests.
"""

import pytest
from metamatch.core.types import (
    Symbol,
    application,
    efa,
    metavariable,
    quantified,
    symbol,
)
from metamatch.matching.problem import Problem


# ─── SYMBOLS ──────────────────────────────────────────────────────


@pytest.fixture
def f():
    return symbol("f")


@pytest.fixture
def g():
    return symbol("g")


@pytest.fixture
def a():
    return symbol("a")


@pytest.fixture
def b():
    return symbol("b")


@pytest.fixture
def forall():
    return symbol("forall")


@pytest.fixture
def five():
    return symbol("5")


# ─── METAVARIABLES ────────────────────────────────────────────────


@pytest.fixture
def P():
    return metavariable("P")


@pytest.fixture
def x():
    return metavariable("x")


@pytest.fixture
def y():
    return metavariable("y")


# ─── PROBLEMS ─────────────────────────────────────────────────────


@pytest.fixture
def imitation_problem(P, a, g):
    """P(a) against g(a, a) with ``a`` free."""
    return Problem(efa(P, a), application(g, a, a))


@pytest.fixture
def bound_imitation_problem(P, g, forall):
    """∀a. P(a) against ∀a. g(a, a)."""
    a = Symbol("a")
    return Problem(
        quantified(forall, "a", efa(P, a)),
        quantified(forall, "a", application(g, a, a)),
    )


@pytest.fixture
def two_metavariable_problem(x, y):
    return Problem(x, symbol("5"), y, symbol("6"))
