"""
tests/unit/test_expression_functions.py
=======================================
Tests for expression-function construction and beta reduction.
"""
import pytest
from metamatch.core.types import (
    Application,
    Binder,
    Index,
    efa,
    metavariable,
    symbol,
)
from metamatch.matching.expression_functions import (
    application_ef,
    apply_ef,
    arity,
    beta_reduce,
    body,
    constant_ef,
    is_expression_function,
    new_ef,
    projection_ef,
)

g, a, b = symbol("g"), symbol("a"), symbol("b")


class TestConstruction:
    def test_new_ef(self):
        ef = new_ef(["u", "v"], g)
        assert ef == Application((Binder("u"), Application((Binder("v"), g))))
        assert is_expression_function(ef)
        assert arity(ef) == 2
        assert body(ef) == g

    def test_constant_shifts_free_indices(self):
        assert body(constant_ef(1, Index(0), ["u"])) == Index(1)

    def test_projection(self):
        assert body(projection_ef(2, 0, ["u", "v"])) == Index(1)
        assert body(projection_ef(2, 1, ["u", "v"])) == Index(0)

    def test_application_ef(self):
        M1, M2 = metavariable("M1"), metavariable("M2")
        ef = application_ef(1, [M1, M2], ["u"])
        assert ef == new_ef(["u"], Application((efa(M1, Index(0)), efa(M2, Index(0)))))

    def test_application_ef_keeps_binding_marker(self):
        M1, M2 = metavariable("M1"), metavariable("M2")
        ef = application_ef(1, [M1, M2], ["u"], binding_marker=Binder("x"))
        assert ef == new_ef(["u"], Application((Binder("x"), efa(M2, Index(1)))))

    def test_arity_errors(self):
        with pytest.raises(ValueError):
            constant_ef(0, g, [])
        with pytest.raises(ValueError):
            constant_ef(2, g, ["u"])
        with pytest.raises(ValueError):
            projection_ef(2, 2, ["u", "v"])

    def test_arity_of_non_ef(self):
        assert arity(g) == 0
        assert not is_expression_function(g)


class TestBetaReduction:
    def test_constant(self):
        assert apply_ef(constant_ef(1, g, ["u"]), [a]) == g

    def test_projections(self):
        assert apply_ef(projection_ef(2, 0, ["u", "v"]), [a, b]) == a
        assert apply_ef(projection_ef(2, 1, ["u", "v"]), [a, b]) == b

    def test_body_with_several_occurrences(self):
        ef = new_ef(["u"], Application((g, Index(0), a, Index(0))))
        assert apply_ef(ef, [b]) == Application((g, b, a, b))

    def test_reduction_under_binding(self):
        ef = new_ef(["u"], Application((Binder("x"), Application((g, Index(1), Index(0))))))
        assert apply_ef(ef, [a]) == Application((Binder("x"), Application((g, a, Index(0)))))

    def test_extra_arguments_stay_applied(self):
        assert apply_ef(constant_ef(1, g, ["u"]), [a, b]) == efa(g, b)

    def test_redex_produced_by_reduction(self):
        ef = new_ef(["u"], efa(Index(0), a))
        assert apply_ef(ef, [constant_ef(1, g, ["w"])]) == g

    def test_no_redex_is_identity(self):
        term = efa(metavariable("P"), a)
        assert beta_reduce(term) is term
