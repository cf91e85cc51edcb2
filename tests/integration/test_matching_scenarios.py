"""
tests/integration/test_matching_scenarios.py
============================================
End-to-end matching: concrete scenarios, soundness, capture avoidance,
and agreement between the two imitation strategies.
"""
import pytest
from metamatch import (
    Index,
    MatchingConfig,
    Problem,
    application,
    binding,
    efa,
    encode,
    lam,
    metavariable,
    quantified,
    symbol,
)
from metamatch.core.types import subterms

f, g, h = symbol("f"), symbol("g"), symbol("h")
a, b, c = symbol("a"), symbol("b"), symbol("c")
forall, exists = symbol("forall"), symbol("exists")


def assert_sound(problem, solution):
    """Every pattern instantiates to its expression, up to alpha-equivalence."""
    for constraint in problem.constraints:
        assert encode(solution.instantiate(constraint.pattern)) == encode(constraint.expression)


def encoded_values(problem, name):
    return [encode(s.get(name)) for s in problem.solutions()]


def has_dangling_index(solution):
    return any(
        isinstance(t, Index) for value in solution.as_dict().values() for t in subterms(value)
    )


class TestScenarios:
    def test_bare_metavariable(self, x, five):
        solutions = list(Problem(x, five).solutions())
        assert len(solutions) == 1
        assert solutions[0].as_dict() == {"x": five}

    def test_decomposition(self, f, x, five):
        problem = Problem(application(f, x), application(f, five))
        solutions = list(problem.solutions())
        assert len(solutions) == 1
        assert solutions[0].get("x") == five

    def test_imitation_with_free_argument(self, imitation_problem, g, a):
        v = symbol("v")
        expected = [
            encode(lam(["v"], application(g, a, a))),
            encode(lam(["v"], application(g, a, v))),
            encode(lam(["v"], application(g, v, a))),
            encode(lam(["v"], application(g, v, v))),
        ]
        assert encoded_values(imitation_problem, "P") == expected

    def test_imitation_with_bound_argument(self, bound_imitation_problem, g):
        solutions = list(bound_imitation_problem.solutions())
        assert len(solutions) == 1
        v = symbol("v")
        assert encode(solutions[0].get("P")) == encode(lam(["v"], application(g, v, v)))

    def test_equal_ground_terms(self):
        x = symbol("x")
        solutions = list(Problem(x, x).solutions())
        assert len(solutions) == 1
        assert len(solutions[0]) == 0

    def test_clash(self):
        assert list(Problem(symbol("3"), symbol("4")).solutions()) == []

    def test_two_instantiations(self, two_metavariable_problem):
        solutions = list(two_metavariable_problem.solutions())
        assert len(solutions) == 1
        assert solutions[0].as_dict() == {"x": symbol("5"), "y": symbol("6")}

    def test_function_bound_then_applied(self):
        P = metavariable("P")
        identity = lam(["x"], symbol("x"))
        problem = Problem(P, identity, efa(P, b), b)
        solutions = list(problem.solutions())
        assert len(solutions) == 1
        assert encode(solutions[0].get("P")) == encode(identity)
        assert_sound(problem, solutions[0])


class TestSoundness:
    @pytest.mark.parametrize(
        "pattern, expression",
        [
            (efa(metavariable("P"), a), application(g, a, a)),
            (efa(metavariable("P"), a, b), application(g, b, a)),
            (
                quantified(forall, "x", efa(metavariable("P"), symbol("x"))),
                quantified(forall, "y", application(h, symbol("y"), c)),
            ),
            (
                application(f, metavariable("x"), efa(metavariable("P"), metavariable("x"))),
                application(f, a, application(g, a)),
            ),
        ],
    )
    def test_every_solution_is_sound(self, pattern, expression):
        problem = Problem(pattern, expression)
        solutions = list(problem.solutions())
        assert solutions
        for solution in solutions:
            assert_sound(problem, solution)

    def test_two_arguments(self):
        problem = Problem(efa(metavariable("P"), a, b), application(g, b, a))
        u, v = symbol("u"), symbol("v")
        values = encoded_values(problem, "P")
        assert len(values) == 4
        assert encode(lam(["u", "v"], application(g, v, u))) in values

    def test_shared_metavariable(self):
        P = metavariable("P")
        problem = Problem(efa(P, a), application(g, a), efa(P, b), application(g, b))
        solutions = list(problem.solutions())
        assert len(solutions) == 1
        v = symbol("v")
        assert encode(solutions[0].get("P")) == encode(lam(["v"], application(g, v)))
        assert_sound(problem, solutions[0])

    def test_no_alpha_duplicates(self, imitation_problem):
        values = encoded_values(imitation_problem, "P")
        assert len(values) == len(set(values))


class TestCapture:
    def test_constant_under_quantifier_is_rejected(self):
        P = metavariable("P")
        problem = Problem(
            quantified(forall, "x", efa(P, symbol("x"))),
            quantified(forall, "y", application(h, symbol("y"), c)),
        )
        solutions = list(problem.solutions())
        assert len(solutions) == 1
        v = symbol("v")
        assert encode(solutions[0].get("P")) == encode(lam(["v"], application(h, v, c)))

    def test_bound_variable_cannot_escape(self):
        x = symbol("x")
        problem = Problem(
            application(metavariable("B"), metavariable("C")),
            binding("x", application(f, x)),
        )
        assert problem.num_solutions() == 0

    def test_metavariable_against_binding(self):
        problem = Problem(
            application(forall, metavariable("B")),
            quantified(forall, "x", application(f, symbol("x"))),
        )
        solution = problem.first_solution()
        assert str(solution.get("B")) == "(λx (f x))"

    @pytest.mark.parametrize(
        "pattern, expression",
        [
            (
                application(metavariable("A"), efa(metavariable("P"), c)),
                binding("x", application(g, symbol("x"), c)),
            ),
            (
                application(metavariable("A"), application(metavariable("B"), efa(metavariable("P"), c))),
                binding("x", binding("y", application(g, symbol("x"), symbol("y"), c))),
            ),
        ],
    )
    def test_stripped_binder_cannot_leak_into_function(self, pattern, expression):
        problem = Problem(pattern, expression)
        solutions = list(problem.solutions())
        assert not any(has_dangling_index(s) for s in solutions)
        assert solutions == []

    @pytest.mark.parametrize(
        "pattern, expression",
        [
            (
                application(metavariable("A"), efa(metavariable("P"), c)),
                binding("x", application(g, c, c)),
            ),
            (
                application(metavariable("A"), application(metavariable("B"), efa(metavariable("P"), c))),
                binding("x", binding("y", application(g, c, c))),
            ),
        ],
    )
    def test_stripped_binder_with_closed_body(self, pattern, expression):
        problem = Problem(pattern, expression)
        solutions = list(problem.solutions())
        assert len(solutions) == 4
        for solution in solutions:
            assert not has_dangling_index(solution)
            assert_sound(problem, solution)


class TestImitationStrategies:
    @pytest.mark.parametrize(
        "expression",
        [
            application(g, a, a),
            application(g, application(h, a), a),
            application(g, b),
            application(g, quantified(exists, "y", application(h, a, symbol("y")))),
        ],
    )
    def test_fast_path_agrees_with_general_imitation(self, expression):
        P = metavariable("P")
        fast = Problem(efa(P, a), expression)
        general = Problem(efa(P, a), expression, config=MatchingConfig(imitation_fast_path=False))
        fast_values = encoded_values(fast, "P")
        assert fast_values
        assert set(fast_values) == set(encoded_values(general, "P"))


class TestProblemIsUntouched:
    def test_solving_does_not_mutate(self, imitation_problem):
        before = imitation_problem.copy()
        list(imitation_problem.solutions())
        assert imitation_problem == before
        assert not imitation_problem.encoded

    def test_queries_agree(self, imitation_problem):
        solutions = list(imitation_problem.solutions())
        assert imitation_problem.num_solutions() == len(solutions) == 4
        assert imitation_problem.first_solution() == solutions[0]

    def test_fresh_symbol_prefix(self, P):
        problem = Problem(efa(P, a), application(g, a, a), config=MatchingConfig(fresh_symbol_prefix="t"))
        solution = problem.first_solution()
        assert solution.get("P").children[0].variable.startswith("t")
