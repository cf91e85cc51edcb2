"""
examples/basic_matching.py
==========================
Minimal metamatch example: first-order decomposition, then a
higher-order pattern P(a) matched against g(a, a).
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from metamatch import Problem, application, efa, metavariable, quantified, symbol


def main():
    f, g, a = symbol("f"), symbol("g"), symbol("a")
    x, P = metavariable("x"), metavariable("P")

    first_order = Problem(application(f, x), application(f, symbol("5")))
    print(f"Problem: {first_order}")
    print(f"  {first_order.first_solution()}")
    assert first_order.num_solutions() == 1, "Should bind ?x to 5"

    higher_order = Problem(efa(P, a), application(g, a, a))
    print(f"Problem: {higher_order}")
    for solution in higher_order.solutions():
        print(f"  {solution}")
    assert higher_order.num_solutions() == 4, "Constant plus three imitations"

    forall = symbol("forall")
    bound = Problem(
        quantified(forall, "a", efa(P, a)),
        quantified(forall, "a", application(g, a, a)),
    )
    print(f"Problem: {bound}")
    for solution in bound.solutions():
        print(f"  {solution}")
    assert bound.num_solutions() == 1, "Bound variable must not escape its quantifier"
    print("✓ Basic matching example passed.")


if __name__ == "__main__":
    main()
