"""
metamatch/matching/problem.py
=============================
Matching problems and the higher-order matching algorithm.

A Problem is a set of Constraints kept in ascending order of
complexity. ``solutions()`` lazily enumerates every Solution that makes
all patterns structurally equal to their expressions, up to renaming of
bound variables.

Algorithm (one recursive step per constraint, always the first one):

    complexity 0   clash                  → prune this branch
    complexity 1   already equal          → drop it, recur
    complexity 2   ?M vs e                → bind ?M ↦ e, substitute, reduce, recur
    complexity 3   (p1..pn) vs (e1..en)   → replace by (pi, ei), recur
    complexity ≥4  (@ ?P a1..an) vs e     → branch over instantiations of ?P:
                     1. constant     λ... e
                     2. projection   λ... ai      (when ai could be e)
                     3. imitation    λ... (e with some ai occurrences abstracted)
                                     or one fresh EFA per child of e

Before searching, a working copy of the problem is converted to de Bruijn
form (see debruijn.py). Solutions that would capture a bound variable are
dropped; the rest are decoded and yielded unless alpha-equivalent to one
already yielded.

Usage:
    P = Problem(efa(metavariable("P"), a), application(g, a, a))
    for solution in P.solutions():
        print(solution)
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, List, Optional, Union

from metamatch.core.config import DEFAULT_CONFIG, MatchingConfig
from metamatch.core.exceptions import (
    ConstructionError,
    InternalInvariantError,
    MalformedPatternError,
)
from metamatch.core.types import (
    Application,
    Index,
    Symbol,
    Term,
    contains_metavariable,
    contains_metavariable_named,
    is_binding,
    is_metavariable,
    is_term,
    metavariable_names,
    replace_at,
)
from metamatch.core.validators import assert_valid_pattern, assert_valid_term
from metamatch.matching.constraint import (
    CLASH,
    DECOMPOSITION,
    INSTANTIATION,
    SATISFIED,
    Constraint,
)
from metamatch.matching.debruijn import (
    adjust_indices,
    binding_depth,
    occurrences,
    structurally_equal,
)
from metamatch.matching.expression_functions import (
    application_ef,
    beta_reduce,
    constant_ef,
    new_ef,
    projection_ef,
)
from metamatch.matching.solution import Solution
from metamatch.matching.substitution import Substitution
from metamatch.matching.symbol_stream import FreshSymbolStream

logger = logging.getLogger(__name__)


class Problem:
    """A set of matching constraints to be solved simultaneously.

    Constraints can be given in any form accepted by :meth:`add`.
    Solving never mutates this object: the search runs on private
    working copies.
    """

    def __init__(self, *args, config: Optional[MatchingConfig] = None):
        self._config = config or DEFAULT_CONFIG
        self._constraints: List[Constraint] = []
        self._stream: Optional[FreshSymbolStream] = None
        self._encoded = False
        self._debug = self._config.debug
        self.add(*args)

    # ─── CONSTRAINT MANAGEMENT ─────────────────────────────────────

    def add(self, *args) -> None:
        """Add constraints, in any of these forms:

            p.add(p1, e1, p2, e2, ...)          patterns and expressions
            p.add([p1, e1, p2, e2, ...])        the same, as one list
            p.add([(p1, e1), (p2, e2), ...])    as a list of pairs
            p.add(c1, c2, ...)                  Constraint instances
            p.add([c1, c2, ...])                the same, as one list
            p.add(other)                        every constraint of another Problem

        Constraints already present are skipped. Raises ConstructionError
        for anything else, and MalformedPatternError for ill-formed EFAs.
        """
        if not args:
            return
        if is_term(args[0]):
            if not all(is_term(a) for a in args):
                raise ConstructionError(
                    "Cannot mix terms with other data when adding to a Problem",
                    context={"args": args},
                )
            if len(args) % 2:
                raise ConstructionError(
                    "Patterns and expressions must come in pairs",
                    context={"count": len(args)},
                )
            for pattern, expression in zip(args[0::2], args[1::2]):
                assert_valid_pattern(pattern)
                assert_valid_term(expression)
                self._insert(Constraint(pattern, expression))
            return
        for arg in args:
            if isinstance(arg, Constraint):
                assert_valid_pattern(arg.pattern)
                self._insert(arg)
            elif isinstance(arg, Problem):
                for constraint in arg._constraints:
                    self._insert(constraint)
            elif isinstance(arg, (list, tuple)):
                if arg and all(isinstance(item, (list, tuple)) for item in arg):
                    if any(len(pair) != 2 for pair in arg):
                        raise ConstructionError(
                            "Each pair must hold exactly one pattern and one expression",
                            context={"value": arg},
                        )
                    self.add(*[item for pair in arg for item in pair])
                else:
                    self.add(*arg)
            else:
                raise ConstructionError(
                    f"Cannot add this type of data to a Problem: {type(arg).__name__}",
                    context={"value": arg},
                )

    def _insert(self, constraint: Constraint) -> None:
        """Insert keeping complexity order (stable) and skipping duplicates."""
        if any(existing == constraint for existing in self._constraints):
            return
        complexity = constraint.complexity()
        index = len(self._constraints)
        for i, existing in enumerate(self._constraints):
            if existing.complexity() > complexity:
                index = i
                break
        self._constraints.insert(index, constraint)

    def plus(self, *args) -> "Problem":
        result = self.copy()
        result.add(*args)
        return result

    def remove(self, to_remove: Union[int, Constraint]) -> None:
        """Remove the constraint at an index, or one equal to the given
        constraint. Unknown constraints and bad indices are ignored."""
        if isinstance(to_remove, Constraint):
            for i, existing in enumerate(self._constraints):
                if existing == to_remove:
                    del self._constraints[i]
                    return
            return
        if isinstance(to_remove, int) and not isinstance(to_remove, bool):
            if 0 <= to_remove < len(self._constraints):
                del self._constraints[to_remove]

    def without(self, to_remove: Union[int, Constraint]) -> "Problem":
        result = self.copy()
        result.remove(to_remove)
        return result

    def copy(self) -> "Problem":
        """Shallow copy: constraints are immutable and shared."""
        result = Problem(config=self._config)
        result._constraints = list(self._constraints)
        if self._stream is not None:
            result._stream = self._stream.copy()
        result._encoded = self._encoded
        result._debug = self._debug
        return result

    @property
    def constraints(self) -> List[Constraint]:
        return list(self._constraints)

    @property
    def encoded(self) -> bool:
        return self._encoded

    @property
    def config(self) -> MatchingConfig:
        return self._config

    @property
    def debug(self) -> bool:
        return self._debug

    @debug.setter
    def debug(self, value: bool) -> None:
        self._debug = bool(value)

    def is_empty(self) -> bool:
        return not self._constraints

    def __len__(self) -> int:
        return len(self._constraints)

    def equals(self, other: "Problem") -> bool:
        """Same set of constraints, regardless of order."""
        if len(self._constraints) != len(other._constraints):
            return False
        return all(
            any(c1 == c2 for c2 in other._constraints) for c1 in self._constraints
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Problem):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __str__(self) -> str:
        return "{" + ", ".join(str(c) for c in self._constraints) + "}"

    def __repr__(self) -> str:
        return f"Problem({self})"

    # ─── REWRITING ─────────────────────────────────────────────────

    def substitute(self, *subs) -> None:
        """Apply substitutions in place to every pattern mentioning them."""
        flat: List[Substitution] = []
        for sub in subs:
            if isinstance(sub, (list, tuple)):
                flat.extend(sub)
            else:
                flat.append(sub)
        names = {sub.name for sub in flat}
        to_replace = [
            c for c in self._constraints if metavariable_names(c.pattern) & names
        ]
        for constraint in to_replace:
            self.remove(constraint)
        for constraint in to_replace:
            pattern = constraint.pattern
            for sub in flat:
                pattern = sub.apply_to(pattern)
            self._insert(Constraint(pattern, constraint.expression))

    def after_substituting(self, *subs) -> "Problem":
        result = self.copy()
        result.substitute(*subs)
        return result

    def beta_reduce(self) -> None:
        """Beta-reduce every pattern in place."""
        for constraint in list(self._constraints):
            reduced = beta_reduce(constraint.pattern)
            if reduced != constraint.pattern:
                self.remove(constraint)
                self._insert(Constraint(reduced, constraint.expression))

    def _encode(self) -> None:
        constraints, self._constraints = self._constraints, []
        for constraint in constraints:
            self._insert(constraint.encoded())
        self._encoded = True

    def _narrate(self, message: str, *args) -> None:
        if self._debug:
            logger.info(message, *args)

    # ─── SOLVING ───────────────────────────────────────────────────

    def solutions(self) -> Iterator[Solution]:
        """Lazily yield every solution, each exactly once up to alpha-equivalence."""
        seen: List[Solution] = []
        proxy = self.copy()
        proxy._encode()
        self._narrate("Solving %s", proxy)
        for solution in proxy._all_solutions(Solution(proxy)):
            if solution.has_capture():
                self._narrate("xxx - %s would capture a bound variable", solution)
                continue
            solution = solution.decoded()
            if any(old == solution for old in seen):
                self._narrate("xxx - %s is a repeat", solution)
                continue
            seen.append(solution)
            yield solution
        if self._debug:
            self._narrate("Final solution set (%d):", len(seen))
            for i, solution in enumerate(seen):
                self._narrate("%d. %s", i, solution)

    def _all_solutions(self, so_far: Solution) -> Iterator[Solution]:
        # self is a private working copy from here on; branches copy it again
        if self._stream is None:
            seeds = [c.pattern for c in self._constraints]
            seeds += [c.expression for c in self._constraints]
            self._stream = FreshSymbolStream(*seeds, prefix=self._config.fresh_symbol_prefix)

        if self.is_empty():
            yield so_far
            return

        constraint = self._constraints[0]
        complexity = constraint.complexity()
        self._narrate("step %s [complexity %s] with %s", constraint, complexity, so_far)

        if complexity == CLASH:
            return

        if complexity == SATISFIED:
            self.remove(0)
            yield from self._all_solutions(so_far)
            return

        if complexity == INSTANTIATION:
            substitution = Substitution.from_constraint(constraint)
            extended = so_far.add(substitution)
            if extended is None:
                return
            self.remove(0)
            self.substitute(substitution)
            self.beta_reduce()
            yield from self._all_solutions(extended)
            return

        if complexity == DECOMPOSITION:
            self.remove(0)
            to_add = constraint.children()
            # Entering a binding on the expression side only: lower its body's
            # indices now and raise them again in every instantiation found.
            must_adjust = is_binding(constraint.expression) and not is_binding(constraint.pattern)
            if must_adjust:
                to_add[1] = Constraint(
                    to_add[1].pattern, adjust_indices(to_add[1].expression, -1, 0)
                )
            for child in to_add:
                self._insert(child)
            readjust = metavariable_names(to_add[1].pattern) if must_adjust else set()
            for solution in self._all_solutions(so_far):
                if readjust:
                    solution = solution.adjusted(readjust, 1, 0)
                yield solution
            return

        if complexity >= 4:
            yield from self._expression_function_solutions(constraint, so_far)
            return

        raise InternalInvariantError(
            f"Invalid value for constraint complexity: {complexity}",
            context={"constraint": str(constraint)},
        )

    def _expression_function_solutions(
        self, constraint: Constraint, so_far: Solution
    ) -> Iterator[Solution]:
        pattern, expression = constraint.pattern, constraint.expression
        head, args = pattern.children[1], pattern.children[2:]
        if not is_metavariable(head):
            raise MalformedPatternError(
                f"Invalid head of expression function application: {head}", pattern=pattern
            )
        if not args:
            raise MalformedPatternError(
                "Empty argument list in expression function application", pattern=pattern
            )
        arity = len(args)

        def extend(ef: Term) -> Iterator[Solution]:
            if contains_metavariable_named(ef, head.text):
                return
            substitution = Substitution(head, ef)
            extended = so_far.add(substitution)
            if extended is None:
                self._narrate("cannot add %s to %s", substitution, so_far)
                return
            branch = self.after_substituting(substitution)
            branch.beta_reduce()
            for solution in branch._all_solutions(extended):
                yield solution.restricted()

        # 1. constant function
        yield from extend(constant_ef(arity, expression, self._stream.next_n(arity)))

        if constraint.can_be_only_constant_efa():
            self._narrate("%s can only be a constant function", head)
            return

        # 2. projections
        for i in range(arity):
            if constraint.can_be_a_projection_efa(i):
                yield from extend(projection_ef(arity, i, self._stream.next_n(arity)))

        # 3. imitation
        if not isinstance(expression, Application):
            return
        if (
            self._config.imitation_fast_path
            and arity == 1
            and not contains_metavariable(args[0])
            and not structurally_equal(args[0], expression)
        ):
            yield from self._subset_imitations(args[0], expression, extend)
            return
        metavariables = [
            Symbol(name, metavariable=True)
            for name in self._stream.next_n(len(expression.children))
        ]
        marker = expression.children[0] if is_binding(expression) else None
        yield from extend(
            application_ef(arity, metavariables, self._stream.next_n(arity), marker)
        )

    def _subset_imitations(
        self,
        arg: Term,
        expression: Term,
        extend: Callable[[Term], Iterator[Solution]],
    ) -> Iterator[Solution]:
        """Abstract every non-empty subset of the occurrences of ``arg``.

        Equivalent to general imitation for a single ground argument, but
        enumerates the 2^n - 1 candidates directly. The empty subset is
        the constant function, already tried.
        """
        addresses = occurrences(arg, expression)
        variable = self._stream.next()
        shifted = adjust_indices(expression, 1)
        n = len(addresses)
        for mask in range(1, 2 ** n):
            body = shifted
            for position, address in enumerate(addresses):
                if (mask >> (n - 1 - position)) & 1:
                    body = replace_at(
                        body, address, Index(binding_depth(expression, address), variable)
                    )
            yield from extend(new_ef([variable], body))

    # ─── CONVENIENCE QUERIES ───────────────────────────────────────

    def first_solution(self) -> Optional[Solution]:
        """First solution, or None. Recomputed on every call."""
        for solution in self.solutions():
            return solution
        return None

    def is_solvable(self) -> bool:
        return self.first_solution() is not None

    def num_solutions(self) -> int:
        return sum(1 for _ in self.solutions())
