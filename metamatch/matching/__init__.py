"""metamatch/matching — De Bruijn encoding, constraints and the matching search."""

from metamatch.matching.constraint import Constraint
from metamatch.matching.debruijn import (
    adjust_indices,
    binding_depth,
    decode,
    encode,
    has_free_index,
    is_free,
    occurrences,
    structurally_equal,
)
from metamatch.matching.expression_functions import (
    application_ef,
    apply_ef,
    beta_reduce,
    constant_ef,
    is_expression_function,
    new_ef,
    projection_ef,
)
from metamatch.matching.problem import Problem
from metamatch.matching.solution import Solution
from metamatch.matching.substitution import Substitution
from metamatch.matching.symbol_stream import FreshSymbolStream

__all__ = [
    "Problem",
    "Constraint",
    "Substitution",
    "Solution",
    "FreshSymbolStream",
    "encode",
    "decode",
    "adjust_indices",
    "binding_depth",
    "is_free",
    "has_free_index",
    "structurally_equal",
    "occurrences",
    "new_ef",
    "constant_ef",
    "projection_ef",
    "application_ef",
    "apply_ef",
    "beta_reduce",
    "is_expression_function",
]
