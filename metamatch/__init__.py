"""
metamatch/__init__.py — Public API exports
"""

from metamatch.core.config import DEFAULT_CONFIG, MatchingConfig
from metamatch.core.exceptions import (
    ConstructionError,
    InternalInvariantError,
    InvalidSubstitution,
    MalformedPatternError,
    MatchingError,
)
from metamatch.core.types import (
    EFA,
    Application,
    Binder,
    Index,
    Symbol,
    application,
    binding,
    efa,
    lam,
    metavariable,
    quantified,
    symbol,
)
from metamatch.matching import (
    Constraint,
    Problem,
    Solution,
    Substitution,
    decode,
    encode,
)
from metamatch.version import __version__

__all__ = [
    "Problem",
    "Constraint",
    "Substitution",
    "Solution",
    "MatchingConfig",
    "DEFAULT_CONFIG",
    "Symbol",
    "Index",
    "Binder",
    "Application",
    "EFA",
    "symbol",
    "metavariable",
    "application",
    "binding",
    "quantified",
    "lam",
    "efa",
    "encode",
    "decode",
    "MatchingError",
    "ConstructionError",
    "MalformedPatternError",
    "InvalidSubstitution",
    "InternalInvariantError",
    "__version__",
]
