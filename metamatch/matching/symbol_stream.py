"""
metamatch/matching/symbol_stream.py
===================================
Deterministic source of new names, scoped to one matching problem.

A stream is seeded with terms and never yields a name used in those
terms (symbol texts, binder variables, index names) nor one it has
yielded before:

    stream = FreshSymbolStream(pattern, expression)
    stream.next_n(2)        # ['v0', 'v2'] if 'v1' already occurs

Copies are independent but start at the same position, so sibling
search branches each continue from the state at the branch point.
"""

from __future__ import annotations

from typing import Iterable, List, Set

from metamatch.core.types import Symbol, Term, symbol_texts


class FreshSymbolStream:
    """Counter-based generator of unused names ``prefix0, prefix1, ...``."""

    def __init__(self, *seeds: Term, prefix: str = "v"):
        if not prefix:
            raise ValueError("Symbol stream prefix must be non-empty.")
        self.prefix = prefix
        self._counter = 0
        self._avoid: Set[str] = set()
        for seed in seeds:
            self._avoid |= symbol_texts(seed)

    def avoid(self, names: Iterable[str]) -> None:
        """Add more names that must never be produced."""
        self._avoid.update(names)

    def next(self) -> str:
        while True:
            candidate = f"{self.prefix}{self._counter}"
            self._counter += 1
            if candidate not in self._avoid:
                self._avoid.add(candidate)
                return candidate

    def next_n(self, n: int) -> List[str]:
        return [self.next() for _ in range(n)]

    def next_symbol(self, metavariable: bool = False) -> Symbol:
        return Symbol(self.next(), metavariable=metavariable)

    def copy(self) -> "FreshSymbolStream":
        result = FreshSymbolStream(prefix=self.prefix)
        result._counter = self._counter
        result._avoid = set(self._avoid)
        return result

    @property
    def position(self) -> int:
        return self._counter

    def __repr__(self) -> str:
        return f"FreshSymbolStream(prefix={self.prefix!r}, position={self._counter})"
