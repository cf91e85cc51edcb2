"""
tests/unit/test_symbol_stream.py
================================
Tests for the fresh-name stream.
"""
import pytest
from metamatch.core.types import application, binding, metavariable, symbol
from metamatch.matching.symbol_stream import FreshSymbolStream


class TestFreshSymbolStream:
    def test_skips_seed_names(self):
        stream = FreshSymbolStream(application(symbol("v0"), symbol("v2")))
        assert stream.next_n(2) == ["v1", "v3"]

    def test_skips_binder_and_metavariable_names(self):
        stream = FreshSymbolStream(binding("v0", metavariable("v1")))
        assert stream.next() == "v2"

    def test_never_repeats(self):
        stream = FreshSymbolStream()
        names = stream.next_n(10)
        assert len(set(names)) == 10

    def test_prefix(self):
        stream = FreshSymbolStream(prefix="t")
        assert stream.next() == "t0"

    def test_empty_prefix_rejected(self):
        with pytest.raises(ValueError):
            FreshSymbolStream(prefix="")

    def test_avoid(self):
        stream = FreshSymbolStream()
        stream.avoid(["v0", "v1"])
        assert stream.next() == "v2"

    def test_copy_is_independent(self):
        stream = FreshSymbolStream()
        stream.next()
        clone = stream.copy()
        assert clone.position == stream.position
        assert clone.next() == stream.next() == "v1"
        clone.next()
        assert clone.position == stream.position + 1

    def test_next_symbol(self):
        stream = FreshSymbolStream()
        assert stream.next_symbol(metavariable=True) == metavariable("v0")
        assert stream.next_symbol() == symbol("v1")
