"""
metamatch/core/config.py
========================
Global configuration for MetaMatch.
"""
from __future__ import annotations
from dataclasses import dataclass


@dataclass
class MatchingConfig:
    debug:               bool = False   # narrate search progress via logging
    fresh_symbol_prefix: str  = "v"     # names are prefix0, prefix1, ...
    imitation_fast_path: bool = True    # subset enumeration for single-argument EFAs

    def __post_init__(self):
        if not self.fresh_symbol_prefix:
            raise ValueError("fresh_symbol_prefix must be non-empty")


# Singleton default config
DEFAULT_CONFIG = MatchingConfig()
