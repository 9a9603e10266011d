"""Constraint-based graph pattern matching."""

from sif_miner.pattern.match import Match, Variable
from sif_miner.pattern.pattern import Pattern, PatternError, Step
from sif_miner.pattern.searcher import iter_matches, search, search_element

__all__ = [
    "Match",
    "Pattern",
    "PatternError",
    "Step",
    "Variable",
    "iter_matches",
    "search",
    "search_element",
]
