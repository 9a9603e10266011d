"""
Mining of pairwise relations (SIF edges) from molecular interaction graphs.

Patterns of constraints are matched against an element graph; each match is
turned into a typed relation between two identified entities, and relations
found by different miners are merged with their provenance.
"""

from sif_miner.graph import Element, ElementKind, InMemoryGraph
from sif_miner.miner.relation import Relation, RelationType
from sif_miner.miner.searcher import RelationSearcher

__all__ = [
    "Element",
    "ElementKind",
    "InMemoryGraph",
    "Relation",
    "RelationType",
    "RelationSearcher",
]
