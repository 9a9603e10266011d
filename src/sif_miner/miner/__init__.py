"""Relation miners, ID resolution and aggregation."""

from sif_miner.miner.ids import DefaultIDResolver
from sif_miner.miner.miners import Miner, MinerCatalog, default_catalog
from sif_miner.miner.relation import Relation, RelationType
from sif_miner.miner.searcher import RelationIndex, RelationSearcher

__all__ = [
    "DefaultIDResolver",
    "Miner",
    "MinerCatalog",
    "Relation",
    "RelationIndex",
    "RelationSearcher",
    "RelationType",
    "default_catalog",
]
