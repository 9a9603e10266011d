"""Searches a graph with a set of miners and aggregates the relations found.

Every miner runs its pattern over the whole graph. Relations with the same
identity are merged into one record that carries the union of their
mediators. The result is sorted so repeated runs give identical output.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Collection, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TYPE_CHECKING, Optional, TextIO

from sif_miner.hgnc import HGNCSymbolTable
from sif_miner.miner.ids import DefaultIDResolver
from sif_miner.miner.miners import MinerCatalog, default_catalog
from sif_miner.miner.relation import Relation, RelationType
from sif_miner.pattern.searcher import iter_matches
from sif_miner.protocol import MinerStats

if TYPE_CHECKING:
    from sif_miner.miner.miners import Miner
    from sif_miner.protocol import ElementGraph, IDResolver

logger = logging.getLogger(__name__)


class RelationIndex:
    """Identity-keyed relation store with atomic insert-or-merge."""

    def __init__(self) -> None:
        self._relations: dict[Relation, Relation] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._relations)

    def add(self, relation: Relation) -> bool:
        """Insert a relation, or merge it into the stored one with the same identity.

        Returns:
            True if the relation was new.
        """
        with self._lock:
            existing = self._relations.get(relation)
            if existing is None:
                self._relations[relation] = relation
                return True
            existing.merge_with(relation)
            return False

    def values(self) -> list[Relation]:
        with self._lock:
            return list(self._relations.values())


class RelationSearcher:
    """Runs miners over a graph and collects deduplicated relations."""

    def __init__(
        self,
        types: Iterable[RelationType],
        resolver: Optional[IDResolver] = None,
        ubique_ids: Optional[Collection[str]] = None,
        catalog: Optional[MinerCatalog] = None,
        miners: Optional[Sequence[Miner]] = None,
        parallel: bool = False,
        max_workers: int = 4,
    ) -> None:
        """Initialize the searcher.

        Args:
            types: Relation types to report. Relations of other types are discarded.
            resolver: Element ID resolver. Defaults to HGNC symbols from an empty
                table, which only resolves chemicals.
            ubique_ids: URIs of ubiquitous molecules to keep out of small-molecule roles.
            catalog: Miner catalog used to build miners for ``types``.
            miners: Explicit miners to run instead of building them from the catalog.
            parallel: Whether to run miners concurrently.
            max_workers: Maximum concurrent workers for parallel search.
        """
        self.types = frozenset(types)
        self.resolver: IDResolver = resolver or DefaultIDResolver(HGNCSymbolTable())
        self.ubique_ids = frozenset(ubique_ids or ())
        self.catalog = catalog or default_catalog()
        self._miners = list(miners) if miners is not None else None
        self.parallel = parallel
        self.max_workers = max_workers
        self.stats: list[MinerStats] = []

    @property
    def miners(self) -> list[Miner]:
        if self._miners is None:
            # Build in tag order so miner order never depends on set iteration
            ordered = sorted(self.types, key=lambda t: t.tag)
            self._miners = self.catalog.build(ordered, self.ubique_ids)
        return self._miners

    def search(self, graph: ElementGraph) -> list[Relation]:
        """Mine the graph with every miner.

        Returns:
            Deduplicated relations of the requested types, sorted by type,
            source, target and mediators.
        """
        index = RelationIndex()
        miners = self.miners
        stats: list[MinerStats] = []

        if self.parallel and len(miners) > 1:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(miners))) as executor:
                futures = {
                    executor.submit(self._run_miner, graph, miner, index): miner
                    for miner in miners
                }
                for future in as_completed(futures):
                    stats.append(future.result())
            order = {miner.name: i for i, miner in enumerate(miners)}
            stats.sort(key=lambda s: order[s.miner])
        else:
            for miner in miners:
                stats.append(self._run_miner(graph, miner, index))

        self.stats = stats
        relations = [r for r in index.values() if r.type in self.types]
        dropped = len(index) - len(relations)
        if dropped:
            logger.debug("Discarded %d relations of unrequested types", dropped)
        return sorted(relations, key=Relation.sort_key)

    def _run_miner(self, graph: ElementGraph, miner: Miner, index: RelationIndex) -> MinerStats:
        stat = MinerStats(miner=miner.name)
        start_time = time.time()

        for match in iter_matches(graph, miner.pattern):
            stat.matches += 1
            relation = miner.create_relation(graph, match, self.resolver)
            if relation is None:
                stat.unresolved += 1
                continue
            if index.add(relation):
                stat.relations += 1

        stat.duration_seconds = time.time() - start_time
        logger.debug("%s", stat)
        return stat

    def write(self, graph: ElementGraph, out: TextIO, with_mediators: bool = False) -> bool:
        """Search the graph and write the relations as SIF text.

        Lines are ``source<TAB>type<TAB>target``, followed by the mediator URIs
        when ``with_mediators`` is set.

        Returns:
            True if relations were found and written. False if nothing was found
            or the output failed; lines already written are left in place.
        """
        relations = self.search(graph)
        if not relations:
            return False

        try:
            out.write("\n".join(r.to_text(with_mediators) for r in relations))
            out.write("\n")
        except OSError as e:
            logger.warning("Failed to write SIF output: %s", e)
            return False
        return True
