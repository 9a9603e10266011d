"""Backtracking search of patterns over an element graph.

Each branch of the search is a (step position, partial match) pair. Checking
steps either keep or drop a branch; generative steps fan a branch out into one
child per generated candidate. The step position only ever increases, so the
search terminates on cyclic graphs without visited-state bookkeeping.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TYPE_CHECKING

from sif_miner.pattern.match import Match

if TYPE_CHECKING:
    from sif_miner.graph import Element
    from sif_miner.pattern.pattern import Pattern
    from sif_miner.protocol import ElementGraph

logger = logging.getLogger(__name__)


def _walk(graph: ElementGraph, seed: Element, pattern: Pattern) -> Iterator[Match]:
    steps = pattern.steps
    stack: list[tuple[int, Match]] = [(0, Match.seeded(pattern.variable_count, seed))]

    while stack:
        position, match = stack.pop()
        if position == len(steps):
            yield match
            continue

        step = steps[position]
        if step.generated is None:
            if step.constraint.satisfies(graph, match, *step.indices):
                stack.append((position + 1, match))
            continue

        for candidate in step.constraint.generate(graph, match, *step.indices):
            stack.append((position + 1, match.extended(step.generated, candidate)))


def search_element(graph: ElementGraph, seed: Element, pattern: Pattern) -> list[Match]:
    """Return every completed match of ``pattern`` seeded at ``seed``."""
    if seed.kind is not pattern.start_kind:
        raise ValueError(
            f"Seed '{seed.uri}' is a {seed.kind.value}, pattern starts at "
            f"{pattern.start_kind.value}"
        )
    return list(_walk(graph, seed, pattern))


def seeds(graph: ElementGraph, pattern: Pattern) -> Sequence[Element]:
    return graph.elements_of_kind(pattern.start_kind)


def iter_matches(graph: ElementGraph, pattern: Pattern) -> Iterator[Match]:
    """Yield all matches of ``pattern`` in the graph, seed by seed."""
    for seed in seeds(graph, pattern):
        yield from _walk(graph, seed, pattern)


def search(
    graph: ElementGraph,
    pattern: Pattern,
    parallel: bool = False,
    max_workers: int = 4,
) -> dict[Element, list[Match]]:
    """Search the whole graph.

    Args:
        graph: Graph to search.
        pattern: Pattern to match.
        parallel: Whether to explore seeds on a thread pool.
        max_workers: Maximum concurrent workers for parallel search.

    Returns:
        Matches grouped by seed, in seed enumeration order. Seeds without a
        match are left out.
    """
    seed_list = list(seeds(graph, pattern))

    if parallel and len(seed_list) > 1:
        found: dict[Element, list[Match]] = {}
        with ThreadPoolExecutor(max_workers=min(max_workers, len(seed_list))) as executor:
            futures = {
                executor.submit(search_element, graph, seed, pattern): seed for seed in seed_list
            }
            for future in as_completed(futures):
                # Errors from the graph propagate to the caller unchanged
                found[futures[future]] = future.result()
        result = {seed: found[seed] for seed in seed_list if found[seed]}
    else:
        result = {}
        for seed in seed_list:
            matches = search_element(graph, seed, pattern)
            if matches:
                result[seed] = matches

    logger.debug(
        "Pattern %r: %d matches from %d seeds",
        pattern,
        sum(len(m) for m in result.values()),
        len(seed_list),
    )
    return result
