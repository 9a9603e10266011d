"""CLI entry point for the SIF relation miner.

Usage:
    uv run python -m sif_miner --graph model.yaml
    uv run python -m sif_miner --graph model.yaml --types controls-state-change-of
    uv run python -m sif_miner --graph model.yaml --mediators --output network.sif
    uv run python -m sif_miner --download-hgnc
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sif_miner.config import Config
    from sif_miner.graph import InMemoryGraph
    from sif_miner.miner.searcher import RelationSearcher
    from sif_miner.protocol import MinerStats


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the miner."""
    parser = argparse.ArgumentParser(
        prog="sif_miner",
        description="Mine pairwise relations (SIF) from a molecular interaction graph",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Mine every relation type, write to stdout
    uv run python -m sif_miner --graph model.yaml

    # Select relation types and keep mediator URIs
    uv run python -m sif_miner --graph model.yaml \\
        --types controls-state-change-of,in-complex-with --mediators

    # Skip common small molecules
    uv run python -m sif_miner --graph model.yaml --ubique ubique.txt

    # Fetch the HGNC symbol table into the data dir
    uv run python -m sif_miner --download-hgnc

    # List relation types
    uv run python -m sif_miner --list-types
""",
    )

    parser.add_argument("--graph", type=Path, help="Graph model (YAML)")
    parser.add_argument(
        "--types",
        type=str,
        help="Comma-separated relation types to mine (default: all)",
    )
    parser.add_argument(
        "--ubique",
        type=Path,
        help="File of ubiquitous molecule URIs, one per line",
    )
    parser.add_argument("--hgnc", type=Path, help="HGNC complete set TSV")
    parser.add_argument("--output", "-o", type=Path, help="Output file (default: stdout)")
    parser.add_argument(
        "--mediators",
        action="store_true",
        help="Append mediator URIs to each relation",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Run miners on a thread pool",
    )
    parser.add_argument(
        "--download-hgnc",
        action="store_true",
        help="Download the HGNC symbol table and exit",
    )
    parser.add_argument(
        "--force-download",
        action="store_true",
        help="Re-download even if the file exists",
    )
    parser.add_argument("--env", type=Path, help="Path to .env file (default: .env)")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--list-types",
        action="store_true",
        help="List relation types and exit",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.list_types:
        return _list_types()

    # Load configuration
    try:
        from sif_miner.config import Config, parse_relation_types

        config = Config.from_env(args.env)
        if args.types:
            config.relation_types = parse_relation_types(args.types)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    if args.hgnc:
        config.hgnc_file = args.hgnc
    if args.ubique:
        config.ubique_file = args.ubique
    if args.mediators:
        config.with_mediators = True
    if args.parallel:
        config.parallel = True

    if args.download_hgnc:
        return _download_hgnc(config, force=args.force_download)

    if args.graph is None:
        parser.error("--graph is required")

    return _mine(config, args.graph, args.output, verbose=args.verbose)


def _list_types() -> int:
    """List all relation types."""
    from sif_miner.miner.relation import RelationType

    print("\nRelation Types:")
    print("=" * 60)
    for relation_type in RelationType:
        kind = "directed" if relation_type.directed else "undirected"
        print(f"  {relation_type.tag:30} {kind}")
    print()
    return 0


def _download_hgnc(config: Config, force: bool) -> int:
    from sif_miner.hgnc import HGNCSymbolTable
    from sif_miner.retry import DownloadError, RetryHandler

    retry = RetryHandler(
        max_retries=config.max_retries,
        initial_delay=config.retry_initial_delay,
        max_delay=config.retry_max_delay,
    )
    try:
        path = HGNCSymbolTable.download(config.data_dir, force=force, retry=retry)
    except DownloadError as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        return 1
    print(f"✓ HGNC table at {path}", file=sys.stderr)
    return 0


def _mine(config: Config, graph_path: Path, output: Path | None, verbose: bool) -> int:
    from sif_miner.graph import GraphFormatError, InMemoryGraph
    from sif_miner.hgnc import HGNCSymbolTable
    from sif_miner.miner.ids import DefaultIDResolver
    from sif_miner.miner.searcher import RelationSearcher

    try:
        graph = InMemoryGraph.from_yaml(graph_path)
        ubique_ids = config.load_ubique_ids()
    except (OSError, GraphFormatError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    hgnc_path = config.hgnc_path()
    if hgnc_path.exists():
        symbols = HGNCSymbolTable.from_file(hgnc_path)
    else:
        print(
            f"⚠ No HGNC table at {hgnc_path}; only chemicals will be named. "
            "Run with --download-hgnc first.",
            file=sys.stderr,
        )
        symbols = HGNCSymbolTable()

    searcher = RelationSearcher(
        config.relation_types,
        resolver=DefaultIDResolver(symbols),
        ubique_ids=ubique_ids,
        parallel=config.parallel,
        max_workers=config.max_workers,
    )

    start_time = time.time()
    if output is None:
        ok = searcher.write(graph, sys.stdout, with_mediators=config.with_mediators)
    else:
        ok = _write_file(searcher, graph, output, config.with_mediators)
    elapsed = time.time() - start_time

    if verbose:
        _print_summary(searcher.stats, elapsed)

    if not ok:
        print("✗ No relations written", file=sys.stderr)
        return 1
    return 0


def _write_file(
    searcher: RelationSearcher, graph: InMemoryGraph, output: Path, with_mediators: bool
) -> bool:
    try:
        with output.open("w", encoding="utf-8") as out:
            return searcher.write(graph, out, with_mediators=with_mediators)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return False


def _print_summary(stats: list[MinerStats], elapsed: float) -> None:
    """Print execution summary."""
    print(file=sys.stderr)
    print("Summary:", file=sys.stderr)
    for stat in stats:
        print(f"  {stat}", file=sys.stderr)
    print(f"  total: {elapsed:.1f}s", file=sys.stderr)


if __name__ == "__main__":
    raise SystemExit(main())
