"""HGNC gene symbol lookup.

Resolves HGNC accessions (``HGNC:1100`` or ``1100``) and previous symbols to
the current approved symbol, using the ``hgnc_complete_set.txt`` table
published by HGNC.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Optional
from urllib.request import urlretrieve

from sif_miner.retry import RetryHandler

logger = logging.getLogger(__name__)

# HGNC mapping download URL
HGNC_MAPPING_URL = (
    "https://storage.googleapis.com/public-download-files/hgnc/tsv/tsv/hgnc_complete_set.txt"
)
HGNC_MAPPING_FILE = "hgnc_complete_set.txt"


def _normalize_accession(accession: str) -> str:
    accession = accession.strip()
    if accession.upper().startswith("HGNC:"):
        return f"HGNC:{accession[5:].strip()}"
    if accession.isdigit():
        return f"HGNC:{accession}"
    return accession


class HGNCSymbolTable:
    """In-memory HGNC accession to symbol table."""

    def __init__(
        self,
        symbols: Mapping[str, str] | None = None,
        previous_symbols: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the table.

        Args:
            symbols: HGNC ID (``HGNC:1100``) to approved symbol.
            previous_symbols: Withdrawn or previous symbol to approved symbol.
        """
        self._symbols = {_normalize_accession(k): v for k, v in (symbols or {}).items()}
        self._approved = {v.upper(): v for v in self._symbols.values()}
        self._previous = {k.upper(): v for k, v in (previous_symbols or {}).items()}

    def __len__(self) -> int:
        return len(self._symbols)

    def symbol_for(self, accession: str) -> Optional[str]:
        """Return the approved symbol for an HGNC ID or a current/previous symbol."""
        key = _normalize_accession(accession)
        if key.startswith("HGNC:"):
            return self._symbols.get(key)
        upper = key.upper()
        return self._approved.get(upper) or self._previous.get(upper)

    @classmethod
    def from_file(cls, path: Path) -> HGNCSymbolTable:
        """Load the HGNC complete set TSV."""
        symbols: dict[str, str] = {}
        previous: dict[str, str] = {}

        with path.open("r", encoding="utf-8") as f:
            reader = csv.DictReader(f, delimiter="\t")
            for row in reader:
                hgnc_id = (row.get("hgnc_id") or "").strip()
                symbol = (row.get("symbol") or "").strip()
                if not hgnc_id or not symbol:
                    continue
                symbols[hgnc_id] = symbol
                for old in (row.get("prev_symbol") or "").strip('"').split("|"):
                    old = old.strip()
                    # Previous symbols can be reused by other genes; first one wins
                    if old and old not in previous:
                        previous[old] = symbol

        logger.debug("Loaded %d HGNC symbols from %s", len(symbols), path)
        return cls(symbols, previous)

    @staticmethod
    def download(data_dir: Path, force: bool = False, retry: RetryHandler | None = None) -> Path:
        """Download the HGNC complete set into ``data_dir/hgnc``.

        Raises:
            DownloadError: If download fails after retries.
        """
        target_dir = data_dir / "hgnc"
        target_dir.mkdir(parents=True, exist_ok=True)

        mapping_path = target_dir / HGNC_MAPPING_FILE

        if not force and mapping_path.exists():
            return mapping_path

        handler = retry or RetryHandler()
        handler.execute(
            lambda: urlretrieve(HGNC_MAPPING_URL, mapping_path),
            operation_name="Download HGNC mapping",
        )
        return mapping_path
