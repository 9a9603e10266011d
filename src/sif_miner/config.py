"""Configuration management for the miner.

This module handles loading configuration from environment variables
and .env files.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from sif_miner.hgnc import HGNC_MAPPING_FILE
from sif_miner.miner.relation import RelationType

logger = logging.getLogger(__name__)

# Trailing comment: a "#" preceded by whitespace
_INLINE_COMMENT = re.compile(r"\s+#.*$")


def _all_types() -> list[RelationType]:
    return list(RelationType)


@dataclass
class Config:
    """Miner configuration loaded from environment."""

    # Paths
    data_dir: Path = field(default_factory=lambda: Path("./data"))
    hgnc_file: Path | None = None
    ubique_file: Path | None = None

    # Mining options
    relation_types: list[RelationType] = field(default_factory=_all_types)
    with_mediators: bool = False
    parallel: bool = False
    max_workers: int = 4

    # Retry settings (downloads only)
    max_retries: int = 3
    retry_initial_delay: float = 2.0
    retry_max_delay: float = 60.0

    @classmethod
    def from_env(cls, env_file: Path | None = None) -> Config:
        """Load configuration from environment variables and optional .env file.

        Args:
            env_file: Optional path to .env file. If None, looks for .env in cwd.

        Returns:
            Config instance with values from environment.

        Raises:
            ValueError: If a value cannot be parsed.
        """
        if env_file is None:
            env_file = Path(".env")

        if env_file.exists():
            _load_dotenv(env_file)

        hgnc_file = os.environ.get("SIF_HGNC_FILE") or None
        ubique_file = os.environ.get("SIF_UBIQUE_FILE") or None
        types = os.environ.get("SIF_TYPES") or None

        return cls(
            data_dir=Path(os.environ.get("SIF_DATA_DIR", "./data")),
            hgnc_file=Path(hgnc_file) if hgnc_file else None,
            ubique_file=Path(ubique_file) if ubique_file else None,
            relation_types=parse_relation_types(types) if types else _all_types(),
            with_mediators=_parse_bool(os.environ.get("SIF_WITH_MEDIATORS", "false")),
            parallel=_parse_bool(os.environ.get("SIF_PARALLEL", "false")),
            max_workers=int(os.environ.get("SIF_MAX_WORKERS", "4")),
            max_retries=int(os.environ.get("SIF_MAX_RETRIES", "3")),
            retry_initial_delay=float(os.environ.get("SIF_RETRY_DELAY", "2.0")),
            retry_max_delay=float(os.environ.get("SIF_RETRY_MAX_DELAY", "60.0")),
        )

    def hgnc_path(self) -> Path:
        """Path of the HGNC table, defaulting to the download location."""
        return self.hgnc_file or self.data_dir / "hgnc" / HGNC_MAPPING_FILE

    def load_ubique_ids(self) -> frozenset[str]:
        """Read the ubiquitous molecule IDs, or an empty set if none configured."""
        if self.ubique_file is None:
            return frozenset()
        return load_id_set(self.ubique_file)


def parse_relation_types(text: str) -> list[RelationType]:
    """Parse a comma-separated list of relation type tags.

    Raises:
        ValueError: On an unknown tag.
    """
    return [RelationType.from_tag(part) for part in text.split(",") if part.strip()]


def load_id_set(path: Path) -> frozenset[str]:
    """Read one ID per line, ignoring blank lines and ``#`` comments.

    A line is a comment when it starts with ``#``; otherwise only a ``#``
    after whitespace starts a trailing comment, so URIs such as
    ``http://example.org/model#SmallMoleculeReference1`` are kept whole.
    """
    ids: set[str] = set()
    with path.open(encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            line = _INLINE_COMMENT.sub("", line)
            if line:
                ids.add(line)
    return frozenset(ids)


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off", ""}:
        return False
    raise ValueError(f"Invalid boolean value '{value}'")


def _load_dotenv(path: Path) -> None:
    """Simple .env file loader (no external dependencies).

    Parses KEY=VALUE lines, ignoring comments and empty lines.
    Does not override existing environment variables.
    """
    try:
        with path.open() as f:
            for line in f:
                line = line.strip()
                # Skip comments and empty lines
                if not line or line.startswith("#"):
                    continue
                # Parse KEY=VALUE
                if "=" in line:
                    key, _, value = line.partition("=")
                    key = key.strip()
                    value = value.strip()
                    # Remove quotes if present
                    if value.startswith('"') and value.endswith('"'):
                        value = value[1:-1]
                    elif value.startswith("'") and value.endswith("'"):
                        value = value[1:-1]
                    # Don't override existing env vars
                    if key and key not in os.environ:
                        os.environ[key] = value
    except OSError as e:
        logger.warning("Could not read %s: %s", path, e)
