#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PairFilter v0.1.0

Exclusion sets — excluded tile ids from configuration and excluded read
ids from a text file, normalised to the form derived from FASTQ headers.

Author: PairFilter Development Team
License: Dual License (Academic/Commercial)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from ..errors import ExclusionFileError
from ..io.fastq_core_module import TEXT_ENCODING, TEXT_ERRORS

logger = logging.getLogger(__name__)

HEADER_SIGIL = "@"


# ============================================================================
#                           NORMALISATION
# ============================================================================

def normalize_read_id(token: str) -> str:
    """
    Bring an identifier to the form of a derived read id.

    Identifiers are stored sigil-prefixed, matching the header text before
    the first space. Both '@M1:55:...' and 'M1:55:...' are accepted.

    Example:
        >>> normalize_read_id('M1:55:000-A:1:1101:15589:1331')
        '@M1:55:000-A:1:1101:15589:1331'
    """
    if token.startswith(HEADER_SIGIL):
        return token
    return HEADER_SIGIL + token


# ============================================================================
#                           SET BUILDERS
# ============================================================================

def build_tile_set(tiles: Iterable[str]) -> frozenset[str]:
    """Build the excluded tile set from literal tile ids."""
    tile_set = frozenset(str(t) for t in tiles)
    if tile_set:
        logger.debug(f"Removing tiles: {sorted(tile_set)}")
    return tile_set


def build_read_set(txt_path: str | Path) -> frozenset[str]:
    """
    Load excluded read ids from a text file.

    Format: one identifier per line; only the first whitespace-delimited
    token of each line is used, so lines copied straight from FASTQ
    headers work as-is.

    Example file:
    @M1:55:000-A:1:1101:15589:1331 1:N:0:1
    M1:55:000-A:1:1101:15590:1402

    Args:
        txt_path: Path to text file with excluded read ids

    Returns:
        Frozen set of normalised read ids

    Raises:
        ExclusionFileError: If the file cannot be opened or read
    """
    txt_path = Path(txt_path)
    logger.debug(f"Removing reads in {txt_path}")

    read_ids: set[str] = set()

    try:
        with open(txt_path, 'r', encoding=TEXT_ENCODING, errors=TEXT_ERRORS) as f:
            for line in f:
                tokens = line.split(None, 1)

                if not tokens:
                    continue

                read_ids.add(normalize_read_id(tokens[0]))
    except OSError as e:
        raise ExclusionFileError(txt_path, e.strerror or str(e)) from e

    logger.info(f"Loaded {len(read_ids)} excluded read ids from {txt_path}")
    return frozenset(read_ids)


# ============================================================================
#                           DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True)
class ExclusionSets:
    """
    Immutable lookup sets consulted by the exclusion rules.

    Attributes:
        tiles: Excluded tile ids
        read_ids: Excluded read ids (sigil-prefixed)
        read_ids_source: File the read ids were loaded from, if any
    """
    tiles: frozenset[str] = field(default_factory=frozenset)
    read_ids: frozenset[str] = field(default_factory=frozenset)
    read_ids_source: Path | None = None

    @classmethod
    def build(
        cls,
        remove_tiles: Iterable[str] = (),
        remove_reads: str | Path | None = None
    ) -> "ExclusionSets":
        """
        Build both sets before the main loop starts.

        Raises:
            ExclusionFileError: If remove_reads is given and cannot be read
        """
        tiles = build_tile_set(remove_tiles)

        if remove_reads is None:
            return cls(tiles=tiles)

        return cls(
            tiles=tiles,
            read_ids=build_read_set(remove_reads),
            read_ids_source=Path(remove_reads),
        )

    @property
    def has_tiles(self) -> bool:
        return bool(self.tiles)

    @property
    def has_read_ids(self) -> bool:
        """True when an exclusion file was configured (even an empty one)."""
        return self.read_ids_source is not None or bool(self.read_ids)
