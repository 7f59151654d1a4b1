#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PairFilter v0.1.0

Predicate chain — ordered accept/reject rules evaluated against each
read pair.

Author: PairFilter Development Team
License: Dual License (Academic/Commercial)
"""

import logging
from abc import ABC, abstractmethod
from typing import FrozenSet, List, Sequence, Tuple

from ..io.fastq_core_module import RecordPair
from .exclusion_utility import ExclusionSets

logger = logging.getLogger(__name__)

DEFAULT_LENGTH_THRESHOLD = 36


# =============================================================================
# RULES
# =============================================================================

class PairRule(ABC):
    """
    Abstract base class for pair acceptance rules.

    Rules must be pure functions of the pair's record fields. Subclasses
    implement evaluate() and set a short `name` used in the stats report.
    """

    name: str = "rule"

    @abstractmethod
    def evaluate(self, pair: RecordPair) -> bool:
        """
        Decide whether a pair passes this rule.

        Args:
            pair: Read pair to check

        Returns:
            True if the pair passes
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class LengthThreshold(PairRule):
    """Both mate sequences must be strictly longer than the threshold."""

    name = "length_threshold"

    def __init__(self, threshold: int = DEFAULT_LENGTH_THRESHOLD):
        if threshold < 0:
            raise ValueError(f"Length threshold must be >= 0, got {threshold}")
        self.threshold = threshold

    def evaluate(self, pair: RecordPair) -> bool:
        return (pair.read1.sequence_length > self.threshold
                and pair.read2.sequence_length > self.threshold)

    def __repr__(self) -> str:
        return f"LengthThreshold(threshold={self.threshold})"


class TileExclusion(PairRule):
    """
    Mate-1 tile id must not be excluded.

    Mate-2 is not consulted: both mates come from the same cluster and so
    the same tile.
    """

    name = "tile_exclusion"

    def __init__(self, tiles: FrozenSet[str]):
        self.tiles = frozenset(tiles)

    def evaluate(self, pair: RecordPair) -> bool:
        return pair.read1.tile_id not in self.tiles

    def __repr__(self) -> str:
        return f"TileExclusion(tiles={sorted(self.tiles)})"


class ReadExclusion(PairRule):
    """Mate-1 read id must not be excluded. Mate-2's id is never checked."""

    name = "read_exclusion"

    def __init__(self, read_ids: FrozenSet[str]):
        self.read_ids = frozenset(read_ids)

    def evaluate(self, pair: RecordPair) -> bool:
        return pair.read1.read_id not in self.read_ids

    def __repr__(self) -> str:
        return f"ReadExclusion(n_read_ids={len(self.read_ids)})"


# =============================================================================
# CHAIN
# =============================================================================

class PredicateChain:
    """
    Ordered list of rules combined with logical AND.

    Every rule is evaluated for every pair; there is no short-circuit on
    the first failure.
    """

    def __init__(self, rules: Sequence[PairRule]):
        self.rules: Tuple[PairRule, ...] = tuple(rules)

    @property
    def rule_names(self) -> List[str]:
        return [rule.name for rule in self.rules]

    def results(self, pair: RecordPair) -> List[Tuple[str, bool]]:
        """Evaluate all rules, returning (name, passed) in chain order."""
        return [(rule.name, rule.evaluate(pair)) for rule in self.rules]

    def failed_rules(self, pair: RecordPair) -> List[str]:
        """Names of the rules the pair fails."""
        return [name for name, passed in self.results(pair) if not passed]

    def evaluate(self, pair: RecordPair) -> bool:
        """True iff the pair passes every rule."""
        accepted = True
        for _, passed in self.results(pair):
            if not passed:
                accepted = False
        return accepted

    def __len__(self) -> int:
        return len(self.rules)

    def __repr__(self) -> str:
        return f"PredicateChain({list(self.rules)})"


def build_predicate_chain(
    threshold: int = DEFAULT_LENGTH_THRESHOLD,
    exclusions: ExclusionSets = None
) -> PredicateChain:
    """
    Build the chain in its fixed order.

    The length rule is always first; the tile rule is appended when tile
    ids are configured, then the read rule when an exclusion file is
    configured.

    Args:
        threshold: Minimum sequence length (exclusive) for both mates
        exclusions: Excluded tiles and read ids

    Returns:
        PredicateChain
    """
    rules: List[PairRule] = [LengthThreshold(threshold)]

    if exclusions is not None:
        if exclusions.has_tiles:
            rules.append(TileExclusion(exclusions.tiles))
        if exclusions.has_read_ids:
            rules.append(ReadExclusion(exclusions.read_ids))

    logger.debug(f"Predicate chain: {', '.join(rule.name for rule in rules)}")
    return PredicateChain(rules)
