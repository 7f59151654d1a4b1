#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Pair filtering engine for PairFilter.

Walks the mate-1 and mate-2 FASTQ streams in lockstep, evaluates the
predicate chain on every pair, routes each pair to the kept or filtered
outputs and keeps the run counters.

Pair n is read, evaluated, routed and counted before pair n+1 is read.
The run stops as soon as either stream is exhausted; records left on
the longer stream are never routed.
"""

# =============================================================================
# SECTION 1: IMPORTS AND DEPENDENCIES
# =============================================================================

import logging
from contextlib import ExitStack
from typing import Iterator

from ..io.fastq_core_module import FastqRecordReader, RecordPair
from .exclusion_utility import ExclusionSets
from .pair_router import PairRouter
from .predicates import PredicateChain, build_predicate_chain
from .run_stats import RunStats, write_stats_file

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 1_000_000


# =============================================================================
# SECTION 2: DUAL-STREAM READER
# =============================================================================

def iter_record_pairs(
    reader1: FastqRecordReader,
    reader2: FastqRecordReader
) -> Iterator[RecordPair]:
    """
    Yield mate pairs until either stream runs out.

    Each step reads four lines from mate-1, then four from mate-2. Headers
    are parsed only once both quadruplets are present, so the leftover
    record of the longer stream is never parsed. A count mismatch between
    the streams is not an error.

    Yields:
        RecordPair objects in stream order
    """
    while True:
        lines1 = reader1.read_lines()
        lines2 = reader2.read_lines()

        if lines1 is None or lines2 is None:
            if lines1 is not None or lines2 is not None:
                longer = reader1 if lines1 is not None else reader2
                logger.warning(
                    f"Mate streams have different lengths: stopped after "
                    f"{min(reader1.records_read, reader2.records_read)} pairs, "
                    f"{longer.source} has unread records"
                )
            return

        yield RecordPair(reader1.parse_lines(lines1), reader2.parse_lines(lines2))


# =============================================================================
# SECTION 3: MAIN LOOP
# =============================================================================

def filter_pairs(
    reader1: FastqRecordReader,
    reader2: FastqRecordReader,
    chain: PredicateChain,
    router: PairRouter,
    stats: RunStats
) -> RunStats:
    """
    Filter every pair from the two readers.

    Args:
        reader1: Mate-1 record reader
        reader2: Mate-2 record reader
        chain: Rules every kept pair must pass
        router: Destination for kept and filtered pairs
        stats: Counters updated once per pair

    Returns:
        The updated stats

    Raises:
        HeaderFormatError: On the first malformed header; pairs already
            routed stay in their outputs
    """
    for pair in iter_record_pairs(reader1, reader2):
        stats.record_checked()

        failed = chain.failed_rules(pair)
        router.route(pair, accepted=not failed, stats=stats, failed_rules=failed)

        if stats.checked % PROGRESS_INTERVAL == 0:
            logger.info(f"Checked {stats.checked:,} read pairs ({stats.removed:,} removed)")

    return stats


# =============================================================================
# SECTION 4: RUNNER
# =============================================================================

class PairFilterRunner:
    """
    Run a complete filtering job from a FilterSettings value.

    Setup errors (unreadable inputs, outputs or exclusion file) are raised
    before any record is processed.

    Example:
        >>> settings = ConfigParser('filter.yaml').to_settings()
        >>> stats = PairFilterRunner(settings).run()
        >>> print(stats.summary())
    """

    def __init__(self, settings):
        """
        Initialize runner.

        Args:
            settings: FilterSettings for this run
        """
        self.settings = settings

    def build_chain(self) -> PredicateChain:
        """
        Build exclusion sets and the predicate chain.

        Raises:
            ExclusionFileError: If the exclusion file cannot be read
        """
        settings = self.settings

        exclusions = ExclusionSets.build(settings.remove_tiles, settings.remove_reads)
        return build_predicate_chain(settings.threshold, exclusions)

    def run(self) -> RunStats:
        """
        Filter all pairs and write the stats file if one is configured.

        Returns:
            Final RunStats
        """
        settings = self.settings
        logger.info("Starting")

        for name, value in (("trim_r1", settings.trim_r1), ("trim_r2", settings.trim_r2)):
            if value is not None:
                logger.warning(f"{name}={value} is accepted but not applied; records are written unchanged")

        chain = self.build_chain()
        stats = RunStats.from_settings(settings, chain.rule_names)

        with ExitStack() as stack:
            reader1 = stack.enter_context(FastqRecordReader.open(settings.r1_input))
            reader2 = stack.enter_context(FastqRecordReader.open(settings.r2_input))
            router = stack.enter_context(PairRouter.open(
                settings.r1_kept, settings.r2_kept,
                settings.r1_filtered, settings.r2_filtered,
            ))

            filter_pairs(reader1, reader2, chain, router, stats)

        logger.info(
            f"Finished: {stats.checked:,} pairs checked, {stats.removed:,} removed, "
            f"{stats.remaining:,} remaining"
        )

        if settings.stats_file is not None:
            write_stats_file(stats, settings.stats_file)

        return stats
