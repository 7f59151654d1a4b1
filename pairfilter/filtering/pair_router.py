#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PairFilter v0.1.0

Pair router — writes accepted pairs to the kept outputs and rejected
pairs to the filtered outputs, one sink per mate.

Author: PairFilter Development Team
License: Dual License (Academic/Commercial)
"""

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Union

from ..errors import FastqIOError
from ..io.fastq_core_module import RecordPair, open_file, write_record
from .run_stats import RunStats

logger = logging.getLogger(__name__)


class PairRouter:
    """
    Dispatch read pairs to four binary sinks.

    Records are written exactly as read. The router owns its sinks when
    created with PairRouter.open() and closes them on exit.

    Example:
        >>> with PairRouter.open(r1_kept, r2_kept, r1_filtered, r2_filtered) as router:
        ...     router.route(pair, accepted=True, stats=stats)
    """

    def __init__(
        self,
        r1_kept: BinaryIO,
        r2_kept: BinaryIO,
        r1_filtered: BinaryIO,
        r2_filtered: BinaryIO,
        exit_stack: Optional[ExitStack] = None
    ):
        self.r1_kept = r1_kept
        self.r2_kept = r2_kept
        self.r1_filtered = r1_filtered
        self.r2_filtered = r2_filtered
        self._exit_stack = exit_stack

    @classmethod
    def open(
        cls,
        r1_kept: Union[str, Path],
        r2_kept: Union[str, Path],
        r1_filtered: Union[str, Path],
        r2_filtered: Union[str, Path]
    ) -> "PairRouter":
        """
        Create (truncate) the four output files.

        Raises:
            FastqIOError: If any output file cannot be created
        """
        handles = []

        # Already-opened sinks are closed if a later one fails
        with ExitStack() as stack:
            for role, filepath in (("mate-1 kept output", r1_kept),
                                   ("mate-2 kept output", r2_kept),
                                   ("mate-1 filtered output", r1_filtered),
                                   ("mate-2 filtered output", r2_filtered)):
                filepath = Path(filepath)
                try:
                    filepath.parent.mkdir(parents=True, exist_ok=True)
                    handles.append(stack.enter_context(open_file(filepath, 'wb')))
                except OSError as e:
                    raise FastqIOError(filepath, role, e.strerror or str(e)) from e
                logger.debug(f"Opened {role}: {filepath}")
            owned = stack.pop_all()

        return cls(*handles, exit_stack=owned)

    def route(self, pair: RecordPair, accepted: bool, stats: RunStats,
              failed_rules: Iterable[str] = ()):
        """
        Write both mates to the kept or filtered sinks and count the pair.

        Args:
            pair: Read pair to write
            accepted: Whether the pair passed the predicate chain
            stats: Counters to update
            failed_rules: Names of failed rules, counted for rejected pairs
        """
        if accepted:
            write_record(self.r1_kept, pair.read1)
            write_record(self.r2_kept, pair.read2)
            stats.record_remaining()
        else:
            write_record(self.r1_filtered, pair.read1)
            write_record(self.r2_filtered, pair.read2)
            stats.record_removed(failed_rules)

    def flush(self):
        for handle in (self.r1_kept, self.r2_kept, self.r1_filtered, self.r2_filtered):
            handle.flush()

    def close(self):
        """Flush and close owned sinks."""
        if self._exit_stack is not None:
            self.flush()
            self._exit_stack.close()
            self._exit_stack = None

    def __enter__(self) -> "PairRouter":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
