#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PairFilter v0.1.0

Run statistics — pair counters accumulated by the filter loop and the
plain-text report written at the end of a run.

Author: PairFilter Development Team
License: Dual License (Academic/Commercial)
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..errors import StatsWriteError
from ..io.fastq_core_module import TEXT_ENCODING, TEXT_ERRORS
from .predicates import DEFAULT_LENGTH_THRESHOLD

logger = logging.getLogger(__name__)

# Report keys for the six file roles, in report order
PATH_ROLES = ("r1i", "r1o", "r1f", "r2i", "r2o", "r2f")


@dataclass
class RunStats:
    """
    Counters for one filtering run plus the configuration echoed in the report.

    Invariant: checked == removed + remaining once each checked pair has
    been routed.
    """

    # Pair counters
    checked: int = 0
    removed: int = 0
    remaining: int = 0

    # Per-rule rejections (a pair failing two rules counts for both)
    rejections_by_rule: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    # Configuration echoes
    paths: Dict[str, Optional[Path]] = field(default_factory=dict)
    threshold: int = DEFAULT_LENGTH_THRESHOLD
    remove_tiles: Tuple[str, ...] = ()
    remove_reads: Optional[Path] = None
    rule_names: List[str] = field(default_factory=list)

    @classmethod
    def from_settings(cls, settings, rule_names: Iterable[str] = ()) -> "RunStats":
        """Create empty counters echoing a FilterSettings value."""
        return cls(
            paths=dict(zip(PATH_ROLES, (
                settings.r1_input, settings.r1_kept, settings.r1_filtered,
                settings.r2_input, settings.r2_kept, settings.r2_filtered,
            ))),
            threshold=settings.threshold,
            remove_tiles=tuple(settings.remove_tiles),
            remove_reads=settings.remove_reads,
            rule_names=list(rule_names),
        )

    def record_checked(self):
        self.checked += 1

    def record_remaining(self):
        self.remaining += 1

    def record_removed(self, failed_rules: Iterable[str] = ()):
        self.removed += 1
        for name in failed_rules:
            self.rejections_by_rule[name] += 1

    @property
    def is_consistent(self) -> bool:
        return self.checked == self.removed + self.remaining

    def get_removal_rate(self) -> float:
        """Percentage of checked pairs that were removed (0-100)."""
        if self.checked == 0:
            return 0.0
        return (self.removed / self.checked) * 100

    def render(self) -> str:
        """
        Render the stats report as newline-separated `key value` lines.

        Returns:
            Report text, ending with a newline
        """
        lines = [f"{role} {self.paths.get(role)}" for role in PATH_ROLES]
        lines.extend([
            f"read_pairs_checked {self.checked}",
            f"read_pairs_removed {self.removed}",
            f"read_pairs_remaining {self.remaining}",
            f"filter_threshold {self.threshold}",
        ])

        if self.remove_tiles:
            lines.append(f"remove_tiles {','.join(sorted(set(self.remove_tiles)))}")

        if self.remove_reads is not None:
            lines.append(f"remove_reads {self.remove_reads}")

        for name in self.rule_names:
            lines.append(f"rejected_by_{name} {self.rejections_by_rule.get(name, 0)}")

        return "\n".join(lines) + "\n"

    def as_dict(self) -> Dict[str, Any]:
        return {
            'read_pairs_checked': self.checked,
            'read_pairs_removed': self.removed,
            'read_pairs_remaining': self.remaining,
            'filter_threshold': self.threshold,
            'removal_rate': self.get_removal_rate(),
            'rejections_by_rule': {name: self.rejections_by_rule.get(name, 0)
                                   for name in self.rule_names},
        }

    def summary(self) -> str:
        """
        Get a human-readable summary of the run.

        Returns:
            Multi-line string with summary
        """
        lines = [
            "=" * 60,
            "PAIR FILTER SUMMARY",
            "=" * 60,
            f"Pairs checked:         {self.checked:,}",
            f"Pairs removed:         {self.removed:,} ({self.get_removal_rate():.1f}%)",
            f"Pairs remaining:       {self.remaining:,}",
            f"Length threshold:      {self.threshold}",
        ]

        if self.rule_names:
            lines.append("")
            lines.append("Rejections by rule:")
            for name in self.rule_names:
                lines.append(f"  {name:<20} {self.rejections_by_rule.get(name, 0):,}")

        lines.append("=" * 60)
        return "\n".join(lines)


def write_stats_file(stats: RunStats, filepath: Union[str, Path]) -> Path:
    """
    Write the rendered report to a file.

    Raises:
        StatsWriteError: If the file cannot be created or written
    """
    filepath = Path(filepath)
    report = stats.render()

    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding=TEXT_ENCODING, errors=TEXT_ERRORS) as f:
            f.write(report)
    except OSError as e:
        raise StatsWriteError(filepath, e.strerror or str(e)) from e

    logger.info(f"Wrote stats file: {filepath}")
    return filepath
