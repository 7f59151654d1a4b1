#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PairFilter v0.1.0

Exception hierarchy for pair filtering runs.

Every error raised here is fatal: a run either completes all reachable
pairs or stops at the first error, leaving whatever was already routed
in the output files.

Author: PairFilter Development Team
License: Dual License (Academic/Commercial)
"""

from pathlib import Path
from typing import Optional, Union


class PairFilterError(Exception):
    """Base class for all fatal pair filtering errors."""
    pass


class FastqIOError(PairFilterError):
    """Raised when an input or output FASTQ path cannot be opened."""

    def __init__(self, path: Union[str, Path], role: str, reason: str = ""):
        self.path = Path(path)
        self.role = role
        message = f"Could not open {role} file: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ExclusionFileError(PairFilterError):
    """Raised when the read-id exclusion file cannot be opened or read."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        message = f"Could not build excluded read set from {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class HeaderFormatError(PairFilterError):
    """
    Raised when a FASTQ header has no space or fewer than five
    colon-delimited fields before the first space.

    Attributes:
        header: Offending header line (decoded, without line terminator)
        source: Name of the stream the record came from
        ordinal: 1-based record number within that stream
    """

    def __init__(self, header: str, reason: str,
                 source: Optional[str] = None, ordinal: Optional[int] = None):
        self.header = header
        self.source = source
        self.ordinal = ordinal

        location = ""
        if source is not None:
            location = f" in {source}"
        if ordinal is not None:
            location = f"{location} at record {ordinal}"

        super().__init__(f"Malformed FASTQ header{location}: {reason}: {header!r}")


class StatsWriteError(PairFilterError):
    """Raised when the stats report cannot be written."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        message = f"Could not write stats file: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


__all__ = [
    "PairFilterError",
    "FastqIOError",
    "ExclusionFileError",
    "HeaderFormatError",
    "StatsWriteError",
]

# PairFilter v0.1.0
# Any usage is subject to this software's license.
