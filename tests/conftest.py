#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PairFilter v0.1.0

Pytest configuration and shared fixtures.

Author: PairFilter Development Team
License: Dual License (Academic/Commercial)
"""

import gzip
import pytest
from pathlib import Path
import tempfile
import shutil


INSTRUMENT = "M01234:55:000000000-A1B2C:1"


def make_header(tile="1101", x=1000, y=2000, mate=1):
    """Illumina-style header line for one mate."""
    return f"@{INSTRUMENT}:{tile}:{x}:{y} {mate}:N:0:1\n"


def make_record(tile="1101", x=1000, y=2000, mate=1, length=40, base="A"):
    """One four-line FASTQ record as bytes."""
    return (
        make_header(tile, x, y, mate)
        + base * length + "\n"
        + "+\n"
        + "I" * length + "\n"
    ).encode("ascii")


def make_pair(tile="1101", x=1000, y=2000, len1=40, len2=40):
    """Matching (mate-1, mate-2) records sharing a read id."""
    return (make_record(tile, x, y, mate=1, length=len1, base="A"),
            make_record(tile, x, y, mate=2, length=len2, base="C"))


def read_id_of(tile="1101", x=1000, y=2000):
    return f"@{INSTRUMENT}:{tile}:{x}:{y}"


def write_fastq(path, records, compress=None):
    """Write raw records to a plain or gzipped file (by suffix)."""
    path = Path(path)
    if compress is None:
        compress = path.suffix == ".gz"
    opener = gzip.open if compress else open
    with opener(path, "wb") as f:
        for record in records:
            f.write(record)
    return path


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="pairfilter_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def paired_files(temp_output_dir):
    """
    Gzipped mate files with four pairs:
    1. both mates 40 bp, tile 1101       -> kept at threshold 36
    2. mate-1 20 bp, mate-2 40 bp        -> removed by length
    3. both 40 bp, tile 2101             -> kept unless tile 2101 excluded
    4. both 40 bp, tile 1101, own read id
    """
    pairs = [
        make_pair(tile="1101", x=1, y=1),
        make_pair(tile="1101", x=2, y=2, len1=20, len2=40),
        make_pair(tile="2101", x=3, y=3),
        make_pair(tile="1101", x=4, y=4),
    ]
    r1 = write_fastq(temp_output_dir / "sample_R1.fastq.gz", [p[0] for p in pairs])
    r2 = write_fastq(temp_output_dir / "sample_R2.fastq.gz", [p[1] for p in pairs])
    return r1, r2, pairs


# PairFilter v0.1.0
# Any usage is subject to this software's license.
