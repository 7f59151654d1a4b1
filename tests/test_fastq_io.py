#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PairFilter v0.1.0

Tests for FASTQ record parsing, reading and file helpers.

Author: PairFilter Development Team
License: Dual License (Academic/Commercial)
"""

import io
import pytest
from pathlib import Path

from pairfilter.errors import FastqIOError, HeaderFormatError
from pairfilter.io import (
    FastqRecordReader,
    parse_header,
    infer_output_path,
    is_gzipped,
    has_gzip_magic,
    KEPT_SUFFIX,
    FILTERED_SUFFIX,
)

from conftest import make_record, read_id_of, write_fastq


class TestParseHeader:
    """Test derivation of read and tile ids from headers."""

    def test_illumina_header(self):
        """Read id is the text before the first space, tile the 5th field."""
        read_id, tile_id = parse_header(b"@M1:55:000-A:1:1101:15589:1331 1:N:0:1\n")

        assert read_id == "@M1:55:000-A:1:1101:15589:1331"
        assert tile_id == "1101"

    def test_exactly_five_fields(self):
        read_id, tile_id = parse_header(b"@a:b:c:d:2204 extra\n")

        assert read_id == "@a:b:c:d:2204"
        assert tile_id == "2204"

    def test_missing_space_is_error(self):
        with pytest.raises(HeaderFormatError, match="no space"):
            parse_header(b"@M1:55:000-A:1:1101:15589:1331\n")

    def test_too_few_fields_is_error(self):
        with pytest.raises(HeaderFormatError, match="at least 5"):
            parse_header(b"@M1:55:000-A:1 1:N:0:1\n")

    def test_colons_after_space_do_not_count(self):
        """Only fields before the first space are considered."""
        with pytest.raises(HeaderFormatError):
            parse_header(b"@read1 1:N:0:1:extra\n")

    def test_error_reports_location(self):
        with pytest.raises(HeaderFormatError) as exc_info:
            parse_header(b"@bad\n", source="R1.fastq.gz", ordinal=7)

        assert "R1.fastq.gz" in str(exc_info.value)
        assert "record 7" in str(exc_info.value)
        assert exc_info.value.ordinal == 7


class TestFastqRecordReader:
    """Test four-line record reading."""

    def test_reads_all_records(self):
        data = make_record(x=1) + make_record(x=2) + make_record(x=3)
        reader = FastqRecordReader(io.BytesIO(data))

        records = list(reader)

        assert len(records) == 3
        assert [r.ordinal for r in records] == [1, 2, 3]
        assert records[1].read_id == read_id_of(x=2)
        assert reader.records_read == 3

    def test_raw_lines_preserved(self):
        """Records keep their exact bytes, line terminators included."""
        raw = b"@a:b:c:d:1101:1:1 1:N:0:1\r\nACGT  \r\n+a:b comment\r\nIIII\r\n"
        record = FastqRecordReader(io.BytesIO(raw)).read_record()

        assert record.to_bytes() == raw
        assert record.separator == b"+a:b comment\r\n"
        assert record.sequence_length == 6

    def test_sequence_length_excludes_newline(self):
        record = FastqRecordReader(io.BytesIO(make_record(length=36))).read_record()

        assert record.sequence_length == 36

    def test_no_sequence_quality_validation(self):
        """Quality length is not compared to sequence length."""
        raw = b"@a:b:c:d:1101:1:1 x\nACGTACGT\n+\nII\n"
        record = FastqRecordReader(io.BytesIO(raw)).read_record()

        assert record.sequence_length == 8

    def test_empty_stream(self):
        reader = FastqRecordReader(io.BytesIO(b""))

        assert reader.read_record() is None
        assert reader.exhausted

    def test_truncated_record_is_end_of_stream(self):
        """Fewer than four lines at the end is a plain stream end."""
        data = make_record(x=1) + b"@a:b:c:d:1101:2:2 1:N:0:1\nACGT\n"
        reader = FastqRecordReader(io.BytesIO(data))

        assert reader.read_record() is not None
        assert reader.read_record() is None

    def test_truncated_record_with_bad_header_is_not_parsed(self):
        reader = FastqRecordReader(io.BytesIO(b"@nospace\nACGT\n+\n"))

        assert reader.read_record() is None

    def test_read_lines_does_not_parse(self):
        """Raw lines come back unparsed; the ordinal advances only on parsing."""
        reader = FastqRecordReader(io.BytesIO(b"@nospace\nACGT\n+\nIIII\n" + make_record(x=2)))

        lines = reader.read_lines()
        assert lines == (b"@nospace\n", b"ACGT\n", b"+\n", b"IIII\n")
        assert reader.records_read == 0

        record = reader.parse_lines(reader.read_lines())
        assert record.ordinal == 1
        assert reader.read_lines() is None

    def test_bad_header_raises(self):
        data = make_record(x=1) + b"@broken_header\nACGT\n+\nIIII\n"
        reader = FastqRecordReader(io.BytesIO(data), source="mate1")

        assert reader.read_record() is not None
        with pytest.raises(HeaderFormatError) as exc_info:
            reader.read_record()

        assert exc_info.value.ordinal == 2
        assert exc_info.value.source == "mate1"

    def test_open_gzipped(self, temp_output_dir):
        path = write_fastq(temp_output_dir / "reads.fastq.gz", [make_record(x=1), make_record(x=2)])

        with FastqRecordReader.open(path) as reader:
            records = list(reader)

        assert len(records) == 2
        assert reader.handle.closed

    def test_open_gzip_without_gz_suffix(self, temp_output_dir):
        """Gzip content is detected by its magic bytes when the suffix does not say so."""
        path = write_fastq(temp_output_dir / "reads.fastq.bgz", [make_record(x=1)], compress=True)

        with FastqRecordReader.open(path) as reader:
            assert reader.read_record().read_id == read_id_of(x=1)

    def test_open_plain(self, temp_output_dir):
        path = write_fastq(temp_output_dir / "reads.fastq", [make_record(x=1)])

        with FastqRecordReader.open(path) as reader:
            assert reader.read_record().tile_id == "1101"

    def test_open_missing_file(self, temp_output_dir):
        with pytest.raises(FastqIOError):
            FastqRecordReader.open(temp_output_dir / "missing.fastq.gz")

    def test_corrupt_gzip_raises_io_error(self, temp_output_dir):
        path = temp_output_dir / "not_really.fastq.gz"
        path.write_bytes(make_record())

        with FastqRecordReader.open(path) as reader:
            with pytest.raises(FastqIOError):
                reader.read_record()


class TestFileHelpers:
    """Test gzip detection and output path inference."""

    def test_is_gzipped(self):
        assert is_gzipped("reads.fastq.gz")
        assert not is_gzipped("reads.fastq")

    def test_has_gzip_magic(self, temp_output_dir):
        compressed = write_fastq(temp_output_dir / "a.bgz", [make_record()], compress=True)
        plain = write_fastq(temp_output_dir / "b.fastq", [make_record()])

        assert has_gzip_magic(compressed)
        assert not has_gzip_magic(plain)

    @pytest.mark.parametrize("input_path,expected", [
        ("S1_R1.fastq.gz", "S1_R1_filtered.fastq"),
        ("S1_R1.fq.gz", "S1_R1_filtered.fastq"),
        ("S1_R1.fastq", "S1_R1_filtered.fastq"),
        ("dir/S1_R1.gz", "dir/S1_R1_filtered.fastq"),
    ])
    def test_kept_path_derived(self, input_path, expected):
        assert infer_output_path(None, input_path, KEPT_SUFFIX) == Path(expected)

    def test_filtered_path_derived(self):
        derived = infer_output_path(None, "S1_R2.fastq.gz", FILTERED_SUFFIX)

        assert derived == Path("S1_R2_filtered_reads.fastq")

    def test_explicit_path_wins(self):
        assert infer_output_path("out.fq", "S1_R1.fastq.gz", KEPT_SUFFIX) == Path("out.fq")


# PairFilter v0.1.0
# Any usage is subject to this software's license.
