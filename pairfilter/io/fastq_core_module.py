#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Core FASTQ I/O module for PairFilter.

Consolidated module containing:
- Raw FASTQ record structure (FastqRecord) with derived tile/read ids
- Header parsing for Illumina-style colon-delimited identifiers
- Four-line record reader over a byte stream (FastqRecordReader)
- File helpers with automatic gzip detection and output path inference

Records keep the exact bytes that were read so that writing them back out
is a verbatim passthrough; nothing is re-formatted or trimmed.
"""

# =============================================================================
# SECTION 1: IMPORTS AND DEPENDENCIES
# =============================================================================

import gzip
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Tuple, Union

from ..errors import FastqIOError, HeaderFormatError

logger = logging.getLogger(__name__)

LINES_PER_RECORD = 4

# 0-based index of the tile field in "@instrument:run:flowcell:lane:tile:x:y"
TILE_FIELD_INDEX = 4

# Header bytes and exclusion files are decoded with the same codec so that
# derived read ids and excluded ids compare byte for byte.
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"

KEPT_SUFFIX = "_filtered.fastq"
FILTERED_SUFFIX = "_filtered_reads.fastq"

# Checked in order; the first match is stripped when deriving output paths
INPUT_SUFFIXES = (".fastq.gz", ".fq.gz", ".fastq", ".fq", ".gz")

GZIP_MAGIC = b"\x1f\x8b"


def decode_text(raw: bytes) -> str:
    """Decode header or identifier bytes with the shared codec."""
    return raw.decode(TEXT_ENCODING, TEXT_ERRORS)


# =============================================================================
# SECTION 2: CORE RECORD DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class FastqRecord:
    """
    One FASTQ record exactly as read from its stream.

    Attributes:
        header: Header line bytes (starts with '@', line terminator included)
        sequence: Sequence line bytes
        separator: Separator line bytes (starts with '+')
        quality: Quality line bytes
        read_id: Header text up to the first space, sigil included
        tile_id: 5th colon-delimited field of read_id
        ordinal: 1-based position of the record in its stream
    """
    header: bytes
    sequence: bytes
    separator: bytes
    quality: bytes
    read_id: str
    tile_id: str
    ordinal: int = 0

    @property
    def lines(self) -> Tuple[bytes, bytes, bytes, bytes]:
        """The four raw lines in file order."""
        return (self.header, self.sequence, self.separator, self.quality)

    @property
    def sequence_length(self) -> int:
        """Number of characters in the sequence line, line terminator excluded."""
        return len(decode_text(self.sequence.rstrip(b"\r\n")))

    def to_bytes(self) -> bytes:
        """Concatenate the four raw lines."""
        return b"".join(self.lines)

    def __repr__(self) -> str:
        return (f"FastqRecord(read_id='{self.read_id}', tile_id='{self.tile_id}', "
                f"length={self.sequence_length}, ordinal={self.ordinal})")


@dataclass(frozen=True)
class RecordPair:
    """
    Mate-1 and mate-2 records read in the same iteration.

    Attributes:
        read1: Record from the mate-1 stream
        read2: Record from the mate-2 stream at the same ordinal
    """
    read1: FastqRecord
    read2: FastqRecord

    @property
    def ordinal(self) -> int:
        """Pair number (shared by both mates)."""
        return self.read1.ordinal

    def __repr__(self) -> str:
        return (f"RecordPair(#{self.ordinal}, R1={self.read1.sequence_length}bp, "
                f"R2={self.read2.sequence_length}bp)")


# =============================================================================
# SECTION 3: HEADER PARSING
# =============================================================================

def parse_header(
    header: bytes,
    source: Optional[str] = None,
    ordinal: Optional[int] = None
) -> Tuple[str, str]:
    """
    Derive (read_id, tile_id) from a FASTQ header line.

    Args:
        header: Raw header line
        source: Stream name, used in error messages
        ordinal: Record number, used in error messages

    Returns:
        Tuple of (read_id, tile_id)

    Raises:
        HeaderFormatError: No space in the header, or fewer than five
            colon-delimited fields before the first space

    Examples:
        >>> parse_header(b"@M1:55:000-A:1:1101:15589:1331 1:N:0:1\\n")
        ('@M1:55:000-A:1:1101:15589:1331', '1101')
    """
    text = decode_text(header)
    space = text.find(" ")

    if space < 0:
        raise HeaderFormatError(text.rstrip("\r\n"), "no space in header",
                                source=source, ordinal=ordinal)

    read_id = text[:space]
    fields = read_id.split(":")

    if len(fields) <= TILE_FIELD_INDEX:
        raise HeaderFormatError(
            text.rstrip("\r\n"),
            f"expected at least {TILE_FIELD_INDEX + 1} ':'-delimited fields, found {len(fields)}",
            source=source, ordinal=ordinal
        )

    return read_id, fields[TILE_FIELD_INDEX]


# =============================================================================
# SECTION 4: FILE UTILITIES
# =============================================================================
# Helper functions for file handling with automatic gzip detection

def is_gzipped(filepath: Union[str, Path]) -> bool:
    """
    Check if file is gzip compressed.

    Args:
        filepath: Path to file

    Returns:
        True if file is gzipped
    """
    filepath = Path(filepath)
    return filepath.suffix in ('.gz', '.gzip')


def has_gzip_magic(filepath: Union[str, Path]) -> bool:
    """Check the first two bytes of an existing file for the gzip signature."""
    with open(filepath, 'rb') as f:
        return f.read(len(GZIP_MAGIC)) == GZIP_MAGIC


def open_file(filepath: Union[str, Path], mode: str = 'rb') -> BinaryIO:
    """
    Open file in binary mode with automatic gzip detection.

    Files opened for reading are decompressed when either the suffix or
    the leading magic bytes say gzip (e.g. '.bgz' inputs); files opened
    for writing are compressed by suffix only.

    Args:
        filepath: Path to file
        mode: File mode ('rb' or 'wb')

    Returns:
        Binary file handle
    """
    filepath = Path(filepath)

    if is_gzipped(filepath) or ('r' in mode and has_gzip_magic(filepath)):
        return gzip.open(filepath, mode)
    else:
        return open(filepath, mode)


def infer_output_path(
    output_path: Optional[Union[str, Path]],
    input_path: Union[str, Path],
    suffix: str
) -> Path:
    """
    Return the explicit output path, or derive one from the input path.

    The first matching extension in INPUT_SUFFIXES is stripped from the
    input path and `suffix` is appended.

    Examples:
        >>> infer_output_path(None, "sample_R1.fastq.gz", KEPT_SUFFIX)
        PosixPath('sample_R1_filtered.fastq')
    """
    if output_path is not None:
        return Path(output_path)

    name = str(input_path)
    for extension in INPUT_SUFFIXES:
        if name.endswith(extension):
            name = name[:-len(extension)]
            break

    return Path(name + suffix)


# =============================================================================
# SECTION 5: FASTQ RECORD READER
# =============================================================================

class FastqRecordReader:
    """
    Read four-line FASTQ records from a binary stream.

    A short read at the end of the stream (fewer than four lines left) is
    treated as the normal end of the stream, not as an error.

    Example:
        >>> with FastqRecordReader.open("sample_R1.fastq.gz") as reader:
        ...     for record in reader:
        ...         print(record.read_id, record.tile_id)
    """

    def __init__(self, handle: BinaryIO, source: str = "<stream>", owns_handle: bool = False):
        """
        Initialize reader.

        Args:
            handle: Binary stream positioned at the start of a record
            source: Name used in log and error messages
            owns_handle: Close the handle when the reader is closed
        """
        self.handle = handle
        self.source = source
        self.owns_handle = owns_handle
        self.records_read = 0
        self.exhausted = False

    @classmethod
    def open(cls, filepath: Union[str, Path], source: Optional[str] = None) -> "FastqRecordReader":
        """
        Open a FASTQ file (gzipped or plain) for reading.

        Raises:
            FastqIOError: If the file cannot be opened
        """
        filepath = Path(filepath)

        if not filepath.is_file():
            raise FastqIOError(filepath, "input", "file not found")

        try:
            handle = open_file(filepath, 'rb')
        except OSError as e:
            raise FastqIOError(filepath, "input", str(e)) from e

        logger.debug(f"Opened {filepath} (gzip={is_gzipped(filepath)})")
        return cls(handle, source=source or str(filepath), owns_handle=True)

    def _readline(self) -> bytes:
        try:
            return self.handle.readline()
        except (OSError, EOFError) as e:
            raise FastqIOError(self.source, "input", f"read failed: {e}") from e

    def read_lines(self) -> Optional[Tuple[bytes, bytes, bytes, bytes]]:
        """
        Read the next four raw lines without parsing them.

        Returns:
            The four lines, or None once any of them comes back empty
        """
        lines = tuple(self._readline() for _ in range(LINES_PER_RECORD))

        if not all(lines):
            self.exhausted = True
            return None

        return lines

    def parse_lines(self, lines: Tuple[bytes, bytes, bytes, bytes]) -> FastqRecord:
        """
        Build the next record from four lines returned by read_lines().

        Raises:
            HeaderFormatError: If the header cannot be parsed
        """
        ordinal = self.records_read + 1
        header, sequence, separator, quality = lines
        read_id, tile_id = parse_header(header, source=self.source, ordinal=ordinal)
        self.records_read = ordinal

        return FastqRecord(
            header=header,
            sequence=sequence,
            separator=separator,
            quality=quality,
            read_id=read_id,
            tile_id=tile_id,
            ordinal=ordinal,
        )

    def read_record(self) -> Optional[FastqRecord]:
        """
        Read and parse the next record.

        Returns:
            FastqRecord, or None once any of the four lines comes back empty

        Raises:
            HeaderFormatError: If the header cannot be parsed
        """
        lines = self.read_lines()
        if lines is None:
            return None
        return self.parse_lines(lines)

    def __iter__(self) -> Iterator[FastqRecord]:
        while True:
            record = self.read_record()
            if record is None:
                return
            yield record

    def close(self):
        """Close the underlying handle if this reader opened it."""
        if self.owns_handle and not self.handle.closed:
            self.handle.close()

    def __enter__(self) -> "FastqRecordReader":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"FastqRecordReader(source='{self.source}', records_read={self.records_read})"


def write_record(handle: BinaryIO, record: FastqRecord) -> None:
    """Write a record's four raw lines unchanged."""
    handle.writelines(record.lines)
