"""
Read I/O module for PairFilter.

Handles reading FASTQ records from gzipped or plain files and writing
them back out byte for byte.

CONSOLIDATED MODULES:
- fastq_core_module.py: Record structures, header parsing, record reader, file helpers
"""

from .fastq_core_module import (
    FastqRecord,
    RecordPair,
    FastqRecordReader,
    parse_header,
    decode_text,
    is_gzipped,
    has_gzip_magic,
    open_file,
    infer_output_path,
    write_record,
    KEPT_SUFFIX,
    FILTERED_SUFFIX,
)

__all__ = [
    # Core data structures
    "FastqRecord",
    "RecordPair",

    # Parsing and reading
    "FastqRecordReader",
    "parse_header",
    "decode_text",

    # File helpers
    "is_gzipped",
    "has_gzip_magic",
    "open_file",
    "infer_output_path",
    "write_record",
    "KEPT_SUFFIX",
    "FILTERED_SUFFIX",
]
