#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PairFilter v0.1.0

Tests for excluded tile and read id sets.

Author: PairFilter Development Team
License: Dual License (Academic/Commercial)
"""

import io
import pytest

from pairfilter.errors import ExclusionFileError
from pairfilter.filtering import (
    ExclusionSets,
    build_read_set,
    build_tile_set,
    normalize_read_id,
)
from pairfilter.io import FastqRecordReader

from conftest import make_record, read_id_of


class TestNormalizeReadId:
    """Test read id normalisation."""

    def test_adds_sigil(self):
        assert normalize_read_id("M1:55:A:1:1101:1:1") == "@M1:55:A:1:1101:1:1"

    def test_keeps_existing_sigil(self):
        assert normalize_read_id("@M1:55:A:1:1101:1:1") == "@M1:55:A:1:1101:1:1"


class TestBuildTileSet:
    """Test tile set construction."""

    def test_set_semantics(self):
        assert build_tile_set(["1101", "2101", "1101"]) == frozenset({"1101", "2101"})

    def test_empty(self):
        assert build_tile_set([]) == frozenset()


class TestBuildReadSet:
    """Test loading excluded read ids from a file."""

    def test_first_token_only(self, temp_output_dir):
        path = temp_output_dir / "exclude.txt"
        path.write_text(
            "@M1:55:A:1:1101:1:1 1:N:0:1\n"
            "M1:55:A:1:1101:2:2\textra columns\n"
            "\n"
            "   \n"
            "M1:55:A:1:1101:3:3"
        )

        read_ids = build_read_set(path)

        assert read_ids == frozenset({
            "@M1:55:A:1:1101:1:1",
            "@M1:55:A:1:1101:2:2",
            "@M1:55:A:1:1101:3:3",
        })

    def test_matches_derived_read_id(self, temp_output_dir):
        """Excluded ids compare equal to ids derived by the record parser."""
        record = FastqRecordReader(io.BytesIO(make_record(x=5, y=6))).read_record()
        path = temp_output_dir / "exclude.txt"
        path.write_text(record.header.decode().lstrip("@"))

        assert record.read_id in build_read_set(path)
        assert record.read_id == read_id_of(x=5, y=6)

    def test_missing_file(self, temp_output_dir):
        with pytest.raises(ExclusionFileError) as exc_info:
            build_read_set(temp_output_dir / "nope.txt")

        assert exc_info.value.path == temp_output_dir / "nope.txt"

    def test_directory_is_error(self, temp_output_dir):
        with pytest.raises(ExclusionFileError):
            build_read_set(temp_output_dir)


class TestExclusionSets:
    """Test the combined exclusion sets."""

    def test_defaults_are_empty(self):
        sets = ExclusionSets.build()

        assert not sets.has_tiles
        assert not sets.has_read_ids
        assert sets.read_ids == frozenset()

    def test_empty_exclusion_file_still_configured(self, temp_output_dir):
        path = temp_output_dir / "empty.txt"
        path.write_text("")

        sets = ExclusionSets.build(remove_reads=path)

        assert sets.has_read_ids
        assert sets.read_ids == frozenset()
        assert sets.read_ids_source == path

    def test_immutable(self):
        sets = ExclusionSets.build(["1101"])

        with pytest.raises(AttributeError):
            sets.tiles = frozenset()


# PairFilter v0.1.0
# Any usage is subject to this software's license.
