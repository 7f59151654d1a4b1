"""
PairFilter v0.1.0

Configuration schema for PairFilter.

Defines all available configuration parameters with defaults and validation,
and the immutable FilterSettings value consumed by a filtering run.

Author: PairFilter Development Team
License: Dual License (Academic/Commercial)
"""

import copy
from dataclasses import dataclass
from typing import Dict, Any, Optional, List, Tuple
from pathlib import Path
import yaml

from ..io.fastq_core_module import infer_output_path, KEPT_SUFFIX, FILTERED_SUFFIX
from ..filtering.predicates import DEFAULT_LENGTH_THRESHOLD
from .parser import ConfigValidationError


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Input Mate Files (gzipped or plain FASTQ)
    # ========================================================================
    'input': {
        'r1': None,
        'r2': None,
    },

    # ========================================================================
    # Output Files (None = derived from the input file name)
    # ========================================================================
    'output': {
        'r1_kept': None,  # <input>_filtered.fastq
        'r2_kept': None,
        'r1_filtered': None,  # <input>_filtered_reads.fastq
        'r2_filtered': None,
        'stats_file': None,  # No report unless set
    },

    # ========================================================================
    # Filter Rules
    # ========================================================================
    'filter': {
        'threshold': DEFAULT_LENGTH_THRESHOLD,  # Both mates must be strictly longer
        'remove_tiles': [],
        'remove_reads': None,  # Text file, one read id per line
        'trim_r1': None,  # Reserved, not applied
        'trim_r2': None,  # Reserved, not applied
    },

    # ========================================================================
    # Logging
    # ========================================================================
    'logging': {
        'level': 'INFO',
    },
}

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

CONFIG_TEMPLATES = ['default', 'exclusion']


def save_config_template(output_path: Path, template: str = 'default'):
    """
    Save a configuration template to file.

    Args:
        output_path: Output file path
        template: Template type ('default', 'exclusion')
    """
    if template not in CONFIG_TEMPLATES:
        raise ValueError(f"Unknown template: {template}. Supported: {', '.join(CONFIG_TEMPLATES)}")

    config = copy.deepcopy(DEFAULT_CONFIG)
    config['input']['r1'] = 'sample_R1.fastq.gz'
    config['input']['r2'] = 'sample_R2.fastq.gz'

    if template == 'exclusion':
        config['output']['stats_file'] = 'sample_filter_stats.txt'
        config['filter']['remove_tiles'] = ['1101', '2101']
        config['filter']['remove_reads'] = 'excluded_reads.txt'

    output_path = Path(output_path)
    with open(output_path, 'w') as f:
        f.write("# PairFilter configuration\n")
        f.write("# Values given on the command line override this file.\n")
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    # Validate inputs
    for key in ('r1', 'r2'):
        value = config.get('input', {}).get(key)
        if not value:
            errors.append(f"Missing input file: input.{key}")
        elif not isinstance(value, (str, Path)):
            errors.append(f"Invalid input.{key}: expected a path, got {value!r}")

    # Validate optional output paths
    for key, value in config.get('output', {}).items():
        if value is not None and not isinstance(value, (str, Path)):
            errors.append(f"Invalid output.{key}: expected a path, got {value!r}")

    filter_config = config.get('filter', {})

    # Validate threshold
    threshold = filter_config.get('threshold')
    if not _is_int(threshold) or threshold < 0:
        errors.append(f"Invalid filter.threshold: must be a non-negative integer, got {threshold!r}")

    # Validate tiles
    tiles = filter_config.get('remove_tiles') or []
    if not isinstance(tiles, (list, tuple)):
        errors.append(f"Invalid filter.remove_tiles: must be a list, got {tiles!r}")
    else:
        for tile in tiles:
            if not isinstance(tile, (str, int)) or isinstance(tile, bool):
                errors.append(f"Invalid tile id in filter.remove_tiles: {tile!r}")

    remove_reads = filter_config.get('remove_reads')
    if remove_reads is not None and not isinstance(remove_reads, (str, Path)):
        errors.append(f"Invalid filter.remove_reads: expected a path, got {remove_reads!r}")

    for key in ('trim_r1', 'trim_r2'):
        value = filter_config.get(key)
        if value is not None and not _is_int(value):
            errors.append(f"Invalid filter.{key}: must be an integer, got {value!r}")

    # Validate logging level
    level = config.get('logging', {}).get('level', 'INFO')
    if str(level).upper() not in VALID_LOG_LEVELS:
        errors.append(f"Invalid logging.level: {level}")

    return errors


@dataclass(frozen=True)
class FilterSettings:
    """
    Immutable configuration for one filtering run.

    Output paths are always resolved; absent ones are derived from the
    corresponding input path.
    """
    r1_input: Path
    r2_input: Path
    r1_kept: Path
    r2_kept: Path
    r1_filtered: Path
    r2_filtered: Path
    threshold: int = DEFAULT_LENGTH_THRESHOLD
    stats_file: Optional[Path] = None
    remove_tiles: Tuple[str, ...] = ()
    remove_reads: Optional[Path] = None
    trim_r1: Optional[int] = None
    trim_r2: Optional[int] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "FilterSettings":
        """
        Build settings from a merged configuration dictionary.

        Raises:
            ConfigValidationError: If the configuration is invalid
        """
        errors = validate_config(config)
        if errors:
            raise ConfigValidationError("; ".join(errors))

        input_config = config['input']
        output_config = config.get('output', {})
        filter_config = config.get('filter', {})

        r1_input = Path(input_config['r1'])
        r2_input = Path(input_config['r2'])

        stats_file = output_config.get('stats_file')
        remove_reads = filter_config.get('remove_reads')

        return cls(
            r1_input=r1_input,
            r2_input=r2_input,
            r1_kept=infer_output_path(output_config.get('r1_kept'), r1_input, KEPT_SUFFIX),
            r2_kept=infer_output_path(output_config.get('r2_kept'), r2_input, KEPT_SUFFIX),
            r1_filtered=infer_output_path(output_config.get('r1_filtered'), r1_input, FILTERED_SUFFIX),
            r2_filtered=infer_output_path(output_config.get('r2_filtered'), r2_input, FILTERED_SUFFIX),
            threshold=filter_config.get('threshold', DEFAULT_LENGTH_THRESHOLD),
            stats_file=Path(stats_file) if stats_file else None,
            remove_tiles=tuple(str(t) for t in (filter_config.get('remove_tiles') or [])),
            remove_reads=Path(remove_reads) if remove_reads else None,
            trim_r1=filter_config.get('trim_r1'),
            trim_r2=filter_config.get('trim_r2'),
        )
