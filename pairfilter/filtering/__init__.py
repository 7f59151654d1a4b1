"""
Pair filtering module for PairFilter.

Lockstep mate-pair filtering: exclusion sets, predicate chain, routing
and run statistics.

Consolidated modules:
- exclusion_utility.py: Excluded tile and read id sets
- predicates.py: Pair rules and the predicate chain
- pair_router.py: Kept/filtered output routing
- run_stats.py: Run counters and stats report
- pair_filter_module.py: Dual-stream reader, main loop and runner
"""

from .exclusion_utility import (
    ExclusionSets,
    build_read_set,
    build_tile_set,
    normalize_read_id,
)

from .predicates import (
    PairRule,
    LengthThreshold,
    TileExclusion,
    ReadExclusion,
    PredicateChain,
    build_predicate_chain,
    DEFAULT_LENGTH_THRESHOLD,
)

from .pair_router import PairRouter

from .run_stats import (
    RunStats,
    write_stats_file,
)

from .pair_filter_module import (
    iter_record_pairs,
    filter_pairs,
    PairFilterRunner,
)

__all__ = [
    # Exclusion sets
    'ExclusionSets',
    'build_read_set',
    'build_tile_set',
    'normalize_read_id',

    # Predicate chain
    'PairRule',
    'LengthThreshold',
    'TileExclusion',
    'ReadExclusion',
    'PredicateChain',
    'build_predicate_chain',
    'DEFAULT_LENGTH_THRESHOLD',

    # Routing and stats
    'PairRouter',
    'RunStats',
    'write_stats_file',

    # Engine
    'iter_record_pairs',
    'filter_pairs',
    'PairFilterRunner',
]
