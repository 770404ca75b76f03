"""
segsim: simulate sequence alignments along segmented trees.

Each segment of the simulated sequence evolves along its own tree, for
instance to model recombination breakpoints. Segments are read from a
segment file, checked, mapped onto alignment sites, simulated one after the
other and merged into one alignment.

Quick Start
-----------
>>> from segsim import load_segments, simulate_alignment, get_model
>>> segments = load_segments("segments.txt")
>>> result = simulate_alignment(segments, get_model("HKY85", kappa=2.0), n_sites=1000, seed=42)
>>> len(result.alignment.to_strings()["A"])
1000

Per-site rates from a table:

>>> from segsim import load_rate_table
>>> rates = load_rate_table("rates.tsv")
>>> result = simulate_alignment(segments, get_model("JC69"), rate_table=rates)
"""

__version__ = "0.1.0"

from .api import SimulationResult, simulate_alignment, simulate_from_config, simulate_from_files
from .config import SimulationConfig
from .exceptions import (
    ConfigError,
    ConsistencyError,
    FormatError,
    ParseError,
    SegsimError,
    StructuralError,
)
from .io.rates import RateTable, load_rate_table
from .io.segments import load_segments, read_segment_records
from .io.sequences import Alignment
from .io.trees import Tree
from .models import SubstitutionModel, get_model
from .segments import Segment, SiteRange, allocate_sites, single_segment, validate_segments
from .simulate.driver import FixedCount, RateSlice, SegmentSimulationDriver
from .simulate.merge import merge_blocks

__all__ = [
    # Pipeline
    "simulate_alignment",
    "simulate_from_config",
    "simulate_from_files",
    "SimulationResult",
    "SimulationConfig",

    # Segments
    "load_segments",
    "read_segment_records",
    "validate_segments",
    "allocate_sites",
    "single_segment",
    "Segment",
    "SiteRange",

    # Simulation
    "SegmentSimulationDriver",
    "FixedCount",
    "RateSlice",
    "merge_blocks",
    "get_model",
    "SubstitutionModel",

    # I/O
    "load_rate_table",
    "RateTable",
    "Alignment",
    "Tree",

    # Errors
    "SegsimError",
    "ParseError",
    "StructuralError",
    "FormatError",
    "ConsistencyError",
    "ConfigError",

    "__version__",
]
