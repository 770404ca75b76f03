"""
High-level simulation API.

Example
-------
>>> from segsim import simulate_alignment, load_segments, get_model
>>> segments = load_segments("segments.txt")
>>> result = simulate_alignment(segments, get_model("HKY85", kappa=2.5), n_sites=500, seed=1)
>>> result.alignment.n_sites
500
"""

import logging
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config import DEFAULT_N_SITES, SimulationConfig
from .exceptions import ConsistencyError, ParseError
from .io.rates import DEFAULT_RATE_COLUMN, RateTable, load_rate_table
from .io.segments import load_segments
from .io.sequences import Alignment
from .io.trees import Tree
from .models import SubstitutionModel, get_model
from .segments import (
    Segment,
    SiteRange,
    allocate_sites,
    boundaries,
    check_site_count,
    single_segment,
    validate_segments,
)
from .simulate.base import SeedLike
from .simulate.driver import ProgressCallback, SegmentSimulationDriver, SimulatorFactory
from .simulate.merge import merge_blocks
from .simulate.rates import RateDistribution

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """
    Outcome of a simulation run.

    Attributes
    ----------
    alignment : Alignment
        The merged alignment
    segments : list[Segment]
        Segments that were simulated
    allocation : list[SiteRange]
        Site range of each segment
    parameters : dict
        Model and run parameters, for metadata output
    """

    alignment: Alignment
    segments: List[Segment]
    allocation: List[SiteRange]
    parameters: Dict[str, Any] = field(default_factory=dict)


def site_allocation(segments: Sequence[Segment], n_sites: int) -> List[SiteRange]:
    """Site range of each segment for an alignment of ``n_sites`` sites."""
    if len(segments) == 1:
        return [SiteRange(0, check_site_count(n_sites))]
    return allocate_sites(n_sites, boundaries(segments))


def simulate_alignment(
    segments: Sequence[Segment],
    model: SubstitutionModel,
    n_sites: Optional[int] = None,
    rate_table: Optional[RateTable] = None,
    rate_distribution: Optional[RateDistribution] = None,
    seed: SeedLike = None,
    simulator_factory: Optional[SimulatorFactory] = None,
    progress: Optional[ProgressCallback] = None,
) -> SimulationResult:
    """
    Simulate an alignment whose segments evolve along their own trees.

    The segments are validated before anything is simulated; the alignment
    is only returned once every segment has been simulated and merged.

    Parameters
    ----------
    segments : sequence of Segment
        Segments in sequence order (one segment for single-tree simulation)
    model : SubstitutionModel
        Substitution model shared by all segments
    n_sites : int, optional
        Number of sites (default 100); superseded by the rate table length
    rate_table : RateTable, optional
        Per-site rates
    rate_distribution : RateDistribution, optional
        Distribution of site rates when no rate table is given
    seed : int or numpy.random.Generator, optional
        Random seed
    simulator_factory : callable, optional
        Replacement for the default tree simulator
    progress : callable, optional
        ``progress(done, total)`` called after each segment

    Returns
    -------
    SimulationResult

    Raises
    ------
    StructuralError
        If the segments are inconsistent
    ConsistencyError
        If simulated blocks cannot be merged
    """
    validate_segments(segments)

    if rate_table is not None:
        if n_sites is not None and n_sites != rate_table.n_sites:
            warnings.warn(
                f"Rate table has {rate_table.n_sites} sites; "
                f"requested number of sites ({n_sites}) ignored"
            )
        total_sites = rate_table.n_sites
    else:
        total_sites = DEFAULT_N_SITES if n_sites is None else n_sites

    allocation = site_allocation(segments, total_sites)

    driver = SegmentSimulationDriver(
        model,
        rate_distribution=rate_distribution,
        seed=seed,
        simulator_factory=simulator_factory,
        progress=progress,
    )
    blocks = driver.run(segments, allocation, rate_table)
    merged = merge_blocks(blocks)

    for name, states in merged.items():
        if len(states) != total_sites:
            raise ConsistencyError(
                f"Merged sequence {name} has {len(states)} sites, expected {total_sites}"
            )

    parameters = {
        **model.get_parameters(),
        **(driver.rate_distribution.get_parameters() if rate_table is None
           else {'rate_distribution': 'table'}),
        'n_sites': total_sites,
        'n_segments': len(segments),
        'segments': [
            {'begin': s.begin, 'end': s.end, 'sites': [r.start, r.end]}
            for s, r in zip(segments, allocation)
        ],
    }
    if isinstance(seed, int):
        parameters['seed'] = seed

    logger.info("Simulated %d sequences of %d sites", len(merged), total_sites)
    return SimulationResult(
        alignment=Alignment.from_sequences(merged, model.states),
        segments=list(segments),
        allocation=allocation,
        parameters=parameters,
    )


def simulate_from_files(
    segments_file: Path | str,
    model: SubstitutionModel,
    rates_file: Optional[Path | str] = None,
    rate_column: str = DEFAULT_RATE_COLUMN,
    **kwargs: Any,
) -> SimulationResult:
    """
    Simulate an alignment from a segment file and an optional rate table.

    Both files are read before simulation starts. Remaining keyword
    arguments are passed to :func:`simulate_alignment`.
    """
    segments = load_segments(segments_file)
    rate_table = load_rate_table(rates_file, rate_column) if rates_file is not None else None
    return simulate_alignment(segments, model, rate_table=rate_table, **kwargs)


def load_config_segments(config: SimulationConfig) -> List[Segment]:
    """Read the segments named by a configuration."""
    if config.segments_file is not None:
        return load_segments(config.segments_file)
    try:
        tree = Tree.from_file(config.tree_file)
    except ValueError as e:
        raise ParseError(f"invalid tree in {config.tree_file}: {e}") from e
    return single_segment(tree)


def simulate_from_config(
    config: SimulationConfig,
    progress: Optional[ProgressCallback] = None,
) -> SimulationResult:
    """
    Run the simulation described by a configuration.

    All inputs (trees, segments, rate table, model) are read and checked
    before simulation starts.
    """
    config.validate()
    segments = load_config_segments(config)
    validate_segments(segments)
    rate_table = (
        load_rate_table(config.rates_file, config.rate_column)
        if config.rates_file is not None else None
    )
    model = get_model(config.model, alphabet=config.alphabet, kappa=config.kappa, omega=config.omega)

    return simulate_alignment(
        segments,
        model,
        n_sites=config.n_sites,
        rate_table=rate_table,
        rate_distribution=config.rate_distribution(),
        seed=config.seed,
        progress=progress,
    )
