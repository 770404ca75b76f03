"""
Segment-by-segment simulation.

Each segment is simulated along its own tree with the shared substitution
model. Segments are processed in order; the site range of every segment is
fixed beforehand by :func:`segsim.segments.allocate_sites`.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Union

import numpy as np

from ..exceptions import ConsistencyError
from ..io.rates import RateTable
from ..io.trees import Tree
from ..models.base import SubstitutionModel
from ..segments import Segment, SiteRange
from .base import SeedLike, SequenceSimulator
from .merge import SequenceBlock
from .rates import ConstantDistribution, RateDistribution
from .tree import TreeSequenceSimulator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FixedCount:
    """Simulate ``n_sites`` sites with rates from the rate distribution."""

    n_sites: int

    @property
    def width(self) -> int:
        return self.n_sites


@dataclass(frozen=True, eq=False)
class RateSlice:
    """Simulate one site per given rate."""

    rates: np.ndarray

    @property
    def width(self) -> int:
        return len(self.rates)


PerSegmentWork = Union[FixedCount, RateSlice]

SimulatorFactory = Callable[
    [Tree, SubstitutionModel, RateDistribution, np.random.Generator], SequenceSimulator
]

ProgressCallback = Callable[[int, int], None]


def default_simulator_factory(
    tree: Tree,
    model: SubstitutionModel,
    rate_distribution: RateDistribution,
    rng: np.random.Generator,
) -> SequenceSimulator:
    return TreeSequenceSimulator(tree, model, rate_distribution, seed=rng)


def plan_work(
    allocation: Sequence[SiteRange], rate_table: Optional[RateTable] = None
) -> List[PerSegmentWork]:
    """
    Describe the simulation work of each segment.

    Parameters
    ----------
    allocation : sequence of SiteRange
        Site range of each segment, contiguous from 0
    rate_table : RateTable, optional
        Per-site rates; when given, each segment gets the rates of its range

    Returns
    -------
    list
        One FixedCount or RateSlice per segment

    Raises
    ------
    ValueError
        If the allocation is not contiguous or does not match the rate table
    """
    cursor = 0
    for site_range in allocation:
        if site_range.start != cursor or site_range.end < site_range.start:
            raise ValueError(f"Site allocation is not contiguous at {site_range}")
        cursor = site_range.end
    if rate_table is not None and cursor != rate_table.n_sites:
        raise ValueError(
            f"Site allocation covers {cursor} sites but the rate table has {rate_table.n_sites}"
        )

    if rate_table is None:
        return [FixedCount(site_range.width) for site_range in allocation]
    return [RateSlice(rate_table.slice(site_range)) for site_range in allocation]


class SegmentSimulationDriver:
    """
    Simulate every segment of a multi-tree alignment, in order.

    Parameters
    ----------
    model : SubstitutionModel
        Substitution model shared by all segments
    rate_distribution : RateDistribution, optional
        Distribution of site rates, ignored when a rate table is given
        (default: constant rate 1)
    seed : int or numpy.random.Generator, optional
        Random seed; one generator is shared by all segments so a run is
        reproducible as a whole
    simulator_factory : callable, optional
        ``factory(tree, model, rate_distribution, rng)`` returning an object
        with ``simulate(n_sites)`` and ``simulate_sites(rates)``
        (default: :class:`TreeSequenceSimulator`)
    progress : callable, optional
        ``progress(done, total)`` called after each segment
    """

    def __init__(
        self,
        model: SubstitutionModel,
        rate_distribution: Optional[RateDistribution] = None,
        seed: SeedLike = None,
        simulator_factory: Optional[SimulatorFactory] = None,
        progress: Optional[ProgressCallback] = None,
    ):
        self.model = model
        self.rate_distribution = rate_distribution or ConstantDistribution(1.0)
        self.rng = seed if isinstance(seed, np.random.Generator) else np.random.default_rng(seed)
        self.simulator_factory = simulator_factory or default_simulator_factory
        self.progress = progress

    def simulate_segment(self, tree: Tree, work: PerSegmentWork) -> SequenceBlock:
        """
        Simulate one segment.

        Parameters
        ----------
        tree : Tree
            Tree of the segment
        work : FixedCount or RateSlice
            What to simulate

        Returns
        -------
        dict
            Mapping from leaf name to the segment's simulated states
        """
        if isinstance(work, RateSlice):
            # Rates come from the table, not from the distribution
            simulator = self.simulator_factory(tree, self.model, ConstantDistribution(1.0), self.rng)
            block = simulator.simulate_sites(work.rates)
        elif isinstance(work, FixedCount):
            simulator = self.simulator_factory(tree, self.model, self.rate_distribution, self.rng)
            block = simulator.simulate(work.n_sites)
        else:
            raise TypeError(f"Unknown segment work: {work!r}")

        for name, states in block.items():
            if len(states) != work.width:
                raise ConsistencyError(
                    f"Simulator returned {len(states)} sites for {name}, expected {work.width}"
                )
        return block

    def run(
        self,
        segments: Sequence[Segment],
        allocation: Sequence[SiteRange],
        rate_table: Optional[RateTable] = None,
    ) -> List[SequenceBlock]:
        """
        Simulate all segments.

        Parameters
        ----------
        segments : sequence of Segment
            Validated segments, in sequence order
        allocation : sequence of SiteRange
            Site range of each segment
        rate_table : RateTable, optional
            Per-site rates covering the whole allocation

        Returns
        -------
        list
            One sequence block per segment, in segment order
        """
        if len(segments) != len(allocation):
            raise ValueError(
                f"{len(segments)} segments but {len(allocation)} site ranges"
            )
        works = plan_work(allocation, rate_table)

        blocks = []
        total = len(segments)
        for index, (segment, site_range, work) in enumerate(zip(segments, allocation, works)):
            logger.info(
                "Simulating segment %d/%d: sites %s on a tree of %d leaves",
                index + 1, total, site_range, segment.tree.n_leaves,
            )
            blocks.append(self.simulate_segment(segment.tree, work))
            if self.progress is not None:
                self.progress(index + 1, total)

        return blocks
