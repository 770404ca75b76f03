"""
Sequence simulation module for segsim.

- TreeSequenceSimulator: evolve sites along one tree under a substitution model
- SegmentSimulationDriver: simulate every segment of a multi-tree alignment
- merge_blocks: join per-segment blocks into one alignment
"""

from .base import SequenceSimulator
from .driver import FixedCount, RateSlice, SegmentSimulationDriver, plan_work
from .merge import merge_blocks
from .rates import ConstantDistribution, GammaDistribution, RateDistribution
from .tree import TreeSequenceSimulator

__all__ = [
    'SequenceSimulator',
    'TreeSequenceSimulator',
    'SegmentSimulationDriver',
    'FixedCount',
    'RateSlice',
    'plan_work',
    'merge_blocks',
    'RateDistribution',
    'ConstantDistribution',
    'GammaDistribution',
]
