"""
Input/Output modules for trees, segment files, rate tables and alignments.

- **Trees**: Newick format
- **Segment files**: ``<begin> <end> <tree>;`` records
- **Rate tables**: tab-separated per-site rates
- **Alignments**: encoded simulated sequences
"""

from segsim.io.trees import Tree, TreeNode
from segsim.io.sequences import Alignment
from segsim.io.rates import RateTable, load_rate_table
from segsim.io.segments import SegmentRecord, load_segments, read_segment_records

__all__ = [
    "Tree",
    "TreeNode",
    "Alignment",
    "RateTable",
    "load_rate_table",
    "SegmentRecord",
    "load_segments",
    "read_segment_records",
]
