"""
Tree segments and their mapping onto alignment sites.

A segment is a contiguous part of the simulated sequence, expressed as a
fraction of its length, that evolves along its own tree.
"""

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Sequence

from .exceptions import StructuralError
from .io.trees import Tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Segment:
    """
    A contiguous part of the sequence governed by one tree.

    Attributes
    ----------
    begin : float
        Start position, as a fraction of the sequence length
    end : float
        End position, as a fraction of the sequence length
    tree : Tree
        Tree the segment evolves along
    """

    begin: float
    end: float
    tree: Tree


@dataclass(frozen=True)
class SiteRange:
    """
    Half-open range of absolute site indices ``[start, end)``.
    """

    start: int
    end: int

    @property
    def width(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"


def single_segment(tree: Tree) -> list[Segment]:
    """Wrap one tree as the implicit segment spanning the whole sequence."""
    return [Segment(0.0, 1.0, tree)]


def boundaries(segments: Sequence[Segment]) -> list[float]:
    """
    Return the boundary positions of an ordered list of segments.

    For n segments this is the n + 1 values ``[begin_0, end_0, ..., end_n-1]``.
    """
    if not segments:
        return []
    return [segments[0].begin] + [segment.end for segment in segments]


def validate_segments(segments: Sequence[Segment]) -> None:
    """
    Check that segments can be simulated together.

    All trees must carry the same leaf names as the first one, segments must
    start at 0, follow each other without gaps and end at 1.

    Parameters
    ----------
    segments : sequence of Segment
        Segments in sequence order

    Raises
    ------
    StructuralError
        For the first segment that breaks an invariant
    """
    if not segments:
        raise StructuralError("no segments to simulate", index=0, kind="empty")

    reference = segments[0].tree.leaf_name_set()
    previous_end = 0.0
    for index, segment in enumerate(segments):
        if index > 0:
            leaves = segment.tree.leaf_name_set()
            if leaves != reference:
                missing = sorted(reference - leaves)
                extra = sorted(leaves - reference)
                raise StructuralError(
                    "all trees must have the same leaf names "
                    f"(missing: {missing or 'none'}, unexpected: {extra or 'none'})",
                    index=index,
                    kind="leaf mismatch",
                )

        if segment.begin != previous_end:
            raise StructuralError(
                f"segments do not match: begins at {segment.begin} "
                f"but the previous one ends at {previous_end}",
                index=index,
                kind="boundary gap",
            )
        if not 0.0 <= segment.end <= 1.0 or segment.end < segment.begin:
            raise StructuralError(
                f"end {segment.end} must lie in [{segment.begin}, 1]",
                index=index,
                kind="boundary order",
            )
        previous_end = segment.end

    if previous_end != 1.0:
        raise StructuralError(
            f"last segment ends at {previous_end}, segments must cover [0, 1]",
            index=len(segments) - 1,
            kind="coverage",
        )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def check_site_count(total_sites) -> int:
    """
    Return ``total_sites`` as an int, or raise ValueError unless it is a
    positive integer (bools and floats are rejected).
    """
    if (
        isinstance(total_sites, bool)
        or not isinstance(total_sites, numbers.Integral)
        or total_sites <= 0
    ):
        raise ValueError(f"total_sites must be a positive integer, got {total_sites!r}")
    return int(total_sites)


def allocate_sites(total_sites: int, positions: Sequence[float]) -> list[SiteRange]:
    """
    Convert boundary positions into a partition of the alignment sites.

    Each segment ends at ``round(b * total_sites)`` of its end boundary and
    starts where the previous segment ended, so the ranges are contiguous no
    matter how every boundary rounds. The last range always ends at
    ``total_sites``.

    Parameters
    ----------
    total_sites : int
        Number of sites in the whole alignment (> 0)
    positions : sequence of float
        Segment boundaries, n + 1 values for n segments

    Returns
    -------
    list[SiteRange]
        One range per segment, in order

    Examples
    --------
    >>> [str(r) for r in allocate_sites(10, [0.0, 0.3, 1.0])]
    ['[0, 3)', '[3, 10)']
    """
    total_sites = check_site_count(total_sites)
    if len(positions) < 2:
        raise ValueError("at least two boundary positions are needed")

    ranges = []
    start = 0
    for position in positions[1:-1]:
        end = min(max(_round_half_up(position * total_sites), start), total_sites)
        ranges.append(SiteRange(start, end))
        start = end
    ranges.append(SiteRange(start, total_sites))

    logger.debug("Allocated %d sites to %d segments: %s",
                 total_sites, len(ranges), ", ".join(str(r) for r in ranges))
    return ranges
