"""
Merging of per-segment simulation blocks into one alignment.
"""

from typing import Dict, Sequence

import numpy as np

from ..exceptions import ConsistencyError

# Simulated states of one segment, keyed by sequence name
SequenceBlock = Dict[str, np.ndarray]


def merge_blocks(blocks: Sequence[SequenceBlock]) -> Dict[str, np.ndarray]:
    """
    Concatenate sequence blocks, per sequence name, in block order.

    Parameters
    ----------
    blocks : sequence of dict
        One block per segment, in segment order

    Returns
    -------
    dict
        Mapping from sequence name to its full sequence, names in the order
        of the first block

    Raises
    ------
    ConsistencyError
        If there are no blocks, or a block does not have exactly the names of
        the first block

    Examples
    --------
    >>> merged = merge_blocks([{'A': np.array([0, 1])}, {'A': np.array([2])}])
    >>> merged['A'].tolist()
    [0, 1, 2]
    """
    if not blocks:
        raise ConsistencyError("No sequence blocks to merge")

    names = list(blocks[0])
    reference = set(names)
    for index, block in enumerate(blocks[1:], start=1):
        if set(block) != reference:
            missing = sorted(reference - set(block))
            extra = sorted(set(block) - reference)
            raise ConsistencyError(
                f"Block {index} does not have the sequences of block 0 "
                f"(missing: {missing or 'none'}, unexpected: {extra or 'none'})"
            )

    return {
        name: np.concatenate([np.asarray(block[name]) for block in blocks])
        for name in names
    }
