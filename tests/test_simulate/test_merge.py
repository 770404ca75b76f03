"""Tests for merging sequence blocks."""

import numpy as np
import pytest

from segsim.exceptions import ConsistencyError
from segsim.simulate.merge import merge_blocks


class TestMergeBlocks:
    """Test block concatenation."""

    def test_concatenates_in_block_order(self):
        blocks = [
            {'A': np.array([0, 0, 0]), 'B': np.array([1, 1, 1])},
            {'B': np.array([3, 3]), 'A': np.array([2, 2])},
        ]
        merged = merge_blocks(blocks)

        assert list(merged) == ['A', 'B']
        assert merged['A'].tolist() == [0, 0, 0, 2, 2]
        assert merged['B'].tolist() == [1, 1, 1, 3, 3]

    def test_single_block_is_unchanged(self):
        block = {'A': np.arange(100), 'B': np.arange(100)[::-1]}
        merged = merge_blocks([block])

        for name in block:
            assert np.array_equal(merged[name], block[name])

    def test_empty_blocks(self):
        merged = merge_blocks([{'A': np.array([], dtype=np.uint8)}, {'A': np.array([1], dtype=np.uint8)}])
        assert merged['A'].tolist() == [1]

    def test_missing_sequence(self):
        blocks = [{'A': np.zeros(2), 'B': np.zeros(2)}, {'A': np.zeros(2)}]
        with pytest.raises(ConsistencyError, match="Block 1") as info:
            merge_blocks(blocks)
        assert "missing: ['B']" in str(info.value)

    def test_renamed_sequence(self):
        blocks = [{'A': np.zeros(2)}, {'A': np.zeros(2)}, {'Z': np.zeros(2)}]
        with pytest.raises(ConsistencyError, match="Block 2"):
            merge_blocks(blocks)

    def test_no_blocks(self):
        with pytest.raises(ConsistencyError):
            merge_blocks([])
