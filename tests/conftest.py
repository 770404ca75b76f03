"""
Pytest configuration and shared fixtures.
"""

import numpy as np
import pytest
from typer.testing import CliRunner

from segsim.io.trees import Tree
from segsim.segments import Segment


TREE_1 = "((A:0.1,B:0.2):0.15,(C:0.3,D:0.1):0.05);"
TREE_2 = "((A:0.1,C:0.2):0.15,(B:0.3,D:0.1):0.05);"
TREE_3 = "(((A:0.1,D:0.2):0.1,B:0.3):0.05,C:0.2);"


class CountingSimulatorFactory:
    """
    Stub simulator factory recording every call.

    Each simulator returns, for every leaf, sites filled with the index of
    the call that produced it, so merged output can be traced back to its
    segment.
    """

    def __init__(self, drop_leaf=None):
        self.calls = []
        self.drop_leaf = drop_leaf

    def __call__(self, tree, model, rate_distribution, rng):
        factory = self

        class StubSimulator:
            def _block(self, n_sites, work):
                index = len(factory.calls)
                factory.calls.append((tree, work))
                names = [n for n in tree.leaf_names if n != factory.drop_leaf or index == 0]
                return {name: np.full(n_sites, index, dtype=np.uint8) for name in names}

            def simulate(self, n_sites):
                return self._block(n_sites, ('count', n_sites))

            def simulate_sites(self, rates):
                return self._block(len(rates), ('rates', np.asarray(rates).copy()))

        return StubSimulator()


@pytest.fixture
def cli_runner():
    """CLI test runner for Typer apps."""
    return CliRunner()


@pytest.fixture
def simple_tree():
    """Four-leaf tree with branch lengths."""
    return Tree.from_newick(TREE_1)


@pytest.fixture
def two_segments():
    """Segments [0, 0.3] and [0.3, 1] on trees sharing leaves A-D."""
    return [
        Segment(0.0, 0.3, Tree.from_newick(TREE_1)),
        Segment(0.3, 1.0, Tree.from_newick(TREE_2)),
    ]


@pytest.fixture
def counting_factory():
    return CountingSimulatorFactory()


@pytest.fixture
def dropping_factory():
    """Stub factory whose simulators after the first one lose leaf D."""
    return CountingSimulatorFactory(drop_leaf="D")


@pytest.fixture
def tree_file(tmp_path):
    """Temporary single-tree Newick file."""
    path = tmp_path / "tree.nwk"
    path.write_text(TREE_1 + "\n")
    return path


@pytest.fixture
def segment_file(tmp_path):
    """Temporary segment file with three segments, one tree over two lines."""
    path = tmp_path / "segments.txt"
    path.write_text(
        "# recombinant history\n"
        f"0.0 0.333 {TREE_1}\n"
        "\n"
        "0.333 0.667 ((A:0.1,C:0.2):0.15,\n"
        "             (B:0.3,D:0.1):0.05);\n"
        f"0.667 1.0 {TREE_3}\n"
    )
    return path


@pytest.fixture
def rate_file(tmp_path):
    """Temporary rate table with 10 sites."""
    path = tmp_path / "rates.tsv"
    rows = ["site\tpr"] + [f"{i + 1}\t{0.5 + 0.1 * i:.1f}" for i in range(10)]
    path.write_text("\n".join(rows) + "\n")
    return path
