"""
Sequence simulation along a tree under a substitution model.
"""

from typing import Any, Dict, Optional

import numpy as np

from ..io.trees import Tree
from ..models.base import SubstitutionModel
from .base import SeedLike, SequenceSimulator
from .rates import RateDistribution


class TreeSequenceSimulator(SequenceSimulator):
    """
    Simulate sequences under a reversible substitution model.

    The root sequence is drawn from the equilibrium frequencies; along each
    branch of length t, a site with rate r changes state according to
    P(r * t) = U @ diag(exp(eigenvalues * r * t)) @ V.

    Parameters
    ----------
    tree : Tree
        Phylogenetic tree (with branch lengths)
    model : SubstitutionModel
        Substitution model shared by all branches
    rate_distribution : RateDistribution, optional
        Distribution of site rates (default: constant)
    seed : int or numpy.random.Generator, optional
        Random seed for reproducibility
    chunk_size : int
        Number of distinct rates whose transition matrices are held in
        memory at once

    Examples
    --------
    >>> from segsim.io.trees import Tree
    >>> from segsim.models import hky85
    >>> tree = Tree.from_newick("((A:0.1,B:0.2):0.15,(C:0.3,D:0.1):0.05);")
    >>> sim = TreeSequenceSimulator(tree, hky85(kappa=2.5), seed=42)
    >>> sequences = sim.simulate(1000)
    >>> len(sequences)
    4
    >>> sequences['A'].shape
    (1000,)
    """

    def __init__(
        self,
        tree: Tree,
        model: SubstitutionModel,
        rate_distribution: Optional[RateDistribution] = None,
        seed: SeedLike = None,
        chunk_size: int = 256,
    ):
        super().__init__(tree, rate_distribution, seed)
        self.model = model
        self.chunk_size = chunk_size

    def _generate_ancestral_sequence(self, n_sites: int) -> np.ndarray:
        """Sample the root sequence from equilibrium frequencies."""
        return self.rng.choice(
            self.model.n_states, size=n_sites, p=self.model.pi
        ).astype(np.uint8)

    def _sample_rows(self, rows: np.ndarray) -> np.ndarray:
        """Draw one state per row of transition probabilities."""
        cumulative = np.cumsum(rows, axis=1)
        u = self.rng.random(len(rows))[:, np.newaxis] * cumulative[:, -1:]
        states = (cumulative < u).sum(axis=1)
        return np.minimum(states, self.model.n_states - 1)

    def _evolve_sequence(
        self,
        parent_seq: np.ndarray,
        branch_length: float,
        rates: np.ndarray,
    ) -> np.ndarray:
        """
        Evolve every site along a branch.

        Sites sharing a rate share a transition matrix, so P(t) is computed
        once per distinct rate.
        """
        child_seq = np.empty_like(parent_seq)
        if len(parent_seq) == 0:
            return child_seq

        unique_rates, inverse = np.unique(rates, return_inverse=True)
        inverse = inverse.ravel()
        for start in range(0, len(unique_rates), self.chunk_size):
            stop = start + self.chunk_size
            P = self.model.transition_matrices(unique_rates[start:stop] * branch_length)
            sites = np.nonzero((inverse >= start) & (inverse < stop))[0]
            rows = P[inverse[sites] - start, parent_seq[sites]]
            child_seq[sites] = self._sample_rows(rows)

        return child_seq

    def get_parameters(self) -> Dict[str, Any]:
        """
        Get simulation parameters for metadata output.

        Returns
        -------
        dict
            Model and rate distribution parameters plus the tree length
        """
        return {
            **self.model.get_parameters(),
            **self.rate_distribution.get_parameters(),
            'tree_length': self.tree.total_length(),
        }
