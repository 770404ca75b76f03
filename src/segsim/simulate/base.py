"""
Base class for sequence simulators.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Union

import numpy as np

from ..io.trees import Tree
from .rates import ConstantDistribution, RateDistribution

SeedLike = Union[int, np.random.Generator, None]


class SequenceSimulator(ABC):
    """
    Abstract base class for sequence simulators.

    A simulator is bound to one tree and evolves sites from the root to the
    tips. Every site has a rate multiplier applied to all branch lengths;
    rates are either given explicitly (:meth:`simulate_sites`) or drawn from
    the simulator's rate distribution (:meth:`simulate`).

    Parameters
    ----------
    tree : Tree
        Phylogenetic tree with branch lengths
    rate_distribution : RateDistribution, optional
        Distribution of site rates (default: constant rate 1)
    seed : int or numpy.random.Generator, optional
        Random seed, or a generator shared with other simulators

    Attributes
    ----------
    tree : Tree
        The phylogenetic tree
    rng : numpy.random.Generator
        Random number generator (seeded for reproducibility)
    """

    def __init__(
        self,
        tree: Tree,
        rate_distribution: Optional[RateDistribution] = None,
        seed: SeedLike = None,
    ):
        self.tree = tree
        self.rate_distribution = rate_distribution or ConstantDistribution(1.0)
        self.rng = seed if isinstance(seed, np.random.Generator) else np.random.default_rng(seed)

        self._validate_tree()

    def _validate_tree(self):
        """Ensure tree is suitable for simulation."""
        for node in self.tree.postorder():
            if node.parent is None:
                continue
            if node.branch_length is None:
                raise ValueError(
                    f"Node {node.name if node.name else node.id} missing branch length"
                )
            if node.branch_length < 0:
                raise ValueError(
                    f"Node {node.name if node.name else node.id} has negative branch length"
                )

    @abstractmethod
    def _generate_ancestral_sequence(self, n_sites: int) -> np.ndarray:
        """
        Generate sequence at root node.

        Returns
        -------
        np.ndarray
            Ancestral sequence (array of state indices)
        """

    @abstractmethod
    def _evolve_sequence(
        self,
        parent_seq: np.ndarray,
        branch_length: float,
        rates: np.ndarray,
    ) -> np.ndarray:
        """
        Evolve sequence along a branch.

        Parameters
        ----------
        parent_seq : np.ndarray
            Parent sequence (array of state indices)
        branch_length : float
            Length of branch
        rates : np.ndarray
            Rate multiplier of each site

        Returns
        -------
        np.ndarray
            Child sequence (array of state indices)
        """

    def simulate_sites(self, rates: np.ndarray) -> Dict[str, np.ndarray]:
        """
        Simulate one site per rate along the tree.

        Parameters
        ----------
        rates : array-like, shape (n_sites,)
            Rate multiplier of each site

        Returns
        -------
        dict
            Mapping from leaf name to sequence array (state indices),
            in leaf order.
        """
        rates = np.asarray(rates, dtype=float)
        if rates.ndim != 1:
            raise ValueError("rates must be a one-dimensional array")
        if np.any(rates < 0):
            raise ValueError("rates must be non-negative")

        sequences = {self.tree.root.id: self._generate_ancestral_sequence(len(rates))}
        for parent, child in self.tree.get_branches():
            sequences[child.id] = self._evolve_sequence(
                sequences[parent.id], child.branch_length, rates
            )

        return {leaf.name: sequences[leaf.id] for leaf in self.tree.leaves}

    def simulate(self, n_sites: int) -> Dict[str, np.ndarray]:
        """
        Simulate ``n_sites`` sites with rates drawn from the rate distribution.

        Returns
        -------
        dict
            Mapping from leaf name to sequence array (state indices).
        """
        if n_sites < 0:
            raise ValueError(f"n_sites must be non-negative, got {n_sites}")
        return self.simulate_sites(self.rate_distribution.sample(n_sites, self.rng))

    @abstractmethod
    def get_parameters(self) -> Dict:
        """
        Get simulation parameters for output metadata.

        Returns
        -------
        dict
            Dictionary of model parameters
        """
