"""
Substitution model container shared by all simulators.
"""

from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Dict, Sequence

import numpy as np

from ..core.matrix import eigen_decompose_rev, transition_matrices


@dataclass(eq=False)
class SubstitutionModel:
    """
    A reversible substitution model.

    Parameters
    ----------
    name : str
        Model name (e.g. 'HKY85')
    states : sequence of str
        Character of each state, in rate matrix order
    Q : np.ndarray, shape (n, n)
        Rate matrix, normalised to one substitution per time unit
    pi : np.ndarray, shape (n,)
        Equilibrium frequencies (must sum to 1)
    parameters : dict
        Model parameters, reported in simulation metadata
    """

    name: str
    states: Sequence[str]
    Q: np.ndarray
    pi: np.ndarray
    parameters: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        n = len(self.states)
        if self.Q.shape != (n, n):
            raise ValueError(f"Q must have shape ({n}, {n}), got {self.Q.shape}")
        if len(self.pi) != n:
            raise ValueError(f"pi must have length {n}, got {len(self.pi)}")
        if not np.isclose(self.pi.sum(), 1.0):
            raise ValueError(f"pi must sum to 1, got {self.pi.sum()}")
        if np.any(self.pi <= 0):
            raise ValueError("pi must be strictly positive")

    @property
    def n_states(self) -> int:
        return len(self.states)

    @cached_property
    def eigen(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Eigendecomposition of Q, computed once."""
        return eigen_decompose_rev(self.Q, self.pi)

    def transition_matrices(self, times: np.ndarray) -> np.ndarray:
        """
        P(t) for each time in ``times``.

        Returns
        -------
        np.ndarray, shape (len(times), n, n)
        """
        eigenvalues, U, V = self.eigen
        return transition_matrices(eigenvalues, U, V, np.asarray(times, dtype=float))

    def get_parameters(self) -> Dict[str, Any]:
        """Model parameters for output metadata."""
        return {'model': self.name, **self.parameters}
