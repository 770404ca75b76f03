"""
Codon substitution models.
"""

from typing import Optional, Sequence

import numpy as np

from ..core.matrix import create_reversible_Q
from ..io.sequences import CODONS, GENETIC_CODE
from .base import SubstitutionModel
from .nucleotide import is_transition


def is_synonymous(codon1: str, codon2: str) -> bool:
    """Check if two codons code for the same amino acid."""
    return GENETIC_CODE[codon1] == GENETIC_CODE[codon2]


def build_codon_Q_matrix(kappa: float, omega: float, pi: np.ndarray) -> np.ndarray:
    """
    Build a codon rate matrix Q for given kappa, omega, and pi.

    Parameters
    ----------
    kappa : float
        Transition/transversion ratio
    omega : float
        dN/dS ratio
    pi : np.ndarray, shape (61,)
        Codon frequencies

    Returns
    -------
    np.ndarray, shape (61, 61)
        Rate matrix Q, normalised to one substitution per time unit
    """
    S = np.zeros((61, 61))

    for i, codon_i in enumerate(CODONS):
        for j, codon_j in enumerate(CODONS):
            if i == j:
                continue

            diffs = [k for k in range(3) if codon_i[k] != codon_j[k]]
            if len(diffs) != 1:
                # Only single nucleotide changes allowed
                continue

            s = 1.0
            if is_transition(codon_i[diffs[0]], codon_j[diffs[0]]):
                s *= kappa
            if not is_synonymous(codon_i, codon_j):
                s *= omega
            S[i, j] = s

    return create_reversible_Q(S, pi, normalize=True)


def gy94(
    kappa: float = 2.0,
    omega: float = 0.4,
    pi: Optional[Sequence[float]] = None,
) -> SubstitutionModel:
    """
    Goldman-Yang codon model with a single omega (codeml's M0).

    Parameters
    ----------
    kappa : float
        Transition/transversion ratio
    omega : float
        dN/dS ratio
    pi : sequence of 61 floats, optional
        Codon frequencies (default: uniform)

    Returns
    -------
    SubstitutionModel
    """
    if kappa <= 0 or omega < 0:
        raise ValueError(f"kappa must be positive and omega non-negative, got {kappa}, {omega}")
    if pi is None:
        pi = np.ones(61) / 61
    else:
        pi = np.asarray(pi, dtype=float)
        if len(pi) != 61:
            raise ValueError(f"pi must have length 61, got {len(pi)}")
        pi = pi / pi.sum()

    return SubstitutionModel(
        name='GY94',
        states=CODONS,
        Q=build_codon_Q_matrix(kappa, omega, pi),
        pi=pi,
        parameters={'kappa': float(kappa), 'omega': float(omega)},
    )
