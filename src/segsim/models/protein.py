"""
Protein substitution models.
"""

import numpy as np

from ..core.matrix import create_reversible_Q
from ..io.sequences import AMINO_ACIDS
from .base import SubstitutionModel


def poisson() -> SubstitutionModel:
    """Poisson model: equal exchange rates and frequencies among amino acids."""
    pi = np.ones(20) / 20
    return SubstitutionModel(
        name='Poisson',
        states=AMINO_ACIDS,
        Q=create_reversible_Q(np.ones((20, 20)), pi),
        pi=pi,
    )
