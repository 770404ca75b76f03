"""
Nucleotide substitution models.

States are ordered T, C, A, G (U, C, A, G for RNA).
"""

from typing import Optional, Sequence

import numpy as np

from ..core.matrix import create_reversible_Q
from ..io.sequences import NUCLEOTIDES, RNA_NUCLEOTIDES
from .base import SubstitutionModel

# Exchangeability slots of the GTR model, in TCAG indices
GTR_PAIRS = {
    'TC': (0, 1), 'TA': (0, 2), 'TG': (0, 3),
    'CA': (1, 2), 'CG': (1, 3), 'AG': (2, 3),
}


def is_transition(nuc1: str, nuc2: str) -> bool:
    """Check if nucleotide change is a transition (A<->G or C<->T)."""
    transitions = {('A', 'G'), ('G', 'A'), ('C', 'T'), ('T', 'C')}
    return (nuc1, nuc2) in transitions


def _frequencies(pi: Optional[Sequence[float]]) -> np.ndarray:
    if pi is None:
        return np.ones(4) / 4
    pi = np.asarray(pi, dtype=float)
    if len(pi) != 4:
        raise ValueError(f"pi must have length 4, got {len(pi)}")
    if np.any(pi <= 0):
        raise ValueError("pi must be strictly positive")
    return pi / pi.sum()


def _states(rna: bool) -> tuple[str, ...]:
    return RNA_NUCLEOTIDES if rna else NUCLEOTIDES


def hky85(kappa: float = 2.0, pi: Optional[Sequence[float]] = None, rna: bool = False) -> SubstitutionModel:
    """
    HKY85 model: transition/transversion ratio and unequal base frequencies.

    Parameters
    ----------
    kappa : float
        Transition/transversion ratio
    pi : sequence of 4 floats, optional
        Base frequencies in TCAG order (default: uniform)
    rna : bool
        Use U instead of T

    Returns
    -------
    SubstitutionModel
    """
    if kappa <= 0:
        raise ValueError(f"kappa must be positive, got {kappa}")
    pi = _frequencies(pi)

    S = np.ones((4, 4))
    for i, a in enumerate(NUCLEOTIDES):
        for j, b in enumerate(NUCLEOTIDES):
            if is_transition(a, b):
                S[i, j] = kappa

    Q = create_reversible_Q(S, pi)
    return SubstitutionModel(
        name='HKY85',
        states=_states(rna),
        Q=Q,
        pi=pi,
        parameters={'kappa': float(kappa), 'pi': pi.tolist()},
    )


def k80(kappa: float = 2.0, rna: bool = False) -> SubstitutionModel:
    """Kimura 2-parameter model (HKY85 with uniform base frequencies)."""
    model = hky85(kappa=kappa, rna=rna)
    model.name = 'K80'
    model.parameters = {'kappa': float(kappa)}
    return model


def jc69(rna: bool = False) -> SubstitutionModel:
    """Jukes-Cantor model: equal rates and base frequencies."""
    pi = np.ones(4) / 4
    return SubstitutionModel(
        name='JC69',
        states=_states(rna),
        Q=create_reversible_Q(np.ones((4, 4)), pi),
        pi=pi,
    )


def gtr(
    rates: Optional[dict] = None,
    pi: Optional[Sequence[float]] = None,
    rna: bool = False,
) -> SubstitutionModel:
    """
    General time-reversible model.

    Parameters
    ----------
    rates : dict, optional
        Exchangeabilities keyed by pair ('TC', 'TA', 'TG', 'CA', 'CG', 'AG');
        missing pairs default to 1
    pi : sequence of 4 floats, optional
        Base frequencies in TCAG order (default: uniform)
    rna : bool
        Use U instead of T

    Returns
    -------
    SubstitutionModel
    """
    rates = dict(rates or {})
    unknown = set(rates) - set(GTR_PAIRS)
    if unknown:
        raise ValueError(f"Unknown GTR rate(s): {', '.join(sorted(unknown))}")
    pi = _frequencies(pi)

    S = np.ones((4, 4))
    for pair, (i, j) in GTR_PAIRS.items():
        value = float(rates.get(pair, 1.0))
        if value <= 0:
            raise ValueError(f"GTR rate {pair} must be positive, got {value}")
        S[i, j] = S[j, i] = value

    return SubstitutionModel(
        name='GTR',
        states=_states(rna),
        Q=create_reversible_Q(S, pi),
        pi=pi,
        parameters={
            'rates': {pair: float(S[i, j]) for pair, (i, j) in GTR_PAIRS.items()},
            'pi': pi.tolist(),
        },
    )
