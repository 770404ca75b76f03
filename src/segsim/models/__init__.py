"""
Substitution models for sequence simulation.

Available models, by alphabet:

- dna / rna: JC69, K80, HKY85, GTR
- protein: Poisson
- codon: GY94 (alias M0)
"""

from typing import Any, Optional

from .base import SubstitutionModel
from .codon import gy94
from .nucleotide import gtr, hky85, jc69, k80
from .protein import poisson

MODELS_BY_ALPHABET = {
    'dna': ('JC69', 'K80', 'HKY85', 'GTR'),
    'rna': ('JC69', 'K80', 'HKY85', 'GTR'),
    'protein': ('POISSON',),
    'codon': ('GY94', 'M0'),
}

DEFAULT_MODELS = {'dna': 'HKY85', 'rna': 'HKY85', 'protein': 'POISSON', 'codon': 'GY94'}


def get_model(
    name: Optional[str] = None,
    alphabet: str = 'dna',
    kappa: float = 2.0,
    omega: float = 0.4,
    rates: Optional[dict] = None,
    pi: Optional[Any] = None,
) -> SubstitutionModel:
    """
    Build a substitution model by name.

    Parameters
    ----------
    name : str, optional
        Model name (case-insensitive); defaults to the alphabet's default model
    alphabet : str
        'dna', 'rna', 'protein' or 'codon'
    kappa : float
        Transition/transversion ratio (K80, HKY85, GY94)
    omega : float
        dN/dS ratio (GY94)
    rates : dict, optional
        Exchangeabilities (GTR)
    pi : sequence of float, optional
        Equilibrium frequencies (HKY85, GTR, GY94)

    Returns
    -------
    SubstitutionModel

    Raises
    ------
    ValueError
        If the model does not exist for the alphabet
    """
    alphabet = alphabet.lower()
    if alphabet not in MODELS_BY_ALPHABET:
        raise ValueError(f"Unknown alphabet: {alphabet}")
    key = (name or DEFAULT_MODELS[alphabet]).upper()
    if key not in MODELS_BY_ALPHABET[alphabet]:
        raise ValueError(
            f"Model {name} is not available for {alphabet} "
            f"(expected one of {', '.join(MODELS_BY_ALPHABET[alphabet])})"
        )

    rna = alphabet == 'rna'
    if key == 'JC69':
        return jc69(rna=rna)
    if key == 'K80':
        return k80(kappa=kappa, rna=rna)
    if key == 'HKY85':
        return hky85(kappa=kappa, pi=pi, rna=rna)
    if key == 'GTR':
        return gtr(rates=rates, pi=pi, rna=rna)
    if key == 'POISSON':
        return poisson()
    return gy94(kappa=kappa, omega=omega, pi=pi)


__all__ = [
    'SubstitutionModel',
    'get_model',
    'jc69',
    'k80',
    'hky85',
    'gtr',
    'poisson',
    'gy94',
]
