"""
Sequence alphabets and alignment handling.
"""

from dataclasses import dataclass
from typing import Mapping, Sequence

import numpy as np


# Genetic code tables (standard code)
GENETIC_CODE = {
    'TTT': 'F', 'TTC': 'F', 'TTA': 'L', 'TTG': 'L',
    'TCT': 'S', 'TCC': 'S', 'TCA': 'S', 'TCG': 'S',
    'TAT': 'Y', 'TAC': 'Y', 'TAA': '*', 'TAG': '*',
    'TGT': 'C', 'TGC': 'C', 'TGA': '*', 'TGG': 'W',
    'CTT': 'L', 'CTC': 'L', 'CTA': 'L', 'CTG': 'L',
    'CCT': 'P', 'CCC': 'P', 'CCA': 'P', 'CCG': 'P',
    'CAT': 'H', 'CAC': 'H', 'CAA': 'Q', 'CAG': 'Q',
    'CGT': 'R', 'CGC': 'R', 'CGA': 'R', 'CGG': 'R',
    'ATT': 'I', 'ATC': 'I', 'ATA': 'I', 'ATG': 'M',
    'ACT': 'T', 'ACC': 'T', 'ACA': 'T', 'ACG': 'T',
    'AAT': 'N', 'AAC': 'N', 'AAA': 'K', 'AAG': 'K',
    'AGT': 'S', 'AGC': 'S', 'AGA': 'R', 'AGG': 'R',
    'GTT': 'V', 'GTC': 'V', 'GTA': 'V', 'GTG': 'V',
    'GCT': 'A', 'GCC': 'A', 'GCA': 'A', 'GCG': 'A',
    'GAT': 'D', 'GAC': 'D', 'GAA': 'E', 'GAG': 'E',
    'GGT': 'G', 'GGC': 'G', 'GGA': 'G', 'GGG': 'G',
}

# State order T, C, A, G as in PAML
NUCLEOTIDES = ('T', 'C', 'A', 'G')
RNA_NUCLEOTIDES = ('U', 'C', 'A', 'G')
AMINO_ACIDS = tuple('ARNDCQEGHILKMFPSTWYV')

# Sense codons in TCAG order (stop codons excluded)
CODONS = tuple(
    a + b + c
    for a in NUCLEOTIDES for b in NUCLEOTIDES for c in NUCLEOTIDES
    if GENETIC_CODE[a + b + c] != '*'
)


@dataclass
class Alignment:
    """
    Multiple sequence alignment of encoded states.

    Attributes
    ----------
    names : list[str]
        Sequence names/labels
    sequences : ndarray, shape (n_species, n_sites)
        Encoded sequences as state indices
    states : tuple[str, ...]
        Character of each state index
    """

    names: list[str]
    sequences: np.ndarray
    states: Sequence[str]

    @property
    def n_species(self) -> int:
        return len(self.names)

    @property
    def n_sites(self) -> int:
        return self.sequences.shape[1]

    def __getitem__(self, name: str) -> np.ndarray:
        return self.sequences[self.names.index(name)]

    def to_strings(self) -> dict[str, str]:
        """
        Decode every sequence into characters.

        Returns
        -------
        dict
            Mapping from sequence name to its character sequence
        """
        lookup = np.array(self.states, dtype=object)
        return {
            name: ''.join(lookup[self.sequences[i]])
            for i, name in enumerate(self.names)
        }

    @classmethod
    def from_sequences(
        cls, sequences: Mapping[str, np.ndarray], states: Sequence[str]
    ) -> "Alignment":
        """Build an alignment from a name -> state array mapping."""
        names = list(sequences)
        if names:
            matrix = np.vstack([np.asarray(sequences[name]) for name in names])
        else:
            matrix = np.empty((0, 0), dtype=np.uint8)
        return cls(names=names, sequences=matrix, states=tuple(states))
