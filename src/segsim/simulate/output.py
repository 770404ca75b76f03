"""
Output formatting for simulated sequences.
"""

import json
from pathlib import Path
from typing import Dict

from ..io.sequences import Alignment
from ..io.trees import Tree

FORMATS = ('fasta', 'phylip')


class SimulationOutput:
    """
    Handle output formatting for simulated alignments.

    Provides methods to write:
    - Sequences in FASTA or sequential PHYLIP format
    - Parameters in JSON format
    - Trees in Newick format
    """

    @staticmethod
    def write_fasta(
        alignment: Alignment,
        output_path: Path,
        line_width: int = 60
    ):
        """
        Write sequences to FASTA format.

        Parameters
        ----------
        alignment : Alignment
            Simulated alignment
        output_path : Path
            Output file path
        line_width : int
            Number of characters per line (default 60)
        """
        with open(output_path, 'w') as f:
            for name, seq in alignment.to_strings().items():
                f.write(f">{name}\n")
                for i in range(0, len(seq), line_width):
                    f.write(seq[i:i + line_width] + '\n')
                if not seq:
                    f.write('\n')

    @staticmethod
    def write_phylip(alignment: Alignment, output_path: Path):
        """
        Write sequences to sequential PHYLIP format.

        The header holds the number of sequences and of characters; names
        are separated from sequences by two spaces (relaxed PHYLIP).
        """
        sequences = alignment.to_strings()
        n_chars = len(next(iter(sequences.values()), ''))
        width = max((len(name) for name in sequences), default=0)

        with open(output_path, 'w') as f:
            f.write(f"{len(sequences)} {n_chars}\n")
            for name, seq in sequences.items():
                f.write(f"{name.ljust(width)}  {seq}\n")

    @classmethod
    def write_alignment(cls, alignment: Alignment, output_path: Path, format: str = 'fasta'):
        """Write an alignment in one of FORMATS."""
        if format == 'fasta':
            cls.write_fasta(alignment, output_path)
        elif format == 'phylip':
            cls.write_phylip(alignment, output_path)
        else:
            raise ValueError(f"Unknown output format: {format}")

    @staticmethod
    def write_parameters(
        params: Dict,
        output_path: Path,
        indent: int = 2
    ):
        """
        Write simulation parameters to JSON file.

        Parameters
        ----------
        params : dict
            Simulation parameters
        output_path : Path
            Output file path
        indent : int
            JSON indentation level
        """
        with open(output_path, 'w') as f:
            json.dump(params, f, indent=indent)

    @staticmethod
    def write_tree(tree: Tree, output_path: Path):
        """Write a tree in Newick format."""
        tree.write(Path(output_path))
