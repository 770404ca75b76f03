"""Main CLI application for segsim."""

import typer
from pathlib import Path
from typing import Optional
from enum import Enum

app = typer.Typer(
    name="segsim",
    help="Simulate sequence alignments along one or more segment trees",
    no_args_is_help=True,
)


class AlphabetChoice(str, Enum):
    """Sequence alphabet."""
    DNA = "dna"
    RNA = "rna"
    PROTEIN = "protein"
    CODON = "codon"


class OutputFormat(str, Enum):
    """Alignment output format."""
    FASTA = "fasta"
    PHYLIP = "phylip"


@app.command()
def simulate(
    tree: Optional[Path] = typer.Option(
        None,
        "--tree", "-t",
        help="Tree file (Newick format with branch lengths)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    trees: Optional[Path] = typer.Option(
        None,
        "--trees", "-T",
        help="Segment file: one '<begin> <end> <tree>;' record per segment",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output alignment file",
    ),
    sites: Optional[int] = typer.Option(
        None,
        "--sites", "-n",
        help="Number of sites to simulate (default: 100)",
        min=1,
    ),
    rates: Optional[Path] = typer.Option(
        None,
        "--rates", "-r",
        help="Tab-separated table of per-site rates (sets the number of sites)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    rate_column: Optional[str] = typer.Option(
        None,
        "--rate-column",
        help="Column of the rate table holding the rates (default: pr)",
    ),
    alphabet: Optional[AlphabetChoice] = typer.Option(
        None,
        "--alphabet", "-a",
        help="Sequence alphabet (default: dna)",
    ),
    model: Optional[str] = typer.Option(
        None,
        "--model", "-m",
        help="Substitution model (JC69, K80, HKY85, GTR, Poisson, GY94)",
    ),
    kappa: Optional[float] = typer.Option(
        None,
        "--kappa",
        help="Transition/transversion ratio (default: 2.0)",
        min=0.0,
    ),
    omega: Optional[float] = typer.Option(
        None,
        "--omega",
        help="dN/dS ratio for codon models (default: 0.4)",
        min=0.0,
    ),
    gamma_alpha: Optional[float] = typer.Option(
        None,
        "--gamma-alpha",
        help="Shape of a discrete gamma distribution of site rates",
    ),
    gamma_categories: Optional[int] = typer.Option(
        None,
        "--gamma-categories",
        help="Number of gamma rate categories (default: 4)",
        min=1,
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Random seed for reproducibility",
    ),
    format: Optional[OutputFormat] = typer.Option(
        None,
        "--format",
        help="Output format (default: fasta)",
    ),
    tagged_tree: Optional[Path] = typer.Option(
        None,
        "--tagged-tree",
        help="Write the tree with node ids to this file and exit without simulating",
    ),
    param: Optional[Path] = typer.Option(
        None,
        "--param", "-p",
        help="Parameter file of key=value lines (options on the command line win)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    output_params: bool = typer.Option(
        True,
        "--output-params/--no-output-params",
        help="Write parameters to JSON file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Log each simulation step",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Suppress progress messages",
    ),
):
    """
    Simulate an alignment along one tree or a series of segment trees.

    With --trees, each segment of the alignment evolves along its own tree;
    all trees must share the same leaves and the segments must cover [0, 1]
    without gaps.

    Examples:

        \b
        # 1000 sites along a single tree
        segsim simulate -t tree.nwk -o sim.fasta -n 1000 --seed 42

        \b
        # Recombinant alignment, HKY85 with gamma rates
        segsim simulate -T segments.txt -o sim.fasta -n 1000 -m HKY85 --gamma-alpha 0.5

        \b
        # Site rates from a table
        segsim simulate -T segments.txt -r rates.tsv -o sim.phy --format phylip
    """
    from .commands.simulate import run_simulate

    run_simulate(
        param=param,
        overrides=dict(
            tree_file=tree,
            segments_file=trees,
            output=output,
            n_sites=sites,
            rates_file=rates,
            rate_column=rate_column,
            alphabet=alphabet.value if alphabet else None,
            model=model,
            kappa=kappa,
            omega=omega,
            gamma_alpha=gamma_alpha,
            gamma_categories=gamma_categories,
            seed=seed,
            output_format=format.value if format else None,
            tagged_tree=tagged_tree,
        ),
        output_params=output_params,
        verbose=verbose,
        quiet=quiet,
    )


@app.command(name="check-segments")
def check_segments(
    trees: Path = typer.Argument(
        ...,
        help="Segment file to check",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    sites: Optional[int] = typer.Option(
        None,
        "--sites", "-n",
        help="Also show the site range of each segment for this many sites",
        min=1,
    ),
):
    """
    Check a segment file without simulating.

    Prints one line per segment with its boundaries and number of leaves.

    Example:
        segsim check-segments segments.txt --sites 1000
    """
    from .commands.check import run_check

    run_check(trees=trees, sites=sites)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
