"""Simulate command implementation."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from ...api import load_config_segments, simulate_from_config
from ...config import SimulationConfig
from ...exceptions import SegsimError
from ...simulate.output import SimulationOutput


def _fail(message: str):
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _write_tagged_tree(config: SimulationConfig, quiet: bool):
    """Write the single tree with node ids, without simulating."""
    tree = load_config_segments(config)[0].tree
    tree.tag_node_ids()
    SimulationOutput.write_tree(tree, config.tagged_tree)
    if not quiet:
        typer.echo(f"Tagged tree -> {config.tagged_tree}")


def run_simulate(
    param: Optional[Path],
    overrides: Dict[str, Any],
    output_params: bool,
    verbose: bool,
    quiet: bool,
):
    """Simulate an alignment and write it."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        base = SimulationConfig.from_param_file(param) if param else SimulationConfig()
        config = base.merge(**overrides)
        config.validate()
    except SegsimError as e:
        _fail(str(e))

    if not quiet:
        typer.echo("segsim Sequence Simulator")
        typer.echo("=" * 50)

    if config.tagged_tree is not None:
        try:
            _write_tagged_tree(config, quiet)
        except (SegsimError, OSError) as e:
            _fail(str(e))
        return

    if config.output is None:
        _fail("An output file (--output) is required")

    if not quiet:
        if config.tree_method == 'multiple':
            typer.echo(f"Segment file: {config.segments_file}")
        else:
            typer.echo(f"Tree file: {config.tree_file}")
        if config.rates_file is not None:
            typer.echo(f"Site rates: {config.rates_file} (column {config.rate_column})")
        typer.echo(f"Alphabet: {config.alphabet}")
        typer.echo("\nPerforming simulations...")

    def report(done: int, total: int):
        if not quiet:
            typer.echo(f"  Segment {done}/{total} done")

    try:
        result = simulate_from_config(config, progress=report)
    except (SegsimError, ValueError) as e:
        _fail(str(e))
    except OSError as e:
        _fail(f"Could not read input: {e}")

    try:
        SimulationOutput.write_alignment(result.alignment, config.output, config.output_format)
    except OSError as e:
        _fail(f"Could not write output: {e}")

    if not quiet:
        alignment = result.alignment
        typer.echo(f"\n{alignment.n_species} sequences x {alignment.n_sites} sites -> {config.output}")

    if output_params:
        params_path = config.output.parent / f"{config.output.stem}.params.json"
        try:
            SimulationOutput.write_parameters(result.parameters, params_path)
            if not quiet:
                typer.echo(f"Parameters -> {params_path}")
        except OSError as e:
            typer.echo(f"Warning: Could not write parameters: {e}", err=True)

    if not quiet:
        typer.echo("\nSimulation complete!")
