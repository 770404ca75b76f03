"""Check-segments command implementation."""

from pathlib import Path
from typing import Optional

import typer

from ...exceptions import SegsimError
from ...io.segments import load_segments
from ...segments import allocate_sites, boundaries, validate_segments


def run_check(trees: Path, sites: Optional[int]):
    """Validate a segment file and print its segments."""
    try:
        segments = load_segments(trees)
        validate_segments(segments)
        allocation = allocate_sites(sites, boundaries(segments)) if sites else None
    except SegsimError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"{len(segments)} segment(s), {segments[0].tree.n_leaves} leaves")
    for index, segment in enumerate(segments):
        line = f"  {index}: [{segment.begin:g}, {segment.end:g}]"
        if allocation is not None:
            site_range = allocation[index]
            line += f"  sites {site_range} ({site_range.width})"
        typer.echo(line)
