"""GeoCrop CLI — clip vector files to a boundary from the command line.

Usage::

    geocrop crop roads.geojson city.geojson -o roads_city.geojson
    geocrop crop parks.gpkg city.geojson --precision 7 --no-split
    geocrop validate-boundary city.geojson
    geocrop --version
"""

from __future__ import annotations

import logging
import sys

import click

from geocrop.core.exceptions import GeoCropError


@click.group(invoke_without_command=True)
@click.version_option(package_name="geocrop")
@click.option("-v", "--verbose", is_flag=True, help="Log progress to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """GeoCrop — clip map features to an administrative boundary."""
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("features_path", type=click.Path(exists=True))
@click.argument("boundary_path", type=click.Path(exists=True))
@click.option("-o", "--output", type=click.Path(), help="Save the clipped features to this file.")
@click.option("--precision", type=int, default=None, help="Decimal places used for duplicate detection.")
@click.option("--no-split", is_flag=True, help="Keep multi-part results as one feature.")
def crop(
    features_path: str,
    boundary_path: str,
    output: str | None,
    precision: int | None,
    no_split: bool,
) -> None:
    """Clip the features in FEATURES_PATH to the boundary in BOUNDARY_PATH."""
    from geocrop.api import crop_file

    click.echo(f"Cropping {features_path} to {boundary_path}...")

    try:
        result = crop_file(
            features_path,
            boundary_path,
            output=output,
            precision=precision,
            split=False if no_split else None,
        )
    except (GeoCropError, ValueError, OSError) as exc:
        click.secho(f"Error: {exc}", fg="red")
        sys.exit(1)

    click.echo()
    click.echo(result.summary())


@cli.command(name="validate-boundary")
@click.argument("boundary_path", type=click.Path(exists=True))
def validate_boundary_cmd(boundary_path: str) -> None:
    """Check that BOUNDARY_PATH holds a closed Polygon/MultiPolygon."""
    from geocrop.api import validate_boundary_file

    try:
        boundary = validate_boundary_file(boundary_path)
    except (GeoCropError, ValueError, OSError) as exc:
        click.secho(f"Invalid boundary: {exc}", fg="red")
        sys.exit(1)

    click.secho(f"Boundary OK: {boundary.kind.value} with {len(boundary.rings)} ring(s)", fg="green")


if __name__ == "__main__":
    cli()
