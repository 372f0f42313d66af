"""Click CLI commands for IsoCity."""

import logging

import click

from .errors import IsoCityError
from .raster import render_png
from .scene import Scene
from .system import create_building_system
from .venues import VENUE_PRESETS

logger = logging.getLogger(__name__)


def _build_system(geojson: str, venue: str, max_buildings: int, min_area: float):
    scene = Scene()
    system = create_building_system(scene, venue, max_buildings=max_buildings,
                                    min_building_area=min_area)
    accepted = system.load_geojson(geojson)
    return scene, system, accepted


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose: bool):
    """IsoCity CLI for rendering isometric building footprints."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')


@cli.command()
def venues():
    """List the preset venue anchors."""
    for key, preset in VENUE_PRESETS.items():
        ox, oy = preset.world_offset
        click.echo(f"{key:<14} {preset.display_name:<22} "
                   f"lat={preset.origin.lat:.4f} lng={preset.origin.lng:.4f} "
                   f"offset=({ox:g}, {oy:g})")


@cli.command()
@click.argument('geojson', type=click.Path(exists=True, dir_okay=False))
@click.option('--venue', default='pittsburgh', show_default=True, help='Venue preset')
@click.option('--max-buildings', default=500, show_default=True, help='Building cap')
@click.option('--min-area', default=100.0, show_default=True, help='Minimum footprint area')
def stats(geojson: str, venue: str, max_buildings: int, min_area: float):
    """Ingest GEOJSON and print per-type building counts."""
    try:
        _, system, accepted = _build_system(geojson, venue, max_buildings, min_area)
    except IsoCityError as e:
        raise click.ClickException(str(e))

    result = system.get_stats()
    click.echo(f"Accepted {accepted} buildings")
    for type_name, count in sorted(result['by_type'].items()):
        click.echo(f"  {type_name:<12} {count}")
    system.destroy()


@cli.command()
@click.argument('geojson', type=click.Path(exists=True, dir_okay=False))
@click.argument('output', type=click.Path(dir_okay=False))
@click.option('--venue', default='pittsburgh', show_default=True, help='Venue preset')
@click.option('--width', default=1024, show_default=True, help='Image width (px)')
@click.option('--height', default=768, show_default=True, help='Image height (px)')
@click.option('--max-buildings', default=500, show_default=True, help='Building cap')
@click.option('--min-area', default=100.0, show_default=True, help='Minimum footprint area')
def render(geojson: str, output: str, venue: str, width: int, height: int,
           max_buildings: int, min_area: float):
    """Ingest GEOJSON and write the rendered map to OUTPUT (PNG)."""
    try:
        scene, system, accepted = _build_system(geojson, venue, max_buildings, min_area)
    except IsoCityError as e:
        raise click.ClickException(str(e))

    path = render_png(scene, output, size=(width, height))
    click.echo(f"Rendered {accepted} buildings to {path}")
    system.destroy()


if __name__ == '__main__':
    cli()
