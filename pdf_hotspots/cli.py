"""
Command-line interface for PDF Hotspots.
"""

import asyncio
import json
import logging
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from pdf_hotspots import __version__
from pdf_hotspots.controller import InteractiveController
from pdf_hotspots.document import HotspotDocument
from pdf_hotspots.exceptions import HotspotError
from pdf_hotspots.manifest import HotspotAnnotation, new_annotation_id
from pdf_hotspots.parser import get_page_dimensions, has_hotspots, parse_manifest
from pdf_hotspots.render import PageRenderCache, PageRenderCacheConfig, PyMuPDFRasterizer
from pdf_hotspots.types import PageSize, Point
from pdf_hotspots.utils import configure_logging, format_file_size

console = Console()


def _fail(message):
    console.print(f"[bold red]✗ Error:[/bold red] {message}")
    sys.exit(1)


def _read_pdf(path):
    return Path(path).read_bytes()


def _load_hotspot_spec(path):
    """Read ``{"hotspots": [...], "assets": {key: path}}``; asset paths are relative to the file."""
    spec_path = Path(path)
    data = json.loads(spec_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise click.BadParameter("hotspot file must contain a JSON object", param_hint="HOTSPOTS_JSON")

    hotspots = []
    for entry in data.get("hotspots", []):
        entry = dict(entry)
        entry.setdefault("id", new_annotation_id())
        hotspots.append(HotspotAnnotation.from_dict(entry))

    assets = {}
    for key, asset_path in (data.get("assets") or {}).items():
        resolved = Path(asset_path)
        if not resolved.is_absolute():
            resolved = spec_path.parent / resolved
        assets[key] = resolved.read_bytes()
    return hotspots, assets


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """
    PDF Hotspots CLI - Embed and inspect interactive hotspots in PDF files.
    """
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


@cli.command(name="info")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
def show_info(input_pdf):
    """
    Display page sizes and hotspot status of a PDF file.

    Example:

        pdf-hotspots info guide.pdf
    """
    data = _read_pdf(input_pdf)
    dimensions = get_page_dimensions(data)
    manifest = parse_manifest(data)

    table = Table(title=f"PDF Information: {os.path.basename(input_pdf)}")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("File Size", format_file_size(len(data)))
    table.add_row("Number of Pages", str(len(dimensions)))
    for index, size in enumerate(dimensions):
        table.add_row(f"Page {index + 1}", f"{size.width:g} x {size.height:g} pt")
    table.add_row("Hotspots Embedded", "Yes" if has_hotspots(data) else "No")
    if manifest is not None:
        table.add_row("Manifest Id", manifest.id)
        table.add_row("Hotspots", str(len(manifest.annotations)))
        table.add_row("Shared Assets", str(len(manifest.shared_assets)))
        title = (manifest.metadata or {}).get("title")
        if title:
            table.add_row("Title", str(title))

    console.print()
    console.print(table)
    console.print()


@cli.command(name="list")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--page', '-p', type=int, default=None, help='Only list hotspots on this page (0-indexed)')
def list_hotspots(input_pdf, page):
    """
    List the hotspots embedded in a PDF file.

    Example:

        pdf-hotspots list guide.pdf --page 0
    """
    manifest = parse_manifest(_read_pdf(input_pdf))
    if manifest is None:
        console.print("[yellow]No hotspots embedded.[/yellow]")
        return

    annotations = manifest.annotations if page is None else manifest.annotations_for_page(page)
    table = Table(title=f"Hotspots: {os.path.basename(input_pdf)}")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Page", justify="right")
    table.add_column("Type", style="magenta")
    table.add_column("Rect (l, b, w, h)")
    table.add_column("Content", style="green")

    for annotation in annotations:
        rect = annotation.rect
        content = annotation.content
        summary = content.title or content.text or content.asset_key or ("<image>" if content.has_image else "")
        table.add_row(
            annotation.id,
            str(annotation.page_index),
            annotation.type.identifier,
            f"{rect.left:g}, {rect.bottom:g}, {rect.width:g}, {rect.height:g}",
            summary,
        )

    console.print(table)
    console.print(f"[dim]{len(annotations)} hotspot(s)[/dim]")


@cli.command(name="embed")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.argument('hotspots_json', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', required=True, type=click.Path(dir_okay=False), help='Output PDF path')
def embed(input_pdf, hotspots_json, output):
    """
    Add hotspots described in a JSON file to a PDF.

    Hotspots whose id is already embedded in INPUT_PDF are replaced.

    Example:

        pdf-hotspots embed guide.pdf hotspots.json -o guide-interactive.pdf
    """
    try:
        hotspots, assets = _load_hotspot_spec(hotspots_json)
        document = HotspotDocument.from_bytes(_read_pdf(input_pdf))
        for key, data in assets.items():
            document.add_shared_asset(data, key=key)
        for hotspot in hotspots:
            if document.get_hotspot(hotspot.id) is not None:
                document.update_hotspot(hotspot)
                continue
            document.add_hotspot(
                hotspot.page_index,
                hotspot.rect,
                hotspot.type,
                hotspot.content,
                show_default_icon=hotspot.show_default_icon,
                initially_visible=hotspot.initially_visible,
                label=hotspot.label,
                id=hotspot.id,
            )
        data = document.save()
    except (HotspotError, OSError, ValueError, KeyError, TypeError, OverflowError) as e:
        _fail(e)

    destination = Path(output)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(data)
    console.print(f"[bold green]✓ Embedded {len(document.hotspots)} hotspot(s)[/bold green]")
    console.print(f"[dim]Output: {destination.resolve()} ({format_file_size(len(data))})[/dim]")


@cli.command(name="hit")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--page', '-p', type=int, default=0, show_default=True, help='Page index (0-indexed)')
@click.option('--x', 'x', type=float, required=True, help='Horizontal position, from the left edge')
@click.option('--y', 'y', type=float, required=True, help='Vertical position, from the top edge')
@click.option('--width', type=float, default=None, help='Rendered page width (default: page width in points)')
@click.option('--height', type=float, default=None, help='Rendered page height (default: page height in points)')
def hit(input_pdf, page, x, y, width, height):
    """
    Report the hotspots under a point of a rendered page.

    Example:

        pdf-hotspots hit guide.pdf --page 0 --x 120 --y 80 --width 600 --height 848
    """
    controller = InteractiveController()
    controller.initialize(_read_pdf(input_pdf))
    page_size = controller.get_page_dimensions(page)
    if page_size is None:
        _fail(f"Page {page} is out of range (document has {controller.page_count} pages)")

    rendered = PageSize(width or page_size.width, height or page_size.height)
    try:
        matches = controller.hotspots_at(Point(x, y), rendered, page_index=page)
    except HotspotError as e:
        _fail(e)

    if not matches:
        console.print("[yellow]No hotspot at this point.[/yellow]")
        return
    for annotation in matches:
        label = annotation.content.title or annotation.label or ""
        console.print(f"  • [cyan]{annotation.id}[/cyan] {label}")


async def _render_page(data, page, config):
    cache = PageRenderCache(data, len(get_page_dimensions(data)), PyMuPDFRasterizer(), config)
    try:
        image = await cache.render_page(page)
        return image.copy() if image is not None else None
    finally:
        cache.dispose()


@cli.command(name="render")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--page', '-p', type=int, default=0, show_default=True, help='Page index (0-indexed)')
@click.option('--dpi', type=float, default=150.0, show_default=True, help='Render resolution')
@click.option('--output', '-o', required=True, type=click.Path(dir_okay=False), help='Output image path')
def render(input_pdf, page, dpi, output):
    """
    Rasterize one page to an image file.

    Example:

        pdf-hotspots render guide.pdf --page 0 --dpi 200 -o page.png
    """
    try:
        config = PageRenderCacheConfig(max_cached_pages=1, render_dpi=dpi, pre_render_adjacent=False)
    except HotspotError as e:
        _fail(e)

    image = asyncio.run(_render_page(_read_pdf(input_pdf), page, config))
    if image is None:
        _fail(f"Could not render page {page}")

    image.save(output)
    console.print(f"[bold green]✓ Rendered page {page}[/bold green] ({image.width}x{image.height})")
    console.print(f"[dim]Output: {os.path.abspath(output)}[/dim]")


def main():
    cli()


if __name__ == "__main__":
    main()
