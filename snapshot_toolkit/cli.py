"""
Command-line interface for Snapshot Toolkit
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from snapshot_toolkit import __version__
from snapshot_toolkit.core.config import get_settings
from snapshot_toolkit.core.exceptions import SnapshotToolkitError
from snapshot_toolkit.core.paths import reference_directory
from snapshot_toolkit.visual_testing.comparison import ImageComparator
from snapshot_toolkit.visual_testing.reference_store import ReferenceStore, load_pixel_buffer
from snapshot_toolkit.visual_testing.verifier import SnapshotVerifier

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """Snapshot Toolkit - visual regression testing for UI components"""
    level = logging.DEBUG if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@main.command()
@click.argument("reference", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("candidate", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--tolerance", "-t", default=0.0, type=click.FloatRange(0.0, 1.0), help="Fraction of pixels allowed to differ")
@click.option("--channel-tolerance", default=None, type=click.IntRange(0, 255), help="Per-channel delta counted as equal (default: from settings)")
@click.option("--diff", "diff_path", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Write a diff image to this path")
def compare(
    reference: Path,
    candidate: Path,
    tolerance: float,
    channel_tolerance: int | None,
    diff_path: Path | None,
) -> None:
    """Compare CANDIDATE against REFERENCE"""
    if channel_tolerance is None:
        channel_tolerance = get_settings().channel_tolerance

    try:
        reference_buffer = load_pixel_buffer(reference)
        candidate_buffer = load_pixel_buffer(candidate)
        comparator = ImageComparator(channel_tolerance=channel_tolerance)
        result = comparator.compare(candidate_buffer, reference_buffer, tolerance)
    except SnapshotToolkitError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(2)

    table = Table(title="Snapshot Comparison", show_header=True, header_style="bold cyan")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_row("Reference", str(reference))
    table.add_row("Candidate", str(candidate))
    table.add_row("Differing pixels", f"{result.differing_pixel_count}/{result.total_pixels}")
    table.add_row("Differing fraction", f"{result.differing_pixel_fraction:.4%}")
    table.add_row("Tolerance", f"{result.tolerance:.4%}")
    table.add_row("Channel tolerance", str(result.channel_tolerance))
    if result.diagnostic is not None:
        table.add_row("Diagnostic", result.diagnostic.message)
    console.print(table)

    if diff_path is not None:
        diff_path.parent.mkdir(parents=True, exist_ok=True)
        comparator.generate_diff_image(candidate_buffer, reference_buffer).save(diff_path, "PNG")
        console.print(f"Diff image: [green]{diff_path}[/green]")

    if result.matches:
        console.print("[bold green]MATCH[/bold green]")
    else:
        console.print("[bold red]MISMATCH[/bold red]")
        sys.exit(1)


@main.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("key")
@click.option("--suffix", default="", help="Reference directory suffix")
def record(image: Path, key: str, suffix: str) -> None:
    """Record IMAGE as the reference for KEY"""
    try:
        root = get_settings().require_reference_image_dir()
        store = ReferenceStore(reference_directory(root, suffix))
        path = store.record(load_pixel_buffer(image), key)
    except SnapshotToolkitError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(2)

    console.print(f"Recorded reference: [green]{path}[/green]")


@main.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("key")
@click.option("--suffix", "suffixes", multiple=True, help="Suffix to try, in order (repeatable; default: platform suffixes)")
@click.option("--tolerance", "-t", default=0.0, type=click.FloatRange(0.0, 1.0), help="Fraction of pixels allowed to differ")
@click.option("--record", "record_mode", is_flag=True, help="Record instead of comparing")
def verify(image: Path, key: str, suffixes: tuple[str, ...], tolerance: float, record_mode: bool) -> None:
    """Verify IMAGE against the references for KEY, trying each suffix in order"""
    settings = get_settings()
    verifier = SnapshotVerifier(settings=settings, record_mode=record_mode or None)

    try:
        result = verifier.verify(image, key, suffixes=suffixes or None, tolerance=tolerance)
    except SnapshotToolkitError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(2)

    table = Table(title=f"Verification: {key}", show_header=True, header_style="bold cyan")
    table.add_column("Suffix", style="cyan")
    table.add_column("Reference")
    table.add_column("Outcome")
    for attempt in result.attempts:
        table.add_row(attempt.suffix or "<root>", str(attempt.path), attempt.describe())
    console.print(table)

    if result.recorded:
        console.print(f"[yellow]Recorded reference:[/yellow] {result.reference_path}")
    elif result.passed:
        console.print(f"[bold green]MATCH[/bold green] ({result.suffix or '<root>'})")
    else:
        console.print("[bold red]MISMATCH[/bold red]")
        if settings.failure_image_dir is not None:
            for path in verifier.save_failure_images(result):
                console.print(f"  {path}")
        sys.exit(1)


@main.command(name="list")
@click.option("--suffix", default="", help="Reference directory suffix")
def list_references(suffix: str) -> None:
    """List recorded reference keys"""
    try:
        root = get_settings().require_reference_image_dir()
    except SnapshotToolkitError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(2)

    store = ReferenceStore(reference_directory(root, suffix))
    keys = store.list_keys()
    if not keys:
        console.print(f"[yellow]No reference images in {store.directory}[/yellow]")
        return

    table = Table(title=f"Reference Images ({store.directory})", show_header=True, header_style="bold cyan")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Path")
    for key in keys:
        table.add_row(key, str(store.path_for(key)))
    console.print(table)


@main.command()
def config() -> None:
    """Show effective configuration"""
    settings = get_settings()

    table = Table(title="Snapshot Settings", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value")
    for name, value in settings.model_dump().items():
        table.add_row(name, "" if value is None else str(value))
    console.print(table)


if __name__ == "__main__":
    main()
