import logging
import sys
from pathlib import Path
from typing import List, Optional

import rich.traceback
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table
from rich.text import Text

from pigmnts import file_utils, legend
from pigmnts.errors import PigmntsError
from pigmnts.image import palette_from_image
from pigmnts.kmeans import KMeansConfig
from pigmnts.names import nearest_name
from pigmnts.palette import PaletteColor
from pigmnts.weights import Mood

DEFAULT_COUNT = 5

console = Console()
err_console = Console(stderr=True)


def pad_counts(counts: Optional[List[int]], num_files: int, default: int = DEFAULT_COUNT) -> List[int]:
    """One count per input file: given counts apply positionally, the rest use `default`."""
    counts = list(counts or [])
    return counts + [default] * (num_files - len(counts))


def build_palette_table(palette: List[PaletteColor], show_names: bool = False) -> Table:
    table = Table(box=None, padding=(0, 2), show_edge=False)
    table.add_column("")
    table.add_column("Hex", justify="center")
    table.add_column("Dominance", justify="center")
    if show_names:
        table.add_column("Name")

    for color in palette:
        row = [
            Text("  ", style=Style(bgcolor=color.hex)),
            Text(color.hex, style="bold"),
            f"{color.dominance_percent:.2f}%",
        ]
        if show_names:
            row.append(nearest_name(color.lab))
        table.add_row(*row)
    return table


def quiet_lines(palette: List[PaletteColor]) -> List[str]:
    return [f"{color.hex}:{color.dominance_percent:g}" for color in palette]


def export_palette(
    palette: List[PaletteColor],
    image_path: Path,
    legend_dir: Optional[Path],
    json_dir: Optional[Path],
    command_line_str: str,
) -> List[Path]:
    written: List[Path] = []
    if legend_dir:
        legend_image = legend.create_legend_image(palette)
        if legend_image is not None:
            written.append(file_utils.save_palette_png(
                legend_image,
                legend_dir / f"{image_path.stem}-palette.png",
                command_line_invocation=command_line_str,
                additional_metadata={
                    "Source": image_path.name,
                    "PaletteColors": str(len(palette)),
                    "Hex": " ".join(color.hex for color in palette),
                },
            ))
    if json_dir:
        written.append(file_utils.save_palette_json(
            palette, json_dir / f"{image_path.stem}-palette.json", source=image_path.name
        ))
    return written


def pigmnts_cli(
    input_files: List[Path] = typer.Argument(
        ..., metavar="FILE...", help="Input image file(s).",
    ),
    count: Optional[List[int]] = typer.Option(
        None, "--count", "-c", min=1, max=255,
        help=f"Number of colors in the palette. Repeat once per input file. Default: {DEFAULT_COUNT}.",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", "--silent",
        help="Suppress the normal output, print only HEX:DOMINANCE lines.",
    ),
    mood: Mood = typer.Option(
        Mood.DOMINANT, "--mood", case_sensitive=False, help="Weighting strategy for the cluster means.",
    ),
    batch_size: Optional[int] = typer.Option(
        None, "--batch-size", min=1, help="Cluster a random sample of this many pixels.",
    ),
    max_iterations: int = typer.Option(300, "--max-iterations", min=1, help="Iteration budget. Default: 300."),
    workers: int = typer.Option(5, "--workers", min=1, help="Threads for the assignment step. Default: 5."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for reproducible palettes."),
    names: bool = typer.Option(False, "--names", help="Show the nearest color name for every entry."),
    legend_dir: Optional[Path] = typer.Option(
        None, "--legend-dir", file_okay=False, help="Write a swatch legend PNG per input here.",
    ),
    json_dir: Optional[Path] = typer.Option(
        None, "--json-dir", file_okay=False, help="Write the palette as JSON per input here.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log clustering details to stderr."),
):
    """
    Create color palette from image.
    """
    command_line_str = " ".join(sys.argv)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(message)s", handlers=[RichHandler(console=err_console)]
        )

    counts = pad_counts(count, len(input_files))
    config = KMeansConfig(max_iterations=max_iterations, workers=workers, seed=seed)

    for image_path, palette_size in zip(input_files, counts):
        if not quiet:
            header = Text.assemble(
                ("Creating a palette of ", "bold white"),
                (str(palette_size), "bold blue"),
                (" colors from ", "bold white"),
                (image_path.stem, "bold blue"),
            )
            console.print(header)

        try:
            if quiet:
                palette, elapsed_ms = palette_from_image(
                    image_path, palette_size, mood=mood, batch_size=batch_size, config=config
                )
            else:
                with console.status("", spinner="dots"):
                    palette, elapsed_ms = palette_from_image(
                        image_path, palette_size, mood=mood, batch_size=batch_size, config=config
                    )
            written = export_palette(palette, image_path, legend_dir, json_dir, command_line_str)
        except (PigmntsError, OSError) as e:
            typer.secho(f"Problem creating palette: {e}", fg=typer.colors.RED, bold=True, err=True)
            raise typer.Exit(code=1)

        if quiet:
            for line in quiet_lines(palette):
                typer.echo(line)
            continue

        console.print()
        console.print(build_palette_table(palette, show_names=names))
        console.print()
        for path in written:
            typer.echo(f"Saved: {path}")
        typer.secho(f"✓ Success! Took {elapsed_ms}ms", fg=typer.colors.GREEN, bold=True)


def main():
    rich.traceback.install(show_locals=False, suppress=[typer])
    typer.run(pigmnts_cli)


if __name__ == "__main__":
    main()
