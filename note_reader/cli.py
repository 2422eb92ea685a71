"""
Command-line interface for Note Reader.
"""

import os
import sys

import click
from rich.console import Console
from rich.progress import Progress, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

from note_reader.debug import dump_lines
from note_reader.document import NoteDocument
from note_reader.export import export_pdf, export_png
from note_reader.exceptions import NoteReaderException
from note_reader.options import RenderOptions
from note_reader.utils import configure_logging, format_file_size
from note_reader.validators import validate_note

console = Console()


def _open_or_exit(input_note):
    is_valid, error_msg = validate_note(input_note)
    if not is_valid:
        console.print(f"[bold red]✗ Error:[/bold red] {error_msg}")
        sys.exit(1)
    return NoteDocument.open(input_note, RenderOptions.from_env())


@click.group()
@click.version_option(version="1.0.0")
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """
    Note Reader CLI - Render handwritten .note documents.
    """
    configure_logging(verbose)


@cli.command(name="info")
@click.argument('input_note', type=click.Path(exists=True))
def show_info(input_note):
    """
    Display information about a note file.

    Example:

        note-reader info lecture.note
    """
    try:
        with _open_or_exit(input_note) as document:
            info = document.info

        table = Table(title=f"Note Information: {os.path.basename(input_note)}")
        table.add_column("Property", style="cyan", no_wrap=True)
        table.add_column("Value", style="green")

        table.add_row("File Path", os.path.abspath(input_note))
        table.add_row("File Size", format_file_size(info.file_size))
        table.add_row("Number of Pages", str(info.page_count))
        table.add_row("Page Size", f"{info.width:g} x {info.height:g}")
        table.add_row("Paper", info.paper_identifier or "unknown")
        table.add_row("Strokes", str(info.stroke_count))
        table.add_row("Media Objects", str(info.media_objects))
        table.add_row("Graph Nodes", str(info.node_count))

        console.print()
        console.print(table)
        console.print()

    except NoteReaderException as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)


@cli.command(name="export")
@click.argument('input_note', type=click.Path(exists=True))
@click.option(
    '--output', '-o',
    default=None,
    help='Output PDF path (defaults to the note name with .pdf)',
    type=click.Path()
)
@click.option(
    '--title', '-t',
    default=None,
    help='Title stored in the PDF metadata',
    type=str
)
def export(input_note, output, title):
    """
    Export every page of a note to a PDF file.

    Examples:

        note-reader export lecture.note

        note-reader export lecture.note -o out/lecture.pdf -t "Lecture 3"
    """
    output = output or os.path.splitext(input_note)[0] + ".pdf"
    try:
        with _open_or_exit(input_note) as document:
            console.print(f"\n[bold cyan]Rendering {document.page_count} page(s)...[/bold cyan]")

            with Progress(
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console
            ) as progress:
                task = progress.add_task("Exporting", total=document.page_count)
                result = export_pdf(document, output, title=title)
                progress.update(task, completed=result.pages)

        console.print(f"\n[bold green]✓ Exported {result.pages} page(s)[/bold green]")
        console.print(f"[dim]Output file: {os.path.abspath(result.output_file)}[/dim]")
        for warning in result.warnings:
            console.print(f"  [yellow]![/yellow] {warning}")
        console.print()

    except NoteReaderException as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)


@cli.command(name="render")
@click.argument('input_note', type=click.Path(exists=True))
@click.option(
    '--page', '-p',
    default=1,
    help='Page number to render (1-indexed)',
    type=int
)
@click.option(
    '--output', '-o',
    required=True,
    help='Output PNG path',
    type=click.Path()
)
@click.option(
    '--scale', '-s',
    default=1.0,
    help='Scale factor applied to the page size',
    type=float
)
def render(input_note, page, output, scale):
    """
    Render a single page to a PNG image.

    Example:

        note-reader render lecture.note -p 2 -o page2.png --scale 2
    """
    if scale <= 0:
        console.print("[bold red]✗ Error:[/bold red] Scale must be positive")
        sys.exit(1)
    try:
        with _open_or_exit(input_note) as document:
            result = export_png(document, page - 1, output, scale=scale)

        console.print(f"\n[bold green]✓ Rendered page {page}[/bold green]")
        console.print(f"[dim]Output file: {os.path.abspath(result.output_file)}[/dim]")
        for warning in result.warnings:
            console.print(f"  [yellow]![/yellow] {warning}")
        console.print()

    except NoteReaderException as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)


@cli.command(name="dump")
@click.argument('input_note', type=click.Path(exists=True))
@click.option(
    '--index', '-i',
    default=None,
    help='Node table index to dump (defaults to the document metadata)',
    type=int
)
@click.option(
    '--depth', '-d',
    default=6,
    help='Maximum nesting depth to print',
    type=int
)
def dump(input_note, index, depth):
    """
    Dump part of the object graph for reverse engineering.

    Examples:

        note-reader dump lecture.note

        note-reader dump lecture.note -i 42 -d 10
    """
    try:
        with _open_or_exit(input_note) as document:
            indices = [index] if index is not None else [1, 2]
            for table_index in indices:
                node = document.graph[table_index]
                console.print(f"[bold cyan]$objects[{table_index}][/bold cyan]")
                for line in dump_lines(node, max_depth=depth):
                    console.print(line, markup=False, highlight=False)

    except NoteReaderException as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)


if __name__ == '__main__':
    cli()
