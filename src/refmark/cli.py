"""refmark CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from refmark.converter.html_converter import convert_html
from refmark.exceptions import MarkdownError
from refmark.parser.md_parser import MarkdownDocument
from refmark.renderer.fragment_renderer import FragmentRenderer
from refmark.renderer.markdown_renderer import MarkdownRenderer
from refmark.renderer.text_renderer import TextRenderer

_INPUT = click.Path(exists=True, dir_okay=False, path_type=Path)
_OUTPUT_HELP = "Output path (defaults to stdout)"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """Convert HTML to reference-style Markdown and maintain its references."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("input_path", type=_INPUT)
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help=_OUTPUT_HELP)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["markdown", "text", "fragments"], case_sensitive=False),
    default="markdown",
    show_default=True,
    help="Output representation",
)
@click.option("--no-line-feeds", is_flag=True, help="Join text blocks with spaces instead of line breaks")
@click.option("--title", type=str, default="Untitled", show_default=True, help="Default title for fragments")
def convert(
    input_path: Path,
    output: Path | None,
    output_format: str,
    no_line_feeds: bool,
    title: str,
) -> None:
    """Convert an HTML (or plain text) file."""
    html = input_path.read_text(encoding="utf-8", errors="ignore")
    output_format = output_format.lower()

    if output_format == "text":
        text_writer = TextRenderer(line_feeds=not no_line_feeds)
        convert_html([text_writer], html)
        result = text_writer.text
    elif output_format == "fragments":
        fragment_writer = FragmentRenderer(title)
        convert_html([fragment_writer], html)
        result = "".join(f"{f.type.value}\t{f.text}\n" for f in fragment_writer.fragments)
    else:
        md_writer = MarkdownRenderer()
        convert_html([md_writer], html)
        result = md_writer.markdown

    _emit(result, output)


@main.command()
@click.argument("input_path", type=_INPUT)
def refs(input_path: Path) -> None:
    """List the references of a Markdown file."""
    doc = _load(input_path)
    for ref_id in sorted(doc.references):
        reference = doc.references[ref_id]
        titles = " | ".join(t for t in reference.titles if t)
        click.echo(f"[{reference.id}]\t{reference.type.value}\t{reference.url}\t{titles}")


@main.command()
@click.argument("input_path", type=_INPUT)
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help=_OUTPUT_HELP)
def prune(input_path: Path, output: Path | None) -> None:
    """Remove empty links and references that are no longer cited."""
    doc = _load(input_path)
    removed = doc.remove_dead_references()
    _emit(doc.markdown, output)
    if output is not None:
        click.echo(f"Removed {removed} references: {output}")


@main.command()
@click.argument("input_path", type=_INPUT)
@click.argument("ref_ids", type=int, nargs=-1, required=True)
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help=_OUTPUT_HELP)
def remove(input_path: Path, ref_ids: tuple[int, ...], output: Path | None) -> None:
    """Remove references, keeping link titles as plain text."""
    doc = _load(input_path)
    for ref_id in ref_ids:
        doc.remove(ref_id)
    _emit(doc.markdown, output)


@main.command()
@click.argument("input_path", type=_INPUT)
@click.argument("ref_id", type=int)
@click.argument("url", type=str)
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help=_OUTPUT_HELP)
def relink(input_path: Path, ref_id: int, url: str, output: Path | None) -> None:
    """Point reference REF_ID at URL."""
    doc = _load(input_path)
    try:
        doc.get_reference(ref_id)
    except MarkdownError as exc:
        raise click.ClickException(str(exc)) from exc
    doc.set_url(ref_id, url)
    _emit(doc.markdown, output)


def _load(input_path: Path) -> MarkdownDocument:
    try:
        return MarkdownDocument.from_path(input_path)
    except MarkdownError as exc:
        raise click.ClickException(f"{input_path.name}: {exc}") from exc


def _emit(text: str, output: Path | None) -> None:
    if output is None:
        click.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")


if __name__ == "__main__":  # pragma: no cover
    main()
