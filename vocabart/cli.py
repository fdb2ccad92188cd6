#!/usr/bin/env python3
"""Vocabart CLI - AI-illustrated printable flashcard decks."""

import asyncio
import logging
from pathlib import Path

import click

from vocabart import __version__
from vocabart.cards.model import CardStore
from vocabart.config import Settings, load_settings
from vocabart.errors import VocabartError
from vocabart.export.archive import ARCHIVE_NAME, export_archive
from vocabart.export.manifest import (
    HINTS_NAME,
    MANIFEST_NAME,
    apply_hints,
    export_hints,
    export_manifest,
    load_hints,
    load_manifest,
)
from vocabart.export.print_export import PDF_NAME, export_print_pdf
from vocabart.gemini.image import ImageClient
from vocabart.gemini.prompt import build_prompt
from vocabart.pipeline.generate import DeckGenerator, ProgressUpdate


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def _resolve_settings(config, **overrides) -> Settings:
    try:
        settings = load_settings(Path(config) if config else None, **overrides)
    except ValueError as e:
        raise click.UsageError(str(e)) from e
    problems = settings.validate()
    if problems:
        raise click.UsageError("\n".join(problems))
    return settings


def _fail(error: VocabartError) -> None:
    click.secho(f"Error: {error}", fg="red", err=True)
    raise SystemExit(1)


def _print_progress(update: ProgressUpdate) -> None:
    mark = click.style("ok", fg="green") if update.success else click.style("failed", fg="red")
    click.echo(f"  [{update.completed}/{update.total}] {update.term}: {mark}")


def _api_options(func):
    func = click.option("--config", type=click.Path(exists=True, dir_okay=False), help="YAML deck config")(func)
    func = click.option("--api-key", envvar="GEMINI_API_KEY", help="Gemini API key (or GEMINI_API_KEY)")(func)
    func = click.option("--model", help="Gemini image model identifier")(func)
    func = click.option("--style", help="Overarching style applied to every image")(func)
    func = click.option("--verbose", "-v", is_flag=True, help="Debug logging")(func)
    return func


@click.group()
@click.version_option(version=__version__)
def cli():
    """Vocabart - printable picture flashcards from term:definition lists.

    Write one `term (optional hint): definition` per line, generate a deck,
    then print the PDF double-sided, flipping on the long edge.
    """
    pass


@cli.command()
@click.argument("input_file", type=click.File("r", encoding="utf-8"))
@click.option("--out-dir", type=click.Path(file_okay=False, path_type=Path), default=Path("flashcards"),
              show_default=True, help="Directory for the exported files")
@click.option("--concurrency", type=int, help="Cap on simultaneous image requests (default: all at once)")
@click.option("--no-zip", is_flag=True, help="Skip the image archive")
@click.option("--no-json", is_flag=True, help="Skip the JSON manifest")
@click.option("--no-pdf", is_flag=True, help="Skip the print PDF")
@_api_options
def generate(input_file, out_dir, concurrency, no_zip, no_json, no_pdf, style, model, api_key, config, verbose):
    """Generate an illustrated deck from INPUT_FILE (use - for stdin)."""
    _configure_logging(verbose)
    settings = _resolve_settings(config, api_key=api_key, model=model, style=style, concurrency=concurrency)
    text = input_file.read()

    async def _run():
        async with ImageClient.from_settings(settings) as client:
            generator = DeckGenerator(store, client, concurrency=settings.concurrency)
            return await generator.generate_deck(
                text,
                settings.style,
                on_layout=lambda pages: click.echo(f"Laid out {len(store)} cards on {len(pages)} pages"),
                on_progress=_print_progress,
            )

    store = CardStore()
    try:
        result = asyncio.run(_run())
    except VocabartError as e:
        _fail(e)

    click.echo()
    click.echo(f"Generated {result.succeeded}/{result.total} images in {result.total_time:.1f}s")
    if result.failed_terms:
        click.secho(f"Failed: {', '.join(result.failed_terms)}", fg="yellow")

    outputs = []
    try:
        if not no_zip and result.succeeded:
            export_archive(store, out_dir / ARCHIVE_NAME)
            outputs.append(ARCHIVE_NAME)
        if not no_json:
            export_manifest(store, out_dir / MANIFEST_NAME)
            export_hints(store, out_dir / HINTS_NAME)
            outputs.append(MANIFEST_NAME)
        if not no_pdf:
            export_print_pdf(store.cards, out_dir / PDF_NAME)
            outputs.append(PDF_NAME)
    except VocabartError as e:
        _fail(e)

    if outputs:
        click.echo(f"Output: {out_dir}")
        for name in outputs:
            click.echo(f"  {name}")
    if not no_pdf:
        click.echo("Print double-sided, flip on long edge.")


@cli.command()
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("term")
@click.option("--hint", help="New hint for this card (empty string clears it)")
@_api_options
def regenerate(manifest, term, hint, style, model, api_key, config, verbose):
    """Regenerate the image for TERM in MANIFEST and rewrite it."""
    _configure_logging(verbose)
    settings = _resolve_settings(config, api_key=api_key, model=model, style=style)

    hints_path = manifest.parent / HINTS_NAME
    try:
        cards = apply_hints(load_manifest(manifest), load_hints(hints_path))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="MANIFEST") from e

    store = CardStore()
    store.replace(cards)

    async def _run():
        async with ImageClient.from_settings(settings) as client:
            generator = DeckGenerator(store, client)
            return await generator.regenerate(term, hint, settings.style)

    try:
        image = asyncio.run(_run())
        export_manifest(store, manifest)
        export_hints(store, hints_path)
        archive_path = manifest.parent / ARCHIVE_NAME
        if archive_path.exists():
            export_archive(store, archive_path)
    except VocabartError as e:
        _fail(e)

    if image:
        click.secho(f"Regenerated {term!r}", fg="green")
    else:
        click.secho(f"Generation failed for {term!r}", fg="red")
        raise SystemExit(2)


@cli.command("print")
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              help=f"Output PDF (default: {PDF_NAME} next to the manifest)")
@click.option("--no-cut-guides", is_flag=True, help="Don't draw cut guide lines")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def print_deck(manifest, output, no_cut_guides, verbose):
    """Render MANIFEST to a duplex print PDF."""
    _configure_logging(verbose)
    output = output or manifest.parent / PDF_NAME
    try:
        num_pages = export_print_pdf(load_manifest(manifest), output, draw_cut_guides=not no_cut_guides)
    except VocabartError as e:
        _fail(e)

    click.echo(f"Saved {num_pages} pages to {output}")
    click.echo("Print double-sided, flip on long edge.")


@cli.command()
@click.argument("term")
@click.option("--hint", help="Per-card hint")
@click.option("--style", help="Overarching deck style")
def prompt(term, hint, style):
    """Show the image prompt for TERM without calling the API."""
    click.echo(build_prompt(term, hint, style))


if __name__ == "__main__":
    cli()
