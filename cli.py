#!/usr/bin/env python3
"""CLI for the kotoba Japanese dictionary."""

import sys
from pathlib import Path

import click

# Ensure kotoba is importable
sys.path.insert(0, str(Path(__file__).parent))

from kotoba.config import INDEX_DIR, PAGE_SIZE, RESOURCES_DIR, SUGGESTION_DIR
from kotoba.engine.index import indexes_initialized, init_indexes, load_indexes
from kotoba.errors import KotobaError
from kotoba.languages import Language
from kotoba.query.parser import QueryParser
from kotoba.query.schemas import SearchTarget, UserSettings
from kotoba.storage.resources import ResourceStorage, init_resources, resources_initialized
from kotoba.storage.schemas import Kanji, Sentence, Word
from kotoba.suggestions.registry import init_suggestions, load_suggestions, suggestions_initialized

TARGETS = [target.value for target in SearchTarget]


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """kotoba - multilingual Japanese dictionary search."""
    pass


def _settings(lang: str | None, show_english: bool = True) -> UserSettings:
    return UserSettings(user_lang=Language.parse_or_default(lang), show_english=show_english, page_size=PAGE_SIZE)


def _format_item(item) -> str:
    if isinstance(item, Word):
        reading = item.reading
        text = reading.kanji.reading if reading.kanji else reading.kana.reading
        if reading.kanji:
            text += f" [{reading.kana.reading}]"
        glosses = item.glosses_pretty()
        return f"{text}  {glosses}" if glosses else text
    if isinstance(item, Kanji):
        meanings = ", ".join(item.meaning)
        return f"{item.literal}  {meanings}  on: {'、'.join(item.onyomi)}  kun: {'、'.join(item.kunyomi)}"
    if isinstance(item, Sentence):
        translation = next(iter(item.translations.values()), "")
        return f"{item.japanese}  {translation}"
    return str(item)


@cli.command("parse")
@click.argument("query")
@click.option("--target", "-t", type=click.Choice(TARGETS), default="words", help="Search target")
@click.option("--lang", "-l", default=None, help="User language code (default: en-US)")
def parse(query: str, target: str, lang: str | None):
    """Show how a raw query is parsed."""
    parsed = QueryParser(query, SearchTarget(target), _settings(lang)).parse()
    if parsed is None:
        click.echo("Unparsable query.", err=True)
        sys.exit(1)

    click.echo(f"Query: {parsed.query_str!r}")
    click.echo(f"  Target: {parsed.target.value}")
    click.echo(f"  Language: {parsed.language.value}")
    click.echo(f"  Form: {parsed.form.value}")
    if parsed.tags:
        click.echo(f"  Tags: {' '.join(str(tag) for tag in parsed.tags)}")
    if parsed.kanji_reading:
        click.echo(f"  Kanji reading: {parsed.kanji_reading.literal} {parsed.kanji_reading.reading}")


@cli.command("suggest")
@click.argument("text")
@click.option("--lang", "-l", default="", help="User language code")
def suggest(text: str, lang: str):
    """Autocomplete suggestions for TEXT."""
    from kotoba.suggestions.schemas import SuggestionRequest
    from kotoba.suggestions.service import suggestion

    if not suggestions_initialized():
        init_suggestions(load_suggestions(SUGGESTION_DIR))

    try:
        response = suggestion(SuggestionRequest(input=text, lang=lang))
    except KotobaError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    if not response.suggestions:
        click.echo("No suggestions.")
        return

    for pair in response.suggestions:
        if pair.secondary:
            click.echo(f"  {pair.primary} ({pair.secondary})")
        else:
            click.echo(f"  {pair.primary}")


@cli.command("search")
@click.argument("query")
@click.option("--target", "-t", type=click.Choice(TARGETS), default="words", help="Search target")
@click.option("--lang", "-l", default=None, help="User language code (default: en-US)")
@click.option("--page", "-p", default=0, type=int, help="Result page, starting at 0")
@click.option("--no-english", is_flag=True, help="Do not fall back to English results")
def search(query: str, target: str, lang: str | None, page: int, no_english: bool):
    """Search words, kanji or sentences."""
    from kotoba.search import search as run_search

    parsed = QueryParser(query, SearchTarget(target), _settings(lang, not no_english), page).parse()
    if parsed is None:
        click.echo("Unparsable query.", err=True)
        sys.exit(1)

    try:
        if not indexes_initialized():
            init_indexes(load_indexes(INDEX_DIR))
        if not resources_initialized():
            init_resources(ResourceStorage.load(RESOURCES_DIR))
        result = run_search(parsed)
    except KotobaError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    if result.is_empty():
        click.echo("No results found.")
        return

    click.echo(f"Results {parsed.offset() + 1}-{parsed.offset() + len(result)} of {result.total}:")
    for item in result:
        click.echo(f"  [{item.relevance}] {_format_item(item.item)}")


@cli.command("kun-compounds")
@click.argument("literal")
def kun_compounds(literal: str):
    """List words that read LITERAL with one of its kun readings."""
    from kotoba.search.kanji import kun_compounds as find_compounds
    from kotoba.storage.dictionary import get_dict_store

    try:
        sequences = find_compounds(literal)
        pairs = get_dict_store().load_word_pairs(sequences)
    except (KotobaError, FileNotFoundError, RuntimeError) as e:
        message = e.message if isinstance(e, KotobaError) else str(e)
        click.echo(f"Error: {message}", err=True)
        sys.exit(1)

    if not sequences:
        click.echo(f"No kun compounds found for {literal}.")
        return

    for kana, kanji in pairs:
        click.echo(f"  {kanji or kana} [{kana}]")


# ============================================================================
# Server command
# ============================================================================


@cli.command("server")
@click.option("--host", "-h", default="127.0.0.1", help="Host to bind")
@click.option("--port", "-p", default=5000, type=int, help="Port to bind")
@click.option("--debug", is_flag=True, help="Enable Flask debug mode")
def server(host: str, port: int, debug: bool):
    """Run the REST API server."""
    from api import create_app

    click.echo(f"Starting kotoba API on http://{host}:{port}")
    click.echo(f"  Docs: http://{host}:{port}/api/docs/")
    create_app().run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    cli()
