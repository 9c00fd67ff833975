"""
Command-line interface: analyze, render, flag, edit, study, deep, context.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from hwaet.core.constants import ERROR_DEEP_ANALYSIS_FAILED, ERROR_INVALID_IMPORT, STUDY_CSV_FILENAME
from hwaet.core.errors import AnalysisFailed, ConfigurationError, DeepAnalysisError, ImportValidationError
from hwaet.core.models import GlossConfig, TokenUpdate
from hwaet.core.utils import get_file_contents, write_file_contents
from hwaet.processing.session import GlossSession
from hwaet.rendering.export import export_filename
from hwaet.rendering.html import render_html

app = typer.Typer(add_completion=False, no_args_is_help=True)
logger = logging.getLogger("hwaet")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def _load_session(document: Path, config: Optional[GlossConfig] = None) -> GlossSession:
    session = GlossSession(config=config or GlossConfig.from_env())
    try:
        session.import_json(get_file_contents(document))
    except UnicodeDecodeError as exc:
        logger.error("Rejected import of %s: %s", document, exc)
        typer.echo(f"Failed to parse JSON file. {ERROR_INVALID_IMPORT}", err=True)
        raise typer.Exit(code=1)
    except ImportValidationError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    return session


def _save_session(session: GlossSession, document: Path) -> None:
    data = session.export_json()
    write_file_contents(document, data if data is not None else "[]")


@app.command()
def analyze(
    input_path: Path = typer.Argument(..., exists=True, readable=True),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Where to write the JSON document"),
    max_lines: Optional[int] = typer.Option(None, "--max-lines", min=1, help="Lines per oracle request"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Oracle model name"),
    append_to: Optional[Path] = typer.Option(
        None, "--append-to", exists=True, readable=True, help="Append the analysis to an existing document"
    ),
) -> None:
    text = get_file_contents(input_path)
    if not text.strip():
        typer.echo("Nothing to analyze.")
        return

    config = GlossConfig.from_env(max_lines=max_lines, model=model)
    session = _load_session(append_to, config) if append_to else GlossSession(config=config)
    try:
        if append_to:
            session.append_text(text, progress=True)
        else:
            session.analyze(text, progress=True)
    except AnalysisFailed as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    out_path = output or append_to or Path("output") / export_filename()
    _save_session(session, out_path)
    typer.echo(f"Tokens: {len(session)}; written to {out_path}")


@app.command()
def render(
    document: Path = typer.Argument(..., exists=True, readable=True),
    output: Path = typer.Option(Path("output") / "gloss.html", "--output", "-o"),
    title: Optional[str] = typer.Option(None, "--title", help="Page title"),
) -> None:
    session = _load_session(document)
    html = render_html(session.tokens, title=title) if title else render_html(session.tokens)
    write_file_contents(output, html)
    typer.echo(str(output))


@app.command()
def flag(
    document: Path = typer.Argument(..., exists=True, readable=True),
    indices: List[int] = typer.Argument(..., help="Token indices to toggle"),
) -> None:
    session = _load_session(document)
    for index in indices:
        try:
            token = session.toggle_flag(index)
        except IndexError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1)
        state = "flagged" if token.isFlagged else "unflagged"
        typer.echo(f"{index}: {token.original} {state}")
    _save_session(session, document)


@app.command()
def edit(
    document: Path = typer.Argument(..., exists=True, readable=True),
    index: int = typer.Argument(..., help="Index of the token to edit"),
    original: Optional[str] = typer.Option(None, "--original", help="Corrected surface form"),
    lemma: Optional[str] = typer.Option(None, "--lemma"),
    pos: Optional[str] = typer.Option(None, "--pos", help="Part of speech"),
    meaning: Optional[str] = typer.Option(None, "--meaning", help="Modern English translation"),
    grammar: Optional[str] = typer.Option(None, "--grammar", help="Grammatical information"),
    etymology: Optional[str] = typer.Option(None, "--etymology"),
) -> None:
    if original is not None and not original.strip():
        typer.echo("The original form cannot be blank.", err=True)
        raise typer.Exit(code=1)
    updates = TokenUpdate(
        original=original,
        lemma=lemma,
        partOfSpeech=pos,
        modernTranslation=meaning,
        grammaticalInfo=grammar,
        etymology=etymology,
    )
    if updates.is_empty():
        typer.echo("Nothing to change.", err=True)
        raise typer.Exit(code=1)

    session = _load_session(document)
    try:
        token = session.update_token(index, updates)
    except IndexError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    _save_session(session, document)
    typer.echo(f"{index}: {token.original}: {token.lemma} ({token.partOfSpeech}) - {token.modernTranslation}")


@app.command()
def study(
    document: Path = typer.Argument(..., exists=True, readable=True),
    output: Path = typer.Option(Path("output") / STUDY_CSV_FILENAME, "--output", "-o"),
) -> None:
    session = _load_session(document)
    csv_text = session.export_study_csv()
    if csv_text is None:
        typer.echo("No flagged words to export.")
        return
    write_file_contents(output, csv_text)
    typer.echo(f"Cards: {len(session.flagged())}; written to {output}")


@app.command()
def deep(
    document: Path = typer.Argument(..., exists=True, readable=True),
    index: int = typer.Argument(..., help="Index of the word to re-analyze"),
) -> None:
    session = _load_session(document)
    try:
        token = session.deep_analyze(index)
    except (IndexError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    except (DeepAnalysisError, ConfigurationError) as exc:
        logger.error("Deep analysis failed: %s", exc, exc_info=True)
        typer.echo(ERROR_DEEP_ANALYSIS_FAILED, err=True)
        raise typer.Exit(code=1)
    _save_session(session, document)
    typer.echo(f"{token.original}: {token.lemma} ({token.partOfSpeech}) - {token.modernTranslation}")
    for source in token.sources or []:
        typer.echo(f"  {source.title} <{source.uri}>")


@app.command()
def context(
    document: Path = typer.Argument(..., exists=True, readable=True),
    index: int = typer.Argument(...),
    sentence: bool = typer.Option(False, "--sentence/--window", help="Enclosing sentence instead of a window"),
) -> None:
    session = _load_session(document)
    try:
        typer.echo(session.sentence_at(index) if sentence else session.context_at(index))
    except IndexError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)


def run() -> None:  # entry point for module execution
    app()


if __name__ == "__main__":
    run()
