"""
Typer CLI for the secplus-study data pipeline.

Commands:
    secplus concepts        - Build the concept dictionary from the raw corpus
    secplus flashcards      - Generate a domain-stratified flashcard set
    secplus questions       - Generate practice MCQs from a flashcard set
    secplus merge           - Prepend a new card batch to the study corpus
    secplus stats           - Show flashcard/question counts per domain

Usage:
    secplus --help
    secplus concepts --in SECPLUS_COMPLETE_STUDY_DATA.json
    secplus flashcards --max 300 --seed 7
    secplus questions --in data/flashcards.generated.json --total 295
    secplus merge --new new-cards.json --no-dedupe
    secplus --log-level DEBUG stats
"""

from __future__ import annotations

import json
import random
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config import get_settings
from secplus.content.domains import (
    DOMAIN_IDS,
    FLASHCARD_TARGETS,
    QUESTION_TARGETS,
    domain_name,
)
from secplus.content.errors import StudyDataError
from secplus.content.generation import ConceptExtractor, FlashcardGenerator, QuestionGenerator
from secplus.content.merge import StudyDataMerger
from secplus.content.parser import CorpusParser, read_json, write_json
from secplus.content.sampling import scale_targets
from secplus.content.study_data import build_study_data, load_sources

app = typer.Typer(
    help="secplus-study: Security+ SY0-701 study data pipeline",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

# Errors reported as "Error: ..." + exit code 1
FATAL_ERRORS = (StudyDataError, FileNotFoundError, json.JSONDecodeError)


@app.callback()
def main_callback(
    log_level: str = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
):
    """Security+ study data pipeline."""
    level = (log_level or get_settings().log_level).upper()
    logger.remove()
    logger.add(sys.stderr, level=level)


# ========================================
# Helpers
# ========================================


def _fail(error: Exception) -> None:
    err_console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(1)


def _rng(seed: int | None) -> random.Random:
    return random.Random(seed) if seed is not None else random.Random()


def _distribution_table(title: str, counts: dict[str, int], targets: dict[str, int]) -> Table:
    table = Table(title=title)
    table.add_column("Domain", style="cyan")
    table.add_column("Name")
    table.add_column("Count", justify="right", style="green")
    table.add_column("Target", justify="right", style="dim")

    for d in DOMAIN_IDS:
        table.add_row(d, domain_name(d), str(counts.get(d, 0)), str(targets.get(d, 0)))
    return table


# ========================================
# Commands
# ========================================


@app.command("concepts")
def concepts(
    input_path: Path = typer.Option(None, "--in", help="Raw study corpus JSON"),
    output_path: Path = typer.Option(None, "--out", help="Concept dictionary output"),
):
    """
    Build the concept dictionary (term -> definition) from the raw corpus.

    Examples:
        secplus concepts
        secplus concepts --in notes.json --out data/concept_dictionary.json
    """
    settings = get_settings()
    input_path = input_path or settings.corpus_path
    output_path = output_path or settings.concept_dictionary_path

    try:
        corpus = CorpusParser().parse_file(input_path)
        result = ConceptExtractor().extract(corpus)
        write_json(output_path, result.to_list())
    except FATAL_ERRORS as e:
        _fail(e)

    stats = result.stats
    console.print("\n[bold cyan]Concept Dictionary[/bold cyan]")
    console.print(f"  Input:  {input_path}")
    console.print(f"  Output: {output_path}")

    table = Table(title=f"Extracted {len(result.concepts)} concepts")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Total bullets", str(stats.total_bullets))
    table.add_row("Curated sections", str(stats.curated))
    table.add_row("Rule A (dash form)", str(stats.rule_a))
    table.add_row("Rule B (copula form)", str(stats.rule_b))
    table.add_row("Skipped", str(stats.skipped_quality))
    for domain, count in result.by_domain().items():
        table.add_row(f"Domain {domain}", str(count))
    console.print(table)


@app.command("flashcards")
def flashcards(
    input_path: Path = typer.Option(None, "--in", help="Raw corpus or card array JSON"),
    output_path: Path = typer.Option(None, "--out", help="Flashcard set output"),
    max_cards: int = typer.Option(None, "--max", min=1, help="Total cards to sample"),
    seed: int = typer.Option(None, "--seed", help="Seed for reproducible sampling"),
):
    """
    Generate a domain-stratified flashcard set.

    Examples:
        secplus flashcards
        secplus flashcards --in cards.json --max 150 --seed 7
    """
    settings = get_settings()
    input_path = input_path or settings.flashcards_source
    output_path = output_path or settings.flashcards_output
    total = max_cards or settings.flashcards_max

    try:
        data = read_json(input_path)
        flashcard_set = FlashcardGenerator(rng=_rng(seed)).generate(data, input_path, total)
        write_json(output_path, flashcard_set.to_dict())
    except FATAL_ERRORS as e:
        _fail(e)

    console.print("\n[bold cyan]Flashcards[/bold cyan]")
    console.print(f"  Input:  {input_path}")
    console.print(f"  Output: {output_path}")
    console.print(
        _distribution_table(
            f"Generated {flashcard_set.count} flashcards",
            flashcard_set.distribution(),
            scale_targets(FLASHCARD_TARGETS, total),
        )
    )
    if flashcard_set.count < total:
        console.print(f"[yellow]Short of target: {flashcard_set.count}/{total}[/yellow]")


@app.command("questions")
def questions(
    input_path: Path = typer.Option(None, "--in", help="Flashcard set JSON"),
    output_path: Path = typer.Option(None, "--out", help="Question set output"),
    max_cards: int = typer.Option(None, "--max", min=1, help="Maximum flashcards to read"),
    total: int = typer.Option(None, "--total", min=1, help="Total MCQs to sample"),
    seed: int = typer.Option(None, "--seed", help="Seed for reproducible sampling"),
):
    """
    Generate practice MCQs from a flashcard set.

    Examples:
        secplus questions
        secplus questions --in data/flashcards.generated.json --max 600 --total 295
    """
    settings = get_settings()
    input_path = input_path or settings.flashcards_output
    output_path = output_path or settings.questions_output
    max_cards = max_cards or settings.questions_max_cards
    total = total or settings.questions_total

    try:
        data = read_json(input_path)
        question_set = QuestionGenerator(rng=_rng(seed)).generate(
            data, max_cards=max_cards, total=total, source_path=str(input_path)
        )
        write_json(output_path, question_set.to_dict())
    except FATAL_ERRORS as e:
        _fail(e)

    console.print("\n[bold cyan]Practice Questions[/bold cyan]")
    console.print(f"  Input:  {input_path}")
    console.print(f"  Output: {output_path}")
    console.print(
        f"  Generated {question_set.generated_mcq} MCQs, {question_set.generated_short} short items "
        f"({question_set.skipped_cards} cards skipped)"
    )
    console.print(
        _distribution_table(
            f"Sampled {question_set.count} MCQs",
            question_set.distribution(),
            scale_targets(QUESTION_TARGETS, total),
        )
    )


@app.command("merge")
def merge(
    new_path: Path = typer.Option(..., "--new", help="New card batch JSON"),
    existing_path: Path = typer.Option(None, "--existing", help="Current study corpus"),
    output_path: Path = typer.Option(None, "--out", help="Merged corpus output"),
    practice_path: Path = typer.Option(None, "--practice-out", help="Practice question side file"),
    no_dedupe: bool = typer.Option(False, "--no-dedupe", help="Keep exact front/back duplicates"),
):
    """
    Prepend a new card batch to the study corpus.

    Examples:
        secplus merge --new new-cards.json
        secplus merge --new new.json --out SECPLUS_COMPLETE_STUDY_DATA.json --no-dedupe
    """
    settings = get_settings()
    existing_path = existing_path or settings.corpus_path
    output_path = output_path or settings.corpus_path
    practice_path = practice_path or settings.practice_questions_path

    try:
        result = StudyDataMerger(dedupe=not no_dedupe).run(
            new_path, existing_path, output_path, practice_path
        )
    except FATAL_ERRORS as e:
        _fail(e)

    console.print(
        f"\n[green]Merged {result.new_count} new + {result.existing_count} existing "
        f"-> {result.total} total[/green]"
    )
    console.print(f"  Output: {output_path}")
    if result.practice_questions:
        console.print(
            f"  Extracted {len(result.practice_questions)} practice questions -> {practice_path}"
        )


@app.command("stats")
def stats(
    data_dir: Path = typer.Option(None, "--data-dir", help="Directory of generated JSON files"),
):
    """Show flashcard and question counts per domain."""
    settings = get_settings()
    data_dir = data_dir or settings.data_dir

    try:
        study_data = build_study_data(load_sources(data_dir, settings.corpus_path))
    except FATAL_ERRORS as e:
        _fail(e)

    summary = study_data.stats
    table = Table(title=f"{study_data.metadata.get('source', '')} ({study_data.metadata.get('exam', '')})")
    table.add_column("Domain", style="cyan")
    table.add_column("Name")
    table.add_column("Flashcards", justify="right", style="green")
    table.add_column("Questions", justify="right", style="green")

    for row in summary["by_domain"]:
        table.add_row(
            str(row.get("domain")),
            str(row.get("name", "")),
            str(row.get("flashcards", 0)),
            str(row.get("questions", 0)),
        )
    table.add_row(
        "[bold]Total[/bold]", "",
        str(summary["total_flashcards"]),
        str(summary["total_questions"]),
    )
    console.print(table)


if __name__ == "__main__":
    app()
