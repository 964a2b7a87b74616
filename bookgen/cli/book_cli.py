"""Command-line entry point for generating and validating syllabus-driven books."""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bookgen.content.book import validate_book_content
from bookgen.content.scorer import ContentValidator
from bookgen.content.verification import build_verifier
from bookgen.core.config import BookConfig, load_book_config
from bookgen.core.errors import (
    BookGenError,
    CircularDependencyError,
    UnknownPrerequisiteError,
    ValidationFailure,
)
from bookgen.core.provenance import ProvenanceLogger
from bookgen.core.validation import strict_validation
from bookgen.generation.mapping import validate_mapping
from bookgen.generation.pipeline import generate_book
from bookgen.syllabus.models import Topic
from bookgen.syllabus.parser import normalize_topic, parse_syllabus
from bookgen.syllabus.resolver import resolve_dependencies

LOGGER = logging.getLogger(__name__)

SOURCE_DELIMITERS = r"[;,]"

app = typer.Typer(help="Generate Docusaurus book skeletons from a syllabus and check chapter compliance.")
console = Console()


def split_sources(value: str | None) -> List[str]:
    """Split ``a, b;c`` into trimmed source names; empty input gives ``[]``."""
    if not value:
        return []
    return [token.strip() for token in re.split(SOURCE_DELIMITERS, value) if token.strip()]


def _run_log(ctx: typer.Context) -> ProvenanceLogger:
    if ctx.obj and ctx.obj.get("run_log") is not None:
        return ctx.obj["run_log"]
    return ProvenanceLogger(None)


def _load_config(config_path: Path | None) -> BookConfig:
    try:
        return load_book_config(config_path)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Could not load config:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _fail(message: str, exc: Exception) -> None:
    console.print(f"[bold red]{message}:[/bold red] {escape(str(exc))}")
    if isinstance(exc, ValidationFailure):
        for error in exc.errors:
            console.print(f"  - {error}", style="red", markup=False)
    elif isinstance(exc, UnknownPrerequisiteError):
        for topic_id, missing in exc.unknown.items():
            console.print(f"  - {topic_id}: {', '.join(missing)}", style="red", markup=False)
    raise typer.Exit(code=1) from exc


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    run_log: Optional[Path] = typer.Option(
        None, "--run-log", help="Append JSONL provenance events for this run to PATH."
    ),
) -> None:
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"run_log": ProvenanceLogger(run_log.expanduser().resolve()) if run_log else None}


@app.command()
def parse(syllabus_path: Path = typer.Argument(..., help="Syllabus JSON or YAML file.")) -> None:
    """Validate a syllabus and print its stats and teaching order."""
    try:
        parsed = parse_syllabus(syllabus_path)
        ordered = resolve_dependencies(parsed.syllabus)
    except (BookGenError, OSError) as exc:
        _fail("Invalid syllabus", exc)

    stats = parsed.stats
    console.print(f"[bold]{ordered.title}[/bold]")
    console.print(
        f"{stats.topic_count} topics, {stats.category_count} categories, "
        f"{stats.total_learning_objectives} learning objectives"
    )
    table = Table(title="Teaching order", show_header=True)
    table.add_column("#", justify="right")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Category")
    table.add_column("Prerequisites")
    for topic in ordered.topics:
        table.add_row(str(topic.position + 1), topic.id, topic.title, topic.category, ", ".join(topic.prerequisites))
    console.print(table)


@app.command()
def generate(
    ctx: typer.Context,
    syllabus_path: Path = typer.Argument(..., help="Syllabus JSON or YAML file."),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Book root (defaults to config)."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Book config YAML."),
    flat: bool = typer.Option(False, "--flat", help="Write chapters without category sub-directories."),
) -> None:
    """Write chapter stubs, category descriptors, and the sidebar for a syllabus."""
    config = _load_config(config_path)
    updates: Dict[str, Any] = {}
    if output_dir is not None:
        updates["output_dir"] = output_dir.expanduser().resolve()
    if flat:
        updates["group_by_category"] = False
    settings = config.book.model_copy(update=updates) if updates else config.book

    try:
        raw = strict_validation.load_structured_file(syllabus_path).data
        result = generate_book(raw, settings, run_log=_run_log(ctx))
    except CircularDependencyError as exc:
        _fail("Cannot order topics", exc)
    except (BookGenError, OSError) as exc:
        _fail("Book generation failed", exc)

    console.print(f"[green]{result.message}[/green] in {result.book_path}")
    LOGGER.debug("Generated files: %s", result.generated_files)


def _load_topic(path: Path) -> Topic:
    data = strict_validation.load_structured_file(path).data
    try:
        return Topic.model_validate(normalize_topic(data))
    except ValueError as exc:
        raise ValidationFailure([str(exc)], message=f"Invalid topic in {path}") from exc


@app.command("validate-content")
def validate_content(
    ctx: typer.Context,
    content_file: Path = typer.Argument(..., help="Chapter Markdown/MDX file."),
    topic_file: Path = typer.Argument(..., help="Topic JSON or YAML file."),
    sources: Optional[str] = typer.Option(None, "--sources", help="Comma-separated verification sources."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Book config YAML."),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
) -> None:
    """Score one chapter against its syllabus topic; exits 1 when it is not valid."""
    config = _load_config(config_path)
    try:
        topic = _load_topic(topic_file)
        content = content_file.read_text(encoding="utf-8")
        with ContentValidator(build_verifier(config.verification), config=config.scoring) as validator:
            report = validator.validate(content, topic, split_sources(sources))
    except (BookGenError, OSError) as exc:
        _fail("Content validation failed", exc)

    _run_log(ctx).log(
        {
            "stage": "validate",
            "message": f"Validated {content_file.name} against {topic.id}",
            "status": "ok" if report.is_valid else "error",
            "payload": {"score": report.compliance_score, "status": report.compliance_status},
        }
    )
    if as_json:
        console.print_json(json.dumps(report.to_payload()))
    else:
        console.print(report.validation_report, markup=False)
    if not report.is_valid:
        raise typer.Exit(code=1)


@app.command("validate-book")
def validate_book(
    ctx: typer.Context,
    book_dir: Path = typer.Argument(..., help="Directory holding the generated chapters."),
    syllabus_path: Path = typer.Argument(..., help="Syllabus JSON or YAML file."),
    sources: Optional[str] = typer.Option(None, "--sources", help="Comma-separated verification sources."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Book config YAML."),
) -> None:
    """Score every chapter file that matches a syllabus topic."""
    config = _load_config(config_path)
    try:
        syllabus = parse_syllabus(syllabus_path).syllabus
        with ContentValidator(build_verifier(config.verification), config=config.scoring) as validator:
            result = validate_book_content(book_dir, syllabus.topics, validator, sources=split_sources(sources))
    except (BookGenError, OSError) as exc:
        _fail("Book validation failed", exc)

    table = Table(title="Chapter compliance", show_header=True)
    table.add_column("Topic")
    table.add_column("File")
    table.add_column("Score", justify="right")
    table.add_column("Status", justify="center")
    for chapter in result.chapter_results:
        style = "green" if chapter.report.is_valid else "red"
        table.add_row(
            chapter.topic_id,
            chapter.file,
            str(chapter.report.compliance_score),
            chapter.report.compliance_status,
            style=style,
        )
    console.print(table)
    for path in result.unmatched_files:
        console.print(f"[yellow]No topic for {path}[/yellow]")
    console.print(result.summary_report)

    _run_log(ctx).log(
        {
            "stage": "validate",
            "message": f"Validated {result.validated_chapters} chapters under {book_dir}",
            "status": "ok" if result.status != "FAIL" else "error",
            "payload": {"overall": result.overall_compliance_score, "status": result.status},
        }
    )
    if result.status == "FAIL":
        raise typer.Exit(code=1)


@app.command("validate-mapping")
def validate_mapping_command(
    ctx: typer.Context,
    syllabus_path: Path = typer.Argument(..., help="Syllabus JSON or YAML file."),
    chapters_dir: Path = typer.Argument(..., help="Directory searched recursively for chapter files."),
    extension: str = typer.Option(".mdx", "--extension", help="Chapter file extension."),
) -> None:
    """Check that every topic has exactly one chapter file and vice versa."""
    if not extension.startswith("."):
        extension = f".{extension}"
    try:
        syllabus = parse_syllabus(syllabus_path).syllabus
        report = validate_mapping(syllabus.topics, chapters_dir, extension)
    except (BookGenError, OSError) as exc:
        _fail("Mapping validation failed", exc)

    _run_log(ctx).log(
        {
            "stage": "validate",
            "message": report.describe(),
            "status": "ok" if report.is_valid else "error",
            "payload": report.to_payload(),
        }
    )
    if report.is_valid:
        console.print(f"[green]{report.describe()}[/green]")
        return

    table = Table(title="Topic/chapter mapping", show_header=True)
    table.add_column("Problem")
    table.add_column("Items")
    rows = (
        ("missing chapter", report.missing_chapters),
        ("extra chapter", report.extra_chapters),
        ("duplicate topic", report.duplicate_topics),
        ("duplicate file", report.duplicate_files),
    )
    for label, items in rows:
        if items:
            table.add_row(label, ", ".join(items), style="bold red")
    console.print(table)
    raise typer.Exit(code=1)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", help="Book root used by /api/generate-book."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Book config YAML."),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    if output_dir is not None:
        os.environ["BOOKGEN_OUTPUT_DIR"] = str(output_dir.expanduser().resolve())
    if config_path is not None:
        os.environ["BOOKGEN_CONFIG"] = str(config_path.expanduser().resolve())
    uvicorn.run("apps.book_api.main:app", host=host, port=port)


if __name__ == "__main__":
    app()
