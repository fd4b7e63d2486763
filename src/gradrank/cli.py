from __future__ import annotations

import logging
import pathlib
from typing import List, Optional

import typer
from pydantic import ValidationError

from .config import get_settings
from .core.aggregate import filter_rankings, find_duplicate_ids, merge_and_rank, sort_rankings, summarize
from .core.headers import normalize_header_token
from .errors import RankingImportError
from .export.delimited import export_to_delimited, write_export
from .ingest.delimited import validate_file_structure
from .ingest.files import import_batch, load_ranking_file


app = typer.Typer(add_completion=False, help="Merge faculty ranking files into one university ranking")
logger = logging.getLogger(__name__)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="log debug output")):
    try:
        settings = get_settings()
    except ValidationError as e:
        typer.echo(f"Invalid GRADRANK_* settings: {e}", err=True)
        raise typer.Exit(2)
    level = logging.DEBUG if verbose else settings.log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command("rank")
def rank(
    files: List[pathlib.Path] = typer.Argument(..., help="faculty ranking CSV files, processed in order"),
    out: Optional[pathlib.Path] = typer.Option(None, "--out", help="directory to write the export to; cannot be combined with --search, --department, --sort or --desc"),
    quote: bool = typer.Option(False, "--quote", help="quote values containing commas (RFC 4180)"),
    dedupe: bool = typer.Option(False, "--dedupe", help="keep only the first record per student id"),
    search: Optional[str] = typer.Option(None, "--search", help="show only names/ids containing this text"),
    department: Optional[str] = typer.Option(None, "--department", help="show only this department"),
    sort_by: str = typer.Option("rank", "--sort", help="rank|name|external_id|department|gpa"),
    desc: bool = typer.Option(False, "--desc", help="reverse display order"),
    show_summary: bool = typer.Option(False, "--summary", help="print ranking metadata"),
):
    """Merge ranking files, rank students by GPA and print (or export) the result."""
    if out is not None and (search or department or sort_by != "rank" or desc):
        typer.echo("--search, --department, --sort and --desc only apply to printed output, not --out", err=True)
        raise typer.Exit(2)

    try:
        batch = import_batch(files)
    except RankingImportError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(2)

    if batch.skipped:
        typer.echo(f"Skipped {len(batch.skipped)} malformed row(s)", err=True)
    if not batch.records:
        typer.echo("No valid records found", err=True)
        raise typer.Exit(1)

    duplicates = find_duplicate_ids(batch.records)
    if duplicates and not dedupe:
        logger.warning("Student ids appear in more than one row: %s", ", ".join(duplicates))

    ranked = merge_and_rank(batch.records, dedupe_key=(lambda r: r.external_id) if dedupe else None)

    if out is not None:
        try:
            path = write_export(ranked, out, quote=quote)
        except RankingImportError as e:
            typer.echo(e.message, err=True)
            raise typer.Exit(1)
        typer.echo(f"Wrote {path}")
    else:
        try:
            shown = sort_rankings(filter_rankings(ranked, search, department), by=sort_by, descending=desc)
        except ValueError as e:
            typer.echo(str(e), err=True)
            raise typer.Exit(2)
        typer.echo(export_to_delimited(shown, quote=quote))

    if show_summary:
        s = summarize(ranked, threshold=get_settings().graduation_gpa_threshold)
        typer.echo(f"{s.eligible_students} eligible of {s.total_students} total", err=True)
        for dept, n in s.departments.items():
            typer.echo(f"  {dept}: {n}", err=True)
        for w in s.warnings:
            typer.echo(f"warning: {w}", err=True)


@app.command("validate")
def validate(files: List[pathlib.Path] = typer.Argument(...)):
    """Check that each file is a CSV with name, id, department and gpa columns."""
    failed = False
    for f in files:
        try:
            rf = load_ranking_file(f)
        except RankingImportError as e:
            typer.echo(f"{f.name}: {e.message}")
            failed = True
            continue
        ok = validate_file_structure(rf.raw_content)
        typer.echo(f"{rf.file_name}: {'ok' if ok else 'invalid structure'}")
        failed = failed or not ok
    if failed:
        raise typer.Exit(1)


@app.command("headers")
def headers(tokens: List[str] = typer.Argument(...)):
    """Show how header cells are classified."""
    for t in tokens:
        typer.echo(f"{t} -> {normalize_header_token(t).value}")


if __name__ == "__main__":
    app()
