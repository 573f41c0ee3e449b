import logging
import sys
from pathlib import Path

import typer

from hunkpatch.config import load_settings
from hunkpatch.logging import setup_logging
from hunkpatch.patching.errors import ParseError, TargetResolutionError
from hunkpatch.patching.orchestrator import UNKNOWN_TARGET, resolve_target
from hunkpatch.patching.parser import parse_patch
from hunkpatch.reporting import load_results, record_results, summarise_results
from hunkpatch.workspace.patcher import WorkspacePatcher

app = typer.Typer(no_args_is_help = True)


def _read_patch(patch: str) -> str:
    if patch == "-":
        return sys.stdin.read()
    path = Path(patch)
    if not path.is_file():
        raise typer.BadParameter(f"Patch file not found: {patch}")
    return path.read_text(encoding = "utf-8")


@app.command("apply")
def apply_cmd(
    patch: str = typer.Argument(..., help="Unified diff file, or - to read stdin"),
    workdir: Path = typer.Option(Path("."), "--workdir", "-d", help="Directory patch paths are relative to"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Compute results without writing files"),
    fuzz: int | None = typer.Option(None, "--fuzz", min=0, help="Lines a hunk may drift from its declared position"),
    encoding: str | None = typer.Option(None, "--encoding", help="Text encoding of the patched files"),
    report: Path | None = typer.Option(None, "--report", help="Append per-file results to this JSONL file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Apply a unified diff to files under a work directory.
    """

    setup_logging(logging.DEBUG if verbose else logging.WARNING)
    settings = load_settings(fuzz = fuzz, encoding = encoding, dry_run = dry_run or None)

    patch_txt = _read_patch(patch)
    if not patch_txt.strip():
        typer.echo("Nothing to apply: patch is empty")
        return

    try:
        patcher = WorkspacePatcher(
            workdir = workdir,
            patch_content = patch_txt,
            encoding = settings.encoding,
            dry_run = settings.dry_run,
            fuzz = settings.fuzz,
        )
    except ParseError as exc:
        typer.echo(f"Invalid patch: {exc}", err = True)
        raise typer.Exit(code = 2)

    results = patcher.apply_all()

    verb = "would patch" if settings.dry_run else "patched"
    for result in results:
        if result.success:
            typer.echo(f"{verb} {result.path}")
        else:
            typer.echo(f"FAILED {result.path}: {result.error.message}")

    if report is not None and not record_results(
        report, results, workdir = patcher.workdir, dry_run = settings.dry_run
    ):
        typer.echo(f"Could not write results to {report}", err = True)

    failed = sum(1 for result in results if not result.success)
    typer.echo(f"Files: {len(results)}, succeeded: {len(results) - failed}, failed: {failed}")
    if failed:
        raise typer.Exit(code = 1)


@app.command("show")
def show_cmd(
    patch: str = typer.Argument(..., help="Unified diff file, or - to read stdin"),
):
    """
    List the files and hunks in a unified diff without applying it.
    """

    try:
        patches = parse_patch(_read_patch(patch))
    except ParseError as exc:
        typer.echo(f"Invalid patch: {exc}", err = True)
        raise typer.Exit(code = 2)

    for structured in patches:
        try:
            target = resolve_target(structured)
        except TargetResolutionError:
            target = UNKNOWN_TARGET
        typer.echo(f"{target} ({len(structured.hunks)} hunks)")
        for hunk in structured.hunks:
            typer.echo(f"  {hunk.header}")

    typer.echo(f"Files: {len(patches)}")


@app.command("report")
def report_cmd(
    log: Path = typer.Argument(..., help="Result log written by apply --report"),
):
    """
    Summarise the per-file results recorded by earlier apply runs.
    """

    if not log.is_file():
        raise typer.BadParameter(f"Result log not found: {log}")

    records, skipped = load_results(log)
    summary = summarise_results(records, skipped_lines = skipped)

    typer.echo(
        f"Results: {summary.total}, succeeded: {summary.succeeded}, "
        f"failed: {summary.failed}, dry runs: {summary.dry_runs}"
    )
    for error_type, count in summary.failures_by_type.items():
        typer.echo(f"  {error_type}: {count}")
    for path in summary.failed_paths:
        typer.echo(f"  FAILED {path}")
    if summary.skipped_lines:
        typer.echo(f"Skipped unreadable lines: {summary.skipped_lines}")


@app.callback()
def main():
    """
    hunkpatch CLI
    """
    pass
