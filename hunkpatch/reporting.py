import logging
import os
from collections import Counter
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from filelock import FileLock
from pydantic import BaseModel, Field, ValidationError

from hunkpatch.patching.models import PatchFailure, PatchResult

logger = logging.getLogger(__name__)


class ResultRecord(BaseModel):
    """One line of the result log: a per-file outcome and the run it came from."""

    timestamp: str
    workdir: str
    dry_run: bool
    path: str
    success: bool
    error: PatchFailure | None = None


class LogSummary(BaseModel):
    total: int
    succeeded: int
    failed: int
    dry_runs: int
    failures_by_type: dict[str, int] = Field(default_factory=dict)
    failed_paths: list[str] = Field(default_factory=list)
    skipped_lines: int = 0


def record_results(
    path: Path,
    results: Iterable[PatchResult],
    workdir: Path | str,
    dry_run: bool,
    timestamp: str | None = None,
) -> bool:
    """
    Append one JSON line per result to the log at `path`.

    All lines of a run go out under a single `.lock` sidecar, so runs
    sharing a log never interleave. Patched content is not logged.

    Returns:
        True if the write succeeded, False if it failed (e.g., disk full).
    """

    path = Path(path)
    timestamp = timestamp or datetime.now(timezone.utc).isoformat()
    payload = "".join(
        ResultRecord(
            timestamp = timestamp,
            workdir = str(workdir),
            dry_run = dry_run,
            path = result.path,
            success = result.success,
            error = result.error,
        ).model_dump_json() + "\n"
        for result in results
    )

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with FileLock(str(path) + ".lock"):
            with open(path, "ab") as f:
                f.write(payload.encode("utf-8"))
                f.flush()
                os.fsync(f.fileno())
        return True

    except OSError as e:
        logger.critical("Failed to write patch results to %s: %s", path, e)
        return False


def load_results(path: Path) -> tuple[list[ResultRecord], int]:
    """Read a result log, returning the records and the number of lines skipped."""

    records: list[ResultRecord] = []
    skipped = 0

    with Path(path).open("r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                records.append(ResultRecord.model_validate_json(line))
            except ValidationError as e:
                skipped += 1
                logger.warning(
                    "Skipping unreadable result at %s:%d (%d errors)",
                    path,
                    line_number,
                    e.error_count(),
                )

    return records, skipped


def summarise_results(records: list[ResultRecord], skipped_lines: int = 0) -> LogSummary:
    failed = [r for r in records if not r.success]

    counts: Counter[str] = Counter(
        str(r.error.error_type) if r.error else "unknown" for r in failed
    )
    # most frequent first, ties by name
    by_type = dict(sorted(counts.items(), key=lambda item: (-item[1], item[0])))

    return LogSummary(
        total = len(records),
        succeeded = len(records) - len(failed),
        failed = len(failed),
        dry_runs = sum(1 for r in records if r.dry_run),
        failures_by_type = by_type,
        failed_paths = sorted({r.path for r in failed}),
        skipped_lines = skipped_lines,
    )
