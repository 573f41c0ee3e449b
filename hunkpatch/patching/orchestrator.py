import logging
from collections.abc import Sequence
from typing import Protocol

from hunkpatch.patching.applier import DEFAULT_FUZZ, apply_hunks
from hunkpatch.patching.errors import (
    NotFoundError,
    PatchError,
    PatchIOError,
    TargetResolutionError,
)
from hunkpatch.patching.models import PatchResult, StructuredPatch
from hunkpatch.patching.parser import parse_patch

logger = logging.getLogger(__name__)

DEV_NULL = "/dev/null"
UNKNOWN_TARGET = "unknown"


class ContentReader(Protocol):
    def read(self, path: str) -> str:
        """Return the file's text; raise FileNotFoundError or NotFoundError if absent."""
        ...


class ContentWriter(Protocol):
    def write(self, path: str, content: str) -> None:
        ...


def clean_file_name(name: str | None) -> str | None:
    """Strip a leading a/ or b/ segment. /dev/null and blanks count as absent."""
    if name is None:
        return None
    name = name.strip()
    if not name or name == DEV_NULL:
        return None
    if name.startswith(("a/", "b/")):
        name = name[2:]
    return name or None


def resolve_target(patch: StructuredPatch) -> str:
    """
    Pick the file a structured patch applies to.

    The new file name wins since it names the post-change file; the old name
    is the fallback (deletions carry /dev/null on the new side).
    """

    target = clean_file_name(patch.new_file_name) or clean_file_name(patch.old_file_name)
    if target is None:
        raise TargetResolutionError(
            "cannot determine the target file from the patch headers",
            old_file_name = patch.old_file_name,
            new_file_name = patch.new_file_name,
        )
    return target


def _is_creation(patch: StructuredPatch) -> bool:
    return (
        clean_file_name(patch.old_file_name) is None
        and all(hunk.old_lines == 0 for hunk in patch.hunks)
    )


def _read_original(
    reader: ContentReader,
    path: str,
    patch: StructuredPatch,
    staged: dict[str, str],
) -> str:
    if path in staged:
        return staged[path]

    try:
        return reader.read(path)
    except NotFoundError:
        if _is_creation(patch):
            return ""
        raise
    except FileNotFoundError as exc:
        if _is_creation(patch):
            return ""
        raise NotFoundError(path) from exc
    except (OSError, UnicodeError) as exc:
        raise PatchIOError(f"failed to read {path}: {exc}", path = path) from exc


def _write_patched(writer: ContentWriter, path: str, content: str) -> None:
    try:
        writer.write(path, content)
    except (OSError, UnicodeError) as exc:
        raise PatchIOError(f"failed to write {path}: {exc}", path = path) from exc


def _apply_one(
    patch: StructuredPatch,
    reader: ContentReader,
    writer: ContentWriter | None,
    dry_run: bool,
    fuzz: int,
    staged: dict[str, str],
) -> PatchResult:
    try:
        path = resolve_target(patch)
    except TargetResolutionError as exc:
        logger.warning("Skipping patch section: %s", exc.message)
        return PatchResult(path = UNKNOWN_TARGET, success = False, error = exc.to_failure())

    try:
        original = _read_original(reader, path, patch, staged)
        patched = apply_hunks(original, patch.hunks, fuzz = fuzz)
        if not dry_run:
            _write_patched(writer, path, patched)
    except PatchError as exc:
        logger.warning("Failed to patch %s: %s", path, exc.message)
        return PatchResult(path = path, success = False, error = exc.to_failure())

    # later sections for the same path build on this one
    staged[path] = patched
    logger.debug("Patched %s (%d hunks)", path, len(patch.hunks))
    return PatchResult(path = path, content = patched, success = True)


def apply_patches(
    patches: Sequence[StructuredPatch],
    reader: ContentReader,
    writer: ContentWriter | None = None,
    *,
    dry_run: bool = False,
    fuzz: int = DEFAULT_FUZZ,
) -> list[PatchResult]:
    """
    Apply parsed patches file by file, returning one result per patch in order.

    A failure in one file (unresolvable target, missing file, hunk mismatch,
    read/write error) is recorded in that file's result and never stops the
    remaining files. Patches are applied in sequence, so two sections naming
    the same file see each other's output; in dry-run mode the writer is
    never called and the computed content is still reported.
    """

    if writer is None and not dry_run:
        raise ValueError("a writer is required unless dry_run is set")

    staged: dict[str, str] = {}
    results = [
        _apply_one(patch, reader, writer, dry_run, fuzz, staged)
        for patch in patches
    ]

    failed = sum(1 for result in results if not result.success)
    logger.info(
        "Applied patches to %d/%d files%s",
        len(results) - failed,
        len(results),
        " (dry run)" if dry_run else "",
    )
    return results


def apply_patch_text(
    patch_txt: str,
    reader: ContentReader,
    writer: ContentWriter | None = None,
    *,
    dry_run: bool = False,
    fuzz: int = DEFAULT_FUZZ,
) -> list[PatchResult]:
    """Parse `patch_txt` and apply it. ParseError propagates and nothing is touched."""
    patches = parse_patch(patch_txt)
    return apply_patches(patches, reader, writer, dry_run = dry_run, fuzz = fuzz)
