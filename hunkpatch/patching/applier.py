import logging
from collections.abc import Iterator, Sequence

from hunkpatch.patching.errors import ContentMismatchError
from hunkpatch.patching.models import Hunk, HunkLine

logger = logging.getLogger(__name__)

DEFAULT_FUZZ = 3


def detect_line_terminator(text: str) -> str:
    """Return the terminator used by the first line of `text`, "\\n" if unknown."""
    first = text.find("\n")
    if first > 0 and text[first - 1] == "\r":
        return "\r\n"
    return "\n"


def _split_lines(text: str, newline: str) -> tuple[list[str], bool]:
    if text == "":
        return [], True
    lines = text.split(newline)
    if lines[-1] == "":
        lines.pop()
        return lines, True
    return lines, False


def _candidate_starts(expected: int, fuzz: int) -> Iterator[int]:
    yield expected
    for distance in range(1, fuzz + 1):
        yield expected + distance
        yield expected - distance


def _matches_at(
    buffer: list[str],
    start: int,
    old_side: list[HunkLine],
    eof_newline: bool,
    min_start: int,
) -> bool:
    end = start + len(old_side)
    if start < min_start or end > len(buffer):
        return False

    # a flagged last line only exists at the very end of a file without a final newline
    if old_side and old_side[-1].no_newline and (end != len(buffer) or eof_newline):
        return False

    return all(buffer[start + k] == line.text for k, line in enumerate(old_side))


def apply_hunks(
    original: str,
    hunks: Sequence[Hunk],
    fuzz: int = DEFAULT_FUZZ,
) -> str:
    """
    Apply one file's hunks, in order, to its original content.

    Args:
        original: Full text of the file before patching
        hunks: The file's hunks, as parsed (line numbers relative to `original`)
        fuzz: How many lines away from the declared position a hunk may match

    Returns:
        The patched text.

    Raises:
        ContentMismatchError: If any hunk cannot be located. The caller never
            sees a partially patched text.

    Each hunk's `old_start` refers to the original file, so a running offset
    (added minus removed lines of the hunks applied so far) shifts later
    hunks into the edited buffer. When the lines at the expected position do
    not match, positions up to `fuzz` lines away are tried nearest first,
    forward before backward.
    """

    if fuzz < 0:
        raise ValueError(f"fuzz must be >= 0, got {fuzz}")

    newline = detect_line_terminator(original)
    buffer, eof_newline = _split_lines(original, newline)

    offset = 0
    min_start = 0

    for index, hunk in enumerate(hunks, start=1):
        old_side = hunk.old_side()
        new_side = hunk.new_side()

        # pure insertions name the line they follow
        anchor = hunk.old_start - 1 if hunk.old_lines else hunk.old_start
        expected = anchor + offset

        start = next(
            (
                candidate
                for candidate in _candidate_starts(expected, fuzz)
                if _matches_at(buffer, candidate, old_side, eof_newline, min_start)
            ),
            None,
        )
        if start is None:
            logger.debug(
                "Hunk #%d (%s) not found near buffer line %d",
                index,
                hunk.header,
                expected + 1,
            )
            raise ContentMismatchError(index, hunk.old_start, fuzz)

        if start != expected:
            logger.debug("Hunk #%d applied with fuzz offset %+d", index, start - expected)

        end = start + len(old_side)
        reaches_eof = end == len(buffer)
        buffer[start:end] = [line.text for line in new_side]

        if reaches_eof:
            eof_newline = not new_side[-1].no_newline if new_side else True

        offset += len(new_side) - len(old_side)
        min_start = start + len(new_side)

    if not buffer:
        return ""
    patched = newline.join(buffer)
    if eof_newline:
        patched += newline
    return patched
