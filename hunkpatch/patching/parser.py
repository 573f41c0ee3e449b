import logging
import re
from dataclasses import replace

from hunkpatch.patching.errors import ParseError
from hunkpatch.patching.models import Hunk, HunkLine, LineKind, StructuredPatch

logger = logging.getLogger(__name__)

HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
LINE_SPLIT_RE = re.compile(r"\r?\n")

# lines that may sit between or after hunks of one file
NEXT_SECTION_PREFIXES = ("--- ", "+++ ", "diff ", "Index: ", "====")
EXTENDED_HEADER_PREFIXES = (
    "index ",
    "new file mode",
    "deleted file mode",
    "old mode",
    "new mode",
    "similarity",
    "dissimilarity",
    "rename ",
    "copy ",
)


def _split_file_header(line: str, marker: str) -> tuple[str | None, str | None]:
    tail = line[len(marker):]
    name, sep, header = tail.partition("\t")
    name = name.strip()
    header = header.strip() if sep else ""
    return (name or None), (header or None)


def _starts_file_section(lines: list[str], i: int) -> bool:
    return (
        lines[i].startswith("--- ")
        and i + 2 < len(lines)
        and lines[i + 1].startswith("+++ ")
        and lines[i + 2].startswith("@@")
    )


def _parse_hunk(lines: list[str], i: int) -> tuple[Hunk, int]:
    header_line_no = i + 1
    match = HUNK_HEADER_RE.match(lines[i])
    if match is None:
        raise ParseError(f"malformed hunk header: {lines[i]!r}", header_line_no)

    old_start = int(match.group(1))
    old_lines = int(match.group(2)) if match.group(2) is not None else 1
    new_start = int(match.group(3))
    new_lines = int(match.group(4)) if match.group(4) is not None else 1

    body: list[HunkLine] = []
    old_seen = 0
    new_seen = 0
    i += 1

    while i < len(lines):
        line = lines[i]

        if line.startswith("\\"):
            # "\ No newline at end of file" (text is localised by git)
            if not body:
                raise ParseError("no-newline marker without a preceding hunk line", i + 1)
            body[-1] = replace(body[-1], no_newline = True)
            i += 1
            continue

        if old_seen >= old_lines and new_seen >= new_lines:
            break
        if line.startswith("@@") or _starts_file_section(lines, i):
            break

        if line == "":
            # editors tend to strip the single space of an empty context line
            kind, text = LineKind.CONTEXT, ""
        elif line[0] in (" ", "-", "+"):
            kind, text = LineKind(line[0]), line[1:]
        else:
            raise ParseError(f"unexpected line in hunk body: {line!r}", i + 1)

        if kind != LineKind.ADD:
            old_seen += 1
        if kind != LineKind.DELETE:
            new_seen += 1
        body.append(HunkLine(kind = kind, text = text))
        i += 1

    if old_seen != old_lines or new_seen != new_lines:
        raise ParseError(
            f"hunk {match.group(0)} declares -{old_lines} +{new_lines} lines "
            f"but its body has -{old_seen} +{new_seen}",
            header_line_no,
        )

    hunk = Hunk(
        old_start = old_start,
        old_lines = old_lines,
        new_start = new_start,
        new_lines = new_lines,
        lines = tuple(body),
    )
    return hunk, i


def _parse_file_section(lines: list[str], i: int) -> tuple[StructuredPatch, int]:
    header_line_no = i + 1
    old_name, old_header = _split_file_header(lines[i], "--- ")

    if i + 1 >= len(lines) or not lines[i + 1].startswith("+++ "):
        raise ParseError("'---' header is not followed by a '+++' header", header_line_no)
    new_name, new_header = _split_file_header(lines[i + 1], "+++ ")
    i += 2

    hunks: list[Hunk] = []
    while i < len(lines):
        line = lines[i]
        if line.startswith("@@"):
            hunk, i = _parse_hunk(lines, i)
            hunks.append(hunk)
            continue
        if line.startswith(NEXT_SECTION_PREFIXES):
            break
        if line.strip() == "" or line.startswith(EXTENDED_HEADER_PREFIXES):
            i += 1
            continue
        # a body line here means the hunk before it is longer than its header says
        raise ParseError(f"unexpected line in file section: {line!r}", i + 1)

    if not hunks:
        raise ParseError(
            f"file section {new_name or old_name!r} contains no hunks",
            header_line_no,
        )

    patch = StructuredPatch(
        old_file_name = old_name,
        new_file_name = new_name,
        hunks = tuple(hunks),
        old_header = old_header,
        new_header = new_header,
    )
    return patch, i


def parse_patch(patch_txt: str) -> list[StructuredPatch]:
    """
    Split a (possibly multi-file) unified diff into structured per-file patches.

    A unified diff looks like:
    ```diff
    --- a/src/main.py
    +++ b/src/main.py
    @@ -10,6 +10,7 @@
     def calculate_total(items):
         total = 0
         for item in items:
    +        if item < 0:
    +            continue
             total += item
         return total
    ```

    - `--- a/path` and `+++ b/path`: source and destination file names,
      kept verbatim (prefix stripping is the orchestrator's business)
    - `@@ -start,count +start,count @@`: hunk header, a missing count means 1
    - ` `, `-`, `+` prefixes: context, removed and added lines
    - `\\ No newline at end of file`: flags the line right before it

    Whitespace-only input yields an empty list. Any structural problem
    raises ParseError and nothing is returned.
    """

    if not patch_txt.strip():
        return []

    lines = LINE_SPLIT_RE.split(patch_txt)
    if lines and lines[-1] == "":
        lines.pop()

    patches: list[StructuredPatch] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("--- "):
            patch, i = _parse_file_section(lines, i)
            patches.append(patch)
            continue
        if line.startswith("+++ "):
            raise ParseError("'+++' header without a preceding '---' header", i + 1)
        if line.startswith("@@"):
            raise ParseError("hunk header outside of a file section", i + 1)
        i += 1

    if not patches:
        raise ParseError("no '---'/'+++' file header pair found")

    logger.debug(
        "Parsed %d file patches (%d hunks) from unified diff",
        len(patches),
        sum(len(p.hunks) for p in patches),
    )
    return patches
