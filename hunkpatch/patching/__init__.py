from hunkpatch.patching.applier import DEFAULT_FUZZ, apply_hunks
from hunkpatch.patching.errors import (
    ApplyError,
    ContentMismatchError,
    NotFoundError,
    ParseError,
    PatchError,
    PatchErrorType,
    PatchIOError,
    TargetResolutionError,
)
from hunkpatch.patching.models import (
    Hunk,
    HunkLine,
    LineKind,
    PatchFailure,
    PatchResult,
    StructuredPatch,
)
from hunkpatch.patching.orchestrator import (
    ContentReader,
    ContentWriter,
    apply_patch_text,
    apply_patches,
    resolve_target,
)
from hunkpatch.patching.parser import parse_patch

__all__ = [
    "DEFAULT_FUZZ",
    "parse_patch",
    "apply_hunks",
    "apply_patches",
    "apply_patch_text",
    "resolve_target",
    "ContentReader",
    "ContentWriter",
    "Hunk",
    "HunkLine",
    "LineKind",
    "StructuredPatch",
    "PatchResult",
    "PatchFailure",
    "PatchErrorType",
    "PatchError",
    "ParseError",
    "TargetResolutionError",
    "ApplyError",
    "ContentMismatchError",
    "PatchIOError",
    "NotFoundError",
]
