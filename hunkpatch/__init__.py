"""
hunkpatch: parse unified diffs and apply them file by file.
"""

from hunkpatch.patching import (
    PatchResult,
    StructuredPatch,
    apply_hunks,
    apply_patch_text,
    apply_patches,
    parse_patch,
)

__version__ = "0.1.0"

__all__ = [
    "parse_patch",
    "apply_hunks",
    "apply_patches",
    "apply_patch_text",
    "StructuredPatch",
    "PatchResult",
]
