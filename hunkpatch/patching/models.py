from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from hunkpatch.patching.errors import PatchErrorType


class LineKind(StrEnum):
    CONTEXT = " "
    DELETE = "-"
    ADD = "+"


@dataclass(frozen=True)
class HunkLine:
    kind: LineKind
    text: str
    no_newline: bool = False


@dataclass(frozen=True)
class Hunk:
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: tuple[HunkLine, ...]

    def old_side(self) -> list[HunkLine]:
        """Context and deleted lines, i.e. what must already be in the file."""
        return [line for line in self.lines if line.kind != LineKind.ADD]

    def new_side(self) -> list[HunkLine]:
        """Context and added lines, i.e. what the file holds afterwards."""
        return [line for line in self.lines if line.kind != LineKind.DELETE]

    @property
    def header(self) -> str:
        return f"@@ -{self.old_start},{self.old_lines} +{self.new_start},{self.new_lines} @@"


@dataclass(frozen=True)
class StructuredPatch:
    old_file_name: str | None
    new_file_name: str | None
    hunks: tuple[Hunk, ...]
    old_header: str | None = None
    new_header: str | None = None


class PatchFailure(BaseModel):
    error_type: PatchErrorType
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class PatchResult(BaseModel):
    path: str
    content: str = ""
    success: bool
    error: PatchFailure | None = None

    @model_validator(mode="after")
    def _error_iff_failed(self) -> "PatchResult":
        if self.success and self.error is not None:
            raise ValueError("successful result must not carry an error")
        if not self.success and self.error is None:
            raise ValueError("failed result must carry an error")
        return self
