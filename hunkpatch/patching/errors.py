from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hunkpatch.patching.models import PatchFailure


class PatchErrorType(StrEnum):
    PARSE_ERROR = "parse_error"
    TARGET_RESOLUTION = "target_resolution"
    CONTENT_MISMATCH = "content_mismatch"
    NOT_FOUND = "not_found"
    IO_ERROR = "io_error"


class PatchError(Exception):
    def __init__(
        self,
        error_type: PatchErrorType,
        message: str,
        details: dict | None = None
    ):
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.details = details or {}

    def to_failure(self) -> "PatchFailure":
        from hunkpatch.patching.models import PatchFailure

        return PatchFailure(
            error_type = self.error_type,
            message = self.message,
            details = self.details,
        )


class ParseError(PatchError):
    """The patch blob cannot be split into files and hunks."""
    def __init__(
        self,
        message: str,
        line_number: int | None = None
    ):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(
            PatchErrorType.PARSE_ERROR,
            message,
            details = {
                "line_number": line_number
            }
        )
        self.line_number = line_number


class TargetResolutionError(PatchError):
    def __init__(
        self,
        message: str,
        old_file_name: str | None = None,
        new_file_name: str | None = None
    ):
        super().__init__(
            PatchErrorType.TARGET_RESOLUTION,
            message,
            details = {
                "old_file_name": old_file_name,
                "new_file_name": new_file_name,
            }
        )


class ApplyError(PatchError):
    pass


class ContentMismatchError(ApplyError):
    """A hunk's context/deleted lines were not found within the fuzz window."""
    def __init__(
        self,
        hunk_index: int,
        old_start: int,
        fuzz: int
    ):
        super().__init__(
            PatchErrorType.CONTENT_MISMATCH,
            f"hunk #{hunk_index} at line {old_start} does not match file content (fuzz {fuzz})",
            details = {
                "hunk_index": hunk_index,
                "old_start": old_start,
                "fuzz": fuzz,
            }
        )
        self.hunk_index = hunk_index
        self.old_start = old_start


class PatchIOError(PatchError):
    def __init__(
        self,
        message: str,
        path: str | None = None,
        error_type: PatchErrorType = PatchErrorType.IO_ERROR
    ):
        super().__init__(
            error_type,
            message,
            details = {
                "path": path
            }
        )
        self.path = path


class NotFoundError(PatchIOError):
    def __init__(
        self,
        path: str
    ):
        super().__init__(
            f"file not found: {path}",
            path = path,
            error_type = PatchErrorType.NOT_FOUND,
        )
