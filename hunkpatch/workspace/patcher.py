import logging
from pathlib import Path

from hunkpatch.patching.applier import DEFAULT_FUZZ
from hunkpatch.patching.models import PatchResult, StructuredPatch
from hunkpatch.patching.orchestrator import apply_patches
from hunkpatch.patching.parser import parse_patch
from hunkpatch.workspace.store import WorkspaceStore

logger = logging.getLogger(__name__)


class WorkspacePatcher:
    """
    Applies a multi-file unified diff to files under a work directory.

    The patch is parsed when the patcher is built, so a malformed patch
    raises ParseError right away and nothing on disk is touched.
    """

    def __init__(
        self,
        workdir: Path | str,
        patch_content: str,
        encoding: str = "utf-8",
        dry_run: bool = False,
        fuzz: int = DEFAULT_FUZZ
    ):
        if not workdir or not str(workdir).strip():
            raise ValueError("workdir must be a non-empty path")
        if not patch_content or not isinstance(patch_content, str):
            raise ValueError("patch_content must be a non-empty string")

        self.store = WorkspaceStore(Path(workdir), encoding = encoding)
        self.dry_run = dry_run
        self.fuzz = fuzz
        self._patches = parse_patch(patch_content)
        logger.debug(
            "Prepared patch for %d files in %s",
            len(self._patches),
            self.store.workdir,
        )

    @property
    def workdir(self) -> Path:
        return self.store.workdir

    @property
    def parsed_patches(self) -> list[StructuredPatch]:
        return list(self._patches)

    @property
    def file_count(self) -> int:
        return len(self._patches)

    def apply_all(self) -> list[PatchResult]:
        return apply_patches(
            self._patches,
            reader = self.store,
            writer = self.store,
            dry_run = self.dry_run,
            fuzz = self.fuzz,
        )
