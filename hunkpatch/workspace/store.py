import logging
from pathlib import Path

from hunkpatch.patching.errors import NotFoundError, TargetResolutionError
from hunkpatch.workspace.filesystem import PathEscapeError, SymLinkError, resolve_safe_path

logger = logging.getLogger(__name__)


class WorkspaceStore:
    """Reads and writes patch targets under a work directory."""

    def __init__(
        self,
        workdir: Path,
        encoding: str = "utf-8",
        allow_symlinks: bool = False
    ):
        self.workdir = Path(workdir).resolve()
        self.encoding = encoding
        self.allow_symlinks = allow_symlinks

    def _resolve(self, path: str) -> Path:
        try:
            return resolve_safe_path(
                workdir = self.workdir,
                relative_path = path,
                allow_symlinks = self.allow_symlinks
            )
        except (PathEscapeError, SymLinkError) as exc:
            raise TargetResolutionError(str(exc), new_file_name = path) from exc

    def read(self, path: str) -> str:
        full_path = self._resolve(path)
        if not full_path.is_file():
            raise NotFoundError(path)
        # newline="" keeps CRLF files intact for the applier
        with full_path.open("r", encoding = self.encoding, newline = "") as f:
            return f.read()

    def write(self, path: str, content: str) -> None:
        full_path = self._resolve(path)
        full_path.parent.mkdir(parents = True, exist_ok = True)
        with full_path.open("w", encoding = self.encoding, newline = "") as f:
            f.write(content)
        logger.debug("Wrote %d bytes to %s", len(content.encode(self.encoding)), full_path)

