import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathEscapeError(Exception):
    def __init__(self, candidate: Path, workdir: Path):
        super().__init__(f"Candidate {str(candidate)} is not relative to workdir: {str(workdir)}")


class SymLinkError(Exception):
    def __init__(self, path: Path):
        super().__init__(f"Path contains symlink: {str(path)}")


def resolve_safe_path(
    workdir: Path,
    relative_path: str,
    allow_symlinks: bool = False
) -> Path:
    """
    Resolve a patch target inside a work directory safely.

    Args:
        workdir: Directory the patch is applied in
        relative_path: Target identity taken from the patch headers
        allow_symlinks: If False, reject paths that contain symlinks

    Returns:
        Resolved absolute Path that is guaranteed to be within workdir

    Raises:
        PathEscapeError: If the resolved path would escape the work directory
        SymLinkError: If symlinks are not allowed and path contains one
    """

    workdir = Path(workdir).resolve()

    if relative_path.startswith('/'):
        relative_path = relative_path.strip('/')

    candidate = (workdir / relative_path).resolve()

    if not candidate.is_relative_to(workdir) or candidate == workdir:
        logger.warning("Path escape attempt: %s is not inside %s", candidate, workdir)
        raise PathEscapeError(candidate, workdir)

    if not allow_symlinks:
        path_so_far = workdir

        for part in Path(relative_path).parts:
            path_so_far = path_so_far / part

            if path_so_far.is_symlink():
                logger.warning("Symlink blocked: %s", path_so_far)
                raise SymLinkError(path_so_far)

    logger.debug("Resolved safe path: %s -> %s", relative_path, candidate)
    return candidate
