from hunkpatch.workspace.filesystem import PathEscapeError, SymLinkError, resolve_safe_path
from hunkpatch.workspace.patcher import WorkspacePatcher
from hunkpatch.workspace.store import WorkspaceStore

__all__ = [
    "WorkspacePatcher",
    "WorkspaceStore",
    "resolve_safe_path",
    "PathEscapeError",
    "SymLinkError",
]
