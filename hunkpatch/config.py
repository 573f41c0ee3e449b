import logging
import os

from pydantic import BaseModel, ConfigDict, Field

from hunkpatch.patching.applier import DEFAULT_FUZZ

logger = logging.getLogger(__name__)


def _env_truthy(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, value)
        return default


class PatchSettings(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
    )

    fuzz: int = Field(default=DEFAULT_FUZZ, ge=0)
    encoding: str = "utf-8"
    dry_run: bool = False


def load_settings(
    fuzz: int | None = None,
    encoding: str | None = None,
    dry_run: bool | None = None,
) -> PatchSettings:
    """
    Build settings from HUNKPATCH_* environment variables.

    Explicit (non-None) arguments win over the environment.
    """

    return PatchSettings(
        fuzz=fuzz if fuzz is not None else _env_int("HUNKPATCH_FUZZ", DEFAULT_FUZZ),
        encoding=encoding or os.getenv("HUNKPATCH_ENCODING") or "utf-8",
        dry_run=dry_run if dry_run is not None else _env_truthy("HUNKPATCH_DRY_RUN"),
    )
