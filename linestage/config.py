import logging
import os

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_APPLY_ARGS = ["apply", "--cached", "--unidiff-zero", "--whitespace=nowarn", "-"]


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, value)
        return default


def env_log_level() -> int:
    name = _env_str("LINESTAGE_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


class GitConfig(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    git_binary: str = "git"
    timeout_sec: int = Field(default=30, gt=0)
    apply_args: list[str] = Field(default_factory=lambda: list(DEFAULT_APPLY_ARGS))


def load_config() -> GitConfig:
    """Build the git settings from LINESTAGE_* environment variables."""
    timeout_sec = _env_int("LINESTAGE_GIT_TIMEOUT_SEC", 30)
    if timeout_sec <= 0:
        logger.warning("Ignoring non-positive LINESTAGE_GIT_TIMEOUT_SEC=%d", timeout_sec)
        timeout_sec = 30
    return GitConfig(
        git_binary=_env_str("LINESTAGE_GIT_BINARY", "git"),
        timeout_sec=timeout_sec,
    )
