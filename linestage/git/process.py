import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from linestage.config import GitConfig, load_config

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_CODE = 124


@dataclass
class GitResult:
    args: list[str]
    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class GitCommandError(Exception):
    def __init__(self, cmd_name: str, exit_code: int, stderr: str = ""):
        message = f"{cmd_name} failed with exit code {exit_code}"
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
        self.cmd_name = cmd_name
        self.exit_code = exit_code
        self.stderr = stderr


def run_git(
    args: list[str],
    cwd: Path,
    input_text: str | None = None,
    timeout_sec: int | None = None,
    config: GitConfig | None = None,
    success_codes: tuple[int, ...] = (0,),
) -> GitResult:
    """
    Run git with `args` inside `cwd` and capture its output.

    A timeout is reported as exit code 124 with a "timed out" message on
    stderr rather than raised, so callers handle it like any other failure.
    Exit codes outside `success_codes` are logged at ERROR.
    """

    config = config or load_config()
    cmd = [config.git_binary, *args]
    timeout = timeout_sec if timeout_sec is not None else config.timeout_sec
    logger.debug("Running %s in %s", " ".join(cmd), cwd)

    try:
        completed = subprocess.run(
            cmd,
            cwd=cwd,
            input=input_text,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.error("git %s timed out after %d seconds", args[0], timeout)
        return GitResult(
            args=cmd,
            stdout="",
            stderr=f"git {args[0]} timed out after {timeout} seconds",
            exit_code=TIMEOUT_EXIT_CODE,
        )

    result = GitResult(
        args=cmd,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        exit_code=completed.returncode,
    )
    if result.exit_code not in success_codes:
        logger.error("git %s exited with %d: %s", args[0], result.exit_code, result.stderr.strip())
    return result


def check_exit_code(
    cmd_name: str,
    exit_code: int,
    success: int = 0,
    stderr: str = "",
) -> GitCommandError | None:
    if exit_code != success:
        return GitCommandError(cmd_name, exit_code, stderr)
    return None
