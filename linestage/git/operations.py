import logging
from collections.abc import Iterable
from pathlib import Path

from linestage.config import GitConfig, load_config
from linestage.diff.errors import EmptySelectionError
from linestage.diff.models import FileStatus, ParsedDiff
from linestage.diff.parser import parse_diff
from linestage.diff.selection import SelectionMode, SelectionType
from linestage.diff.synthesizer import synthesize_patch
from linestage.git.process import GitCommandError, GitResult, check_exit_code, run_git
from linestage.git.status import (
    FileChange,
    WorkingDirectoryFileChange,
    parse_porcelain_status,
)

logger = logging.getLogger(__name__)


def get_status(repo_dir: Path, config: GitConfig | None = None) -> list[WorkingDirectoryFileChange]:
    cmd = ["status", "--untracked-files=all", "--porcelain", "-z"]
    result = run_git(cmd, cwd=repo_dir, config=config)

    error = check_exit_code("git_status", result.exit_code, stderr=result.stderr)
    if error:
        raise error
    return parse_porcelain_status(result.stdout)


def diff_args(file: FileChange) -> list[str]:
    """Arguments for diffing one working-tree file against HEAD."""
    if file.status == FileStatus.NEW:
        return ["diff", "--no-index", "--patch-with-raw", "-z", "--", "/dev/null", file.path]
    return ["diff", "HEAD", "--patch-with-raw", "-z", "--", file.path]


def get_raw_diff(repo_dir: Path, file: FileChange, config: GitConfig | None = None) -> str:
    """
    Fetch the unified diff text of `file`.

    `--patch-with-raw -z` puts the raw status records first, NUL separated;
    the patch itself is the last piece. `git diff --no-index` exits with 1
    when the files differ, which is not a failure.
    """

    result = run_git(diff_args(file), cwd=repo_dir, config=config, success_codes=(0, 1))
    if result.exit_code not in (0, 1):
        raise GitCommandError("git_diff", result.exit_code, result.stderr)
    return result.stdout.split("\0")[-1]


def get_diff(repo_dir: Path, file: FileChange, config: GitConfig | None = None) -> ParsedDiff:
    return parse_diff(get_raw_diff(repo_dir, file, config=config))


def apply_patch_to_index(repo_dir: Path, patch: str, config: GitConfig | None = None) -> GitResult:
    """
    Feed `patch` to `git apply --cached` on stdin.

    A failed apply is raised unchanged as GitCommandError; nothing is retried.
    """

    config = config or load_config()
    result = run_git(config.apply_args, cwd=repo_dir, input_text=patch, config=config)
    error = check_exit_code("git_apply", result.exit_code, stderr=result.stderr)
    if error:
        raise error
    return result


def add_file_to_index(
    repo_dir: Path,
    file: FileChange,
    config: GitConfig | None = None,
) -> GitResult:
    if file.status == FileStatus.NEW:
        cmd = ["add", "--", file.path]
    else:
        cmd = ["add", "-u", "--", file.path]

    result = run_git(cmd, cwd=repo_dir, config=config)
    error = check_exit_code("git_add", result.exit_code, stderr=result.stderr)
    if error:
        raise error
    return result


def stage_file(
    repo_dir: Path,
    file: WorkingDirectoryFileChange,
    config: GitConfig | None = None,
) -> bool:
    """
    Stage the selected lines of one file.

    Returns:
        True if anything was handed to git, False if the file was skipped
    """

    selection = file.selection
    if not selection.overrides and selection.mode == SelectionMode.ALL:
        add_file_to_index(repo_dir, file, config=config)
        return True

    diff = get_diff(repo_dir, file, config=config)
    selection_type = selection.selection_type(diff)
    if selection_type == SelectionType.NONE:
        logger.info("Nothing selected in %s, skipping", file.path)
        return False
    if selection_type == SelectionType.ALL:
        add_file_to_index(repo_dir, file, config=config)
        return True

    try:
        patch = synthesize_patch(file.path, diff, selection, file.status, allow_empty=False)
    except EmptySelectionError:
        logger.info("Selection in %s leaves nothing to stage, skipping", file.path)
        return False

    apply_patch_to_index(repo_dir, patch, config=config)
    logger.info("Staged partial selection of %s", file.path)
    return True


def stage_files(
    repo_dir: Path,
    files: Iterable[WorkingDirectoryFileChange],
    config: GitConfig | None = None,
) -> list[str]:
    staged: list[str] = []
    for file in files:
        if stage_file(repo_dir, file, config=config):
            staged.append(file.path)
    return staged


def resolve_head(repo_dir: Path, config: GitConfig | None = None) -> bool:
    result = run_git(
        ["rev-parse", "--verify", "--quiet", "HEAD"],
        cwd=repo_dir,
        config=config,
        success_codes=(0, 1),
    )
    return result.exit_code == 0


def create_commit(
    repo_dir: Path,
    summary: str,
    description: str,
    files: Iterable[WorkingDirectoryFileChange],
    config: GitConfig | None = None,
) -> GitResult:
    """Reset the index, stage `files` by their selections and commit."""
    reset_args = ["reset"]
    if resolve_head(repo_dir, config=config):
        reset_args += ["HEAD", "--mixed"]

    result = run_git(reset_args, cwd=repo_dir, config=config)
    error = check_exit_code("git_reset", result.exit_code, stderr=result.stderr)
    if error:
        raise error

    stage_files(repo_dir, files, config=config)

    message = summary
    if description:
        message = f"{summary}\n\n{description}"

    result = run_git(["commit", "-m", message], cwd=repo_dir, config=config)
    error = check_exit_code("git_commit", result.exit_code, stderr=result.stderr)
    if error:
        raise error
    return result
