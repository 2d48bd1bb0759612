"""Thin wrappers around the git executable."""

from linestage.git.operations import (
    add_file_to_index,
    apply_patch_to_index,
    create_commit,
    diff_args,
    get_diff,
    get_raw_diff,
    get_status,
    stage_file,
    stage_files,
)
from linestage.git.process import GitCommandError, GitResult, check_exit_code, run_git
from linestage.git.status import (
    FileChange,
    WorkingDirectoryFileChange,
    map_status,
    parse_porcelain_status,
)

__all__ = [
    "add_file_to_index",
    "apply_patch_to_index",
    "create_commit",
    "diff_args",
    "get_diff",
    "get_raw_diff",
    "get_status",
    "stage_file",
    "stage_files",
    "GitCommandError",
    "GitResult",
    "check_exit_code",
    "run_git",
    "FileChange",
    "WorkingDirectoryFileChange",
    "map_status",
    "parse_porcelain_status",
]
