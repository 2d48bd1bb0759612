"""Diff model, parser, line selection and partial patch synthesis."""

from linestage.diff.errors import (
    BinaryContentError,
    DiffError,
    DiffErrorType,
    EmptySelectionError,
    MalformedDiffError,
    UnsupportedChangeError,
)
from linestage.diff.models import (
    BinaryDiff,
    Diff,
    DiffHunk,
    DiffLine,
    DiffLineType,
    FileStatus,
    HunkHeader,
    ParsedDiff,
)
from linestage.diff.parser import parse_diff, parse_hunk_header
from linestage.diff.selection import DiffSelection, SelectionMode, SelectionType
from linestage.diff.synthesizer import (
    create_patch_for_deleted_file,
    create_patch_for_modified_file,
    create_patch_for_new_file,
    emitted_line_type,
    partial_hunks,
    synthesize_patch,
)

__all__ = [
    "BinaryContentError",
    "DiffError",
    "DiffErrorType",
    "EmptySelectionError",
    "MalformedDiffError",
    "UnsupportedChangeError",
    "BinaryDiff",
    "Diff",
    "DiffHunk",
    "DiffLine",
    "DiffLineType",
    "FileStatus",
    "HunkHeader",
    "ParsedDiff",
    "parse_diff",
    "parse_hunk_header",
    "DiffSelection",
    "SelectionMode",
    "SelectionType",
    "create_patch_for_deleted_file",
    "create_patch_for_modified_file",
    "create_patch_for_new_file",
    "emitted_line_type",
    "partial_hunks",
    "synthesize_patch",
]
