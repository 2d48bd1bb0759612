import logging
from collections.abc import Callable
from dataclasses import dataclass

from linestage.diff.errors import (
    BinaryContentError,
    EmptySelectionError,
    UnsupportedChangeError,
)
from linestage.diff.models import (
    Diff,
    DiffHunk,
    DiffLine,
    DiffLineType,
    FileStatus,
    HunkHeader,
    ParsedDiff,
)
from linestage.diff.selection import DiffSelection

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = "100644"


def emitted_line_type(line_type: DiffLineType, selected: bool) -> DiffLineType | None:
    """
    How an original line appears in a partial patch.

    | original | selected | emitted  |
    |----------|----------|----------|
    | added    | yes      | added    |
    | added    | no       | omitted  |
    | removed  | yes      | removed  |
    | removed  | no       | context  |
    | context  | either   | context  |
    """

    if line_type == DiffLineType.ADDED:
        return DiffLineType.ADDED if selected else None
    if line_type == DiffLineType.REMOVED:
        return DiffLineType.REMOVED if selected else DiffLineType.CONTEXT
    return DiffLineType.CONTEXT


@dataclass
class _Emitted:
    line_type: DiffLineType
    text: str
    old_missing_newline: bool = False
    new_missing_newline: bool = False


def _emit(line: DiffLine, selected: bool) -> _Emitted | None:
    line_type = emitted_line_type(line.line_type, selected)
    if line_type is None:
        return None
    flag = line.no_trailing_newline
    if line_type == DiffLineType.REMOVED:
        return _Emitted(line_type, line.text, old_missing_newline=flag)
    if line_type == DiffLineType.ADDED:
        return _Emitted(line_type, line.text, new_missing_newline=flag)
    # a kept removal still ends the way it did in the old file
    return _Emitted(line_type, line.text, flag, flag)


def _settle_newlines(entries: list[_Emitted]) -> list[_Emitted]:
    """
    Only the last line of each side may end without a newline.

    A context line whose two sides now disagree (an unselected removal that
    was the old last line but is followed by selected additions) is split
    into a removed/added pair so the new side can gain its newline.
    """

    old_side = [i for i, e in enumerate(entries) if e.line_type != DiffLineType.ADDED]
    new_side = [i for i, e in enumerate(entries) if e.line_type != DiffLineType.REMOVED]
    last_old = old_side[-1] if old_side else -1
    last_new = new_side[-1] if new_side else -1

    settled: list[_Emitted] = []
    for i, entry in enumerate(entries):
        old_missing = entry.old_missing_newline and i == last_old
        new_missing = entry.new_missing_newline and i == last_new
        if entry.line_type == DiffLineType.CONTEXT and old_missing != new_missing:
            settled.append(
                _Emitted(DiffLineType.REMOVED, entry.text, old_missing_newline=old_missing)
            )
            settled.append(
                _Emitted(DiffLineType.ADDED, entry.text, new_missing_newline=new_missing)
            )
        else:
            settled.append(_Emitted(entry.line_type, entry.text, old_missing, new_missing))
    return settled


def _first_line(start: int, count: int) -> int:
    return start if count else start + 1


def _build_hunk(
    entries: list[_Emitted],
    old_start: int,
    new_first_line: int,
    section: str = "",
) -> DiffHunk:
    old_count = sum(1 for e in entries if e.line_type != DiffLineType.ADDED)
    new_count = sum(1 for e in entries if e.line_type != DiffLineType.REMOVED)
    # an empty side points at the line before it
    new_start = new_first_line if new_count else new_first_line - 1

    old_line = _first_line(old_start, old_count)
    new_line = new_first_line
    lines: list[DiffLine] = []
    for entry in entries:
        old_number = old_line if entry.line_type != DiffLineType.ADDED else None
        new_number = new_line if entry.line_type != DiffLineType.REMOVED else None
        lines.append(
            DiffLine(
                line_type=entry.line_type,
                text=entry.text,
                old_line_number=old_number,
                new_line_number=new_number,
                no_trailing_newline=entry.old_missing_newline or entry.new_missing_newline,
            )
        )
        if old_number is not None:
            old_line += 1
        if new_number is not None:
            new_line += 1

    return DiffHunk(
        header=HunkHeader(
            old_start=old_start,
            old_count=old_count,
            new_start=new_start,
            new_count=new_count,
            section=section,
        ),
        lines=tuple(lines),
    )


def _selected_entries(
    diff: Diff,
    selection: DiffSelection,
    keep: Callable[[DiffLine], bool] = lambda line: True,
) -> list[list[_Emitted]]:
    """Run every line of every hunk through the emission table."""
    per_hunk: list[list[_Emitted]] = []
    index = 0
    for hunk in diff.hunks:
        entries: list[_Emitted] = []
        for line in hunk.lines:
            selected = True
            if line.is_change:
                selected = selection.is_selected(index)
                index += 1
            if not keep(line):
                continue
            emitted = _emit(line, selected)
            if emitted is not None:
                entries.append(emitted)
        per_hunk.append(entries)
    return per_hunk


def partial_hunks(diff: Diff, selection: DiffSelection) -> list[DiffHunk]:
    """
    Rebuild the hunks of `diff` keeping only the selected changes.

    Hunks left with nothing but context are dropped. Each surviving hunk
    keeps its old range; its new start is shifted by the net line delta of
    the hunks emitted before it.
    """

    hunks: list[DiffHunk] = []
    delta = 0
    for original, entries in zip(diff.hunks, _selected_entries(diff, selection)):
        entries = _settle_newlines(entries)
        if not any(e.line_type != DiffLineType.CONTEXT for e in entries):
            continue
        header = original.header
        new_first_line = _first_line(header.old_start, header.old_count) + delta
        hunk = _build_hunk(entries, header.old_start, new_first_line, header.section)
        delta += hunk.header.new_count - hunk.header.old_count
        hunks.append(hunk)
    return hunks


def _render(preamble: list[str], hunks: list[DiffHunk]) -> str:
    if not hunks:
        return ""
    body = preamble + [hunk.render() for hunk in hunks]
    # git apply wants the patch to end with a newline
    return "\n".join(body) + "\n"


def _modified_preamble(path: str) -> list[str]:
    return [
        f"diff --git a/{path} b/{path}",
        f"--- a/{path}",
        f"+++ b/{path}",
    ]


def create_patch_for_modified_file(path: str, diff: Diff, selection: DiffSelection) -> str:
    hunks = partial_hunks(diff, selection)
    logger.debug("Kept %d of %d hunks for %s", len(hunks), len(diff.hunks), path)
    return _render(_modified_preamble(path), hunks)


def create_patch_for_new_file(path: str, diff: Diff, selection: DiffSelection) -> str:
    """
    Patch that creates `path` holding only the selected added lines.

    Unselected additions are left out entirely; the result is always a
    single `-0,0` hunk.
    """

    per_hunk = _selected_entries(
        diff, selection, keep=lambda line: line.line_type == DiffLineType.ADDED
    )
    entries = _settle_newlines([entry for entries in per_hunk for entry in entries])
    hunks = [_build_hunk(entries, 0, 1)] if entries else []

    mode = diff.new_file_mode or DEFAULT_FILE_MODE
    preamble = [
        f"diff --git a/{path} b/{path}",
        f"new file mode {mode}",
        "--- /dev/null",
        f"+++ b/{path}",
    ]
    logger.debug("Selected %d added lines for new file %s", len(entries), path)
    return _render(preamble, hunks)


def create_patch_for_deleted_file(path: str, diff: Diff, selection: DiffSelection) -> str:
    """
    Patch removing the selected lines of a deleted file.

    Unselected removals stay behind as context, which stages a partial
    deletion against the unchanged path. Selecting every line stages the
    deletion of the file itself.
    """

    resolved = selection.resolve(diff)
    if resolved and all(resolved.values()):
        hunks = partial_hunks(diff, selection)
        mode = diff.deleted_file_mode or DEFAULT_FILE_MODE
        preamble = [
            f"diff --git a/{path} b/{path}",
            f"deleted file mode {mode}",
            f"--- a/{path}",
            "+++ /dev/null",
        ]
        return _render(preamble, hunks)

    return create_patch_for_modified_file(path, diff, selection)


def synthesize_patch(
    path: str,
    diff: ParsedDiff,
    selection: DiffSelection,
    change_kind: FileStatus,
    allow_empty: bool = True,
) -> str:
    """
    Build the unified diff that stages exactly the selected lines of `path`.

    Args:
        path: Repository-relative path of the file (post-rename for renames)
        diff: Parsed diff of the file against HEAD
        selection: Which changed lines to stage
        change_kind: Status of the file, picks the strategy
        allow_empty: When False, an empty result raises EmptySelectionError

    Returns:
        Patch text for `git apply --cached`, or "" when nothing is selected

    Raises:
        BinaryContentError: diff is binary
        UnsupportedChangeError: file is conflicted
        EmptySelectionError: nothing to stage and allow_empty is False
    """

    if diff.is_binary:
        raise BinaryContentError(path)

    if change_kind == FileStatus.NEW:
        patch = create_patch_for_new_file(path, diff, selection)
    elif change_kind == FileStatus.DELETED:
        patch = create_patch_for_deleted_file(path, diff, selection)
    elif change_kind in (FileStatus.MODIFIED, FileStatus.RENAMED):
        patch = create_patch_for_modified_file(path, diff, selection)
    else:
        raise UnsupportedChangeError(str(change_kind))

    if not patch and not allow_empty:
        raise EmptySelectionError(path)
    return patch
