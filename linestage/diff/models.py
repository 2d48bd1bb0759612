from collections.abc import Iterator
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator


class DiffLineType(StrEnum):
    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"


class FileStatus(StrEnum):
    """Change kind of a working-tree file, as reported by git status."""

    NEW = "new"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    CONFLICTED = "conflicted"


MARKERS: dict[DiffLineType, str] = {
    DiffLineType.CONTEXT: " ",
    DiffLineType.ADDED: "+",
    DiffLineType.REMOVED: "-",
}

NO_NEWLINE_MARKER = "\\ No newline at end of file"


class DiffLine(BaseModel):
    """
    A single line of a hunk.

    - `text` never includes the leading +/-/space marker
    - added lines have no `old_line_number`, removed lines no `new_line_number`
    - `no_trailing_newline` is set when the diff followed this line with
      `\\ No newline at end of file`
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    line_type: DiffLineType
    text: str
    old_line_number: int | None = None
    new_line_number: int | None = None
    no_trailing_newline: bool = False

    @model_validator(mode="after")
    def check_line_numbers(self) -> "DiffLine":
        has_old = self.old_line_number is not None
        has_new = self.new_line_number is not None
        if self.line_type == DiffLineType.ADDED and (has_old or not has_new):
            raise ValueError("added lines carry only a new line number")
        if self.line_type == DiffLineType.REMOVED and (has_new or not has_old):
            raise ValueError("removed lines carry only an old line number")
        if self.line_type == DiffLineType.CONTEXT and not (has_old and has_new):
            raise ValueError("context lines carry both line numbers")
        return self

    @property
    def is_change(self) -> bool:
        return self.line_type != DiffLineType.CONTEXT

    @property
    def in_old(self) -> bool:
        return self.line_type != DiffLineType.ADDED

    @property
    def in_new(self) -> bool:
        return self.line_type != DiffLineType.REMOVED

    def render(self) -> str:
        rendered = f"{MARKERS[self.line_type]}{self.text}"
        if self.no_trailing_newline:
            rendered = f"{rendered}\n{NO_NEWLINE_MARKER}"
        return rendered


class HunkHeader(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    section: str = ""

    def render(self) -> str:
        header = (
            f"@@ -{_format_range(self.old_start, self.old_count)} "
            f"+{_format_range(self.new_start, self.new_count)} @@"
        )
        if self.section:
            header = f"{header} {self.section}"
        return header


def _format_range(start: int, count: int) -> str:
    # git leaves out a count of exactly one
    if count == 1:
        return str(start)
    return f"{start},{count}"


class DiffHunk(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    header: HunkHeader
    lines: tuple[DiffLine, ...]

    @property
    def old_line_count(self) -> int:
        return sum(1 for line in self.lines if line.in_old)

    @property
    def new_line_count(self) -> int:
        return sum(1 for line in self.lines if line.in_new)

    @property
    def changed_lines(self) -> list[DiffLine]:
        return [line for line in self.lines if line.is_change]

    @property
    def has_changes(self) -> bool:
        return any(line.is_change for line in self.lines)

    def render(self) -> str:
        return "\n".join([self.header.render()] + [line.render() for line in self.lines])


class Diff(BaseModel):
    """
    A parsed text diff for one file.

    Hunks are ordered by ascending `old_start` and never overlap. Changed
    lines are addressed by their position in the concatenation of every
    added/removed line across all hunks (the global change index), which is
    what `DiffSelection` keys on.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    hunks: tuple[DiffHunk, ...] = ()
    header_lines: tuple[str, ...] = ()
    new_file_mode: str | None = None
    deleted_file_mode: str | None = None
    is_binary: Literal[False] = False

    @property
    def is_empty(self) -> bool:
        return not self.hunks

    def changed_lines(self) -> Iterator[tuple[int, DiffLine]]:
        index = 0
        for hunk in self.hunks:
            for line in hunk.lines:
                if line.is_change:
                    yield index, line
                    index += 1

    @property
    def changed_line_count(self) -> int:
        return sum(len(hunk.changed_lines) for hunk in self.hunks)


class BinaryDiff(BaseModel):
    """Marker for a diff whose content is not text."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    header_lines: tuple[str, ...] = ()
    is_binary: Literal[True] = True


ParsedDiff = Diff | BinaryDiff
