import logging
import re

from linestage.diff.errors import MalformedDiffError
from linestage.diff.models import (
    BinaryDiff,
    Diff,
    DiffHunk,
    DiffLine,
    DiffLineType,
    HunkHeader,
    ParsedDiff,
)

logger = logging.getLogger(__name__)

HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@ ?(.*)$")
BINARY_MARKER_RE = re.compile(r"^(Binary files .* differ|GIT binary patch)$")
NEW_FILE_MODE_PREFIX = "new file mode "
DELETED_FILE_MODE_PREFIX = "deleted file mode "

_LINE_TYPES = {
    " ": DiffLineType.CONTEXT,
    "+": DiffLineType.ADDED,
    "-": DiffLineType.REMOVED,
}


def parse_hunk_header(line: str, line_number: int | None = None) -> HunkHeader:
    match = HUNK_HEADER_RE.match(line)
    if not match:
        raise MalformedDiffError("unparseable hunk header", line_number, line)

    old_start, old_count, new_start, new_count, section = match.groups()
    return HunkHeader(
        old_start=int(old_start),
        old_count=int(old_count) if old_count is not None else 1,
        new_start=int(new_start),
        new_count=int(new_count) if new_count is not None else 1,
        section=section or "",
    )


class _HunkBuilder:
    """Accumulates the lines of one hunk while the parser walks the text."""

    def __init__(self, header: HunkHeader, line_number: int):
        self.header = header
        self.line_number = line_number
        self.lines: list[DiffLine] = []
        # 0 is the "line before" convention for an empty side
        self.old_line = header.old_start if header.old_count else header.old_start + 1
        self.new_line = header.new_start if header.new_count else header.new_start + 1

    def add(self, line_type: DiffLineType, text: str) -> None:
        old_number = self.old_line if line_type != DiffLineType.ADDED else None
        new_number = self.new_line if line_type != DiffLineType.REMOVED else None
        self.lines.append(
            DiffLine(
                line_type=line_type,
                text=text,
                old_line_number=old_number,
                new_line_number=new_number,
            )
        )
        if old_number is not None:
            self.old_line += 1
        if new_number is not None:
            self.new_line += 1

    def mark_no_newline(self, line_number: int, raw: str) -> None:
        if not self.lines:
            raise MalformedDiffError(
                "end-of-file marker without a preceding line", line_number, raw
            )
        last = self.lines[-1]
        self.lines[-1] = last.model_copy(update={"no_trailing_newline": True})

    def build(self) -> DiffHunk:
        hunk = DiffHunk(header=self.header, lines=tuple(self.lines))
        if (
            hunk.old_line_count != self.header.old_count
            or hunk.new_line_count != self.header.new_count
        ):
            raise MalformedDiffError(
                f"hunk declares -{self.header.old_count} +{self.header.new_count} lines "
                f"but contains -{hunk.old_line_count} +{hunk.new_line_count}",
                self.line_number,
            )
        return hunk


def parse_diff(diff_text: str) -> ParsedDiff:
    """
    Parse the unified diff of a single file into a `Diff`.

    Lines ahead of the first `@@` header are file metadata (diff --git,
    index, ---/+++, mode lines). A binary marker among them short-circuits
    to `BinaryDiff`. Every line after the first hunk header must be a hunk
    header, a +/-/space line or an end-of-file marker.

    Raises:
        MalformedDiffError: bad hunk header, orphan content line, counts
            that disagree with the header, or overlapping hunks.
    """

    raw_lines = diff_text.split("\n")
    if raw_lines and raw_lines[-1] == "":
        raw_lines.pop()

    header_lines: list[str] = []
    hunks: list[DiffHunk] = []
    current: _HunkBuilder | None = None
    new_file_mode = None
    deleted_file_mode = None

    for line_number, raw in enumerate(raw_lines, start=1):
        if raw.startswith("@@"):
            header = parse_hunk_header(raw, line_number)
            if current is not None:
                hunks.append(current.build())
            _check_order(hunks, header, line_number)
            current = _HunkBuilder(header, line_number)
            continue

        if current is None:
            if BINARY_MARKER_RE.match(raw):
                logger.debug("Binary marker found, skipping line parsing")
                return BinaryDiff(header_lines=tuple(header_lines + [raw]))
            if raw.startswith(NEW_FILE_MODE_PREFIX):
                new_file_mode = raw[len(NEW_FILE_MODE_PREFIX):].strip()
            elif raw.startswith(DELETED_FILE_MODE_PREFIX):
                deleted_file_mode = raw[len(DELETED_FILE_MODE_PREFIX):].strip()
            header_lines.append(raw)
            continue

        if raw.startswith("\\"):
            current.mark_no_newline(line_number, raw)
            continue

        line_type = _LINE_TYPES.get(raw[:1])
        if line_type is None:
            raise MalformedDiffError("line has no diff marker", line_number, raw)
        current.add(line_type, raw[1:])

    if current is not None:
        hunks.append(current.build())

    logger.debug(
        "Parsed %d hunks (%d header lines) from diff",
        len(hunks),
        len(header_lines),
    )
    return Diff(
        hunks=tuple(hunks),
        header_lines=tuple(header_lines),
        new_file_mode=new_file_mode,
        deleted_file_mode=deleted_file_mode,
    )


def _check_order(hunks: list[DiffHunk], header: HunkHeader, line_number: int) -> None:
    if not hunks:
        return
    previous = hunks[-1].header
    old_ok = _first_line(header.old_start, header.old_count) >= _end_line(
        previous.old_start, previous.old_count
    )
    new_ok = _first_line(header.new_start, header.new_count) >= _end_line(
        previous.new_start, previous.new_count
    )
    if not (old_ok and new_ok):
        raise MalformedDiffError(
            f"hunk at {header.render()} overlaps or precedes the hunk at "
            f"{previous.render()}",
            line_number,
        )


def _first_line(start: int, count: int) -> int:
    return start if count else start + 1


def _end_line(start: int, count: int) -> int:
    return _first_line(start, count) + count
