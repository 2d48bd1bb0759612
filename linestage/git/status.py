import logging
import re

from pydantic import BaseModel, ConfigDict, Field

from linestage.diff.models import FileStatus
from linestage.diff.selection import DiffSelection

logger = logging.getLogger(__name__)

PORCELAIN_RECORD_RE = re.compile(r"^([?! \w]{2}) (.+)$", re.DOTALL)

# porcelain XY codes that are not a plain modification
_STATUS_CODES: dict[str, FileStatus] = {
    "M": FileStatus.MODIFIED,
    "A": FileStatus.NEW,
    "D": FileStatus.DELETED,
    "R": FileStatus.RENAMED,
    "RM": FileStatus.RENAMED,  # renamed in index, modified in working tree
    "RD": FileStatus.CONFLICTED,  # renamed in index, deleted in working tree
    "DD": FileStatus.CONFLICTED,
    "AU": FileStatus.CONFLICTED,
    "UD": FileStatus.CONFLICTED,
    "UA": FileStatus.CONFLICTED,
    "DU": FileStatus.CONFLICTED,
    "AA": FileStatus.CONFLICTED,
    "UU": FileStatus.CONFLICTED,
    "??": FileStatus.NEW,
}


def map_status(raw_status: str) -> FileStatus:
    return _STATUS_CODES.get(raw_status.strip(), FileStatus.MODIFIED)


class FileChange(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str
    status: FileStatus


class WorkingDirectoryFileChange(FileChange):
    """A changed working-tree file together with the lines picked for staging."""

    selection: DiffSelection = Field(default_factory=DiffSelection)


def parse_porcelain_status(output: str) -> list[WorkingDirectoryFileChange]:
    """
    Parse `git status --porcelain -z` output.

    Records are NUL terminated and paths are never quoted. A rename or copy
    record is followed by an extra record holding the source path, which is
    skipped; the post-rename path is kept. Every file starts with everything
    selected.
    """

    files: list[WorkingDirectoryFileChange] = []
    records = iter(output.split("\0"))
    for record in records:
        match = PORCELAIN_RECORD_RE.match(record)
        if not match:
            continue
        mode_text, path = match.groups()
        if "R" in mode_text or "C" in mode_text:
            next(records, None)
        files.append(WorkingDirectoryFileChange(path=path, status=map_status(mode_text)))

    logger.debug("Parsed %d entries from porcelain status", len(files))
    return files
