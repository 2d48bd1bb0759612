from enum import StrEnum


class DiffErrorType(StrEnum):
    MALFORMED_DIFF = "malformed_diff"
    EMPTY_SELECTION = "empty_selection"
    BINARY_CONTENT = "binary_content"
    UNSUPPORTED_CHANGE = "unsupported_change"


class DiffError(Exception):
    def __init__(self, error_type: DiffErrorType, message: str):
        super().__init__(message)
        self.error_type = error_type


class MalformedDiffError(DiffError):
    """Raised when diff text cannot be parsed; no partial result is kept."""

    def __init__(
        self,
        reason: str,
        line_number: int | None = None,
        line: str | None = None,
    ):
        message = reason
        if line_number is not None:
            message = f"line {line_number}: {reason}"
        if line is not None:
            message = f"{message}: {line!r}"
        super().__init__(DiffErrorType.MALFORMED_DIFF, message)
        self.reason = reason
        self.line_number = line_number
        self.line = line


class EmptySelectionError(DiffError):
    """The selection leaves nothing to stage; skip the apply step."""

    def __init__(self, path: str):
        super().__init__(
            DiffErrorType.EMPTY_SELECTION,
            f"Selection for {path} produces an empty patch",
        )
        self.path = path


class BinaryContentError(DiffError):
    def __init__(self, path: str | None = None):
        target = path or "diff"
        super().__init__(
            DiffErrorType.BINARY_CONTENT,
            f"Binary content in {target} cannot be staged line by line",
        )
        self.path = path


class UnsupportedChangeError(DiffError):
    def __init__(self, change_kind: str):
        super().__init__(
            DiffErrorType.UNSUPPORTED_CHANGE,
            f"Cannot build a partial patch for a {change_kind} file",
        )
        self.change_kind = change_kind
