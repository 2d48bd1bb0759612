from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from linestage.diff.errors import BinaryContentError
from linestage.diff.models import ParsedDiff


class SelectionMode(StrEnum):
    ALL = "all"
    NONE = "none"


class SelectionType(StrEnum):
    ALL = "all"
    PARTIAL = "partial"
    NONE = "none"


class DiffSelection(BaseModel):
    """
    Which changed lines of one file should be staged.

    Stored as a default `mode` plus sparse per-line `overrides` keyed by
    global change index, so the line count never needs to be known up front.
    An override always wins over the mode. Indices are only meaningful
    against the diff they were picked from.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    mode: SelectionMode = SelectionMode.ALL
    overrides: dict[int, bool] = Field(default_factory=dict)

    @classmethod
    def from_indices(cls, indices: Iterable[int]) -> "DiffSelection":
        return cls(
            mode=SelectionMode.NONE,
            overrides={index: True for index in indices},
        )

    def select_all(self) -> None:
        self.mode = SelectionMode.ALL
        self.overrides.clear()

    def select_none(self) -> None:
        self.mode = SelectionMode.NONE
        self.overrides.clear()

    def set_line(self, index: int, selected: bool) -> None:
        self.overrides[index] = selected

    def clear_line(self, index: int) -> None:
        self.overrides.pop(index, None)

    def toggle_line(self, index: int) -> None:
        self.overrides[index] = not self.is_selected(index)

    def is_selected(self, index: int) -> bool:
        if index in self.overrides:
            return self.overrides[index]
        return self.mode == SelectionMode.ALL

    def resolve(self, diff: ParsedDiff) -> dict[int, bool]:
        """Map every changed line of `diff` to whether it is selected."""
        if diff.is_binary:
            raise BinaryContentError()
        return {index: self.is_selected(index) for index, _ in diff.changed_lines()}

    def selection_type(self, diff: ParsedDiff) -> SelectionType:
        """
        Classify the selection against `diff`.

        A diff without changed lines (an empty new file, a mode change) has
        nothing to pick per line, so the mode alone decides.
        """

        resolved = self.resolve(diff)
        if not resolved:
            return SelectionType.ALL if self.mode == SelectionMode.ALL else SelectionType.NONE
        selected = sum(1 for value in resolved.values() if value)
        if selected == 0:
            return SelectionType.NONE
        if selected == len(resolved):
            return SelectionType.ALL
        return SelectionType.PARTIAL
