from abc import ABC, abstractmethod
from typing import Any

from ..schemas import DayWindow, FocusRow

class FocusStore(ABC):
    """
    The record store seen by the accumulator: query by day window, patch by id.

    `accumulate` is the only write callers use. The default below is a plain
    read-modify-write: the base value comes from the row already returned by
    `query_day` and the sum is written back in a second round trip, with no
    revision check in between. Two concurrent requests for the same row can
    both read the same base and one delta is lost. Stores that can do a
    conditional or atomic update override `accumulate` and close that gap.
    """

    focus_field = "focus"

    @abstractmethod
    def query_day(self, window: DayWindow, subject: str | None = None, limit: int = 100) -> list[FocusRow]:
        """Rows with window.today <= day < window.tomorrow, in store order."""

    @abstractmethod
    def update_fields(self, row_id: str, fields: dict[str, Any]) -> None:
        """Set exactly the named fields on one row; leave everything else alone."""

    def accumulate(self, row: FocusRow, minutes: int) -> int:
        new_focus = row.focus + minutes
        self.update_fields(row.id, {self.focus_field: new_focus})
        return new_focus
