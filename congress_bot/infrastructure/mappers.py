from __future__ import annotations

import math
import re
from typing import Any, Sequence

from ..domain.errors import SheetsError, TaskLookupError
from ..domain.models import TaskDefinition

ROW_NUMBER_RE = re.compile(r"\d+")

TASK_NUMBER_COL = 0
TASK_TITLE_COL = 1
TASK_POINTS_COL = 2
TASK_CRITERIA_COL = 5


def cell(row: Sequence[Any], index: int, default: str = "") -> str:
    if index >= len(row) or row[index] is None:
        return default
    return str(row[index]).strip()


def to_number(value: Any) -> float:
    # Whole values stay int so "10" is shown as 10, not 10.0.
    try:
        number = float(str(value).strip().replace(",", ""))
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    number = round(number, 6)
    return int(number) if number.is_integer() else number


def row_from_updated_range(updated_range: str | None) -> int:
    # "Responses-D1!A12:D12" -> 12
    if not updated_range or "!" not in updated_range:
        raise SheetsError("Could not determine updated range.")
    first_cell = updated_range.split("!", 1)[1].split(":", 1)[0]
    digits = "".join(ROW_NUMBER_RE.findall(first_cell))
    if not digits:
        raise SheetsError(f"Could not determine updated row from {updated_range!r}")
    return int(digits)


def task_from_row(row: Sequence[Any]) -> TaskDefinition:
    number = cell(row, TASK_NUMBER_COL)
    criteria = cell(row, TASK_CRITERIA_COL)
    if not criteria:
        raise TaskLookupError("Criteria not found for this task")
    return TaskDefinition(
        number=number,
        title=cell(row, TASK_TITLE_COL),
        points=to_number(cell(row, TASK_POINTS_COL, "0")),
        criteria=criteria,
    )


def column_letter(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA."""
    letters = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters
