from __future__ import annotations

from typing import Optional, Sequence

from ...domain.repositories import ScoresRepository
from ..mappers import cell, column_letter, to_number
from ..metrics import metrics
from .client import ValuesClient

DEFAULT_RESULTS_SHEET = "Results"


class SheetsScoresRepository(ScoresRepository):
    """
    Лист результатов: колонка A: chat id, дальше по колонке на каждый день конгресса.
    """

    def __init__(self, client: ValuesClient, *, sheet: str = DEFAULT_RESULTS_SHEET, days: int = 9):
        self._client = client
        self._sheet = sheet
        self._days = days

    @property
    def _full_range(self) -> str:
        return f"{self._sheet}!A:{column_letter(self._days)}"

    async def _find(self, chat_id: int) -> tuple[Optional[int], Sequence[str]]:
        rows = await self._client.get(self._full_range)
        chat = str(chat_id)
        for idx, row in enumerate(rows, start=1):
            if cell(row, 0) == chat:
                return idx, row
        return None, ()

    @metrics.wrap_async("sheets:scores.add_points", source="sheets")
    async def add_points(self, chat_id: int, points: float, day: int) -> None:
        row_number, row = await self._find(chat_id)
        if row_number is None:
            values = [chat_id] + [points if d == day else 0 for d in range(1, self._days + 1)]
            await self._client.append(self._full_range, [values])
            return
        current = to_number(cell(row, day, "0"))
        await self._client.update(
            f"{self._sheet}!{column_letter(day)}{row_number}",
            [[to_number(current + points)]],
        )

    @metrics.wrap_async("sheets:scores.daily", source="sheets")
    async def get_daily_score(self, chat_id: int, day: int) -> float:
        _, row = await self._find(chat_id)
        return to_number(cell(row, day, "0"))

    @metrics.wrap_async("sheets:scores.total", source="sheets")
    async def get_total_score(self, chat_id: int) -> float:
        _, row = await self._find(chat_id)
        return to_number(sum(to_number(cell(row, d, "0")) for d in range(1, self._days + 1)))
