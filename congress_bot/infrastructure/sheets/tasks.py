from __future__ import annotations

from typing import Mapping, Sequence

from ...domain.errors import TaskLookupError
from ...domain.models import TaskDefinition
from ...domain.repositories import TasksRepository
from ...domain.value_objects import is_task_number
from ..mappers import TASK_CRITERIA_COL, TASK_NUMBER_COL, TASK_POINTS_COL, TASK_TITLE_COL, cell, task_from_row, to_number
from ..metrics import metrics
from .client import ValuesClient


class SheetsTasksRepository(TasksRepository):
    def __init__(self, client: ValuesClient, ranges: Mapping[int, str]):
        self._client = client
        self._ranges = dict(ranges)

    def range_for(self, day: int) -> str:
        try:
            return self._ranges[day]
        except KeyError:
            raise TaskLookupError(f"No task range configured for day {day}") from None

    async def _rows(self, day: int) -> list[list[str]]:
        rows = await self._client.get(self.range_for(day))
        if not rows:
            raise TaskLookupError("No task data found")
        return rows

    @metrics.wrap_async("sheets:tasks.list", source="sheets")
    async def list_tasks(self, day: int) -> Sequence[TaskDefinition]:
        rows = await self._rows(day)
        tasks: list[TaskDefinition] = []
        for row in rows:
            number = cell(row, TASK_NUMBER_COL)
            if not is_task_number(number):
                continue
            tasks.append(
                TaskDefinition(
                    number=number,
                    title=cell(row, TASK_TITLE_COL),
                    points=to_number(cell(row, TASK_POINTS_COL, "0")),
                    criteria=cell(row, TASK_CRITERIA_COL),
                )
            )
        return tasks

    @metrics.wrap_async("sheets:tasks.get", source="sheets")
    async def get_task(self, day: int, task_number: str) -> TaskDefinition:
        rows = await self._rows(day)
        for row in rows:
            if cell(row, TASK_NUMBER_COL) == task_number:
                return task_from_row(row)
        raise TaskLookupError(f"Task {task_number} not found")
