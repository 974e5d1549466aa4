from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .models import AppendedRow, ResponseKind, SubmissionRecord, TaskDefinition


class ResponsesRepository(Protocol):
    async def append(self, day: int, record: SubmissionRecord) -> AppendedRow: ...

    async def set_validity(self, target: AppendedRow, is_valid: bool) -> None: ...

    async def has_valid_response(self, day: int, chat_id: int, task_number: str) -> bool: ...


class TasksRepository(Protocol):
    async def list_tasks(self, day: int) -> Sequence[TaskDefinition]: ...

    async def get_task(self, day: int, task_number: str) -> TaskDefinition: ...


class ScoresRepository(Protocol):
    async def add_points(self, chat_id: int, points: float, day: int) -> None: ...

    async def get_daily_score(self, chat_id: int, day: int) -> float: ...

    async def get_total_score(self, chat_id: int) -> float: ...


class CriteriaEvaluator(Protocol):
    async def evaluate(self, criteria: str, response: str | bytes, kind: ResponseKind) -> bool: ...


class ImageHost(Protocol):
    async def upload(self, data: bytes, filename: str) -> str: ...

    async def close(self) -> None: ...


class CongressCalendar(Protocol):
    @property
    def days(self) -> int: ...

    def now(self) -> datetime: ...

    def current_day(self) -> int: ...

    def is_accepting(self) -> bool: ...
