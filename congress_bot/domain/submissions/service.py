from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from ..models import (
    AppendedRow,
    ResponseKind,
    ScoreSummary,
    SubmissionRecord,
    TaskDefinition,
)
from ..repositories import (
    CongressCalendar,
    CriteriaEvaluator,
    ImageHost,
    ResponsesRepository,
    ScoresRepository,
    TasksRepository,
)

ImageSource = Callable[[], Awaitable[bytes]]

TIMESTAMP_FORMAT = "%d/%m/%Y, %H:%M:%S"

logger = logging.getLogger(__name__)


class SubmissionStatus(Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    ALREADY_COMPLETED = "already_completed"


@dataclass(frozen=True)
class SubmissionResult:
    status: SubmissionStatus
    task_number: str
    day: int
    daily_score: Optional[float] = None
    points_awarded: float = 0

    @property
    def is_valid(self) -> bool:
        return self.status == SubmissionStatus.ACCEPTED


class SubmissionService:
    """
    Приём ответа на задание: проверка на повтор, запись в таблицу,
    оценка по критериям, отметка валидности и начисление баллов.
    Ошибки внешних сервисов не перехватываются, их показывает workflow.
    """

    def __init__(
        self,
        *,
        responses: ResponsesRepository,
        tasks: TasksRepository,
        scores: ScoresRepository,
        evaluator: CriteriaEvaluator,
        image_host: ImageHost,
        calendar: CongressCalendar,
    ):
        self._responses = responses
        self._tasks = tasks
        self._scores = scores
        self._evaluator = evaluator
        self._image_host = image_host
        self._calendar = calendar

    @property
    def calendar(self) -> CongressCalendar:
        return self._calendar

    def is_accepting(self) -> bool:
        return self._calendar.is_accepting()

    def accepting_day(self) -> int | None:
        day = self._calendar.current_day()
        return day if 1 <= day <= self._calendar.days else None

    async def is_task_already_completed(self, chat_id: int, task_number: str, *, day: int | None = None) -> bool:
        target_day = day if day is not None else self._calendar.current_day()
        try:
            return await self._responses.has_valid_response(target_day, chat_id, task_number)
        except Exception:
            logger.exception(
                "Failed to check existing valid response chat_id=%s task=%s day=%s",
                chat_id,
                task_number,
                target_day,
            )
            return False

    async def submit_text(
        self,
        chat_id: int,
        task_number: str,
        text: str,
        *,
        day: int | None = None,
    ) -> SubmissionResult:
        day = day if day is not None else self._calendar.current_day()
        if await self.is_task_already_completed(chat_id, task_number, day=day):
            return SubmissionResult(SubmissionStatus.ALREADY_COMPLETED, task_number, day)

        target = await self._append(day, chat_id, task_number, text)
        task = await self._tasks.get_task(day, task_number)
        is_valid = await self._evaluator.evaluate(task.criteria, text, ResponseKind.TEXT)
        return await self.record_verdict(chat_id, day, task, target, is_valid)

    async def submit_image(
        self,
        chat_id: int,
        task_number: str,
        image: ImageSource,
        filename: str,
        *,
        day: int | None = None,
    ) -> SubmissionResult:
        day = day if day is not None else self._calendar.current_day()
        if await self.is_task_already_completed(chat_id, task_number, day=day):
            return SubmissionResult(SubmissionStatus.ALREADY_COMPLETED, task_number, day)

        data = await image()
        public_url = await self._image_host.upload(data, filename)
        target = await self._append(day, chat_id, task_number, public_url)
        task = await self._tasks.get_task(day, task_number)
        is_valid = await self._evaluator.evaluate(task.criteria, data, ResponseKind.IMAGE)
        return await self.record_verdict(chat_id, day, task, target, is_valid)

    async def record_verdict(
        self,
        chat_id: int,
        day: int,
        task: TaskDefinition,
        target: AppendedRow,
        is_valid: bool,
    ) -> SubmissionResult:
        await self._responses.set_validity(target, is_valid)
        awarded = 0
        if is_valid and task.points > 0:
            await self._scores.add_points(chat_id, task.points, day)
            awarded = task.points
        daily_score = await self._scores.get_daily_score(chat_id, day)
        logger.info(
            "Submission recorded chat_id=%s task=%s day=%s valid=%s awarded=%s",
            chat_id,
            task.number,
            day,
            is_valid,
            awarded,
        )
        return SubmissionResult(
            SubmissionStatus.ACCEPTED if is_valid else SubmissionStatus.REJECTED,
            task.number,
            day,
            daily_score=daily_score,
            points_awarded=awarded,
        )

    async def tasks_for_today(self) -> list[TaskDefinition] | None:
        day = self.accepting_day()
        if day is None:
            return None
        return list(await self._tasks.list_tasks(day))

    async def score_summary(self, chat_id: int) -> ScoreSummary:
        day = self._calendar.current_day()
        today = 0
        if 1 <= day <= self._calendar.days:
            today = await self._scores.get_daily_score(chat_id, day)
        total = await self._scores.get_total_score(chat_id)
        return ScoreSummary(day=day, today=today, total=total)

    async def _append(self, day: int, chat_id: int, task_number: str, response: str) -> AppendedRow:
        record = SubmissionRecord(
            timestamp=self._calendar.now().strftime(TIMESTAMP_FORMAT),
            chat_id=chat_id,
            task_number=task_number,
            response=response,
        )
        return await self._responses.append(day, record)
