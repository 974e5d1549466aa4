from __future__ import annotations

import logging
from dataclasses import dataclass

from ..domain.models import ResponseKind
from ..domain.submissions import (
    ImageSource,
    ResponseSessions,
    SubmissionResult,
    SubmissionService,
    SubmissionStatus,
)
from ..domain.value_objects import ParsedText, TextParseStatus
from .pages import Page
from .presenters import BotPresenter

logger = logging.getLogger(__name__)


@dataclass
class BotWorkflow:
    submissions: SubmissionService
    sessions: ResponseSessions
    presenter: BotPresenter

    async def start_page(self) -> Page:
        return self.presenter.start_page()

    async def begin_submission(self, chat_id: int) -> Page:
        self.sessions.begin(chat_id)
        return self.presenter.submission_instructions()

    async def cancel(self, chat_id: int) -> Page:
        self.sessions.finish(chat_id)
        return self.presenter.cancelled()

    def is_awaiting_response(self, chat_id: int) -> bool:
        return self.sessions.is_awaiting(chat_id)

    async def tasks_page(self) -> Page:
        try:
            tasks = await self.submissions.tasks_for_today()
        except Exception:
            logger.exception("Failed to load today's tasks")
            return self.presenter.tasks_error()
        if not tasks:
            return self.presenter.tasks_unavailable()
        return self.presenter.tasks_page(self.submissions.calendar.current_day(), tasks)

    async def score_page(self, chat_id: int) -> Page:
        try:
            summary = await self.submissions.score_summary(chat_id)
        except Exception:
            logger.exception("Failed to load score chat_id=%s", chat_id)
            return self.presenter.score_error()
        return self.presenter.score_page(summary, accepting=self.submissions.is_accepting())

    async def handle_text(self, chat_id: int, text: str) -> list[Page]:
        if not self.sessions.is_awaiting(chat_id):
            return []
        day = self.submissions.accepting_day()
        if day is None:
            self.sessions.finish(chat_id)
            return [self.presenter.not_accepting_today()]

        parsed = ParsedText.parse(text)
        if parsed.status == TextParseStatus.TASK_ONLY:
            self.sessions.await_image(chat_id, parsed.task_number)
            return [self.presenter.image_prompt(parsed.task_number)]
        if parsed.status == TextParseStatus.INVALID_FORMAT:
            return [self.presenter.invalid_format()]
        if parsed.status == TextParseStatus.INVALID_CONTENT:
            return [self.presenter.invalid_content()]

        try:
            result = await self.submissions.submit_text(chat_id, parsed.task_number, parsed.response, day=day)
        except Exception:
            logger.exception("Text response error chat_id=%s task=%s", chat_id, parsed.task_number)
            pages = [self.presenter.submission_error(ResponseKind.TEXT)]
        else:
            pages = self._result_pages(result, ResponseKind.TEXT)
        self.sessions.finish(chat_id)
        return pages

    async def handle_photo(self, chat_id: int, image: ImageSource, *, file_name: str) -> list[Page]:
        if not self.sessions.is_awaiting(chat_id):
            return []
        day = self.submissions.accepting_day()
        if day is None:
            self.sessions.finish(chat_id)
            return [self.presenter.not_accepting_today()]

        task_number = self.sessions.image_task(chat_id)
        if not task_number:
            return [self.presenter.task_number_first()]

        try:
            result = await self.submissions.submit_image(chat_id, task_number, image, file_name, day=day)
        except Exception:
            logger.exception("Image response error chat_id=%s task=%s", chat_id, task_number)
            pages = [self.presenter.submission_error(ResponseKind.IMAGE)]
        else:
            pages = self._result_pages(result, ResponseKind.IMAGE)
        self.sessions.finish(chat_id)
        return pages

    def _result_pages(self, result: SubmissionResult, kind: ResponseKind) -> list[Page]:
        if result.status == SubmissionStatus.ALREADY_COMPLETED:
            return [self.presenter.already_completed(result.task_number)]
        return [
            self.presenter.verdict(kind, result.is_valid),
            self.presenter.daily_score(result.daily_score or 0),
        ]
