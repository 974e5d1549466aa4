from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Sequence, Union

from aiogram import Dispatcher, F
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import CallbackQuery, InlineKeyboardButton, InlineKeyboardMarkup, Message

from .container import AppContainer
from .pages import Page, PageButton
from .workflow import BotWorkflow
from ..infrastructure.metrics import metrics

HandlerResult = Union[Page, Sequence[Page], None]


class TelegramBotApp:
    def __init__(self, container: AppContainer, *, max_message_length: int = 3800):
        self.container = container
        self.max_message_length = max_message_length
        self.workflow = BotWorkflow(
            submissions=container.submission_service,
            sessions=container.sessions,
            presenter=container.presenter,
        )
        self._logger = logging.getLogger(__name__)

    def _chunk_text(self, text: str) -> List[str]:
        lines = text.split("\n")
        chunks: list[str] = []
        current = ""
        for line in lines:
            addition = line if not current else "\n" + line
            if len(current) + len(addition) > self.max_message_length:
                if current:
                    chunks.append(current)
                current = line
                while len(current) > self.max_message_length:
                    chunks.append(current[: self.max_message_length])
                    current = current[self.max_message_length :]
            else:
                current += addition
        if current:
            chunks.append(current)
        return chunks

    def _build_markup(self, buttons: list[list[PageButton]]):
        if not buttons:
            return None
        inline_rows = [
            [InlineKeyboardButton(text=btn.text, callback_data=btn.callback_data) for btn in row]
            for row in buttons
        ]
        return InlineKeyboardMarkup(inline_keyboard=inline_rows)

    async def _render_page(self, chat_id: int, bot, page: Page):
        chunks = self._chunk_text(page.text)
        markup = self._build_markup(page.buttons)
        total = len(chunks)
        for idx, chunk in enumerate(chunks):
            is_last = idx == total - 1
            await bot.send_message(
                chat_id,
                chunk,
                parse_mode=page.parse_mode,
                disable_web_page_preview=page.disable_preview,
                reply_markup=markup if is_last else None,
            )

    async def _render(self, chat_id: int, bot, result: HandlerResult):
        if not result:
            return
        pages = [result] if isinstance(result, Page) else list(result)
        for page in pages:
            await self._render_page(chat_id, bot, page)

    async def _safe_answer(self, cq: CallbackQuery):
        try:
            await cq.answer()
        except TelegramBadRequest as exc:
            if "query is too old" in str(exc).lower():
                return
            raise

    def _format_user(self, tg_user) -> str:
        if not tg_user:
            return "unknown (id=?)"
        username = tg_user.username or tg_user.first_name or "unknown"
        return f"{username} (id={tg_user.id})"

    def _log_action(self, tg_user, action: str) -> None:
        self._logger.info("User %s triggered %s", self._format_user(tg_user), action)

    async def _handle_message(
        self,
        message: Message,
        handler: Callable[[int], Awaitable[HandlerResult]],
        *,
        action_name: str | None = None,
    ):
        action_name = action_name or f"message:{message.content_type}"
        self._log_action(message.from_user, action_name)
        chat_id = message.chat.id
        async with metrics.span_async(action_name, source="telegram", extra={"chat_id": chat_id}):
            result = await handler(chat_id)
            await self._render(chat_id, message.bot, result)

    async def _handle_query(self, cq: CallbackQuery, handler: Callable[[int], Awaitable[HandlerResult]]):
        await self._safe_answer(cq)
        action_name = f"callback:{cq.data or '<empty>'}"
        self._log_action(cq.from_user, action_name)
        if cq.message is None:
            return
        chat_id = cq.message.chat.id
        async with metrics.span_async(action_name, source="telegram", extra={"chat_id": chat_id}):
            result = await handler(chat_id)
            await self._render(chat_id, cq.bot, result)

    def _photo_source(self, message: Message):
        photo = message.photo[-1]

        async def fetch() -> bytes:
            buffer = await message.bot.download(photo)
            if buffer is None:
                raise RuntimeError(f"Telegram returned no data for photo {photo.file_unique_id}")
            return buffer.getvalue()

        return fetch, f"{message.chat.id}_{photo.file_unique_id}.jpg"

    def build_dispatcher(self) -> Dispatcher:
        dp = Dispatcher(storage=MemoryStorage())

        @dp.message(Command("start"))
        async def start(m: Message):
            await self._handle_message(m, lambda _chat_id: self.workflow.start_page(), action_name="command:start")

        @dp.message(Command("submit"))
        async def submit(m: Message):
            await self._handle_message(m, self.workflow.begin_submission, action_name="command:submit")

        @dp.message(Command("cancel"))
        async def cancel(m: Message):
            await self._handle_message(m, self.workflow.cancel, action_name="command:cancel")

        @dp.callback_query(F.data == "view_tasks")
        async def view_tasks(cq: CallbackQuery):
            await self._handle_query(cq, lambda _chat_id: self.workflow.tasks_page())

        @dp.callback_query(F.data == "submit_responses")
        async def submit_responses(cq: CallbackQuery):
            await self._handle_query(cq, self.workflow.begin_submission)

        @dp.callback_query(F.data == "view_score")
        async def view_score(cq: CallbackQuery):
            await self._handle_query(cq, self.workflow.score_page)

        @dp.message(F.photo)
        async def photo_response(m: Message):
            if not self.workflow.is_awaiting_response(m.chat.id):
                return
            fetch, file_name = self._photo_source(m)

            async def handler(chat_id: int):
                return await self.workflow.handle_photo(chat_id, fetch, file_name=file_name)

            await self._handle_message(m, handler, action_name="response:image")

        @dp.message(F.text)
        async def text_response(m: Message):
            if not self.workflow.is_awaiting_response(m.chat.id):
                return
            text = m.text or ""

            async def handler(chat_id: int):
                return await self.workflow.handle_text(chat_id, text)

            await self._handle_message(m, handler, action_name="response:text")

        return dp
