from __future__ import annotations

from typing import Optional


class ResponseSessions:
    """
    Временное состояние пользователей в памяти процесса:
    кто сейчас сдаёт ответ и для какого задания ждём картинку.
    """

    def __init__(self):
        self._awaiting_response: dict[int, bool] = {}
        self._awaiting_image_task: dict[int, str] = {}

    def begin(self, chat_id: int) -> None:
        self._awaiting_response[chat_id] = True

    def is_awaiting(self, chat_id: int) -> bool:
        return chat_id in self._awaiting_response

    def await_image(self, chat_id: int, task_number: str) -> None:
        self._awaiting_image_task[chat_id] = task_number

    def image_task(self, chat_id: int) -> Optional[str]:
        return self._awaiting_image_task.get(chat_id)

    def finish(self, chat_id: int) -> None:
        self._awaiting_response.pop(chat_id, None)
        self._awaiting_image_task.pop(chat_id, None)
