from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

TASK_NUMBER_RE = re.compile(r"^\d+$")


def is_task_number(value: str | None) -> bool:
    return bool(value) and TASK_NUMBER_RE.match(value) is not None


class TextParseStatus(Enum):
    TASK_ONLY = "task_only"
    COMPLETE = "complete"
    INVALID_FORMAT = "invalid_format"
    INVALID_CONTENT = "invalid_content"


@dataclass(frozen=True)
class ParsedText:
    status: TextParseStatus
    task_number: str | None = None
    response: str | None = None

    @classmethod
    def parse(cls, text: str) -> "ParsedText":
        """
        Разбирает текстовый ответ: одна строка с номером задания
        (дальше ждём картинку) или ровно две строки «номер / ответ».
        """
        lines = [line.strip() for line in text.replace("\r\n", "\n").split("\n")]
        if len(lines) == 1 and is_task_number(lines[0]):
            return cls(TextParseStatus.TASK_ONLY, task_number=lines[0])
        if len(lines) != 2:
            return cls(TextParseStatus.INVALID_FORMAT)
        task_number, response = lines
        if not is_task_number(task_number) or not response:
            return cls(TextParseStatus.INVALID_CONTENT)
        return cls(TextParseStatus.COMPLETE, task_number=task_number, response=response)
