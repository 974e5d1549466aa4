from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ResponseKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class TaskDefinition:
    number: str
    title: str
    points: float
    criteria: str


@dataclass(frozen=True)
class AppendedRow:
    sheet: str
    row: int


@dataclass(frozen=True)
class SubmissionRecord:
    timestamp: str
    chat_id: int
    task_number: str
    response: str

    def as_row(self) -> list:
        return [self.timestamp, self.chat_id, self.task_number, self.response]


@dataclass(frozen=True)
class ScoreSummary:
    day: int
    today: float
    total: float
