from .models import (
    AppendedRow,
    ResponseKind,
    ScoreSummary,
    SubmissionRecord,
    TaskDefinition,
)
from .value_objects import ParsedText, TextParseStatus, is_task_number
from .errors import (
    EvaluationError,
    ImageHostError,
    SheetsError,
    SubmissionError,
    TaskLookupError,
)
from .repositories import (
    CongressCalendar,
    CriteriaEvaluator,
    ImageHost,
    ResponsesRepository,
    ScoresRepository,
    TasksRepository,
)
from .calendar import FixedStartCalendar

__all__ = [
    "AppendedRow",
    "ResponseKind",
    "ScoreSummary",
    "SubmissionRecord",
    "TaskDefinition",
    "ParsedText",
    "TextParseStatus",
    "is_task_number",
    "EvaluationError",
    "ImageHostError",
    "SheetsError",
    "SubmissionError",
    "TaskLookupError",
    "CongressCalendar",
    "CriteriaEvaluator",
    "ImageHost",
    "ResponsesRepository",
    "ScoresRepository",
    "TasksRepository",
    "FixedStartCalendar",
]
