from __future__ import annotations


class SubmissionError(Exception):
    """
    Базовая ошибка внешних сервисов, из-за которой ответ не удалось принять.
    """


class SheetsError(SubmissionError):
    pass


class TaskLookupError(SubmissionError):
    pass


class ImageHostError(SubmissionError):
    pass


class EvaluationError(SubmissionError):
    pass
