from .service import ImageSource, SubmissionResult, SubmissionService, SubmissionStatus
from .sessions import ResponseSessions

__all__ = [
    "ImageSource",
    "ResponseSessions",
    "SubmissionResult",
    "SubmissionService",
    "SubmissionStatus",
]
