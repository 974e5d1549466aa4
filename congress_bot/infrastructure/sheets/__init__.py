from .client import SheetsClient, ValuesClient, load_service_account
from .responses import SheetsResponsesRepository, responses_sheet
from .scores import SheetsScoresRepository
from .tasks import SheetsTasksRepository

__all__ = [
    "SheetsClient",
    "ValuesClient",
    "load_service_account",
    "SheetsResponsesRepository",
    "responses_sheet",
    "SheetsScoresRepository",
    "SheetsTasksRepository",
]
