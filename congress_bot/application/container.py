from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from ..domain import FixedStartCalendar
from ..domain.submissions import ResponseSessions, SubmissionService
from ..infrastructure import load_task_ranges_from_yaml
from ..infrastructure.evaluation import LLMCriteriaEvaluator
from ..infrastructure.images import DriveImageHost
from ..infrastructure.metrics import metrics
from ..infrastructure.sheets import (
    SheetsClient,
    SheetsResponsesRepository,
    SheetsScoresRepository,
    SheetsTasksRepository,
    load_service_account,
)
from .metrics.logger import configure_metrics_logger
from .presenters import BotPresenter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    bot_token: str
    sheet_id: str
    congress_start: date
    google_credentials_path: str = "credentials.json"
    task_ranges_path: str = "config/task_ranges.yaml"
    congress_days: int = 9
    timezone: str = "Asia/Colombo"
    results_sheet: str = "Results"
    drive_folder_id: str | None = None
    evaluator_api_url: str = "https://api.openai.com/v1"
    evaluator_api_key: str | None = None
    evaluator_model: str = "gpt-4o-mini"
    metrics_log_path: str | None = None


class AppContainer:
    def __init__(
        self,
        *,
        config: AppConfig,
        submission_service: SubmissionService,
        sessions: ResponseSessions,
        presenter: BotPresenter,
        image_host: DriveImageHost,
        evaluator: LLMCriteriaEvaluator,
    ):
        self.config = config
        self.submission_service = submission_service
        self.sessions = sessions
        self.presenter = presenter

        self._image_host = image_host
        self._evaluator = evaluator

    async def init_resources(self) -> None:
        if self.config.metrics_log_path:
            metrics.configure(configure_metrics_logger(self.config.metrics_log_path))
            logger.info("Metrics are written to %s", self.config.metrics_log_path)

    async def close(self) -> None:
        await self._image_host.close()
        await self._evaluator.close()


def create_container(config: AppConfig) -> AppContainer:
    credentials = load_service_account(config.google_credentials_path)
    sheets = SheetsClient(config.sheet_id, credentials)
    task_ranges = load_task_ranges_from_yaml(config.task_ranges_path)
    missing_days = [day for day in range(1, config.congress_days + 1) if day not in task_ranges]
    if missing_days:
        logger.warning("No task range configured for days %s", ",".join(map(str, missing_days)))

    image_host = DriveImageHost(credentials, folder_id=config.drive_folder_id)
    evaluator = LLMCriteriaEvaluator(
        api_url=config.evaluator_api_url,
        api_key=config.evaluator_api_key,
        model=config.evaluator_model,
    )
    submission_service = SubmissionService(
        responses=SheetsResponsesRepository(sheets),
        tasks=SheetsTasksRepository(sheets, task_ranges),
        scores=SheetsScoresRepository(sheets, sheet=config.results_sheet, days=config.congress_days),
        evaluator=evaluator,
        image_host=image_host,
        calendar=FixedStartCalendar(
            config.congress_start,
            days=config.congress_days,
            timezone=config.timezone,
        ),
    )

    return AppContainer(
        config=config,
        submission_service=submission_service,
        sessions=ResponseSessions(),
        presenter=BotPresenter(),
        image_host=image_host,
        evaluator=evaluator,
    )
