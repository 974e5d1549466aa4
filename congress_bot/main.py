import asyncio
import logging
import os
from datetime import date

from dotenv import load_dotenv
from aiogram import Bot

from .application.bot_app import TelegramBotApp
from .application.bootstrap import bootstrap_app
from .application.container import AppConfig

load_dotenv()
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def _required(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise RuntimeError(f"{name} is empty. Put it to .env")
    return value


def load_app_config() -> AppConfig:
    bot_token = _required("BOT_TOKEN")
    sheet_id = _required("SHEET_ID")
    start_raw = _required("CONGRESS_START_DATE")
    try:
        congress_start = date.fromisoformat(start_raw)
    except ValueError:
        raise RuntimeError(f"CONGRESS_START_DATE must be YYYY-MM-DD, got {start_raw!r}") from None
    congress_days = int(os.getenv("CONGRESS_DAYS", "9"))
    if congress_days < 1:
        raise RuntimeError("CONGRESS_DAYS must be positive")
    config = AppConfig(
        bot_token=bot_token,
        sheet_id=sheet_id,
        congress_start=congress_start,
        google_credentials_path=os.getenv("GOOGLE_CREDENTIALS_PATH", "credentials.json"),
        task_ranges_path=os.getenv("TASK_RANGES_PATH", "config/task_ranges.yaml"),
        congress_days=congress_days,
        timezone=os.getenv("CONGRESS_TIMEZONE", "Asia/Colombo").strip(),
        results_sheet=os.getenv("RESULTS_SHEET", "Results").strip(),
        drive_folder_id=os.getenv("DRIVE_FOLDER_ID", "").strip() or None,
        evaluator_api_url=os.getenv("EVALUATOR_API_URL", "https://api.openai.com/v1").strip(),
        evaluator_api_key=os.getenv("EVALUATOR_API_KEY", "").strip() or None,
        evaluator_model=os.getenv("EVALUATOR_MODEL", "gpt-4o-mini").strip(),
        metrics_log_path=os.getenv("METRICS_LOG_PATH", "").strip() or None,
    )
    logger.info(
        "Config loaded: sheet_id=%s, congress_start=%s, days=%s, timezone=%s, "
        "task_ranges=%s, results_sheet=%s, drive_folder=%s, evaluator=%s (%s), metrics=%s",
        config.sheet_id,
        config.congress_start.isoformat(),
        config.congress_days,
        config.timezone,
        config.task_ranges_path,
        config.results_sheet,
        config.drive_folder_id or "root",
        config.evaluator_api_url,
        config.evaluator_model,
        config.metrics_log_path or "log",
    )
    return config


async def main():
    config = load_app_config()
    logger.info("Bootstrapping application")
    async with bootstrap_app(config) as container:
        logger.info("Building Telegram bot application")
        bot_app = TelegramBotApp(container)
        bot = Bot(config.bot_token)
        dp = bot_app.build_dispatcher()
        logger.info("Starting polling loop")
        try:
            await dp.start_polling(bot)
        except Exception:
            logger.exception("Polling stopped due to unexpected error")
            raise
        finally:
            await bot.session.close()
            logger.info("Polling loop finished")


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user, shutting down")


if __name__ == "__main__":
    run()
