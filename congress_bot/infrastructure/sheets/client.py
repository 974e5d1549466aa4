from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import gspread
from google.oauth2.service_account import Credentials

from ...domain.errors import SheetsError

SCOPES = (
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
)
USER_ENTERED = {"valueInputOption": "USER_ENTERED"}

logger = logging.getLogger(__name__)


def load_service_account(path: str) -> Credentials:
    return Credentials.from_service_account_file(path, scopes=list(SCOPES))


class ValuesClient(Protocol):
    async def append(self, range_: str, values: list[list[Any]]) -> dict: ...

    async def get(self, range_: str) -> list[list[str]]: ...

    async def update(self, range_: str, values: list[list[Any]]) -> None: ...


class SheetsClient(ValuesClient):
    """
    Тонкая асинхронная обёртка над values API таблицы через gspread.
    gspread синхронный, поэтому вызовы уходят в отдельный поток.
    """

    def __init__(self, spreadsheet_id: str, credentials: Credentials):
        self._spreadsheet_id = spreadsheet_id
        self._gc = gspread.authorize(credentials)
        self._spreadsheet: gspread.Spreadsheet | None = None

    def _open(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            self._spreadsheet = self._gc.open_by_key(self._spreadsheet_id)
        return self._spreadsheet

    async def _call(self, op: str, range_: str, func):
        def run():
            return func(self._open())

        try:
            return await asyncio.to_thread(run)
        except gspread.exceptions.GSpreadException as exc:
            logger.warning("Sheets %s failed for range %s: %s", op, range_, exc)
            raise SheetsError(f"Sheets {op} failed for {range_}: {exc}") from exc

    async def append(self, range_: str, values: list[list[Any]]) -> dict:
        return await self._call(
            "append",
            range_,
            lambda sh: sh.values_append(range_, params=USER_ENTERED, body={"values": values}),
        )

    async def get(self, range_: str) -> list[list[str]]:
        response = await self._call("get", range_, lambda sh: sh.values_get(range_))
        return list(response.get("values") or [])

    async def update(self, range_: str, values: list[list[Any]]) -> None:
        await self._call(
            "update",
            range_,
            lambda sh: sh.values_update(range_, params=USER_ENTERED, body={"values": values}),
        )
