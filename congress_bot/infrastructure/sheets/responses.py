from __future__ import annotations

from ...domain.models import AppendedRow, SubmissionRecord
from ...domain.repositories import ResponsesRepository
from ..mappers import cell, row_from_updated_range
from ..metrics import metrics
from .client import ValuesClient

VALID = "TRUE"
INVALID = "FALSE"


def responses_sheet(day: int) -> str:
    return f"Responses-D{day}"


class SheetsResponsesRepository(ResponsesRepository):
    def __init__(self, client: ValuesClient):
        self._client = client

    @metrics.wrap_async("sheets:responses.append", source="sheets")
    async def append(self, day: int, record: SubmissionRecord) -> AppendedRow:
        sheet = responses_sheet(day)
        response = await self._client.append(f"{sheet}!A:D", [record.as_row()])
        updated_range = (response or {}).get("updates", {}).get("updatedRange")
        return AppendedRow(sheet=sheet, row=row_from_updated_range(updated_range))

    @metrics.wrap_async("sheets:responses.set_validity", source="sheets")
    async def set_validity(self, target: AppendedRow, is_valid: bool) -> None:
        await self._client.update(
            f"{target.sheet}!E{target.row}",
            [[VALID if is_valid else INVALID]],
        )

    @metrics.wrap_async("sheets:responses.has_valid", source="sheets")
    async def has_valid_response(self, day: int, chat_id: int, task_number: str) -> bool:
        rows = await self._client.get(f"{responses_sheet(day)}!A:E")
        chat = str(chat_id)
        return any(
            cell(row, 1) == chat and cell(row, 2) == task_number and cell(row, 4) == VALID
            for row in rows
        )
