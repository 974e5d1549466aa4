import unittest

from congress_bot.domain import AppendedRow, SheetsError, SubmissionRecord, TaskLookupError
from congress_bot.infrastructure.sheets import (
    SheetsResponsesRepository,
    SheetsScoresRepository,
    SheetsTasksRepository,
)


class FakeValuesClient:
    def __init__(self):
        self.values: dict[str, list[list[str]]] = {}
        self.appends: list[tuple[str, list]] = []
        self.updates: list[tuple[str, list]] = []
        self.append_response: dict = {"updates": {"updatedRange": "Responses-D1!A7:D7"}}

    async def append(self, range_, values):
        self.appends.append((range_, values))
        return self.append_response

    async def get(self, range_):
        return self.values.get(range_, [])

    async def update(self, range_, values):
        self.updates.append((range_, values))


class ResponsesRepositoryTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.client = FakeValuesClient()
        self.repo = SheetsResponsesRepository(self.client)

    async def test_append_returns_row_from_updated_range(self):
        record = SubmissionRecord("19/10/2026, 09:30:05", 42, "1", "SALADE")

        target = await self.repo.append(1, record)

        self.assertEqual(target, AppendedRow(sheet="Responses-D1", row=7))
        self.assertEqual(
            self.client.appends,
            [("Responses-D1!A:D", [["19/10/2026, 09:30:05", 42, "1", "SALADE"]])],
        )

    async def test_append_without_updated_range_fails(self):
        self.client.append_response = {}

        with self.assertRaisesRegex(SheetsError, "Could not determine updated range"):
            await self.repo.append(1, SubmissionRecord("ts", 42, "1", "x"))

    async def test_set_validity_writes_column_e(self):
        await self.repo.set_validity(AppendedRow("Responses-D3", 12), False)

        self.assertEqual(self.client.updates, [("Responses-D3!E12", [["FALSE"]])])

    async def test_has_valid_response_matches_chat_task_and_flag(self):
        self.client.values["Responses-D2!A:E"] = [
            ["Timestamp", "Chat", "Task", "Response", "Valid"],
            ["ts", "42", "1", "a", "FALSE"],
            ["ts", "42", "2", "b", "TRUE"],
            ["ts", "43", "1", "c", "TRUE"],
            ["ts", "42", "3", "d"],
        ]

        self.assertFalse(await self.repo.has_valid_response(2, 42, "1"))
        self.assertTrue(await self.repo.has_valid_response(2, 42, "2"))
        self.assertFalse(await self.repo.has_valid_response(2, 42, "3"))


class TasksRepositoryTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.client = FakeValuesClient()
        self.repo = SheetsTasksRepository(self.client, {1: "Tasks-D1!A2:F30"})
        self.client.values["Tasks-D1!A2:F30"] = [
            ["1", "Values", "10", "", "", "Mention SALADE"],
            ["2", "Selfie", "", "", "", "A selfie with the team"],
            ["3", "Broken", "5"],
            ["Bonus", "Header-like row"],
        ]

    async def test_get_task_reads_points_and_criteria(self):
        task = await self.repo.get_task(1, "1")

        self.assertEqual(task.points, 10)
        self.assertEqual(task.criteria, "Mention SALADE")
        self.assertEqual(task.title, "Values")

    async def test_missing_points_default_to_zero(self):
        task = await self.repo.get_task(1, "2")

        self.assertEqual(task.points, 0)

    async def test_missing_criteria_raises(self):
        with self.assertRaisesRegex(TaskLookupError, "Criteria not found"):
            await self.repo.get_task(1, "3")

    async def test_unknown_task_raises(self):
        with self.assertRaisesRegex(TaskLookupError, "Task 9 not found"):
            await self.repo.get_task(1, "9")

    async def test_empty_range_raises(self):
        self.client.values["Tasks-D1!A2:F30"] = []

        with self.assertRaisesRegex(TaskLookupError, "No task data found"):
            await self.repo.get_task(1, "1")

    async def test_unconfigured_day_raises(self):
        with self.assertRaisesRegex(TaskLookupError, "day 4"):
            await self.repo.list_tasks(4)

    async def test_list_tasks_skips_rows_without_number(self):
        tasks = await self.repo.list_tasks(1)

        self.assertEqual([t.number for t in tasks], ["1", "2", "3"])


class ScoresRepositoryTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.client = FakeValuesClient()
        self.repo = SheetsScoresRepository(self.client, sheet="Results", days=3)
        self.client.values["Results!A:D"] = [
            ["Chat", "D1", "D2", "D3"],
            ["42", "5", "7"],
        ]

    async def test_add_points_updates_existing_cell(self):
        await self.repo.add_points(42, 10, 2)

        self.assertEqual(self.client.updates, [("Results!C2", [[17]])])

    async def test_add_points_into_empty_day(self):
        await self.repo.add_points(42, 4, 3)

        self.assertEqual(self.client.updates, [("Results!D2", [[4]])])

    async def test_add_points_appends_new_chat(self):
        await self.repo.add_points(99, 10, 2)

        self.assertEqual(self.client.appends, [("Results!A:D", [[99, 0, 10, 0]])])

    async def test_daily_and_total_scores(self):
        self.assertEqual(await self.repo.get_daily_score(42, 1), 5)
        self.assertEqual(await self.repo.get_daily_score(42, 3), 0)
        self.assertEqual(await self.repo.get_total_score(42), 12)
        self.assertEqual(await self.repo.get_daily_score(100, 1), 0)

    async def test_fractional_points_are_kept(self):
        self.client.values["Results!A:D"][1] = ["42", "2.5", "0.5"]

        await self.repo.add_points(42, 1.5, 2)

        self.assertEqual(self.client.updates, [("Results!C2", [[2]])])
        self.assertEqual(await self.repo.get_daily_score(42, 1), 2.5)
        self.assertEqual(await self.repo.get_total_score(42), 3)


if __name__ == "__main__":
    unittest.main()
