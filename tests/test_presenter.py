import unittest

from congress_bot.application.presenters import BotPresenter
from congress_bot.domain import ResponseKind, ScoreSummary, TaskDefinition


class BotPresenterTests(unittest.TestCase):
    def setUp(self):
        self.presenter = BotPresenter()

    def test_main_menu_buttons(self):
        page = self.presenter.start_page()

        self.assertEqual(
            [row[0].callback_data for row in page.buttons],
            ["view_tasks", "submit_responses", "view_score"],
        )

    def test_instructions_show_example(self):
        page = self.presenter.submission_instructions()

        self.assertIn("<b>Task Number</b>", page.text)
        self.assertIn("SALADE", page.text)
        self.assertEqual(page.buttons, [])

    def test_tasks_page_escapes_titles(self):
        tasks = [TaskDefinition(number="1", title="<Team> photo", points=10, criteria="c")]

        page = self.presenter.tasks_page(2, tasks)

        self.assertIn("&lt;Team&gt; photo", page.text)
        self.assertIn("10 pts", page.text)
        self.assertIn("Day 2", page.text)

    def test_tasks_page_falls_back_to_number(self):
        page = self.presenter.tasks_page(1, [TaskDefinition(number="5", title="", points=0, criteria="c")])

        self.assertIn("Task 5", page.text)

    def test_score_page_hides_today_outside_window(self):
        summary = ScoreSummary(day=12, today=0, total=88)

        page = self.presenter.score_page(summary, accepting=False)

        self.assertNotIn("Today", page.text)
        self.assertIn("88", page.text)

    def test_verdict_texts(self):
        self.assertIn("Great!", self.presenter.verdict(ResponseKind.TEXT, True).text)
        self.assertIn("image doesn't meet", self.presenter.verdict(ResponseKind.IMAGE, False).text)

    def test_daily_score_has_menu(self):
        page = self.presenter.daily_score(30)

        self.assertIn("30 points", page.text)
        self.assertEqual(len(page.buttons), 3)

    def test_image_prompt_escapes_task_number(self):
        page = self.presenter.image_prompt("<1>")

        self.assertIn("&lt;1&gt;", page.text)


if __name__ == "__main__":
    unittest.main()
