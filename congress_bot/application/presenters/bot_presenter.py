from __future__ import annotations

from html import escape
from pathlib import Path
from typing import Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ...domain.models import ResponseKind, ScoreSummary, TaskDefinition
from ..pages import Page, PageButton

EXAMPLE_RESPONSE = "The acronym for AIESEC values is 'SALADE'"


class BotPresenter:
    def __init__(self, templates_dir: Path | None = None):
        base_dir = templates_dir or (Path(__file__).resolve().parent / "templates")
        self._env = Environment(
            loader=FileSystemLoader(str(base_dir)),
            autoescape=select_autoescape(enabled_extensions=("j2",), default_for_string=True, default=True),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def _main_menu_buttons(self) -> list[list[PageButton]]:
        return [
            [PageButton("📋 View Tasks", "view_tasks")],
            [PageButton("📝 Submit Responses", "submit_responses")],
            [PageButton("🏆 View Score", "view_score")],
        ]

    def _render(self, template: str, **context) -> str:
        return self._env.get_template(template).render(**context).strip()

    def start_page(self) -> Page:
        return Page(
            "👋 Welcome to the congress tasks bot!\n"
            "Check today's tasks, submit your responses and follow your score.",
            buttons=self._main_menu_buttons(),
        )

    def submission_instructions(self) -> Page:
        return Page(self._render("instructions.j2", example=EXAMPLE_RESPONSE))

    def not_accepting_today(self) -> Page:
        return Page("⚠️ Responses are not being accepted today.", buttons=self._main_menu_buttons())

    def image_prompt(self, task_number: str) -> Page:
        return Page(f"📸 Now send your image response for Task {escape(task_number)}")

    def invalid_format(self) -> Page:
        return Page("⚠️ Invalid format. Submit as:\n\n<code>Task Number</code>\n<code>Your Response</code>")

    def invalid_content(self) -> Page:
        return Page("⚠️ Invalid task number or empty response.")

    def task_number_first(self) -> Page:
        return Page("⚠️ Please send Task Number first.")

    def already_completed(self, task_number: str) -> Page:
        return Page(
            f"✅ You've already submitted a valid response for Task {escape(task_number)}. "
            "No need to submit again.",
            buttons=self._main_menu_buttons(),
        )

    def verdict(self, kind: ResponseKind, is_valid: bool) -> Page:
        if kind == ResponseKind.IMAGE:
            text = "✅ Your image meets the criteria." if is_valid else "❌ Your image doesn't meet the criteria."
        else:
            text = (
                "✅ Great! Your response meets the criteria."
                if is_valid
                else "❌ Your response doesn't meet the criteria."
            )
        return Page(text)

    def daily_score(self, score: float) -> Page:
        return Page(f"🎉 Your score for today: {score} points.", buttons=self._main_menu_buttons())

    def submission_error(self, kind: ResponseKind) -> Page:
        if kind == ResponseKind.IMAGE:
            return Page("❌ Error saving your image. Please try again.", buttons=self._main_menu_buttons())
        return Page("❌ Error saving your response. Please try again later.", buttons=self._main_menu_buttons())

    def tasks_page(self, day: int, tasks: Sequence[TaskDefinition]) -> Page:
        text = self._render("tasks_page.j2", day=day, tasks=tasks)
        return Page(text, buttons=self._main_menu_buttons())

    def tasks_unavailable(self) -> Page:
        return Page("📋 There are no tasks today.", buttons=self._main_menu_buttons())

    def tasks_error(self) -> Page:
        return Page("❌ Could not load tasks. Please try again later.", buttons=self._main_menu_buttons())

    def score_page(self, summary: ScoreSummary, *, accepting: bool) -> Page:
        text = self._render("score_page.j2", summary=summary, accepting=accepting)
        return Page(text, buttons=self._main_menu_buttons())

    def score_error(self) -> Page:
        return Page("❌ Could not load your score. Please try again later.", buttons=self._main_menu_buttons())

    def cancelled(self) -> Page:
        return Page("Submission cancelled.", buttons=self._main_menu_buttons())
