"""
Page facade for the TodoMVC application.

Exposes the task-list actions the scenarios talk about ("add a task",
"mark it completed", "filter by active") and hides the CSS selectors
behind them. Short fixed pauses after each mutation give the
application's own rendering a chance to settle before the next step
reads the list.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page

from todo_e2e.core.constants import DEFAULT_TODO_URL
from todo_e2e.pages.actions import PageActions

logger = logging.getLogger(__name__)

SELECTORS = {
    "new_todo_input": ".new-todo",
    "todo_list": ".todo-list",
    "todo_item": ".todo-list li",
    "todo_label": ".todo-list li label",
    "todo_count": ".todo-count",
    "clear_completed_button": ".clear-completed",
    "filter_all": 'a[href="#/"]',
    "filter_active": 'a[href="#/active"]',
    "filter_completed": 'a[href="#/completed"]',
    "toggle_all": ".toggle-all",
}


class TodoPage:
    def __init__(self, page: Page, base_url: str = DEFAULT_TODO_URL) -> None:
        self.actions = PageActions(page, base_url)

    @property
    def page(self) -> Page:
        return self.actions.page

    def _row(self, task_text: str) -> Locator:
        label = self.actions.locator(SELECTORS["todo_label"]).filter(has_text=task_text)
        return label.locator("..").first

    def open(self) -> None:
        self.actions.navigate("/")
        self.actions.wait_for_selector(SELECTORS["new_todo_input"])

    def add_todo(self, task_text: str) -> None:
        self.actions.fill(SELECTORS["new_todo_input"], task_text)
        self.actions.press("Enter")
        self.actions.wait(500)

    def add_todos(self, tasks: Iterable[str]) -> None:
        for task in tasks:
            self.add_todo(task)

    def mark_completed(self, task_text: str) -> None:
        self._row(task_text).locator('input[type="checkbox"]').check()
        self.actions.wait(300)

    def unmark(self, task_text: str) -> None:
        self._row(task_text).locator('input[type="checkbox"]').uncheck()
        self.actions.wait(200)

    def is_completed(self, task_text: str) -> bool:
        """True when the row labelled ``task_text`` carries the ``completed`` class."""
        try:
            self.actions.wait_for_selector(SELECTORS["todo_list"])
            for item in self.actions.locator(SELECTORS["todo_item"]).all():
                label_text = item.locator("label").text_content()
                if label_text is not None and label_text.strip() == task_text:
                    class_name = item.get_attribute("class") or ""
                    return "completed" in class_name
            return False
        except PlaywrightError:
            logger.exception("Error checking if task %r is completed", task_text)
            return False

    def counter_text(self) -> str:
        counter = self.actions.locator(SELECTORS["todo_count"])
        if counter.count() == 0:
            return ""
        return (counter.text_content() or "").strip()

    def is_counter_visible(self) -> bool:
        return self.actions.is_visible(SELECTORS["todo_count"])

    def item_count(self) -> int:
        return self.actions.locator(SELECTORS["todo_item"]).count()

    def is_empty(self) -> bool:
        return self.item_count() == 0

    def delete_todo(self, task_text: str) -> None:
        row = self._row(task_text)
        # The destroy button only renders while the row is hovered.
        row.hover()
        self.actions.wait(200)
        row.locator("button.destroy").click()
        self.actions.wait(300)

    def delete_all(self) -> None:
        while self.item_count() > 0:
            first_label = self.actions.locator(SELECTORS["todo_label"]).first
            text = first_label.text_content() if first_label.count() > 0 else None
            if not text or not text.strip():
                # Nothing addressable by label; stop instead of spinning.
                break
            self.delete_todo(text.strip())

    def clear_completed(self) -> None:
        button = self.actions.locator(SELECTORS["clear_completed_button"])
        if button.count() > 0:
            button.click()
            self.actions.wait(300)

    def reload(self) -> None:
        self.actions.reload()
        self.actions.wait_for_selector(SELECTORS["new_todo_input"])

    def filter_all(self) -> None:
        self.actions.click(SELECTORS["filter_all"])
        self.actions.wait(300)

    def filter_active(self) -> None:
        self.actions.click(SELECTORS["filter_active"])
        self.actions.wait(300)

    def filter_completed(self) -> None:
        self.actions.click(SELECTORS["filter_completed"])
        self.actions.wait(300)

    def toggle_all(self) -> None:
        self.actions.click(SELECTORS["toggle_all"])
        self.actions.wait(300)

    def visible_todos(self) -> List[str]:
        """Labels of the rows currently shown (rows hidden by a filter are skipped)."""
        todos: List[str] = []
        for item in self.actions.locator(SELECTORS["todo_item"]).all():
            if not item.is_visible():
                continue
            text = item.locator("label").text_content()
            if text:
                todos.append(text.strip())
        return todos

    def todo_exists(self, task_text: str) -> bool:
        try:
            return task_text in self.visible_todos()
        except PlaywrightError:
            logger.exception("Error checking if task %r exists", task_text)
            return False


__all__ = ["SELECTORS", "TodoPage"]
