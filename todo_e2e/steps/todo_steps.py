"""Step vocabulary for the TodoMVC scenarios.

The phrases below are what the ``.feature`` files are written against;
renaming one breaks every scenario that uses it.
"""

from __future__ import annotations

from typing import List

from pytest_bdd import given, then, when

from todo_e2e.pages.todo_page import TodoPage
from todo_e2e.runner.step_registry import registry
from todo_e2e.steps import table_column

# Given


@given(registry.given("the user navigates to the TodoMVC application", __name__))
def open_todo_app(todo_page: TodoPage) -> None:
    todo_page.open()


# When


@when(registry.when('the user adds the task "{task}"', __name__))
def add_task(todo_page: TodoPage, task: str) -> None:
    todo_page.add_todo(task)


@when(registry.when("the user adds the following tasks:", __name__))
def add_task_table(todo_page: TodoPage, datatable: List[List[str]]) -> None:
    todo_page.add_todos(table_column(datatable, "task"))


@when(registry.when("the user adds {count:d} tasks", __name__))
def add_numbered_tasks(todo_page: TodoPage, count: int) -> None:
    todo_page.add_todos(f"Task {i}" for i in range(1, count + 1))


@when(registry.when('the user marks as completed the task "{task}"', __name__))
def complete_task(todo_page: TodoPage, task: str) -> None:
    todo_page.mark_completed(task)


@when(registry.when('the user unmarks the task "{task}"', __name__))
def uncomplete_task(todo_page: TodoPage, task: str) -> None:
    todo_page.unmark(task)


@when(registry.when('the user deletes the task "{task}"', __name__))
def delete_task(todo_page: TodoPage, task: str) -> None:
    todo_page.delete_todo(task)


@when(registry.when("the user deletes all tasks", __name__))
def delete_all_tasks(todo_page: TodoPage) -> None:
    todo_page.delete_all()


@when(registry.when("the user clears completed tasks", __name__))
def clear_completed(todo_page: TodoPage) -> None:
    todo_page.clear_completed()


@when(registry.when("the user reloads the page", __name__))
def reload_page(todo_page: TodoPage) -> None:
    todo_page.reload()


@when(registry.when("the user filters by all tasks", __name__))
def filter_all(todo_page: TodoPage) -> None:
    todo_page.filter_all()


@when(registry.when("the user filters by active tasks", __name__))
def filter_active(todo_page: TodoPage) -> None:
    todo_page.filter_active()


@when(registry.when("the user filters by completed tasks", __name__))
def filter_completed(todo_page: TodoPage) -> None:
    todo_page.filter_completed()


@when(registry.when("the user marks all tasks as completed", __name__))
def toggle_all(todo_page: TodoPage) -> None:
    todo_page.toggle_all()


# Then


@then(registry.then('the counter should show "{text}"', __name__))
def counter_shows(todo_page: TodoPage, text: str) -> None:
    counter = todo_page.counter_text()
    assert text in counter, f'Counter should show "{text}" but shows "{counter}"'


@then(registry.then("the task list should be empty", __name__))
def list_empty(todo_page: TodoPage) -> None:
    count = todo_page.item_count()
    assert count == 0, f"Task list should be empty but contains {count} task(s)"


@then(registry.then('the task "{task}" should be marked as completed', __name__))
def task_completed(todo_page: TodoPage, task: str) -> None:
    assert todo_page.is_completed(task), f'Task "{task}" should be marked as completed but it is not'


@then(registry.then('the task "{task}" should not be marked as completed', __name__))
def task_not_completed(todo_page: TodoPage, task: str) -> None:
    assert not todo_page.is_completed(task), f'Task "{task}" should not be marked as completed but it is'


@then(registry.then("should see {count:d} task in the list", __name__))
def item_count_singular(todo_page: TodoPage, count: int) -> None:
    actual = todo_page.item_count()
    assert actual == count, f"Expected to see {count} task in the list but found {actual}"


@then(registry.then("should see {count:d} tasks in the list", __name__))
def item_count_plural(todo_page: TodoPage, count: int) -> None:
    actual = todo_page.item_count()
    assert actual == count, f"Expected to see {count} tasks in the list but found {actual}"


@then(registry.then('should see the task "{task}"', __name__))
def task_visible(todo_page: TodoPage, task: str) -> None:
    assert todo_page.todo_exists(task), f'Task "{task}" should be visible in the list but was not found'


@then(registry.then('should not see the task "{task}"', __name__))
def task_not_visible(todo_page: TodoPage, task: str) -> None:
    assert not todo_page.todo_exists(task), f'Task "{task}" should not be visible in the list but was found'


@then(registry.then("should not see the counter", __name__))
def counter_hidden(todo_page: TodoPage) -> None:
    assert not todo_page.is_counter_visible(), "Task counter should not be visible when list is empty"


@then(registry.then("should see only {count:d} task", __name__))
def visible_count(todo_page: TodoPage, count: int) -> None:
    visible = todo_page.visible_todos()
    assert len(visible) == count, f"Should see {count} task(s) but found {len(visible)}: {visible}"


@then(registry.then("should see the following tasks:", __name__))
def tasks_visible_table(todo_page: TodoPage, datatable: List[List[str]]) -> None:
    visible = todo_page.visible_todos()
    for task in table_column(datatable, "task"):
        assert task in visible, f'Task "{task}" should be visible. Current tasks: [{", ".join(visible)}]'
