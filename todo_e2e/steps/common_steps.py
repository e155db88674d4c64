"""Generic steps that work on any page through raw selectors."""

from __future__ import annotations

from pytest_bdd import given, then, when

from todo_e2e.pages.actions import PageActions
from todo_e2e.pages.helpers import clear_and_fill, click_with_retry, wait_for_clickable, wait_for_page_load
from todo_e2e.runner.step_registry import registry


@given(registry.given('I navigate to "{url}"', __name__))
def navigate_to(page_actions: PageActions, url: str) -> None:
    page_actions.goto(url)
    wait_for_page_load(page_actions.page)


@when(registry.when('I click on the element "{selector}"', __name__))
def click_element(page_actions: PageActions, selector: str) -> None:
    wait_for_clickable(page_actions.page, selector)
    click_with_retry(page_actions.page, selector)


@when(registry.when('I fill "{selector}" with "{text}"', __name__))
def fill_element(page_actions: PageActions, selector: str, text: str) -> None:
    clear_and_fill(page_actions.page, selector, text)


@then(registry.then('the element "{selector}" should be visible', __name__))
def element_visible(page_actions: PageActions, selector: str) -> None:
    assert page_actions.is_visible(selector), f'Element "{selector}" should be visible on the page'


@then(registry.then('the element "{selector}" should contain text "{text}"', __name__))
def element_contains_text(page_actions: PageActions, selector: str, text: str) -> None:
    actual = page_actions.get_text(selector)
    assert text in actual, f'Element "{selector}" should contain the text "{text}" but has "{actual}"'


@then(registry.then('the URL should contain "{fragment}"', __name__))
def url_contains(page_actions: PageActions, fragment: str) -> None:
    url = page_actions.url
    assert fragment in url, f'Current URL "{url}" should contain "{fragment}"'


@then(registry.then("I wait for {seconds:d} seconds", __name__))
def wait_seconds(page_actions: PageActions, seconds: int) -> None:
    page_actions.wait(seconds * 1000)
