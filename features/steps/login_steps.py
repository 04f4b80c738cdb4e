"""Step definitions for the login page example."""

from pathlib import Path

from behave import given, then, when
from behave.runner import Context

LOGIN_PAGE = Path(__file__).parent.parent / "support" / "login.html"


@given("I open the login page")
def step_open_login_page(context: Context) -> None:
    context.page.goto(LOGIN_PAGE.resolve().as_uri())


@when('I sign in as "{username}" with password "{password}"')
def step_sign_in(context: Context, username: str, password: str) -> None:
    context.page.fill("#username", username)
    context.page.fill("#password", password)
    context.page.click("#submit")


@then('I see the message "{message}"')
def step_see_message(context: Context, message: str) -> None:
    text = context.page.text_content("#message")
    assert text == message, f"Expected message {message!r}, got {text!r}"
