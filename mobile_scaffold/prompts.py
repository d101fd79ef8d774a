"""Interactive prompts.

Questions are plain data (``Question``); answering them is delegated to a
``Prompter``.  The default ``RichPrompter`` asks on the terminal through
``rich.prompt``; tests substitute a scripted prompter.
"""

from __future__ import annotations

from typing import Any, Literal, Protocol

from pydantic import BaseModel, Field
from rich.prompt import Confirm, Prompt

from mobile_scaffold.utils import console


class Question(BaseModel):
    """A single question put to the user."""

    name: str
    message: str
    kind: Literal["input", "select", "confirm"] = "input"
    choices: list[str] = Field(default_factory=list)
    default: Any = None


class Prompter(Protocol):
    def ask(self, question: Question) -> Any:
        """Block until the user answers *question* and return the answer."""
        ...


class RichPrompter:
    """Terminal prompter backed by ``rich.prompt``."""

    def ask(self, question: Question) -> Any:
        if question.kind == "confirm":
            return Confirm.ask(
                question.message,
                default=bool(question.default),
                console=console,
            )
        kwargs: dict[str, Any] = {"console": console}
        if question.choices:
            kwargs["choices"] = question.choices
        if question.default not in (None, ""):
            kwargs["default"] = str(question.default)
        return Prompt.ask(question.message, **kwargs)


# ---------------------------------------------------------------------------
# Question catalogue
# ---------------------------------------------------------------------------

AUTH_TYPES = ["jwt", "oauth2", "session"]
ANIMATABLE_CHOICES = ["react-native-animatable", "none"]


def entity_directory_question(default: str | None = None) -> Question:
    """Ask for the backend directory holding ``.jhipster/<Name>.json``."""
    return Question(
        name="filePath",
        message="Enter the directory where your JHipster app is located",
        default=default or "",
    )


BOOTSTRAP_QUESTIONS: dict[str, Question] = {
    "auth_type": Question(
        name="authType",
        message="Which authentication type does your JHipster backend use?",
        kind="select",
        choices=AUTH_TYPES,
        default="jwt",
    ),
    "search_engine": Question(
        name="searchEngine",
        message="Does your backend use Elasticsearch?",
        kind="confirm",
        default=False,
    ),
    "dev_screens": Question(
        name="devScreens",
        message="Would you like to include the Ignite development screens?",
        kind="confirm",
        default=True,
    ),
    "animatable": Question(
        name="animatable",
        message="Which animation library would you like to use?",
        kind="select",
        choices=ANIMATABLE_CHOICES,
        default="react-native-animatable",
    ),
}
