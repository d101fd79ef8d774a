"""Shared pytest fixtures for the mobile-scaffold test suite.

Provides reusable fixtures for:
- Temporary app and backend directories
- Sample JHipster entity definitions
- A scripted prompter standing in for the terminal
- Mock subprocess helpers
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from mobile_scaffold.config import ConfigStore, Settings
from mobile_scaffold.prompts import Question


# ---------------------------------------------------------------------------
# Scripted prompter
# ---------------------------------------------------------------------------


class ScriptedPrompter:
    """Answers questions from a fixed script and records what was asked.

    An answer that is an exception instance (or class) is raised instead of
    returned, which is how tests simulate Ctrl-C at a prompt.
    """

    def __init__(self, answers: list[Any] | None = None) -> None:
        self.answers = list(answers or [])
        self.questions: list[Question] = []

    def ask(self, question: Question) -> Any:
        self.questions.append(question)
        if not self.answers:
            raise AssertionError(f"Unexpected question: {question.message}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException) or (
            isinstance(answer, type) and issubclass(answer, BaseException)
        ):
            raise answer
        return answer


@pytest.fixture
def prompter() -> ScriptedPrompter:
    """A prompter with no scripted answers; any question fails the test."""
    return ScriptedPrompter()


# ---------------------------------------------------------------------------
# Entity definitions
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_entity() -> dict[str, Any]:
    """A realistic ``.jhipster/Foo.json`` payload."""
    return {
        "fluentMethods": True,
        "relationships": [
            {
                "relationshipType": "many-to-one",
                "relationshipName": "owner",
                "otherEntityName": "user",
                "otherEntityField": "login",
            },
            {
                "relationshipType": "one-to-many",
                "relationshipName": "bar",
                "otherEntityName": "bar",
                "otherEntityRelationshipName": "foo",
            },
        ],
        "fields": [
            {"fieldName": "name", "fieldType": "String", "fieldValidateRules": ["required"]},
            {"fieldName": "age", "fieldType": "Integer"},
            {"fieldName": "active", "fieldType": "Boolean"},
            {"fieldName": "birthday", "fieldType": "LocalDate"},
            {"fieldName": "status", "fieldType": "Status", "fieldValues": "OPEN,CLOSED"},
        ],
        "changelogDate": "20190101000000",
        "entityTableName": "foo",
        "dto": "no",
        "pagination": "infinite-scroll",
        "service": "no",
    }


def write_entity(directory: Path, name: str, payload: dict[str, Any]) -> Path:
    """Write *payload* as ``<directory>/.jhipster/<name>.json``."""
    path = directory / ".jhipster" / f"{name}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def make_entity():
    """Factory fixture exposing ``write_entity``."""
    return write_entity


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def app_dir(tmp_path: Path) -> Path:
    """A generated app with a minimal ``ignite/ignite.json``."""
    root = tmp_path / "app"
    (root / "ignite").mkdir(parents=True)
    (root / "ignite" / "ignite.json").write_text(
        json.dumps({"name": "MyApp", "authType": "jwt", "jhipsterDirectory": ""}),
        encoding="utf-8",
    )
    return root


@pytest.fixture
def config_store(app_dir: Path, settings: Settings) -> ConfigStore:
    return ConfigStore(settings.config_file(app_dir))


@pytest.fixture
def backend_dir(tmp_path: Path, sample_entity: dict[str, Any]) -> Path:
    """A JHipster backend directory holding ``.jhipster/Foo.json``."""
    root = tmp_path / "backend"
    write_entity(root, "Foo", sample_entity)
    return root


# ---------------------------------------------------------------------------
# Mock subprocess
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_run_checked():
    """Patch ``run_checked`` in the bootstrap module; records every command."""
    with patch(
        "mobile_scaffold.scaffolder.bootstrap.run_checked",
        new_callable=AsyncMock,
        return_value="",
    ) as mocked:
        yield mocked
