"""Locate a JHipster entity definition for the current project.

Resolution order (first match wins):

1. The project-local cache ``.jhipster/<Name>.json``.
2. An explicit backend directory passed with ``--jh-dir``.  A missing file
   there is an error; the user asked for that directory specifically.
3. Asking the user for the backend directory until the file is found.

Definitions found through 2 or 3 are copied into the local cache and the
backend directory is remembered in the project config as the next default.
"""

from __future__ import annotations

import asyncio
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from mobile_scaffold.config import ConfigStore, Settings
from mobile_scaffold.entity.models import EntityDefinition, load_entity_definition
from mobile_scaffold.errors import NotFoundError, ResolutionAborted, ValidationError
from mobile_scaffold.prompts import Prompter, RichPrompter, entity_directory_question
from mobile_scaffold.utils import (
    is_blank,
    pascal_case,
    print_error,
    print_info,
    print_success,
)

CONFIG_DIRECTORY_KEY = "jhipsterDirectory"


class ResolutionState(str, Enum):
    """States of the interactive directory lookup."""

    PROMPTING = "prompting"
    VALIDATING = "validating"
    RESOLVED = "resolved"
    ABORTED = "aborted"


class EntitySource(str, Enum):
    CACHE = "cache"
    OVERRIDE = "override"
    PROMPT = "prompt"


@dataclass
class LocatedEntity:
    """Result of a successful lookup."""

    name: str
    path: Path
    source: EntitySource
    definition: EntityDefinition


def normalize_entity_name(name: str | None) -> str:
    """Return the canonical (PascalCase) entity name.

    Raises:
        ValidationError: If *name* is blank.
    """
    if is_blank(name):
        raise ValidationError("A name is required.")
    canonical = pascal_case(str(name))
    if not canonical:
        raise ValidationError(f"'{name}' is not a usable entity name.")
    return canonical


def _strip_trailing_slash(directory: str) -> str:
    directory = directory.strip()
    if len(directory) > 1 and directory.endswith(("/", "\\")):
        return directory[:-1]
    return directory


class EntityLocator:
    """Resolves entity names to definition files for one project."""

    def __init__(
        self,
        config_store: ConfigStore,
        *,
        project_root: str | Path | None = None,
        prompter: Prompter | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.config_store = config_store
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.prompter = prompter or RichPrompter()
        self.settings = settings or Settings()

    # -- Public API --------------------------------------------------------

    async def locate(
        self, name: str, directory_override: str | None = None
    ) -> LocatedEntity:
        """Find (and if needed cache) the definition for entity *name*.

        Raises:
            ValidationError: *name* is blank.  Raised before any I/O.
            NotFoundError: *directory_override* lacks the definition file.
            ResolutionAborted: The user interrupted the directory prompt.
            ParseError: The definition file is not valid JSON.
        """
        entity_name = normalize_entity_name(name)
        cache_path = self.cache_path(entity_name)

        if cache_path.is_file():
            print_success("Found the entity config locally in .jhipster")
            return LocatedEntity(
                name=entity_name,
                path=cache_path,
                source=EntitySource.CACHE,
                definition=load_entity_definition(cache_path),
            )

        if not is_blank(directory_override):
            directory = _strip_trailing_slash(str(directory_override))
            source_file = self.source_path(directory, entity_name)
            if not source_file.is_file():
                raise NotFoundError(
                    f"No entity configuration file found at {source_file}",
                    path=source_file,
                )
            print_success(f"Found the entity config at {source_file}")
            source = EntitySource.OVERRIDE
        else:
            directory, source_file = self._resolve_interactively(entity_name)
            source = EntitySource.PROMPT

        # A malformed definition must never reach the cache.
        definition = load_entity_definition(source_file)
        await self._materialize(source_file, cache_path, directory)
        return LocatedEntity(
            name=entity_name,
            path=cache_path,
            source=source,
            definition=definition,
        )

    def cache_path(self, entity_name: str) -> Path:
        return self.settings.entity_cache(self.project_root) / f"{entity_name}.json"

    def source_path(self, directory: str, entity_name: str) -> Path:
        """Location of the definition inside backend *directory*."""
        base = Path(directory).expanduser()
        if not base.is_absolute():
            base = self.project_root / base
        return base / self.settings.entity_cache_dir / f"{entity_name}.json"

    # -- Internals ---------------------------------------------------------

    def _resolve_interactively(self, entity_name: str) -> tuple[str, Path]:
        """Prompt until a backend directory containing the definition is given."""
        default = self.config_store.get(CONFIG_DIRECTORY_KEY)
        state = ResolutionState.PROMPTING
        directory = ""
        candidate = Path()

        while True:
            if state is ResolutionState.PROMPTING:
                try:
                    answer = self.prompter.ask(entity_directory_question(default))
                except (KeyboardInterrupt, EOFError):
                    state = ResolutionState.ABORTED
                    continue
                directory = _strip_trailing_slash(str(answer or ""))
                state = ResolutionState.VALIDATING

            elif state is ResolutionState.VALIDATING:
                candidate = self.source_path(directory, entity_name)
                print_info(f"Looking for {candidate}")
                if candidate.is_file():
                    print_success(f"Found entity file at {candidate}")
                    state = ResolutionState.RESOLVED
                else:
                    error = NotFoundError(
                        f"Could not find entity file at {candidate}, please try again.",
                        path=candidate,
                    )
                    print_error(str(error))
                    state = ResolutionState.PROMPTING

            elif state is ResolutionState.RESOLVED:
                return directory, candidate

            else:
                raise ResolutionAborted(
                    f"Lookup of the {entity_name} entity configuration was cancelled."
                )

    async def _materialize(self, source_file: Path, cache_path: Path, directory: str) -> None:
        """Copy *source_file* into the cache and remember *directory*."""
        await asyncio.to_thread(cache_path.parent.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(shutil.copyfile, source_file, cache_path)
        print_success("Entity config saved to your app's .jhipster folder.")
        self.config_store.save({CONFIG_DIRECTORY_KEY: directory})


async def locate_entity(
    name: str,
    config_store: ConfigStore,
    *,
    directory_override: str | None = None,
    project_root: str | Path | None = None,
    prompter: Prompter | None = None,
    settings: Settings | None = None,
) -> LocatedEntity:
    """Convenience wrapper around :meth:`EntityLocator.locate`."""
    locator = EntityLocator(
        config_store,
        project_root=project_root,
        prompter=prompter,
        settings=settings,
    )
    return await locator.locate(name, directory_override)
