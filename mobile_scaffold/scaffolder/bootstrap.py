"""New-project bootstrap.

Creates a React Native application wired for a JHipster backend:

1. Resolve the project options: defaults come from the JHipster backend's
   ``.yo-rc.json`` when a backend directory is given, and anything still
   unset is asked for.
2. Install the base React Native app.
3. Replace its sample tests and copy the static boilerplate directories.
4. Render the boilerplate templates.
5. Append ``.gitattributes`` / ``.gitignore`` entries (failures only warn).
6. Merge the template ``package.json`` into the generated one.
7. Link native libraries.
8. Run the plugin chain (see ``build_install_steps``).
9. Optionally initialise git.

Every external command is awaited in order; a non-zero exit raises
``CommandError`` and aborts the remaining steps.  Nothing is rolled back.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, Field, field_validator

from mobile_scaffold import __version__
from mobile_scaffold.config import PLUGIN_DEFAULTS, ConfigStore, Settings
from mobile_scaffold.errors import NotFoundError, ParseError, ValidationError
from mobile_scaffold.prompts import AUTH_TYPES, BOOTSTRAP_QUESTIONS, Prompter, RichPrompter
from mobile_scaffold.scaffolder.manifest import merge_manifest_file
from mobile_scaffold.scaffolder.templates import TemplateRenderer, TemplateTarget
from mobile_scaffold.utils import (
    append_text,
    console,
    format_duration,
    is_blank,
    load_json,
    pascal_case,
    print_info,
    print_success,
    run_checked,
    which,
    write_json,
)

STATIC_DIRECTORIES: tuple[str, ...] = ("App", "Tests", "storybook")

BOILERPLATE_TEMPLATES: list[TemplateTarget] = [
    TemplateTarget("index.js.j2", "index.ios.js"),
    TemplateTarget("index.js.j2", "index.android.js"),
    TemplateTarget("README.md.j2", "README.md"),
    TemplateTarget("editorconfig.j2", ".editorconfig"),
    TemplateTarget("babelrc.j2", ".babelrc"),
    TemplateTarget("env.example.j2", ".env.example"),
    TemplateTarget("App/Config/AppConfig.js.j2", "App/Config/AppConfig.js"),
    TemplateTarget("App/Containers/RootContainer.js.j2", "App/Containers/RootContainer.js"),
    TemplateTarget("App/Services/Api.js.j2", "App/Services/Api.js"),
    TemplateTarget("App/Redux/LoginRedux.js.j2", "App/Redux/LoginRedux.js"),
    TemplateTarget("App/Redux/index.js.j2", "App/Redux/index.js"),
    TemplateTarget("App/Navigation/AppNavigation.js.j2", "App/Navigation/AppNavigation.js"),
    TemplateTarget("Tests/Redux/LoginReduxTest.js.j2", "Tests/Redux/LoginReduxTest.js"),
    TemplateTarget("App/Sagas/LoginSagas.js.j2", "App/Sagas/LoginSagas.js"),
    TemplateTarget("App/Fixtures/login.json.j2", "App/Fixtures/login.json"),
    TemplateTarget("App/Sagas/index.js.j2", "App/Sagas/index.js"),
    TemplateTarget("App/Sagas/StartupSagas.js.j2", "App/Sagas/StartupSagas.js"),
    TemplateTarget("Tests/Sagas/StartupSagaTest.js.j2", "Tests/Sagas/StartupSagaTest.js"),
    TemplateTarget("Tests/Setup.js.j2", "Tests/Setup.js"),
    TemplateTarget("storybook/storybook.js.j2", "storybook/storybook.js"),
]


def boilerplate_targets(settings: Settings) -> list[TemplateTarget]:
    """The boilerplate batch plus the project config at ``settings.config_path``."""
    return [
        *BOILERPLATE_TEMPLATES,
        TemplateTarget("ignite.json.j2", settings.config_path.as_posix()),
    ]


_TRUE_STRINGS = {"true", "yes", "y", "1", "on"}
_FALSE_STRINGS = {"false", "no", "n", "0", "off", ""}


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


class BootstrapOptions(BaseModel):
    """Options for a new project.  ``None`` means "ask the user"."""

    name: str
    auth_type: str | None = Field(default=None)
    search_engine: bool | None = Field(default=None)
    dev_screens: bool | None = Field(default=None)
    animatable: str | None = Field(default=None)
    skip_git: bool = False
    skip_lint: bool = False
    boilerplate: str | None = None
    react_native_version: str | None = None
    debug: bool = False
    parent_dir: Path = Field(default_factory=Path.cwd)
    backend_dir: str | None = None

    @field_validator("search_engine", "dev_screens", mode="before")
    @classmethod
    def _coerce_bool(cls, value: Any) -> Any:
        """Accept ``"true"``/``"false"`` as given on the command line."""
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        return value

    @field_validator("auth_type")
    @classmethod
    def _check_auth_type(cls, value: str | None) -> str | None:
        if value is None:
            return value
        allowed = BOOTSTRAP_QUESTIONS["auth_type"].choices
        if value not in allowed:
            raise ValueError(f"auth_type must be one of {', '.join(allowed)}")
        return value

    @property
    def debug_args(self) -> list[str]:
        return ["--debug"] if self.debug else []


# ---------------------------------------------------------------------------
# Plugin chain
# ---------------------------------------------------------------------------


@dataclass
class InstallStep:
    """One step of the plugin chain.

    ``command`` is run in the project root when ``condition`` holds; ``after``
    runs once the command succeeded (or on its own when there is no command).
    """

    name: str
    command: list[str] | None = None
    condition: Callable[[BootstrapOptions], bool] = lambda options: True
    after: Callable[[Path], None] | None = None

    def enabled(self, options: BootstrapOptions) -> bool:
        return self.condition(options)


def build_install_steps(
    options: BootstrapOptions,
    settings: Settings,
    config_store: ConfigStore,
) -> list[InstallStep]:
    """Return the ordered plugin chain for *options*."""
    debug = options.debug_args
    manifest_name = settings.manifest_name

    def ignite_add(plugin: str) -> list[str]:
        return ["ignite", "add", plugin, *debug]

    def save_plugin_defaults(_root: Path) -> None:
        config_store.save(PLUGIN_DEFAULTS)

    def ignore_ignite_in_lint(root: Path) -> None:
        manifest = root / manifest_name
        pkg = load_json(manifest)
        standard = pkg.get("standard")
        if not isinstance(standard, dict):
            standard = {}
        standard["ignore"] = ["ignite/**"]
        pkg["standard"] = standard
        write_json(pkg, manifest, indent=2)

    cookies = f"react-native-cookies@{settings.cookies_module_version}"

    return [
        InstallStep(
            name=f"add {options.boilerplate or settings.boilerplate}",
            command=ignite_add(options.boilerplate or settings.boilerplate),
            after=save_plugin_defaults,
        ),
        InstallStep(
            name="add ignite-ir-boilerplate-2016",
            command=ignite_add("ignite-ir-boilerplate-2016"),
        ),
        InstallStep(
            name="add dev-screens",
            command=ignite_add("dev-screens"),
            condition=lambda o: bool(o.dev_screens),
        ),
        InstallStep(
            name="add vector-icons",
            command=ignite_add("vector-icons"),
        ),
        InstallStep(
            name="install react-native-cookies",
            command=["npm", "install", "--save", cookies],
            condition=lambda o: o.auth_type == "session",
        ),
        InstallStep(
            name="link react-native-cookies",
            command=["npx", "react-native", "link", "react-native-cookies"],
            condition=lambda o: o.auth_type == "session",
        ),
        InstallStep(
            name="add animatable",
            command=ignite_add("animatable"),
            condition=lambda o: o.animatable == "react-native-animatable",
        ),
        InstallStep(
            name="add standard",
            command=ignite_add("standard"),
            condition=lambda o: not o.skip_lint,
            after=ignore_ignite_in_lint,
        ),
    ]


# ---------------------------------------------------------------------------
# Bootstrapper
# ---------------------------------------------------------------------------


BACKEND_CONFIG_NAME = ".yo-rc.json"
BACKEND_CONFIG_KEY = "generator-jhipster"


def read_backend_config(backend_dir: str | Path) -> dict[str, Any]:
    """Return the ``generator-jhipster`` section of the backend's ``.yo-rc.json``.

    Raises:
        NotFoundError: The file does not exist.
        ParseError: The file is not JSON or has no ``generator-jhipster`` object.
    """
    path = Path(backend_dir) / BACKEND_CONFIG_NAME
    if not path.is_file():
        raise NotFoundError(f"Couldn't load JHipster configuration from {path}", path=path)
    section = load_json(path).get(BACKEND_CONFIG_KEY)
    if not isinstance(section, dict):
        raise ParseError(f"No '{BACKEND_CONFIG_KEY}' object in {path}", source=str(path))
    return section


def is_android_installed() -> bool:
    """``True`` when ``$ANDROID_HOME/tools`` exists."""
    android_home = os.environ.get("ANDROID_HOME")
    if is_blank(android_home):
        return False
    return (Path(android_home) / "tools").is_dir()


class Bootstrapper:
    """Runs the new-project workflow."""

    def __init__(
        self,
        settings: Settings | None = None,
        prompter: Prompter | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.prompter = prompter or RichPrompter()
        self.renderer = renderer or TemplateRenderer(self.settings.template_dir)

    # -- Public API --------------------------------------------------------

    async def run(self, options: BootstrapOptions) -> Path:
        """Create the project described by *options*; returns its root.

        Raises:
            ValidationError: The project name is blank.
            NotFoundError: ``backend_dir`` has no ``.yo-rc.json``.
            CommandError: An external command failed.
            ParseError: A manifest or the backend config could not be parsed.
        """
        options = self.apply_backend_defaults(options)
        if is_blank(options.name):
            raise ValidationError("A project name is required.")

        started = time.monotonic()
        print_success("using the JHipster boilerplate")
        options = self.resolve_options(options)

        project_root = await self.install_base(options)
        context = self.build_context(options)
        config_store = ConfigStore(self.settings.config_file(project_root))

        await asyncio.to_thread(shutil.rmtree, project_root / "__tests__", True)

        with console.status("▸ copying files"):
            for directory in STATIC_DIRECTORIES:
                await self.renderer.copy_static(
                    f"boilerplate/{directory}", project_root / directory
                )

        with console.status("▸ generating files"):
            await self.renderer.render_batch(
                boilerplate_targets(self.settings), project_root, context, prefix="boilerplate"
            )
            self.append_ignore_files(project_root)
            self.merge_package_json(project_root, context)

        with console.status("▸ linking native libraries"):
            await run_checked(["npx", "react-native", "link"], cwd=project_root, quiet=True)

        await self.run_install_steps(
            build_install_steps(options, self.settings, config_store),
            options,
            project_root,
        )

        if not options.skip_git:
            await self.init_git(project_root)

        print_success(
            f"ignited {options.name} in {format_duration(time.monotonic() - started)}"
        )
        self.print_next_steps(options.name)
        return project_root

    def apply_backend_defaults(self, options: BootstrapOptions) -> BootstrapOptions:
        """Default the name, auth type and search engine from the backend.

        Values given explicitly are kept; the backend directory is stored as
        an absolute path so the entity generator finds it from the app root.
        """
        if is_blank(options.backend_dir):
            return options
        backend = Path(str(options.backend_dir)).expanduser()
        if not backend.is_absolute():
            backend = Path(options.parent_dir) / backend
        backend = backend.resolve()
        jhipster = read_backend_config(backend)

        updates: dict[str, Any] = {"backend_dir": str(backend)}
        if is_blank(options.name) and jhipster.get("baseName"):
            updates["name"] = pascal_case(str(jhipster["baseName"]))
        if options.auth_type is None and jhipster.get("authenticationType") in AUTH_TYPES:
            updates["auth_type"] = jhipster["authenticationType"]
        if options.search_engine is None and "searchEngine" in jhipster:
            updates["search_engine"] = jhipster["searchEngine"] == "elasticsearch"
        print_info(f"▸ using the JHipster backend at {backend}")
        return BootstrapOptions.model_validate({**options.model_dump(), **updates})

    def resolve_options(self, options: BootstrapOptions) -> BootstrapOptions:
        """Fill every unset option by asking the user."""
        answers: dict[str, Any] = {}
        for field_name, question in BOOTSTRAP_QUESTIONS.items():
            if getattr(options, field_name) is None:
                answers[field_name] = self.prompter.ask(question)
        if not answers:
            return options
        return BootstrapOptions.model_validate({**options.model_dump(), **answers})

    def build_context(self, options: BootstrapOptions) -> dict[str, Any]:
        return {
            "name": options.name,
            "plugin_version": __version__,
            "react_native_version": self._react_native_version(options),
            "auth_type": options.auth_type,
            "search_engine": bool(options.search_engine),
            "dev_screens": bool(options.dev_screens),
            "animatable": options.animatable,
            "jhipster_directory": options.backend_dir or "",
        }

    # -- Steps -------------------------------------------------------------

    async def install_base(self, options: BootstrapOptions) -> Path:
        """Run ``react-native init`` and return the new project root."""
        version = self._react_native_version(options)
        print_info(f"▸ installing React Native {version}")
        await run_checked(
            ["npx", "react-native", "init", options.name, "--version", version],
            cwd=options.parent_dir,
            capture=False,
        )
        return Path(options.parent_dir) / options.name

    def append_ignore_files(self, project_root: Path) -> None:
        # https://github.com/facebook/react-native/issues/12724
        append_text(project_root / ".gitattributes", "*.bat text eol=crlf\n")
        append_text(project_root / ".gitignore", "\n# Misc\n#\n.env\n")

    def merge_package_json(self, project_root: Path, context: dict[str, Any]) -> dict[str, Any]:
        fragment = self.renderer.render("boilerplate/package.json.j2", context)
        return merge_manifest_file(self.settings.manifest_file(project_root), fragment)

    async def run_install_steps(
        self,
        steps: list[InstallStep],
        options: BootstrapOptions,
        project_root: Path,
    ) -> list[str]:
        """Run every enabled step in order; returns the names of those run."""
        ran: list[str] = []
        for step in steps:
            if not step.enabled(options):
                continue
            step_started = time.monotonic()
            print_info(f"▸ {step.name}")
            if step.command:
                await run_checked(step.command, cwd=project_root, capture=False)
            if step.after is not None:
                step.after(project_root)
            ran.append(step.name)
            print_success(
                f"{step.name} in {format_duration(time.monotonic() - step_started)}"
            )
        return ran

    async def init_git(self, project_root: Path) -> bool:
        """Create the initial commit unless git is missing or already set up."""
        if (project_root / ".git").exists() or which("git") is None:
            return False
        with console.status("configuring git"):
            await run_checked(["git", "init", "."], cwd=project_root)
            await run_checked(["git", "add", "."], cwd=project_root)
            await run_checked(["git", "commit", "-m", "Initial commit."], cwd=project_root)
        print_success("configured git")
        return True

    def print_next_steps(self, name: str) -> None:
        print_info("")
        print_info("Time to get cooking!")
        print_info("")
        print_info("To run in iOS:")
        print_info(f"[bold]  cd {name}[/bold]")
        print_info("[bold]  react-native run-ios[/bold]")
        print_info("")
        if is_android_installed():
            print_info("To run in Android:")
        else:
            print_info(
                "To run in Android, make sure you've followed the latest react-native "
                "setup instructions at "
                "https://facebook.github.io/react-native/docs/getting-started.html. "
                "You won't be able to run [bold]react-native run-android[/bold] "
                "successfully until you have. Then:"
            )
        print_info(f"[bold]  cd {name}[/bold]")
        print_info("[bold]  react-native run-android[/bold]")
        print_info("")

    # -- Internals ---------------------------------------------------------

    def _react_native_version(self, options: BootstrapOptions) -> str:
        return options.react_native_version or self.settings.react_native_version
