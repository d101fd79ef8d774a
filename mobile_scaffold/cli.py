"""Command-line entry point.

Usage::

    mobile-scaffold new MyApp --auth-type jwt --skip-git
    mobile-scaffold generate entity Foo --jh-dir=../backend
    mobile-scaffold g entity Foo
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from pydantic import ValidationError as PydanticValidationError

from mobile_scaffold import __version__
from mobile_scaffold.config import Settings
from mobile_scaffold.entity.generator import EntityGenerator
from mobile_scaffold.errors import ResolutionAborted, ScaffoldError, ValidationError
from mobile_scaffold.prompts import ANIMATABLE_CHOICES, AUTH_TYPES
from mobile_scaffold.scaffolder.bootstrap import BootstrapOptions, Bootstrapper
from mobile_scaffold.utils import is_blank, print_error, print_info, print_warning, set_debug

PROG = "mobile-scaffold"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="React Native scaffolding for JHipster backends",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            f"  {PROG} new MyApp --auth-type jwt\n"
            f"  {PROG} generate entity Foo --jh-dir=../backend\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Print debug output")
    sub = parser.add_subparsers(dest="command", required=True)

    new = sub.add_parser("new", help="Create a new app")
    new.add_argument("name", nargs="?", default="", help="App name")
    new.add_argument("--auth-type", choices=AUTH_TYPES, default=None)
    new.add_argument("--search-engine", default=None, help="true/false")
    new.add_argument("--dev-screens", default=None, help="true/false")
    new.add_argument("--animatable", choices=ANIMATABLE_CHOICES, default=None)
    new.add_argument("--skip-git", action="store_true")
    new.add_argument("--skip-lint", action="store_true")
    new.add_argument("--boilerplate", "-b", default=None, help="Plugin to add first")
    new.add_argument("--react-native-version", default=None)
    new.add_argument(
        "--jh-dir",
        default="",
        help="JHipster backend directory; its .yo-rc.json supplies defaults",
    )

    generate = sub.add_parser("generate", aliases=["g"], help="Generate code")
    generate.add_argument("kind", choices=["entity"])
    generate.add_argument("name", nargs="?", default="", help="Entity name")
    generate.add_argument(
        "--jh-dir",
        default="",
        help="Directory of the JHipster backend holding .jhipster/<Name>.json",
    )
    return parser


async def _generate_entity(args: argparse.Namespace, settings: Settings) -> None:
    if is_blank(args.name):
        print_info(f"{PROG} generate entity <name>\n")
        raise ValidationError("A name is required.")
    generator = EntityGenerator(settings=settings)
    await generator.generate(args.name, directory_override=args.jh_dir or None)


async def _new(args: argparse.Namespace, settings: Settings) -> None:
    if is_blank(args.name) and is_blank(args.jh_dir):
        print_info(f"{PROG} new <name> [--jh-dir=<backend>]\n")
        raise ValidationError("A name is required.")
    try:
        options = BootstrapOptions(
            name=args.name,
            auth_type=args.auth_type,
            search_engine=args.search_engine,
            dev_screens=args.dev_screens,
            animatable=args.animatable,
            skip_git=args.skip_git,
            skip_lint=args.skip_lint,
            boilerplate=args.boilerplate,
            react_native_version=args.react_native_version,
            debug=settings.debug,
            backend_dir=args.jh_dir or None,
        )
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid options: {exc}") from exc
    await Bootstrapper(settings=settings).run(options)


def run(argv: list[str] | None = None) -> int:
    """Parse *argv*, run the command and return the process exit code."""
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    if args.debug:
        settings.debug = True
    set_debug(settings.debug)

    command = _new if args.command == "new" else _generate_entity
    try:
        asyncio.run(command(args, settings))
    except ValidationError as exc:
        print_info(str(exc))
        return 0
    except ResolutionAborted as exc:
        print_warning(str(exc))
        return 130
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        return 1
    return 0


def main() -> None:
    """CLI entry point for ``python -m mobile_scaffold``."""
    sys.exit(run())


if __name__ == "__main__":
    main()
