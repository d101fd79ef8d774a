"""Shared utility functions for mobile-scaffold.

Provides async command execution, JSON I/O, name-case helpers, and
Rich-based console reporting.  Functions raise ``ScaffoldError`` subclasses
with clear messages when something goes wrong.
"""

from __future__ import annotations

import asyncio
import json
import os
import re
import shutil
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.rule import Rule

from mobile_scaffold.errors import CommandError, ParseError

console = Console()

_debug_enabled = False


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: str | list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    capture: bool = True,
    quiet: bool = False,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a shell command asynchronously.

    Args:
        cmd: Shell command string or list of arguments.
        cwd: Working directory for the child process.
        timeout: Optional wall-clock seconds before the process is killed.
            ``None`` waits for the process however long it takes.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams).
        quiet: Discard stdout/stderr entirely.  ``react-native link`` hangs
            when attached to a terminal, so it is always run quietly.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    if quiet:
        out_pipe = asyncio.subprocess.DEVNULL
    else:
        out_pipe = asyncio.subprocess.PIPE if capture else None
    cmd_str = cmd if isinstance(cmd, str) else " ".join(cmd)
    print_debug(f"$ {cmd_str}")

    if isinstance(cmd, list):
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=out_pipe,
            stderr=out_pipe,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )
    else:
        process = await asyncio.create_subprocess_shell(
            cmd,
            stdout=out_pipe,
            stderr=out_pipe,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {cmd_str}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


async def run_checked(
    cmd: str | list[str],
    cwd: str | Path | None = None,
    capture: bool = True,
    quiet: bool = False,
) -> str:
    """Run *cmd* and raise ``CommandError`` on a non-zero exit code.

    Returns the captured stdout.
    """
    returncode, stdout, stderr = await run_command(
        cmd, cwd=cwd, capture=capture, quiet=quiet
    )
    if returncode != 0:
        cmd_str = cmd if isinstance(cmd, str) else " ".join(cmd)
        raise CommandError(cmd_str, returncode, stderr)
    return stdout


def which(program: str) -> str | None:
    """Return the full path of *program* on ``PATH`` or ``None``."""
    return shutil.which(program)


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def is_blank(value: str | None) -> bool:
    """Return ``True`` for ``None``, empty, or whitespace-only strings."""
    return value is None or not str(value).strip()


def _split_words(value: str) -> list[str]:
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", value)
    spaced = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1 \2", spaced)
    return [w for w in re.split(r"[^A-Za-z0-9]+", spaced) if w]


def pascal_case(value: str) -> str:
    """Convert ``foo-bar``, ``foo_bar`` or ``fooBar`` to ``FooBar``.

    Examples::

        pascal_case("field test entity") -> "FieldTestEntity"
        pascal_case("fooBar")            -> "FooBar"
    """
    return "".join(w[0].upper() + w[1:].lower() for w in _split_words(value))


def camel_case(value: str) -> str:
    """Convert to ``fooBar``."""
    pascal = pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


def kebab_case(value: str) -> str:
    """Convert to ``foo-bar``."""
    return "-".join(w.lower() for w in _split_words(value))


def snake_case(value: str) -> str:
    """Convert to ``foo_bar``."""
    return "_".join(w.lower() for w in _split_words(value))


def pluralize(word: str) -> str:
    """Naive English plural used for entity collection names."""
    if not word:
        return word
    lower = word.lower()
    if lower.endswith("y") and lower[-2:-1] not in ("a", "e", "i", "o", "u"):
        return word[:-1] + "ies"
    if lower.endswith(("s", "sh", "ch", "x", "z")):
        return word + "es"
    return word + "s"


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def parse_json(raw: str, source: str = "<string>") -> Any:
    """Parse *raw* JSON text, raising ``ParseError`` on malformed input."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON in {source}: {exc}", source=source) from exc


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON object from *path*.

    Raises:
        FileNotFoundError: If the file does not exist.
        ParseError: If the file is not valid JSON or not a JSON object.
    """
    file_path = Path(path)
    raw = file_path.read_text(encoding="utf-8")
    data = parse_json(raw, source=str(file_path))
    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object in {file_path}", source=str(file_path))
    return data


def write_json(data: Any, path: str | Path, indent: int | str = 2) -> Path:
    """Write *data* as pretty-printed JSON, creating parent directories."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(data, indent=indent, ensure_ascii=False) + "\n"
    file_path.write_text(content, encoding="utf-8")
    return file_path


def append_text(path: str | Path, text: str) -> bool:
    """Append *text* to *path*.

    Failures are reported as a warning and swallowed; returns whether the
    write succeeded.
    """
    try:
        with Path(path).open("a", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as exc:
        print_warning(f"Could not append to {path}: {exc}")
        return False
    return True


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    if seconds < 0:
        return "0.0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    if hours > 0 or minutes > 0:
        parts.append(f"{int(secs)}s")
    else:
        parts.append(f"{secs:.1f}s")

    return " ".join(parts)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def set_debug(enabled: bool) -> None:
    """Toggle output of ``print_debug`` messages."""
    global _debug_enabled
    _debug_enabled = enabled


def print_header(title: str) -> None:
    """Print a full-width rule with *title*."""
    console.print()
    console.print(Rule(f"[bold cyan] {title} [/bold cyan]", style="cyan"))
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_info(message: str) -> None:
    """Print a plain informational message."""
    console.print(message)


def print_debug(message: str) -> None:
    """Print a dim message when debug output is enabled."""
    if _debug_enabled:
        console.print(f"[dim]{message}[/dim]")
