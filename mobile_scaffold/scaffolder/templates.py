"""Jinja2 template rendering for project and entity scaffolding.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``mobile_scaffold/scaffolder/templates/`` directory and renders them with
project- or entity-specific context data.  Supports single-file rendering,
batch rendering of ``(template, target)`` pairs, and copying the static
(non-template) files that sit next to the templates.
"""

from __future__ import annotations

import asyncio
import json
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from mobile_scaffold.utils import camel_case, kebab_case, pascal_case, pluralize, snake_case


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

TEMPLATE_SUFFIX = ".j2"


@dataclass(frozen=True)
class TemplateTarget:
    """One entry of a render batch."""

    template: str
    target: str


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Undefined variables raise instead of rendering as
    empty strings, so a template/context mismatch fails loudly.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["pascal_case"] = pascal_case
        self.env.filters["camel_case"] = camel_case
        self.env.filters["kebab_case"] = kebab_case
        self.env.filters["snake_case"] = snake_case
        self.env.filters["pluralize"] = pluralize
        self.env.filters["tojson_pretty"] = _tojson_pretty_filter

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"boilerplate/package.json.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(**context)

    # -- File-based rendering (async) --------------------------------------

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically.  Returns the output
        path.
        """
        content = self.render(template_path, context)
        out = Path(output_path)
        await asyncio.to_thread(_write_file, out, content)
        return out

    async def render_batch(
        self,
        targets: list[TemplateTarget],
        output_dir: str | Path,
        context: dict[str, Any],
        *,
        prefix: str = "",
    ) -> list[Path]:
        """Render each ``TemplateTarget`` into *output_dir*, in order.

        Args:
            targets: Template/target pairs.  ``target`` is relative to
                *output_dir*; ``template`` is relative to *prefix*.
            output_dir: Root directory for the rendered files.
            context: Template context variables.
            prefix: Subdirectory of the template root holding the templates.

        Returns:
            List of written file paths.
        """
        written: list[Path] = []
        out_base = Path(output_dir)
        for item in targets:
            template_key = f"{prefix}/{item.template}" if prefix else item.template
            path = await self.render_to_file(template_key, out_base / item.target, context)
            written.append(path)
        return written

    # -- Static files -------------------------------------------------------

    async def copy_static(self, source_prefix: str, output_dir: str | Path) -> Path:
        """Copy every non-template file under *source_prefix* to *output_dir*.

        Existing files are overwritten; ``*.j2`` files are skipped because
        they are rendered separately.
        """
        source = self.template_dir / source_prefix
        out = Path(output_dir)
        await asyncio.to_thread(
            shutil.copytree,
            source,
            out,
            ignore=shutil.ignore_patterns(f"*{TEMPLATE_SUFFIX}"),
            dirs_exist_ok=True,
        )
        return out


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _tojson_pretty_filter(value: Any, indent: int = 2) -> str:
    """Serialise *value* as indented JSON for ``.json`` templates."""
    return json.dumps(value, indent=indent, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
