"""mobile-scaffold configuration.

Two layers live here:

* ``Settings`` -- typed, validated tool settings (file locations, template
  directory, pinned React Native version).  A Pydantic v2 model so values
  coming from the environment are validated at construction time.
* ``ConfigStore`` -- the per-project JSON document (``ignite/ignite.json``)
  that remembers choices between runs, such as the backend directory that
  holds the JHipster entity definitions.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from mobile_scaffold.utils import load_json, write_json

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "scaffolder" / "templates"

# Keys merged into the project config once the plugin itself is installed.
PLUGIN_DEFAULTS: dict[str, Any] = {
    "tests": True,
    "generators": {
        "entity": "mobile-scaffold",
    },
}


class Settings(BaseModel):
    """Tool-level settings.

    Paths are relative to the project root unless absolute.  Instances are
    created once by the CLI and passed to the bootstrapper and the entity
    generator.
    """

    config_path: Path = Field(default=Path("ignite/ignite.json"))
    entity_cache_dir: Path = Field(default=Path(".jhipster"))
    manifest_name: str = Field(default="package.json")
    template_dir: Path = Field(default=DEFAULT_TEMPLATE_DIR)
    react_native_version: str = Field(default="0.59.10")
    boilerplate: str = Field(default="ignite-jhipster")
    cookies_module_version: str = Field(default="3.2.0")
    debug: bool = Field(default=False)

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def config_file(self, project_root: Path) -> Path:
        """Absolute location of the project config file."""
        return Path(project_root) / self.config_path

    def entity_cache(self, project_root: Path) -> Path:
        """Absolute location of the project-local entity cache directory."""
        return Path(project_root) / self.entity_cache_dir

    def manifest_file(self, project_root: Path) -> Path:
        """Absolute location of the project's ``package.json``."""
        return Path(project_root) / self.manifest_name

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            MOBILE_SCAFFOLD_CONFIG_PATH, MOBILE_SCAFFOLD_TEMPLATE_DIR,
            MOBILE_SCAFFOLD_RN_VERSION, MOBILE_SCAFFOLD_BOILERPLATE,
            MOBILE_SCAFFOLD_DEBUG.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("MOBILE_SCAFFOLD_CONFIG_PATH"):
            kwargs["config_path"] = Path(os.environ["MOBILE_SCAFFOLD_CONFIG_PATH"])
        if os.environ.get("MOBILE_SCAFFOLD_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["MOBILE_SCAFFOLD_TEMPLATE_DIR"])
        if os.environ.get("MOBILE_SCAFFOLD_RN_VERSION"):
            kwargs["react_native_version"] = os.environ["MOBILE_SCAFFOLD_RN_VERSION"]
        if os.environ.get("MOBILE_SCAFFOLD_BOILERPLATE"):
            kwargs["boilerplate"] = os.environ["MOBILE_SCAFFOLD_BOILERPLATE"]
        debug = os.environ.get("MOBILE_SCAFFOLD_DEBUG", "").strip().lower()
        kwargs["debug"] = debug in ("1", "true", "yes", "on")
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# Project config persistence
# ---------------------------------------------------------------------------


def merge_config(current: dict[str, Any], partial: dict[str, Any]) -> dict[str, Any]:
    """Return *current* with *partial* laid over it.

    Precedence is top-level only: a key in *partial* replaces the value in
    *current* wholesale, nested mappings included.
    """
    merged = dict(current)
    for key, value in partial.items():
        merged[key] = value
    return merged


class ConfigStore:
    """Reads and writes the project config JSON document.

    The file is a developer convenience cache, not a system of record: writes
    are plain overwrites with no transactional guarantee.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> dict[str, Any]:
        """Return the stored mapping, or ``{}`` when no file exists yet.

        Raises:
            ParseError: If the file exists but is not a JSON object.
        """
        if not self.path.exists():
            return {}
        return load_json(self.path)

    def save(self, partial: dict[str, Any]) -> dict[str, Any]:
        """Shallow-merge *partial* into the stored mapping and persist it.

        Returns the merged mapping that was written.
        """
        merged = merge_config(self.load(), partial)
        write_json(merged, self.path, indent="\t")
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        return self.load().get(key, default)
