"""Merge the template ``package.json`` into the one created by the base install.

The manifest is treated as a tagged structure: three well-known mappings
(``dependencies``, ``devDependencies``, ``scripts``) that are merged key by
key, plus an ordered bag of every other top-level key.

Precedence:

* Well-known mappings -- union of both sides, the fragment wins on a
  conflicting key (template-pinned versions beat generic defaults).
* Any other key -- the base wins; the fragment only fills gaps, so fields the
  base installer owns (``name``, ``version``) are never clobbered.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mobile_scaffold.errors import ParseError
from mobile_scaffold.utils import load_json, parse_json, write_json

DEPENDENCIES = "dependencies"
DEV_DEPENDENCIES = "devDependencies"
SCRIPTS = "scripts"

MERGED_KEYS: tuple[str, ...] = (DEPENDENCIES, DEV_DEPENDENCIES, SCRIPTS)


@dataclass
class Manifest:
    """A ``package.json`` split into well-known mappings and extra keys.

    A well-known mapping is ``None`` when the key is absent from the
    document, which keeps absent and empty (``{}``) distinguishable.
    """

    dependencies: dict[str, Any] | None = None
    dev_dependencies: dict[str, Any] | None = None
    scripts: dict[str, Any] | None = None
    extras: dict[str, Any] = field(default_factory=dict)
    key_order: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "<manifest>") -> "Manifest":
        if not isinstance(data, dict):
            raise ParseError(f"Expected a JSON object in {source}", source=source)
        known: dict[str, dict[str, Any] | None] = {}
        for key in MERGED_KEYS:
            value = data.get(key)
            if value is not None and not isinstance(value, dict):
                raise ParseError(f"'{key}' must be an object in {source}", source=source)
            known[key] = dict(value) if value is not None else None
        return cls(
            dependencies=known[DEPENDENCIES],
            dev_dependencies=known[DEV_DEPENDENCIES],
            scripts=known[SCRIPTS],
            extras={k: v for k, v in data.items() if k not in MERGED_KEYS},
            key_order=list(data.keys()),
        )

    def known(self) -> dict[str, dict[str, Any] | None]:
        return {
            DEPENDENCIES: self.dependencies,
            DEV_DEPENDENCIES: self.dev_dependencies,
            SCRIPTS: self.scripts,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialise back to a plain mapping, honouring ``key_order``."""
        values: dict[str, Any] = {k: v for k, v in self.known().items() if v is not None}
        values.update(self.extras)
        ordered: dict[str, Any] = {}
        for key in self.key_order:
            if key in values:
                ordered[key] = values[key]
        for key, value in values.items():
            ordered.setdefault(key, value)
        return ordered


def _union(base: dict[str, Any] | None, fragment: dict[str, Any] | None) -> dict[str, Any] | None:
    if base is None and fragment is None:
        return None
    return {**(base or {}), **(fragment or {})}


def merge(base: Manifest, fragment: Manifest) -> Manifest:
    """Merge two ``Manifest`` values; see the module docstring for precedence."""
    extras = dict(base.extras)
    for key, value in fragment.extras.items():
        if key not in extras:
            extras[key] = value

    key_order = list(base.key_order)
    key_order.extend(k for k in fragment.key_order if k not in key_order)

    return Manifest(
        dependencies=_union(base.dependencies, fragment.dependencies),
        dev_dependencies=_union(base.dev_dependencies, fragment.dev_dependencies),
        scripts=_union(base.scripts, fragment.scripts),
        extras=extras,
        key_order=key_order,
    )


def merge_manifests(base: dict[str, Any], fragment: dict[str, Any]) -> dict[str, Any]:
    """Merge plain manifest mappings.  Neither input is modified."""
    return merge(
        Manifest.from_dict(base, source="base manifest"),
        Manifest.from_dict(fragment, source="manifest fragment"),
    ).to_dict()


def merge_manifest_file(path: str | Path, fragment_text: str) -> dict[str, Any]:
    """Merge rendered *fragment_text* into the manifest at *path* and write it.

    Raises:
        FileNotFoundError: The base manifest does not exist.  The base
            install step always creates it, so this is a broken precondition.
        ParseError: Either document is not a valid JSON object.
    """
    manifest_path = Path(path)
    base = load_json(manifest_path)
    fragment = parse_json(fragment_text, source="rendered package.json")
    merged = merge_manifests(base, fragment)
    write_json(merged, manifest_path, indent=2)
    return merged
