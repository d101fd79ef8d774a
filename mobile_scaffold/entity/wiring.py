"""Connect generated entity files to the app.

The boilerplate sagas index, API service, fixture API, root reducer and
navigator carry marker comments such as::

    // mobile-scaffold-saga-redux-connect-needle

For every marker an entity snippet is rendered and inserted on the lines just
above it, indented like the marker.  Markers sit at the head of their lists,
so inserted entries always end with a comma.  A snippet already present in
the file is not inserted again; re-running the generator for an entity
leaves the files unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mobile_scaffold.scaffolder.templates import TemplateRenderer
from mobile_scaffold.utils import print_debug, print_warning

MARKER_PREFIX = "// mobile-scaffold-"

SAGAS_INDEX = "App/Sagas/index.js"
API_SERVICE = "App/Services/Api.js"
FIXTURE_API = "App/Services/FixtureApi.js"
REDUX_INDEX = "App/Redux/index.js"
NAVIGATION = "App/Navigation/AppNavigation.js"


@dataclass(frozen=True)
class Insertion:
    """A snippet template inserted above ``marker`` in ``path``."""

    path: str
    marker: str
    snippet: str


def _needle(name: str) -> str:
    return f"{MARKER_PREFIX}{name}-needle"


ENTITY_INSERTIONS: list[Insertion] = [
    Insertion(
        SAGAS_INDEX,
        _needle("saga-redux-import"),
        "import { {{ entity.name }}Types } from '../Redux/{{ entity.name }}Redux'",
    ),
    Insertion(
        SAGAS_INDEX,
        _needle("saga-method-import"),
        "import { get{{ entity.name }}, getAll{{ entity.plural }}, update{{ entity.name }}, "
        "delete{{ entity.name }}{% if project.search_engine %}, search{{ entity.plural }}{% endif %} }"
        " from './{{ entity.name }}Sagas'",
    ),
    Insertion(
        SAGAS_INDEX,
        _needle("saga-redux-connect"),
        "{% set t = entity.camel | snake_case | upper %}"
        "takeLatest({{ entity.name }}Types.{{ t }}_REQUEST, get{{ entity.name }}, api),\n"
        "takeLatest({{ entity.name }}Types.{{ t }}_ALL_REQUEST, getAll{{ entity.plural }}, api),\n"
        "takeLatest({{ entity.name }}Types.{{ t }}_UPDATE_REQUEST, update{{ entity.name }}, api),\n"
        "{% if project.search_engine %}"
        "takeLatest({{ entity.name }}Types.{{ t }}_SEARCH_REQUEST, search{{ entity.plural }}, api),\n"
        "{% endif %}"
        "takeLatest({{ entity.name }}Types.{{ t }}_DELETE_REQUEST, delete{{ entity.name }}, api),",
    ),
    Insertion(
        API_SERVICE,
        _needle("api-import"),
        "import {{ entity.name }}Api from './{{ entity.name }}Api'",
    ),
    Insertion(
        API_SERVICE,
        _needle("api-export"),
        "...{{ entity.name }}Api(api),",
    ),
    Insertion(
        FIXTURE_API,
        _needle("api-fixture"),
        "get{{ entity.name }}: () => ({ ok: true, data: require('../Fixtures/get{{ entity.name }}.json') }),\n"
        "getAll{{ entity.plural }}: () => ({ ok: true, data: require('../Fixtures/get{{ entity.plural }}.json') }),\n"
        "update{{ entity.name }}: () => ({ ok: true, data: require('../Fixtures/get{{ entity.name }}.json') }),\n"
        "create{{ entity.name }}: () => ({ ok: true, data: require('../Fixtures/get{{ entity.name }}.json') }),\n"
        "{% if project.search_engine %}"
        "search{{ entity.plural }}: () => ({ ok: true, data: require('../Fixtures/get{{ entity.plural }}.json') }),\n"
        "{% endif %}"
        "delete{{ entity.name }}: () => ({ ok: true }),",
    ),
    Insertion(
        REDUX_INDEX,
        _needle("redux-store-import"),
        "{{ entity.plural_camel }}: require('./{{ entity.name }}Redux').reducer,",
    ),
    Insertion(
        NAVIGATION,
        _needle("navigation-import"),
        "import {{ entity.name }}EntityScreen from '../Containers/{{ entity.name }}EntityScreen'\n"
        "import {{ entity.name }}EntityDetailScreen from '../Containers/{{ entity.name }}EntityDetailScreen'\n"
        "import {{ entity.name }}EntityEditScreen from '../Containers/{{ entity.name }}EntityEditScreen'",
    ),
    Insertion(
        NAVIGATION,
        _needle("navigation-declaration"),
        "{{ entity.name }}Entity: { screen: {{ entity.name }}EntityScreen, "
        "navigationOptions: { title: '{{ entity.plural }}' } },\n"
        "{{ entity.name }}EntityDetail: { screen: {{ entity.name }}EntityDetailScreen, "
        "navigationOptions: { title: 'View {{ entity.name }}' } },\n"
        "{{ entity.name }}EntityEdit: { screen: {{ entity.name }}EntityEditScreen, "
        "navigationOptions: { title: 'Edit {{ entity.name }}' } },",
    ),
]


def insert_before_marker(content: str, marker: str, snippet: str) -> str | None:
    """Return *content* with *snippet* inserted above the *marker* line.

    Returns ``None`` when the marker is absent.  When the indented snippet is
    already present the content is returned unchanged.
    """
    lines = content.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if line.strip() != marker:
            continue
        indent = line[: len(line) - len(line.lstrip())]
        block = "".join(f"{indent}{part}\n" for part in snippet.splitlines())
        if block in content:
            return content
        return "".join(lines[:index]) + block + "".join(lines[index:])
    return None


def wire_entity(
    project_root: Path,
    context: dict[str, Any],
    renderer: TemplateRenderer,
    insertions: list[Insertion] | None = None,
) -> list[Path]:
    """Apply every insertion for one entity; returns the files that changed.

    A missing file or marker is reported as a warning and skipped, so apps
    whose index files were replaced by hand still get the entity files.
    """
    originals: dict[Path, str] = {}
    contents: dict[Path, str] = {}
    missing: set[Path] = set()
    for insertion in insertions if insertions is not None else ENTITY_INSERTIONS:
        path = project_root / insertion.path
        if path in missing:
            continue
        if path not in contents:
            if not path.is_file():
                print_warning(f"Skipping {insertion.path}: file not found")
                missing.add(path)
                continue
            originals[path] = contents[path] = path.read_text(encoding="utf-8")

        snippet = renderer.render_string(insertion.snippet, context)
        updated = insert_before_marker(contents[path], insertion.marker, snippet)
        if updated is None:
            print_warning(f"Skipping {insertion.path}: marker '{insertion.marker}' not found")
            continue
        contents[path] = updated

    changed: list[Path] = []
    for path, content in contents.items():
        if content != originals[path]:
            path.write_text(content, encoding="utf-8")
            print_debug(f"Updated {path}")
            changed.append(path)
    return changed
