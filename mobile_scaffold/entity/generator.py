"""Per-entity code generation.

Given an entity name, locates its JHipster definition (see ``locator``) and
renders the client-side files for it: list/detail/edit screens, a redux
module, sagas, an API service stub, fixtures, and (unless the project config
sets ``"tests": false``) redux and saga tests.  The new files are then
registered with the app's sagas, API, reducers and navigator (see ``wiring``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from mobile_scaffold.config import ConfigStore, Settings
from mobile_scaffold.entity.locator import EntityLocator, LocatedEntity, normalize_entity_name
from mobile_scaffold.entity.models import EntityField, EntityRelationship
from mobile_scaffold.entity.wiring import wire_entity
from mobile_scaffold.prompts import Prompter
from mobile_scaffold.scaffolder.templates import TemplateRenderer, TemplateTarget
from mobile_scaffold.utils import camel_case, kebab_case, pluralize, print_success


# ---------------------------------------------------------------------------
# Type mapping
# ---------------------------------------------------------------------------

_JS_TYPE_MAP: dict[str, str] = {
    "String": "string",
    "UUID": "string",
    "TextBlob": "string",
    "Blob": "string",
    "AnyBlob": "string",
    "ImageBlob": "string",
    "Duration": "string",
    "Integer": "number",
    "Long": "number",
    "Float": "number",
    "Double": "number",
    "BigDecimal": "number",
    "Boolean": "boolean",
    "LocalDate": "date",
    "Instant": "datetime",
    "ZonedDateTime": "datetime",
}

_SAMPLE_VALUES: dict[str, Any] = {
    "string": "AAAAAAAAAA",
    "number": 1,
    "boolean": False,
    "date": "2019-01-01",
    "datetime": "2019-01-01T00:00:00Z",
}


def js_type(field: EntityField) -> str:
    """Form/input type used by the templates for *field*."""
    if field.is_enum:
        return "enum"
    return _JS_TYPE_MAP.get(field.field_type, "string")


def sample_value(field: EntityField) -> Any:
    """A deterministic fixture value for *field*."""
    if field.is_enum:
        return field.enum_values[0] if field.enum_values else None
    return _SAMPLE_VALUES[js_type(field)]


def _enrich_field(field: EntityField) -> dict[str, Any]:
    return {
        "name": field.field_name,
        "label": field.field_name[:1].upper() + field.field_name[1:],
        "type": field.field_type,
        "js_type": js_type(field),
        "required": field.required,
        "enum_values": field.enum_values,
        "sample": sample_value(field),
    }


def _enrich_relationship(rel: EntityRelationship) -> dict[str, Any]:
    return {
        "name": rel.relationship_name,
        "type": rel.relationship_type,
        "other_entity": rel.other_entity_name,
        "other_entity_pascal": rel.other_entity_name[:1].upper() + rel.other_entity_name[1:],
        "other_field": rel.other_entity_field,
        "is_collection": rel.is_collection,
    }


def build_entity_context(
    located: LocatedEntity, project_config: dict[str, Any]
) -> dict[str, Any]:
    """Template context for one entity."""
    name = located.name
    plural = pluralize(name)
    definition = located.definition
    fields = [_enrich_field(f) for f in definition.fields]
    sample = {"id": 1, **{f["name"]: f["sample"] for f in fields}}
    return {
        "entity": {
            "name": name,
            "camel": camel_case(name),
            "kebab": kebab_case(name),
            "plural": plural,
            "plural_camel": camel_case(plural),
            "plural_kebab": kebab_case(plural),
            "fields": fields,
            "relationships": [_enrich_relationship(r) for r in definition.relationships],
            "paginated": definition.paginated,
            "sample": sample,
            "sample_list": [sample, {**sample, "id": 2}],
        },
        "project": {
            "name": project_config.get("name", ""),
            "auth_type": project_config.get("authType", "jwt"),
            "search_engine": bool(project_config.get("searchEngine", False)),
        },
    }


def entity_targets(name: str, include_tests: bool = True) -> list[TemplateTarget]:
    """The files rendered for entity *name*."""
    plural = pluralize(name)
    targets = [
        TemplateTarget("App/Containers/EntityScreen.js.j2", f"App/Containers/{name}EntityScreen.js"),
        TemplateTarget(
            "App/Containers/EntityDetailScreen.js.j2",
            f"App/Containers/{name}EntityDetailScreen.js",
        ),
        TemplateTarget(
            "App/Containers/EntityEditScreen.js.j2",
            f"App/Containers/{name}EntityEditScreen.js",
        ),
        TemplateTarget(
            "App/Containers/Styles/EntityScreenStyle.js.j2",
            f"App/Containers/Styles/{name}EntityScreenStyle.js",
        ),
        TemplateTarget("App/Redux/EntityRedux.js.j2", f"App/Redux/{name}Redux.js"),
        TemplateTarget("App/Sagas/EntitySagas.js.j2", f"App/Sagas/{name}Sagas.js"),
        TemplateTarget("App/Services/EntityApi.js.j2", f"App/Services/{name}Api.js"),
        TemplateTarget("App/Fixtures/get-entity.json.j2", f"App/Fixtures/get{name}.json"),
        TemplateTarget("App/Fixtures/get-entities.json.j2", f"App/Fixtures/get{plural}.json"),
    ]
    if include_tests:
        targets += [
            TemplateTarget("Tests/Redux/EntityReduxTest.js.j2", f"Tests/Redux/{name}ReduxTest.js"),
            TemplateTarget("Tests/Sagas/EntitySagaTest.js.j2", f"Tests/Sagas/{name}SagaTest.js"),
        ]
    return targets


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class EntityGenerator:
    """Generates the client files for entities of one project."""

    def __init__(
        self,
        settings: Settings | None = None,
        prompter: Prompter | None = None,
        renderer: TemplateRenderer | None = None,
        project_root: str | Path | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.renderer = renderer or TemplateRenderer(self.settings.template_dir)
        self.config_store = ConfigStore(self.settings.config_file(self.project_root))
        self.locator = EntityLocator(
            self.config_store,
            project_root=self.project_root,
            prompter=prompter,
            settings=self.settings,
        )

    async def generate(self, name: str, directory_override: str | None = None) -> list[Path]:
        """Locate entity *name*, render its files and wire them into the app.

        Returns the rendered files followed by the app files that changed.
        """
        normalize_entity_name(name)
        located = await self.locator.locate(name, directory_override)
        project_config = self.config_store.load()
        context = build_entity_context(located, project_config)
        include_tests = project_config.get("tests", True) is not False

        written = await self.renderer.render_batch(
            entity_targets(located.name, include_tests),
            self.project_root,
            context,
            prefix="entity",
        )
        written += wire_entity(self.project_root, context, self.renderer)
        print_success("Entity successfully generated!")
        return written


async def generate_entity(
    name: str,
    *,
    directory_override: str | None = None,
    project_root: str | Path | None = None,
    prompter: Prompter | None = None,
    settings: Settings | None = None,
) -> list[Path]:
    """Convenience wrapper around :meth:`EntityGenerator.generate`."""
    generator = EntityGenerator(settings=settings, prompter=prompter, project_root=project_root)
    return await generator.generate(name, directory_override)
