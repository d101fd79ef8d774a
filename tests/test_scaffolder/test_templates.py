"""Tests for the Jinja2 TemplateRenderer."""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import UndefinedError

from mobile_scaffold.scaffolder.bootstrap import BOILERPLATE_TEMPLATES
from mobile_scaffold.scaffolder.templates import TemplateRenderer, TemplateTarget


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A small template tree with one template and two static files."""
    root = tmp_path / "templates"
    (root / "kit" / "App" / "Themes").mkdir(parents=True)
    (root / "kit" / "App" / "Themes" / "Colors.js").write_text("export default {}\n", encoding="utf-8")
    (root / "kit" / "App" / "Config.js.j2").write_text(
        "export const name = '{{ name }}'\n", encoding="utf-8"
    )
    (root / "kit" / "README.md").write_text("# kit\n", encoding="utf-8")
    return root


@pytest.fixture
def renderer(template_dir: Path) -> TemplateRenderer:
    return TemplateRenderer(template_dir)


class TestFilters:
    @pytest.mark.parametrize(
        "expression, expected",
        [
            ("{{ 'bank account' | pascal_case }}", "BankAccount"),
            ("{{ 'BankAccount' | camel_case }}", "bankAccount"),
            ("{{ 'BankAccount' | kebab_case }}", "bank-account"),
            ("{{ 'bankAccount' | snake_case | upper }}", "BANK_ACCOUNT"),
            ("{{ 'Category' | pluralize }}", "Categories"),
        ],
    )
    def test_case_filters(self, renderer: TemplateRenderer, expression: str, expected: str):
        assert renderer.render_string(expression, {}) == expected

    def test_tojson_pretty(self, renderer: TemplateRenderer):
        out = renderer.render_string("{{ data | tojson_pretty }}", {"data": {"a": 1}})
        assert out == '{\n  "a": 1\n}'

    def test_no_html_escaping(self, renderer: TemplateRenderer):
        assert renderer.render_string("{{ v }}", {"v": "<View>"}) == "<View>"

    def test_quotes_survive(self, renderer: TemplateRenderer):
        out = renderer.render_string("import {{ n }} from './{{ n }}'", {"n": "Foo"})
        assert out == "import Foo from './Foo'"


class TestRendering:
    def test_undefined_variable_raises(self, renderer: TemplateRenderer):
        with pytest.raises(UndefinedError):
            renderer.render("kit/App/Config.js.j2", {})

    @pytest.mark.asyncio
    async def test_render_batch(self, renderer: TemplateRenderer, tmp_path: Path):
        out = tmp_path / "out"
        written = await renderer.render_batch(
            [
                TemplateTarget("App/Config.js.j2", "App/Config/AppConfig.js"),
                TemplateTarget("App/Config.js.j2", "index.js"),
            ],
            out,
            {"name": "MyApp"},
            prefix="kit",
        )
        assert written == [out / "App" / "Config" / "AppConfig.js", out / "index.js"]
        assert (out / "index.js").read_text(encoding="utf-8") == "export const name = 'MyApp'\n"

    @pytest.mark.asyncio
    async def test_copy_static_skips_templates(self, renderer: TemplateRenderer, tmp_path: Path):
        out = tmp_path / "out"
        (out / "App" / "Themes").mkdir(parents=True)
        (out / "App" / "Themes" / "Colors.js").write_text("old\n", encoding="utf-8")

        await renderer.copy_static("kit", out)

        assert (out / "App" / "Themes" / "Colors.js").read_text(encoding="utf-8") == "export default {}\n"
        assert (out / "README.md").is_file()
        assert not (out / "App" / "Config.js.j2").exists()


class TestPackagedTemplates:
    def test_every_boilerplate_template_is_rendered(self):
        root = TemplateRenderer().template_dir / "boilerplate"
        packaged = {p.relative_to(root).as_posix() for p in root.rglob("*.j2")}
        assert packaged == {t.template for t in BOILERPLATE_TEMPLATES} | {"package.json.j2", "ignite.json.j2"}
