"""mobile-scaffold -- React Native scaffolding for JHipster backends.

Two workflows are exposed:

* ``Bootstrapper`` creates a new app from the boilerplate templates, merges
  its ``package.json`` into the base install and runs the plugin chain.
* ``EntityGenerator`` locates a JHipster entity definition
  (``.jhipster/<Name>.json``) and renders screens, redux, sagas, an API
  service stub, fixtures and tests for it.

Quick usage::

    from mobile_scaffold import EntityGenerator

    generator = EntityGenerator(project_root="./MyApp")
    written = await generator.generate("Foo", directory_override="../backend")
"""

__version__ = "0.4.0"

from mobile_scaffold.config import ConfigStore, Settings  # noqa: E402
from mobile_scaffold.entity.generator import EntityGenerator  # noqa: E402
from mobile_scaffold.entity.locator import EntityLocator, locate_entity  # noqa: E402
from mobile_scaffold.scaffolder.bootstrap import BootstrapOptions, Bootstrapper  # noqa: E402
from mobile_scaffold.scaffolder.manifest import merge_manifests  # noqa: E402

__all__ = [
    "BootstrapOptions",
    "Bootstrapper",
    "ConfigStore",
    "EntityGenerator",
    "EntityLocator",
    "Settings",
    "locate_entity",
    "merge_manifests",
]
