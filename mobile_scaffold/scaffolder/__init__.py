"""New-project scaffolding: templates, manifest merge and the bootstrap workflow."""

from mobile_scaffold.scaffolder.bootstrap import BootstrapOptions, Bootstrapper
from mobile_scaffold.scaffolder.manifest import merge_manifests
from mobile_scaffold.scaffolder.templates import TemplateRenderer

__all__ = [
    "BootstrapOptions",
    "Bootstrapper",
    "TemplateRenderer",
    "merge_manifests",
]
