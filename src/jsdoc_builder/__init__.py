"""jsdoc-builder - insert JSDoc comments into JavaScript/TypeScript sources."""

try:
    from importlib.metadata import version

    __version__ = version("jsdoc-builder")
except Exception:
    __version__ = "0.0.0.dev0+local"  # Fallback for development

from jsdoc_builder.pipeline import (  # noqa: E402
    GenerateOptions,
    generate_jsdoc,
    generate_jsdoc_for_files,
    generate_jsdoc_from_code,
)
from jsdoc_builder.plugin import JSDocBuilderPlugin, jsdoc_builder_plugin  # noqa: E402

__all__ = [
    "GenerateOptions",
    "JSDocBuilderPlugin",
    "generate_jsdoc",
    "generate_jsdoc_for_files",
    "generate_jsdoc_from_code",
    "jsdoc_builder_plugin",
]
