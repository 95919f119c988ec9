"""Build-tool transform hook.

The plugin follows the shape bundlers such as Vite expect: a named object
with an ``enforce`` order, an optional ``apply`` phase and an async
``transform(code, id)`` returning ``{"code": ..., "map": None}`` or None.
"""

import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any

from jsdoc_builder.extractor import strip_query
from jsdoc_builder.pipeline import GenerateOptions, generate_jsdoc_from_code

FilterPattern = str | re.Pattern

DEFAULT_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".vue")

APPLY_PHASES = ("serve", "build", "both")


def matches_pattern(identifier: str, pattern: FilterPattern) -> bool:
    if isinstance(pattern, str):
        return pattern in identifier
    return pattern.search(identifier) is not None


@dataclass
class JSDocBuilderPlugin:
    """Inserts doc comments into modules as the bundler loads them."""
    include: list[FilterPattern] = field(default_factory=list)
    exclude: list[FilterPattern] = field(default_factory=lambda: [re.compile(r"node_modules")])
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    apply_phase: str = "both"
    options: GenerateOptions = field(default_factory=GenerateOptions)

    name: str = field(default="jsdoc-builder", init=False)
    enforce: str = field(default="pre", init=False)

    def __post_init__(self):
        if self.apply_phase not in APPLY_PHASES:
            raise ValueError(f"apply must be one of {APPLY_PHASES}, got {self.apply_phase!r}")

    @property
    def apply(self) -> str | None:
        """Phase the bundler should run the plugin in; None means always."""
        return None if self.apply_phase == "both" else self.apply_phase

    def should_process(self, identifier: str) -> bool:
        """Check whether a module id passes the extension and path filters."""
        if not identifier or identifier.startswith("\0"):
            return False

        normalized = identifier.replace("\\", "/")
        extensions = {ext.lower() for ext in self.extensions}
        if PurePosixPath(normalized).suffix.lower() not in extensions:
            return False

        if any(matches_pattern(normalized, pattern) for pattern in self.exclude):
            return False

        if not self.include:
            return True

        return any(matches_pattern(normalized, pattern) for pattern in self.include)

    async def transform(self, code: str, identifier: str) -> dict[str, Any] | None:
        """Transform a module.

        Args:
            code: Module source
            identifier: Module id, possibly with a ``?query`` suffix

        Returns:
            ``{"code": ..., "map": None}`` when the module changed, else None
        """
        target_id = strip_query(identifier)
        if not self.should_process(target_id):
            return None

        next_code = await generate_jsdoc_from_code(target_id, code, self.options)
        if next_code == code:
            return None

        return {"code": next_code, "map": None}


def jsdoc_builder_plugin(
    include: list[FilterPattern] | None = None,
    exclude: list[FilterPattern] | None = None,
    extensions: list[str] | None = None,
    apply: str = "both",
    **generate_options: Any,
) -> JSDocBuilderPlugin:
    """Create the transform plugin.

    Args:
        include: Only process ids matching one of these (all ids if empty)
        exclude: Skip ids matching any of these (defaults to node_modules)
        extensions: Recognized file extensions
        apply: "serve", "build" or "both"
        **generate_options: Fields of GenerateOptions

    Returns:
        Configured JSDocBuilderPlugin
    """
    plugin = JSDocBuilderPlugin(
        include=list(include) if include is not None else [],
        apply_phase=apply,
        options=GenerateOptions(**generate_options),
    )
    if exclude is not None:
        plugin.exclude = list(exclude)
    if extensions is not None:
        plugin.extensions = tuple(extensions)
    return plugin
