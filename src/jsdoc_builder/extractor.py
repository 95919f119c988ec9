"""Locating the executable script inside a source unit."""

import re
from pathlib import PurePosixPath

from jsdoc_builder.models import ScriptRange, SourceUnit

CONTAINER_DIALECTS = {"vue"}

_EXTENSION_DIALECT_MAP = {
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "jsx",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".vue": "vue",
}

_SCRIPT_LANG_MAP = {
    "js": "javascript",
    "javascript": "javascript",
    "jsx": "jsx",
    "ts": "typescript",
    "typescript": "typescript",
    "tsx": "tsx",
}

DEFAULT_DIALECT = "typescript"

SCRIPT_BLOCK_RE = re.compile(r"<script\b([^>]*)>(.*?)</script\s*>", re.IGNORECASE | re.DOTALL)
LANG_ATTR_RE = re.compile(r"""\blang\s*=\s*["']?([\w-]+)""", re.IGNORECASE)


def strip_query(identifier: str) -> str:
    """Drop a ``?query`` suffix from a module id."""
    query_index = identifier.find("?")
    return identifier[:query_index] if query_index >= 0 else identifier


def detect_dialect(identifier: str) -> str:
    """Map a path or virtual id to a dialect name by its extension."""
    normalized = strip_query(identifier).replace("\\", "/")
    suffix = PurePosixPath(normalized).suffix.lower()
    return _EXTENSION_DIALECT_MAP.get(suffix, DEFAULT_DIALECT)


def extract_script(unit: SourceUnit) -> ScriptRange | None:
    """Isolate the script text of a source unit.

    Args:
        unit: The source unit to inspect

    Returns:
        ScriptRange covering the script content, or None if a container
        file holds no script block.
    """
    if unit.dialect not in CONTAINER_DIALECTS:
        return ScriptRange(
            script_text=unit.text,
            start_offset=0,
            end_offset=len(unit.text),
            dialect=unit.dialect,
        )

    match = SCRIPT_BLOCK_RE.search(unit.text)
    if match is None:
        return None

    start, end = match.span(2)
    return ScriptRange(
        script_text=match.group(2),
        start_offset=start,
        end_offset=end,
        wrapper_prefix=unit.text[:start],
        wrapper_suffix=unit.text[end:],
        dialect=_script_dialect(match.group(1)),
    )


def _script_dialect(attributes: str) -> str:
    lang = LANG_ATTR_RE.search(attributes)
    if lang is None:
        return "javascript"
    return _SCRIPT_LANG_MAP.get(lang.group(1).lower(), "javascript")
