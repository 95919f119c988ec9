"""Syntax parsing for JavaScript/TypeScript dialects."""

import logging
from collections.abc import Callable

from jsdoc_builder.parsers.base import TypeOracle
from jsdoc_builder.parsers.script_parser import ScriptParser, SyntaxIndex

logger = logging.getLogger(__name__)

SUPPORTED_DIALECTS = ("javascript", "jsx", "typescript", "tsx")

OracleFactory = Callable[[str, str], TypeOracle | None]

_parsers: dict[str, ScriptParser] = {}


def get_parser_for_dialect(dialect: str) -> ScriptParser | None:
    """Get the parser for a script dialect.

    Args:
        dialect: One of javascript, jsx, typescript, tsx

    Returns:
        A (cached) ScriptParser, or None if the dialect is not supported
    """
    if dialect not in SUPPORTED_DIALECTS:
        return None
    if dialect not in _parsers:
        _parsers[dialect] = ScriptParser(dialect)
    return _parsers[dialect]


def build_syntax_index(
    script_text: str,
    dialect: str,
    oracle_factory: OracleFactory | None = None,
) -> SyntaxIndex:
    """Parse script text and attach a semantic oracle when one can be built.

    Oracle construction never raises: any failure is logged and the index is
    returned without an oracle, so inference falls back to syntax only.

    Args:
        script_text: The script source text
        dialect: Script dialect
        oracle_factory: Callable building a TypeOracle from (text, dialect)

    Returns:
        SyntaxIndex for the text

    Raises:
        ValueError: If the dialect is not supported
    """
    parser = get_parser_for_dialect(dialect)
    if parser is None:
        raise ValueError(f"Unsupported dialect: {dialect}")

    index = parser.parse(script_text)

    if oracle_factory is not None:
        try:
            index.oracle = oracle_factory(script_text, dialect)
        except Exception as e:
            logger.warning(f"Type oracle unavailable, using syntax-only inference: {e}")
            index.oracle = None

    return index


__all__ = [
    "OracleFactory",
    "ScriptParser",
    "SUPPORTED_DIALECTS",
    "SyntaxIndex",
    "TypeOracle",
    "build_syntax_index",
    "get_parser_for_dialect",
]
