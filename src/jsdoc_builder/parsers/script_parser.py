from dataclasses import dataclass

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from jsdoc_builder.models import Parameter
from jsdoc_builder.parsers.base import TypeOracle

FUNCTION_DECLARATION_TYPES = ("function_declaration", "generator_function_declaration")

# "function" is the pre-0.21 name of function_expression in tree-sitter-javascript
FUNCTION_EXPRESSION_TYPES = (
    "arrow_function",
    "function_expression",
    "function",
    "generator_function",
)

FUNCTION_LIKE_TYPES = FUNCTION_DECLARATION_TYPES + FUNCTION_EXPRESSION_TYPES + (
    "method_definition",
    "class_declaration",
    "class",
)


def _language_for_dialect(dialect: str) -> Language | None:
    if dialect in ("javascript", "jsx"):
        return Language(tree_sitter_javascript.language())
    if dialect == "typescript":
        return Language(tree_sitter_typescript.language_typescript())
    if dialect == "tsx":
        return Language(tree_sitter_typescript.language_tsx())
    return None


@dataclass
class SyntaxIndex:
    """A parsed script plus the optional semantic oracle built over it."""
    source: bytes
    tree: Tree
    dialect: str
    oracle: TypeOracle | None = None

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        """Source text of a node."""
        return extract_text(self.source, node.start_byte, node.end_byte)


class ScriptParser:
    """Parser for JavaScript/TypeScript source code using tree-sitter."""

    def __init__(self, dialect: str):
        language = _language_for_dialect(dialect)
        if language is None:
            raise ValueError(f"Unsupported dialect: {dialect}")
        self.dialect = dialect
        self.language = language
        self.parser = Parser(self.language)

    def parse(self, source_code: str) -> SyntaxIndex:
        """Parse script text into a SyntaxIndex without an oracle.

        Args:
            source_code: Script source text

        Returns:
            SyntaxIndex over the UTF-8 encoding of the text
        """
        source = bytes(source_code, "utf8")
        tree = self.parser.parse(source)
        return SyntaxIndex(source=source, tree=tree, dialect=self.dialect)


def extract_text(source: bytes, start_byte: int, end_byte: int) -> str:
    """Decode a byte span of the source."""
    return source[start_byte:end_byte].decode("utf-8", errors="replace")


def named_children(node: Node) -> list[Node]:
    """Named children of a node, without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def is_async(node: Node) -> bool:
    """Check whether a function-like node carries the async keyword."""
    return any(child.type == "async" for child in node.children)


def annotation_text(source: bytes, annotation: Node | None) -> str | None:
    """Return the type text of a ``: Type`` annotation node.

    Args:
        source: Script source bytes
        annotation: type_annotation node (or None)

    Returns:
        Annotation text without the leading colon, or None if absent
    """
    if annotation is None:
        return None
    text = extract_text(source, annotation.start_byte, annotation.end_byte).strip()
    if text.startswith(":"):
        text = text[1:].strip()
    return text or None


def extract_parameters(function_node: Node, source: bytes) -> list[Parameter]:
    """Extract the parameter list of a function-like node.

    Non-identifier parameters (destructuring patterns) get the positional
    name ``param<N>``, 1-indexed.

    Args:
        function_node: Function declaration, expression, or arrow function node
        source: Script source bytes

    Returns:
        List of Parameter objects with declared types where annotated
    """
    # Arrow functions with a single bare parameter: x => x
    single = function_node.child_by_field_name("parameter")
    if single is not None:
        return [Parameter(name=extract_text(source, single.start_byte, single.end_byte), node=single)]

    params_node = function_node.child_by_field_name("parameters")
    if params_node is None:
        return []

    parameters = []
    for child in named_children(params_node):
        position = len(parameters) + 1
        declared_type = None
        default_node = None
        pattern = child

        if child.type in ("required_parameter", "optional_parameter"):
            # TypeScript parameter: pattern, optional type annotation, optional value
            pattern = child.child_by_field_name("pattern")
            declared_type = annotation_text(source, child.child_by_field_name("type"))
            default_node = child.child_by_field_name("value")
        elif child.type == "assignment_pattern":
            # JavaScript default value: x = 1
            pattern = child.child_by_field_name("left")
            default_node = child.child_by_field_name("right")

        if pattern is None:
            continue

        rest = pattern.type == "rest_pattern"
        if rest:
            inner = named_children(pattern)
            pattern = inner[0] if inner else pattern

        if pattern.type == "identifier":
            name = extract_text(source, pattern.start_byte, pattern.end_byte)
        else:
            name = f"param{position}"

        parameters.append(Parameter(
            name=name,
            type=declared_type,
            rest=rest,
            node=child,
            default_node=default_node,
        ))

    return parameters


def extract_return_type(function_node: Node, source: bytes) -> str | None:
    """Extract the return type annotation of a function-like node.

    Returns:
        Return type as string, or None if no annotation.
    """
    return annotation_text(source, function_node.child_by_field_name("return_type"))
