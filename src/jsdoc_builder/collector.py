"""Finding declarations that need a doc comment."""

import re

from tree_sitter import Node

from jsdoc_builder.models import DocumentableTarget
from jsdoc_builder.parsers.script_parser import (
    FUNCTION_DECLARATION_TYPES,
    FUNCTION_EXPRESSION_TYPES,
    SyntaxIndex,
    extract_parameters,
    extract_return_type,
    is_async,
)

ANONYMOUS_NAME = "anonymous"

DECLARATION_LIST_TYPES = ("lexical_declaration", "variable_declaration")

# Declarations in these heads are not documented
LOOP_HEAD_TYPES = ("for_statement", "for_in_statement")

TRIVIA_COMMENT_RE = re.compile(rb"//[^\n]*|/\*.*?(?:\*/|\Z)", re.DOTALL)


def is_doc_comment(text: bytes) -> bool:
    return text.startswith(b"/**") and text != b"/**/"


def has_doc_comment(anchor: Node, source: bytes) -> bool:
    """Check whether a node is already preceded by a block doc comment.

    Looks at the comment siblings directly before the anchor, then scans the
    leading trivia between the previous non-comment sibling and the anchor.

    Args:
        anchor: The node a comment would be inserted before
        source: Script source bytes

    Returns:
        True if a ``/**`` comment leads the anchor
    """
    sibling = anchor.prev_sibling
    while sibling is not None and sibling.type == "comment":
        if is_doc_comment(source[sibling.start_byte:sibling.end_byte]):
            return True
        sibling = sibling.prev_sibling

    if sibling is not None:
        trivia_start = sibling.end_byte
    elif anchor.parent is not None:
        trivia_start = anchor.parent.start_byte
    else:
        trivia_start = 0
    return any(
        is_doc_comment(match.group())
        for match in TRIVIA_COMMENT_RE.finditer(source, trivia_start, anchor.start_byte)
    )


class TargetCollector:
    """Collects documentable declarations from a syntax tree."""

    def __init__(self, index: SyntaxIndex):
        self.index = index

    def collect(self) -> list[DocumentableTarget]:
        """Walk the tree depth-first and return undocumented targets.

        Returns:
            Targets in document order
        """
        targets = []
        seen_keys = set()

        stack = [self.index.root]
        while stack:
            node = stack.pop()
            target = self._target_for(node)
            if target is not None and target.identity_key not in seen_keys:
                seen_keys.add(target.identity_key)
                targets.append(target)
            stack.extend(reversed(node.children))

        return targets

    def _target_for(self, node: Node) -> DocumentableTarget | None:
        if node.type in FUNCTION_DECLARATION_TYPES:
            name_node = node.child_by_field_name("name")
            if name_node is None:
                return None
            return self._build_target(node, name_node, self._lift_export(node))

        if node.type == "variable_declarator":
            name_node = node.child_by_field_name("name")
            value = node.child_by_field_name("value")
            if name_node is None:
                return None
            if value is None or value.type not in FUNCTION_EXPRESSION_TYPES:
                return None
            anchor = self._declarator_anchor(node)
            if anchor is None:
                return None
            return self._build_target(value, name_node, anchor)

        return None

    def _declarator_anchor(self, declarator: Node) -> Node | None:
        """Pick the statement a variable-bound function is documented on.

        Returns None for declarations in a loop head.
        """
        declaration = declarator.parent
        if declaration is None or declaration.type not in DECLARATION_LIST_TYPES:
            return declarator

        parent = declaration.parent
        if parent is not None and parent.type in LOOP_HEAD_TYPES:
            return None

        declarators = [c for c in declaration.named_children if c.type == "variable_declarator"]
        if len(declarators) != 1:
            return declarator

        return self._lift_export(declaration)

    def _lift_export(self, node: Node) -> Node:
        parent = node.parent
        if parent is not None and parent.type == "export_statement":
            declaration = parent.child_by_field_name("declaration")
            if declaration is not None and declaration.id == node.id:
                return parent
        return node

    def _build_target(self, function_node: Node, name_node: Node, anchor: Node) -> DocumentableTarget | None:
        source = self.index.source
        if has_doc_comment(anchor, source):
            return None

        if name_node.type in ("identifier", "type_identifier"):
            name = self.index.text(name_node)
        else:
            name = ANONYMOUS_NAME

        return_type = extract_return_type(function_node, source)

        return DocumentableTarget(
            identity_key=(anchor.type, anchor.start_byte, anchor.end_byte),
            name=name,
            parameters=extract_parameters(function_node, source),
            return_type=return_type,
            snippet=self.index.text(anchor),
            anchor_offset=anchor.start_byte,
            is_async=is_async(function_node),
            return_declared=return_type is not None,
            function_node=function_node,
        )
