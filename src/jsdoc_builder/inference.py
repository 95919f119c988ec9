"""Best-effort type inference from syntax, with an optional semantic oracle."""

from abc import ABC, abstractmethod

from tree_sitter import Node

from jsdoc_builder.models import DocumentableTarget, Parameter
from jsdoc_builder.parsers.base import TypeOracle
from jsdoc_builder.parsers.script_parser import (
    FUNCTION_LIKE_TYPES,
    SyntaxIndex,
    extract_text,
    named_children,
)

ANY = "any"
VOID = "void"
ARRAY_TYPE = "any[]"
OBJECT_TYPE = "object"
FUNCTION_TYPE = "Function"
PROMISE_TYPE = "Promise<any>"
REST_TYPE = "any[]"

# Printed oracle results that carry no information
TRIVIAL_ORACLE_TYPES = ("", "{}")

LITERAL_TYPES = {
    "number": "number",
    "string": "string",
    "template_string": "string",
    "true": "boolean",
    "false": "boolean",
    "null": "null",
    "array": ARRAY_TYPE,
    "object": OBJECT_TYPE,
    "arrow_function": FUNCTION_TYPE,
    "function_expression": FUNCTION_TYPE,
    "function": FUNCTION_TYPE,
    "generator_function": FUNCTION_TYPE,
}

ARITHMETIC_OPERATORS = {"-", "*", "/", "%", "**", "<<", ">>", ">>>", "&", "|", "^"}
COMPARISON_OPERATORS = {
    "<", "<=", ">", ">=", "==", "===", "!=", "!==", "instanceof", "in",
}
LOGICAL_OPERATORS = {"&&", "||", "??"}


def split_union(type_text: str) -> list[str]:
    """Split a type on its top-level ``|`` separators."""
    parts = []
    depth = 0
    current = []
    previous = ""
    for char in type_text:
        if char in "<([{":
            depth += 1
        elif char in ">)]}" and not (char == ">" and previous == "="):
            depth -= 1
        previous = char
        if char == "|" and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    parts.append("".join(current).strip())
    return [part for part in parts if part]


def join_types(types: list[str]) -> str:
    """Join types into a flattened union of distinct members, first seen first."""
    members: list[str] = []
    for type_text in types:
        for member in split_union(type_text):
            if member not in members:
                members.append(member)
    if not members:
        return ANY
    return " | ".join(members)


def wrap_async(type_text: str) -> str:
    if type_text.startswith("Promise<"):
        return type_text
    return f"Promise<{type_text}>"


class TypeStrategy(ABC):
    """A way of guessing parameter and return types."""

    @abstractmethod
    def parameter_type(self, parameter: Parameter, env: dict[str, str]) -> str | None:
        """Type for an unannotated parameter, or None if this strategy can't tell."""
        pass

    @abstractmethod
    def return_type(self, target: DocumentableTarget, env: dict[str, str]) -> str | None:
        """Type for an unannotated return, or None if this strategy can't tell."""
        pass


class OracleTypeStrategy(TypeStrategy):
    """Asks the semantic oracle, ignoring empty-shape answers."""

    def __init__(self, oracle: TypeOracle):
        self.oracle = oracle

    def parameter_type(self, parameter, env):
        if parameter.node is None:
            return None
        return self._usable(self.oracle.resolve_parameter_type(parameter.node))

    def return_type(self, target, env):
        if target.function_node is None:
            return None
        return self._usable(self.oracle.resolve_return_type(target.function_node))

    @staticmethod
    def _usable(printed: str | None) -> str | None:
        if printed is None:
            return None
        printed = printed.strip()
        if printed in TRIVIAL_ORACLE_TYPES:
            return None
        return printed


class SyntacticTypeStrategy(TypeStrategy):
    """Heuristic inference from literals, operators and return statements."""

    def __init__(self, source: bytes):
        self.source = source

    def parameter_type(self, parameter, env):
        if parameter.default_node is not None:
            return self.expression_type(parameter.default_node, env)
        if parameter.rest:
            return REST_TYPE
        return ANY

    def return_type(self, target, env):
        function_node = target.function_node
        if function_node is None:
            return VOID

        body = function_node.child_by_field_name("body")
        if body is None:
            return VOID
        if body.type != "statement_block":
            return self.expression_type(body, env)

        returned = [
            self.expression_type(value, env) if value is not None else VOID
            for value in self._immediate_returns(body)
        ]
        non_void = [type_text for type_text in returned if type_text != VOID]
        if not non_void:
            return VOID
        return join_types(non_void)

    def _immediate_returns(self, body: Node) -> list[Node | None]:
        """Expressions of the return statements belonging to this function.

        Nested function-like sub-trees are not entered. A bare ``return``
        yields None.
        """
        values = []
        stack = list(reversed(body.children))
        while stack:
            node = stack.pop()
            if node.type in FUNCTION_LIKE_TYPES:
                continue
            if node.type == "return_statement":
                children = named_children(node)
                values.append(children[0] if children else None)
                continue
            stack.extend(reversed(node.children))
        return values

    def expression_type(self, node: Node, env: dict[str, str]) -> str:
        """Infer the type of an expression node."""
        node_type = node.type

        if node_type in LITERAL_TYPES:
            return LITERAL_TYPES[node_type]

        if node_type == "parenthesized_expression":
            inner = named_children(node)
            return self.expression_type(inner[0], env) if inner else ANY

        if node_type == "identifier":
            return env.get(self._text(node), ANY)

        if node_type == "as_expression":
            children = named_children(node)
            if len(children) >= 2:
                return self._text(children[-1])
            # x as const
            return self.expression_type(children[0], env) if children else ANY

        if node_type == "type_assertion":
            children = named_children(node)
            if children and children[0].type == "type_arguments":
                return self._text(children[0]).strip()[1:-1].strip() or ANY
            return ANY

        if node_type == "unary_expression":
            operator = self._operator(node)
            if operator == "!":
                return "boolean"
            if operator in ("+", "-"):
                return "number"
            return ANY

        if node_type == "binary_expression":
            return self._binary_type(node, env)

        if node_type in ("assignment_expression", "augmented_assignment_expression"):
            right = node.child_by_field_name("right")
            return self.expression_type(right, env) if right is not None else ANY

        if node_type == "await_expression":
            return PROMISE_TYPE

        if node_type == "ternary_expression":
            consequence = node.child_by_field_name("consequence")
            alternative = node.child_by_field_name("alternative")
            if consequence is None or alternative is None:
                return ANY
            return self._common_type(
                self.expression_type(consequence, env),
                self.expression_type(alternative, env),
            )

        return ANY

    def _binary_type(self, node: Node, env: dict[str, str]) -> str:
        operator = self._operator(node)
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if left is None or right is None:
            return ANY

        if operator == "+":
            left_type = self.expression_type(left, env)
            right_type = self.expression_type(right, env)
            if left_type == "string" or right_type == "string":
                return "string"
            if left_type == "number" and right_type == "number":
                return "number"
            return ANY
        if operator in ARITHMETIC_OPERATORS:
            return "number"
        if operator in COMPARISON_OPERATORS:
            return "boolean"
        if operator in LOGICAL_OPERATORS:
            return self._common_type(
                self.expression_type(left, env),
                self.expression_type(right, env),
            )
        return ANY

    @staticmethod
    def _common_type(first: str, second: str) -> str:
        if first == second:
            return first
        return join_types([first, second])

    def _operator(self, node: Node) -> str | None:
        operator = node.child_by_field_name("operator")
        return operator.type if operator is not None else None

    def _text(self, node: Node) -> str:
        return extract_text(self.source, node.start_byte, node.end_byte)


class TypeInferenceEngine:
    """Fills in parameter and return types of collected targets.

    Declared annotations are kept verbatim. Everything else is asked of each
    strategy in turn, the first non-None answer winning.
    """

    def __init__(self, strategies: list[TypeStrategy]):
        self.strategies = strategies

    @classmethod
    def for_index(cls, index: SyntaxIndex) -> "TypeInferenceEngine":
        strategies: list[TypeStrategy] = []
        if index.oracle is not None:
            strategies.append(OracleTypeStrategy(index.oracle))
        strategies.append(SyntacticTypeStrategy(index.source))
        return cls(strategies)

    def infer(self, target: DocumentableTarget) -> DocumentableTarget:
        """Resolve every missing type of a target in place.

        Args:
            target: Target produced by the collector

        Returns:
            The same target, with all parameter types and the return type set
        """
        env: dict[str, str] = {}
        for parameter in target.parameters:
            if parameter.type is None:
                parameter.type = self._first(
                    lambda strategy: strategy.parameter_type(parameter, env)
                )
            env[parameter.name] = parameter.type

        if not target.return_declared:
            return_type = self._first(lambda strategy: strategy.return_type(target, env))
            if target.is_async:
                return_type = wrap_async(return_type)
            target.return_type = return_type

        return target

    def _first(self, ask) -> str:
        for strategy in self.strategies:
            answer = ask(strategy)
            if answer is not None:
                return answer
        return ANY
