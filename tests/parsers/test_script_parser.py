from jsdoc_builder.parsers.script_parser import (
    ScriptParser,
    annotation_text,
    extract_parameters,
    extract_return_type,
    is_async,
)


def _first_function(index, node_type="function_declaration"):
    stack = [index.root]
    while stack:
        node = stack.pop()
        if node.type == node_type:
            return node
        stack.extend(reversed(node.children))
    raise AssertionError(f"no {node_type} in source")


def test_parse_returns_index_over_utf8_bytes():
    parser = ScriptParser("javascript")

    index = parser.parse("const s = 'é';")

    assert index.source == "const s = 'é';".encode("utf-8")
    assert index.dialect == "javascript"


def test_text_of_node():
    index = ScriptParser("javascript").parse("function hello() {}")
    function = _first_function(index)

    assert index.text(function.child_by_field_name("name")) == "hello"


def test_extract_plain_parameters():
    index = ScriptParser("javascript").parse("function f(a, b) {}")

    parameters = extract_parameters(_first_function(index), index.source)

    assert [p.name for p in parameters] == ["a", "b"]
    assert all(p.type is None for p in parameters)


def test_extract_typed_parameters():
    index = ScriptParser("typescript").parse("function f(a: number, b?: string[]) {}")

    parameters = extract_parameters(_first_function(index), index.source)

    assert [(p.name, p.type) for p in parameters] == [("a", "number"), ("b", "string[]")]


def test_extract_default_parameter_javascript():
    index = ScriptParser("javascript").parse("function f(count = 10) {}")

    parameters = extract_parameters(_first_function(index), index.source)

    assert parameters[0].name == "count"
    assert parameters[0].default_node is not None
    assert index.text(parameters[0].default_node) == "10"


def test_extract_default_parameter_typescript():
    index = ScriptParser("typescript").parse("function f(label = 'x') {}")

    parameters = extract_parameters(_first_function(index), index.source)

    assert parameters[0].name == "label"
    assert index.text(parameters[0].default_node) == "'x'"


def test_extract_rest_parameter():
    index = ScriptParser("javascript").parse("function f(first, ...rest) {}")

    parameters = extract_parameters(_first_function(index), index.source)

    assert [p.name for p in parameters] == ["first", "rest"]
    assert parameters[1].rest is True
    assert parameters[0].rest is False


def test_destructured_parameters_get_positional_names():
    index = ScriptParser("javascript").parse("function f(a, { x, y }, [z]) {}")

    parameters = extract_parameters(_first_function(index), index.source)

    assert [p.name for p in parameters] == ["a", "param2", "param3"]


def test_single_bare_arrow_parameter():
    index = ScriptParser("javascript").parse("const f = x => x;")

    parameters = extract_parameters(_first_function(index, "arrow_function"), index.source)

    assert [p.name for p in parameters] == ["x"]


def test_extract_return_type():
    index = ScriptParser("typescript").parse("function f(): Promise<number[]> { return []; }")

    assert extract_return_type(_first_function(index), index.source) == "Promise<number[]>"


def test_missing_return_type():
    index = ScriptParser("typescript").parse("function f() {}")

    assert extract_return_type(_first_function(index), index.source) is None


def test_annotation_text_none():
    assert annotation_text(b"", None) is None


def test_is_async():
    index = ScriptParser("javascript").parse("async function f() {}\nfunction g() {}")
    functions = [n for n in index.root.children if n.type == "function_declaration"]

    assert is_async(functions[0]) is True
    assert is_async(functions[1]) is False
