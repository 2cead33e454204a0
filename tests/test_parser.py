import pytest

from compact_jsonc import NestingDepthError, ParseError
from compact_jsonc.document import CommentKind, JsonValueKind, split_number
from compact_jsonc.parser import MAX_NESTING_DEPTH, normalise_source, parse_document


def test_nodes_are_pre_order():
    document = parse_document('{"a": [1, {"b": null}], "c": true}')
    kinds = [node.kind for node in document.nodes]
    assert kinds == [
        JsonValueKind.OBJECT,
        JsonValueKind.ARRAY,
        JsonValueKind.NUMBER,
        JsonValueKind.OBJECT,
        JsonValueKind.NULL,
        JsonValueKind.BOOLEAN,
    ]
    assert [node.key for node in document.nodes] == [None, '"a"', None, None, '"b"', '"c"']
    assert [node.parent for node in document.nodes] == [-1, 0, 1, 1, 3, 0]
    assert [node.depth for node in document.nodes] == [0, 1, 2, 2, 3, 1]
    assert document[0].children == (1, 5)
    assert document[1].children == (2, 3)
    for node in document.nodes:
        assert all(child > node.index for child in node.children)


def test_positions():
    document = parse_document('{\n  "a": [1]\n}')
    root, member, number = document.nodes
    assert (root.start_pos, root.end_pos, root.end_line) == (0, 14, 3)
    assert member.start_pos == 4
    assert member.value_pos == 9
    assert member.end_line == 2
    assert number.text == "1"


def test_literal_text_is_kept():
    document = parse_document('["a\\"b", -1.5e+3, false]')
    assert [node.text for node in document.nodes[1:]] == ['"a\\"b"', "-1.5e+3", "false"]


def test_trailing_commas():
    assert len(parse_document("[1, 2,]")) == 3
    assert len(parse_document('{"a": 1,}')) == 2


def test_comments():
    document = parse_document("// first   \n[1, /* second\n third */ 2]")
    assert len(document) == 3
    first, second = document.comments
    assert first.kind == CommentKind.LINE
    assert first.text == "// first"
    assert (first.line, first.column, first.offset) == (1, 1, 0)
    assert second.kind == CommentKind.BLOCK
    assert second.text == "/* second\n third */"
    assert second.line == 2


def test_normalise_source():
    assert normalise_source("\ufeff[1,\r\n2]\r") == "[1,\n2]\n"


@pytest.mark.parametrize(
    "source",
    ['{"a": }', "[1, 2", "[1 2]", "{'a': 1}", "[1, @]", "", '{"a": 1} 2', "[01]"],
)
def test_parse_errors(source):
    with pytest.raises(ParseError):
        parse_document(source)


def test_parse_error_position():
    with pytest.raises(ParseError) as e:
        parse_document('{\n  "a": }')
    assert e.value.line == 2
    assert e.value.column == 8
    assert "(line 2, column 8)" in str(e.value)


def test_nesting_depth():
    depth = MAX_NESTING_DEPTH
    document = parse_document("[" * depth + "]" * depth)
    assert document.nodes[-1].depth == depth - 1

    with pytest.raises(NestingDepthError):
        parse_document("[" * (depth + 1) + "]" * (depth + 1))
    with pytest.raises(ParseError):
        parse_document('{"a": ' * (depth + 1) + "1" + "}" * (depth + 1))


def test_split_number():
    assert split_number("7") == ("7", "")
    assert split_number("-12.5e3") == ("-12", ".5e3")
    assert split_number("1E-5") == ("1", "E-5")
    assert split_number("0.25").fraction == ".25"
