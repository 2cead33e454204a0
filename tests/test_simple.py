import dataclasses

import pytest

from compact_jsonc import (
    CommentPolicy,
    EolStyle,
    Formatter,
    FormatOptions,
    NumberListAlignment,
    ParseError,
    TableCommaPlacement,
    format_jsonc,
)

REF_WIDGET = """{
  "widget": {
    "debug": "on",
    "window": {"title": "Sample Konfabulator Widget", "name": "main_window", "width": 500, "height": 500},
    "image": {"src": "Images/Sun.png", "name": "sun1", "hOffset": 250, "vOffset": 250, "alignment": "center"},
    "text": {
      "data": "Click Here",
      "size": 36,
      "style": "bold",
      "name": "text1",
      "hOffset": 250,
      "vOffset": 100,
      "alignment": "center",
      "onMouseUp": "sun1.opacity = (sun1.opacity / 100) * 90;"
    }
  }
}"""

WIDGET = """{"widget": {
    "debug": "on",
    "window": {"title": "Sample Konfabulator Widget", "name": "main_window",
               "width": 500, "height": 500},
    "image": {"src": "Images/Sun.png", "name": "sun1", "hOffset": 250,
              "vOffset": 250, "alignment": "center"},
    "text": {"data": "Click Here", "size": 36, "style": "bold", "name": "text1",
             "hOffset": 250, "vOffset": 100, "alignment": "center",
             "onMouseUp": "sun1.opacity = (sun1.opacity / 100) * 90;"}
}}"""


def test_simple_format():
    formatter = Formatter(indent_spaces=2)
    assert formatter.reformat(WIDGET) == REF_WIDGET


def test_scalar_documents():
    assert format_jsonc("  42 ") == "42"
    assert format_jsonc('"text"') == '"text"'
    assert format_jsonc("[]") == "[]"
    assert format_jsonc("{ }") == "{}"
    assert format_jsonc("[]", FormatOptions(simple_bracket_padding=True)) == "[ ]"


def test_literals_are_kept():
    source = '{"big": 1.50E+10, "escaped": "a\\u0041\\n", "neg": -0.0}'
    assert format_jsonc(source) == '{"big": 1.50E+10, "escaped": "a\\u0041\\n", "neg": -0.0}'


def test_duplicate_keys_are_kept():
    assert format_jsonc('{"a": 1, "a": 2}') == '{"a": 1, "a": 2}'


def test_options_and_overrides():
    options = FormatOptions(indent_spaces=2, max_inline_complexity=0)
    formatter = Formatter(options, eol_style=EolStyle.CRLF)
    assert formatter.options == dataclasses.replace(options, eol_style=EolStyle.CRLF)
    assert formatter.reformat("[1, 2]") == "[\r\n  1,\r\n  2\r\n]"
    assert Formatter(options).reformat("[1, 2]") == "[\n  1,\n  2\n]"


def test_tab_indent_and_prefix():
    formatter = Formatter(
        use_tab_to_indent=True,
        prefix_string="//",
        max_inline_complexity=0,
    )
    assert formatter.reformat('{"a": 1}') == '//{\n//\t"a": 1\n//}'


def test_prefix_on_block_comment_lines():
    formatter = Formatter(prefix_string="# ")
    assert formatter.reformat("[1, /* a\n b */ 2]") == "# [\n#     1, /* a\n#  b */\n#     2\n# ]"
    formatter = Formatter(prefix_string="  ")
    once = formatter.reformat("[1, /* a\n b */ 2]")
    assert once == "  [\n      1, /* a\n   b */\n      2\n  ]"
    assert formatter.reformat(once) == once


def test_no_padding():
    formatter = Formatter(colon_padding=False, comma_padding=False)
    assert formatter.reformat('{"a": [1, 2], "b": null}') == '{ "a":[1,2],"b":null }'


def test_align_expanded_property_names():
    formatter = Formatter(align_expanded_property_names=True, max_inline_complexity=0)
    assert formatter.reformat('{"a": 1, "long": 2}') == '{\n    "a"   : 1,\n    "long": 2\n}'


def test_property_name_padding():
    source = '{"a": 1, "abcdefgh": 2}'
    formatter = Formatter(align_expanded_property_names=True, max_inline_complexity=0)
    assert formatter.reformat(source) == '{\n    "a"       : 1,\n    "abcdefgh": 2\n}'
    limited = Formatter(formatter.options, max_prop_name_padding=6)
    assert limited.reformat(source) == '{\n    "a": 1,\n    "abcdefgh": 2\n}'
    colon_first = Formatter(formatter.options, colon_before_prop_name_padding=True)
    assert colon_first.reformat(source) == (
        '{\n    "a":' + " " * 8 + '1,\n    "abcdefgh": 2\n}'
    )


def test_line_length():
    source = '{"first": "some long text", "second": "more long text"}'
    assert format_jsonc(source) == '{"first": "some long text", "second": "more long text"}'
    formatter = Formatter(max_total_line_length=40)
    assert formatter.reformat(source) == (
        '{\n    "first": "some long text",\n    "second": "more long text"\n}'
    )


def test_overlong_values_are_written_anyway():
    source = '["' + "x" * 30 + '"]'
    formatter = Formatter(max_total_line_length=10)
    assert formatter.reformat(source) == '[\n    "' + "x" * 30 + '"\n]'


def test_east_asian_widths():
    source = '{"a": "テスト", "b": 1}'
    # 5 characters but 8 columns wide
    assert Formatter(max_total_line_length=20).reformat(source) == source
    formatter = Formatter(max_total_line_length=20, east_asian_string_widths=True)
    assert formatter.reformat(source) == '{\n    "a": "テスト",\n    "b": 1\n}'


def test_number_alignment_whitespace():
    source = "[1, 2.5, 10.25]"
    formatter = Formatter(max_inline_complexity=0, omit_trailing_whitespace=False)
    assert formatter.reformat(source) == "[\n     1,   \n     2.5, \n    10.25\n]"
    formatter = Formatter(
        max_inline_complexity=0,
        omit_trailing_whitespace=False,
        table_comma_placement=TableCommaPlacement.AFTER_PADDING,
    )
    assert formatter.reformat(source) == "[\n     1   ,\n     2.5 ,\n    10.25\n]"
    formatter = Formatter(
        max_inline_complexity=0,
        number_list_alignment=NumberListAlignment.LEFT,
    )
    assert formatter.reformat(source) == "[\n    1,\n    2.5,\n    10.25\n]"
    formatter = Formatter(
        max_inline_complexity=0,
        number_list_alignment=NumberListAlignment.LEFT,
        omit_trailing_whitespace=False,
    )
    assert formatter.reformat(source) == "[\n    1,    \n    2.5,  \n    10.25\n]"


def test_crlf_input():
    source = '{\r\n  "a": 1, // one\r\n  "b": 2\r\n}\r\n'
    assert format_jsonc(source) == '{\n    "a": 1, // one\n    "b": 2\n}'


def test_byte_order_mark():
    assert format_jsonc('\ufeff{"a": 1}') == '{"a": 1}'


def test_remove_comments():
    source = "/* head */ [1, /* one */ 2] // tail"
    formatter = Formatter(comment_policy=CommentPolicy.REMOVE)
    assert formatter.reformat(source) == "[1, 2]"
    assert format_jsonc(source) == "/* head */\n[\n    1, /* one */\n    2\n] // tail"


def test_comment_padding():
    source = "[1, /* one */ 2] // tail"
    formatter = Formatter(comment_padding=False)
    assert formatter.reformat(source) == "[\n    1,/* one */\n    2\n]// tail"
    assert formatter.reformat(formatter.reformat(source)) == formatter.reformat(source)


def test_parse_error():
    with pytest.raises(ParseError):
        format_jsonc('{"a": }')
