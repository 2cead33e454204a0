"""Format options for the JSONC formatter."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import IntEnum, auto
from functools import lru_cache

from wcwidth import wcswidth

from compact_jsonc.errors import InvalidOptionsError


@lru_cache(4096)
def _wcswidth(s: str) -> int:
    return wcswidth(s)


class EolStyle(IntEnum):
    """End of line style enumeration."""

    CRLF = auto()
    LF = auto()


class CommentPolicy(IntEnum):
    """What to do with comments found in the input."""

    PRESERVE = auto()
    REMOVE = auto()


class NumberListAlignment(IntEnum):
    """How numbers sharing a column are lined up."""

    NONE = auto()
    LEFT = auto()
    DECIMAL = auto()


class TableCommaPlacement(IntEnum):
    """Where the separator goes relative to a table cell's padding."""

    BEFORE_PADDING = auto()
    AFTER_PADDING = auto()


_ENUM_FIELDS = {
    "eol_style": EolStyle,
    "comment_policy": CommentPolicy,
    "number_list_alignment": NumberListAlignment,
    "table_comma_placement": TableCommaPlacement,
}


@dataclass(frozen=True)
class FormatOptions:
    """Immutable settings shared by every stage of the formatter.

    Properties:

    eol_style:
        Dictates what sort of line endings to use.

    max_total_line_length:
        Maximum length of a line, including indentation, property names and the
        prefix string. Lines that cannot be broken (a very long string, say) may
        still exceed it.

    max_inline_complexity:
        Maximum nesting level that can be displayed on a single line. A primitive type
        or an empty array or object has a complexity of 0. An array or object has a
        complexity of 1 greater than its most complex child.

    max_compact_array_complexity:
        Maximum complexity of an array that may be packed with several items per
        line. 0 disables compact packing.

    max_table_row_complexity:
        Maximum complexity of the rows of a table. Cells are also limited by
        max_inline_complexity, since each one is written on a single line.

    min_compact_array_row_items:
        Arrays with fewer items than this are never packed several items per line.

    always_expand_depth:
        Depth at which arrays/objects are never inlined or packed, regardless of other
        settings. -1 = none; 0 = root node only; 1 = root node and its children.

    indent_spaces:
        Number of spaces to use per indent level (unless use_tab_to_indent is True).
        Also the width assumed for a tab when measuring lines.

    use_tab_to_indent:
        Uses a single tab per indent level, instead of spaces.

    comment_policy:
        PRESERVE keeps every comment of the input, REMOVE drops them all.

    number_list_alignment:
        How numbers are lined up in table columns and in arrays of numbers written
        one or several per line. DECIMAL lines up the decimal points.

    table_comma_placement:
        Whether the comma after a table cell comes before or after its padding.

    allow_trailing_commas:
        If True, the last element of a multi-line array or object gets a comma too.

    simple_bracket_padding:
        If an inlined array or object does NOT contain other arrays/objects,
        setting simple_bracket_padding to True will include spaces inside the brackets.

    nested_bracket_padding:
        If an inlined array or object contains other arrays or objects, setting
        nested_bracket_padding to True will include spaces inside the outer brackets.

    colon_padding:
        If True, includes a space after property colons.

    comma_padding:
        If True, includes a space after commas separating array items and properties.

    comment_padding:
        If True, includes a space between a value and a comment following it.

    align_expanded_property_names:
        If True, property names of expanded objects are padded to the same size.

    max_prop_name_padding:
        Most spaces added after a property name to line it up with its siblings.
        Names of an object needing more than that are not lined up at all.

    colon_before_prop_name_padding:
        If True, lined up property names are written as ``"a":   1`` rather than
        ``"a"   : 1``.

    prefix_string:
        String attached to the beginning of every line, before regular indentation.

    east_asian_string_widths:
        If True, measure strings with their terminal display width rather than the
        number of code points.

    omit_trailing_whitespace:
        If True, strip whitespace at the end of all output lines.

    ensure_ascii:
        Used when serializing Python objects: if True, non-ASCII characters are escaped.
    """

    eol_style: EolStyle = EolStyle.LF
    max_total_line_length: int = 120
    max_inline_complexity: int = 2
    max_compact_array_complexity: int = 2
    max_table_row_complexity: int = 3
    min_compact_array_row_items: int = 0
    always_expand_depth: int = -1
    indent_spaces: int = 4
    use_tab_to_indent: bool = False
    comment_policy: CommentPolicy = CommentPolicy.PRESERVE
    number_list_alignment: NumberListAlignment = NumberListAlignment.DECIMAL
    table_comma_placement: TableCommaPlacement = TableCommaPlacement.BEFORE_PADDING
    allow_trailing_commas: bool = False
    simple_bracket_padding: bool = False
    nested_bracket_padding: bool = True
    colon_padding: bool = True
    comma_padding: bool = True
    comment_padding: bool = True
    align_expanded_property_names: bool = False
    max_prop_name_padding: int = 40
    colon_before_prop_name_padding: bool = False
    prefix_string: str = ""
    east_asian_string_widths: bool = False
    omit_trailing_whitespace: bool = True
    ensure_ascii: bool = True

    def __post_init__(self: FormatOptions) -> None:
        """Reject combinations the formatter cannot honour."""
        for field in fields(self):
            value = getattr(self, field.name)
            enum_type = _ENUM_FIELDS.get(field.name)
            if enum_type is not None:
                if not isinstance(value, enum_type):
                    msg = f"{field.name} must be a {enum_type.__name__}, not {value!r}"
                    raise InvalidOptionsError(msg)
            elif field.type in ("int", "bool") and not isinstance(value, int):
                msg = f"{field.name} must be an integer, not {value!r}"
                raise InvalidOptionsError(msg)

        if self.max_total_line_length <= 0:
            msg = f"max_total_line_length must be positive, not {self.max_total_line_length}"
            raise InvalidOptionsError(msg)
        if self.indent_spaces <= 0 and not self.use_tab_to_indent:
            msg = f"indent_spaces must be positive, not {self.indent_spaces}"
            raise InvalidOptionsError(msg)
        if self.indent_spaces < 0:
            msg = f"indent_spaces cannot be negative, not {self.indent_spaces}"
            raise InvalidOptionsError(msg)
        if self.max_inline_complexity < 0:
            msg = "max_inline_complexity cannot be negative"
            raise InvalidOptionsError(msg)
        for name in (
            "max_compact_array_complexity",
            "max_table_row_complexity",
            "min_compact_array_row_items",
            "max_prop_name_padding",
        ):
            if getattr(self, name) < 0:
                msg = f"{name} cannot be negative"
                raise InvalidOptionsError(msg)
        if self.always_expand_depth < -1:  # noqa: PLR2004
            msg = "always_expand_depth must be -1 or greater"
            raise InvalidOptionsError(msg)
        if not isinstance(self.prefix_string, str) or any(
            c in self.prefix_string for c in "\r\n"
        ):
            msg = "prefix_string must be a single-line string"
            raise InvalidOptionsError(msg)

    @property
    def eol(self: FormatOptions) -> str:
        return "\r\n" if self.eol_style == EolStyle.CRLF else "\n"

    @property
    def indent_str(self: FormatOptions) -> str:
        return "\t" if self.use_tab_to_indent else " " * self.indent_spaces

    @property
    def indent_width(self: FormatOptions) -> int:
        """Columns taken by one indent level."""
        if self.use_tab_to_indent:
            return max(1, self.indent_spaces)
        return self.indent_spaces

    @property
    def comma_str(self: FormatOptions) -> str:
        return ", " if self.comma_padding else ","

    @property
    def colon_str(self: FormatOptions) -> str:
        return ": " if self.colon_padding else ":"

    def str_len(self: FormatOptions, s: str) -> int:
        """Return string length supporting east-Asian characters."""
        if not self.east_asian_string_widths or s.isascii():
            return len(s)
        return _wcswidth(s)

    def bracket_padding(self: FormatOptions, complexity: int) -> bool:
        """Whether an inlined container of this complexity gets inner spaces."""
        if complexity >= 2:  # noqa: PLR2004
            return self.nested_bracket_padding
        return self.simple_bracket_padding
