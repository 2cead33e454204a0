"""Compact JSONC formatter."""

from __future__ import annotations

import dataclasses
import json
import logging
import warnings
from enum import Enum
from typing import TYPE_CHECKING, Any

from compact_jsonc.comments import attach_comments
from compact_jsonc.document import JsonValueKind
from compact_jsonc.layout import Format, plan_layout
from compact_jsonc.metrics import analyze
from compact_jsonc.options import FormatOptions
from compact_jsonc.parser import parse_document
from compact_jsonc.table import TableFormatter, pad_cell

if TYPE_CHECKING:
    from pathlib import PosixPath

    from compact_jsonc.comments import Attachments
    from compact_jsonc.document import CommentToken, Document
    from compact_jsonc.layout import LayoutPlan
    from compact_jsonc.metrics import NodeMetrics

logger = logging.getLogger(__name__)
debug = logger.debug


class Renderer:
    """Write a planned document out as text, one line at a time."""

    def __init__(  # noqa: PLR0913
        self: Renderer,
        document: Document,
        attachments: Attachments,
        metrics: list[NodeMetrics],
        plans: dict[int, LayoutPlan],
        options: FormatOptions,
    ) -> None:
        self.document = document
        self.attachments = attachments
        self.metrics = metrics
        self.plans = plans
        self.options = options
        self.tables = TableFormatter(document, metrics, attachments, options)
        self.lines: list[str] = []

    def render(self: Renderer) -> str:
        """Return the formatted document, without a final line ending."""
        self.lines = []
        root = self.document.root
        slots = self.attachments.get(root)
        for comment in slots.leading:
            self.write_comment_line(comment, 0)
        self.newline(0)
        self.write_value(root, 0)
        self.write_trailing(slots.trailing)
        for comment in slots.footer:
            self.write_comment_line(comment, 0)

        lines = self.lines
        if self.options.omit_trailing_whitespace:
            lines = [line.rstrip(" \t") for line in lines]
        for number, line in enumerate(lines, start=1):
            if self.options.str_len(line) > self.options.max_total_line_length:
                debug(f"render: line {number} is {self.options.str_len(line)} wide")
        return self.options.eol.join(lines)

    def newline(self: Renderer, depth: int) -> None:
        self.lines.append(self.options.prefix_string + self.options.indent_str * depth)

    def write(self: Renderer, text: str) -> None:
        self.lines[-1] += text

    def write_comment_text(self: Renderer, comment: CommentToken) -> None:
        # Continuation lines of block comments are kept as written, after the
        # prefix. A prefix already there from an earlier run isn't doubled.
        prefix = self.options.prefix_string
        first, *rest = comment.text.split("\n")
        self.write(first)
        for line in rest:
            if prefix and line.startswith(prefix):
                line = line[len(prefix) :]  # noqa: PLW2901
            self.lines.append(prefix + line)

    def write_comment_line(self: Renderer, comment: CommentToken, depth: int) -> None:
        self.newline(depth)
        self.write_comment_text(comment)

    def write_trailing(self: Renderer, comments: list[CommentToken]) -> None:
        for comment in comments:
            if self.options.comment_padding:
                self.write(" ")
            self.write_comment_text(comment)

    def write_name(self: Renderer, index: int, name_width: int) -> None:
        node = self.document[index]
        padding = " " * max(0, name_width - self.metrics[index].key_width)
        colon = self.options.colon_str
        if self.options.colon_before_prop_name_padding:
            self.write(node.key + colon[0] + padding + colon[1:])
        else:
            self.write(node.key + padding + colon)

    def needs_comma(self: Renderer, position: int, count: int) -> bool:
        return position < count - 1 or self.options.allow_trailing_commas

    def inline_text(self: Renderer, index: int) -> str:
        """Return a value written on a single line."""
        node = self.document[index]
        if not node.is_container:
            return node.text

        opening, closing = node.brackets
        if not node.children:
            return opening + (" " if self.options.simple_bracket_padding else "") + closing

        if node.kind == JsonValueKind.OBJECT:
            items = [
                self.document[child].key + self.options.colon_str + self.inline_text(child)
                for child in node.children
            ]
        else:
            items = [self.inline_text(child) for child in node.children]
        padding = " " if self.options.bracket_padding(self.metrics[index].complexity) else ""
        return opening + padding + self.options.comma_str.join(items) + padding + closing

    def write_value(self: Renderer, index: int, depth: int) -> None:
        plan = self.plans.get(index)
        if plan is None or plan.format == Format.INLINE:
            self.write(self.inline_text(index))
        elif plan.format == Format.COMPACT_PACKED:
            self.write_packed(index, depth, plan)
        elif plan.format == Format.TABLE:
            self.write_table(index, depth, plan)
        else:
            self.write_expanded(index, depth, plan)

    def number_cell(self: Renderer, plan: LayoutPlan, child: int, *, comma: bool) -> str:
        text, width = plan.numbers.format_value(
            self.document[child].text,
            self.metrics[child].inline_width,
        )
        return pad_cell(text, width, plan.numbers.max_value_size, self.options, comma=comma)

    def write_expanded(self: Renderer, index: int, depth: int, plan: LayoutPlan) -> None:
        """Write a container with each element starting on its own line."""
        node = self.document[index]
        opening, closing = node.brackets
        self.write(opening)
        for position, child in enumerate(node.children):
            slots = self.attachments.get(child)
            for comment in slots.leading:
                self.write_comment_line(comment, depth + 1)
            self.newline(depth + 1)
            if node.kind == JsonValueKind.OBJECT:
                self.write_name(child, plan.name_width)

            comma = self.needs_comma(position, len(node.children))
            if plan.numbers is not None:
                self.write(self.number_cell(plan, child, comma=comma))
            else:
                self.write_value(child, depth + 1)
                if comma:
                    self.write(",")
            self.write_trailing(slots.trailing)

        self.write_inner(index, depth)
        self.write(closing)

    def write_packed(self: Renderer, index: int, depth: int, plan: LayoutPlan) -> None:
        """Write an array spanning several lines, with as many elements per line as fit."""
        node = self.document[index]
        options = self.options
        opening, closing = node.brackets
        line_start = options.str_len(options.prefix_string)
        line_start += options.indent_width * (depth + 1)
        separator = options.comma_str[1:]

        self.write(opening)
        self.newline(depth + 1)
        column = line_start
        for position, child in enumerate(node.children):
            comma = self.needs_comma(position, len(node.children))
            if plan.numbers is not None:
                text = self.number_cell(plan, child, comma=comma)
                width = plan.numbers.max_value_size + (1 if comma else 0)
            else:
                text = self.inline_text(child) + ("," if comma else "")
                width = self.metrics[child].inline_width + (1 if comma else 0)

            if column > line_start:
                if column + len(separator) + width > options.max_total_line_length:
                    self.newline(depth + 1)
                    column = line_start
                else:
                    self.write(separator)
                    column += len(separator)
            self.write(text)
            column += width

        self.write_inner(index, depth)
        self.write(closing)

    def write_table(self: Renderer, index: int, depth: int, plan: LayoutPlan) -> None:
        """Write each child on its own line, lined up in columns with its siblings."""
        node = self.document[index]
        opening, closing = node.brackets
        self.write(opening)
        for position, row in enumerate(node.children):
            for comment in self.attachments.get(row).leading:
                self.write_comment_line(comment, depth + 1)
            self.newline(depth + 1)
            if node.kind == JsonValueKind.OBJECT:
                self.write_name(row, plan.name_width)
            self.write(self.tables.format_row(plan.table, row, self.inline_text))
            if self.needs_comma(position, len(node.children)):
                self.write(",")
            self.write_trailing(self.tables.row_comments(row))

        self.write_inner(index, depth)
        self.write(closing)

    def write_inner(self: Renderer, index: int, depth: int) -> None:
        """Write comments before a closing bracket, then start the bracket's line."""
        for comment in self.attachments.get(index).inner:
            self.write_comment_line(comment, depth + 1)
        self.newline(depth)


class Formatter:
    """Class that outputs JSON formatted in a compact, user-readable way.

    Any given container is formatted in one of four ways:
    * Arrays or objects will be written on a single line, if their contents aren't too
      complex and the resulting line wouldn't be too long.
    * Arrays can be written on multiple lines, with multiple items per line, as long as
      those items aren't too complex.
    * Arrays or objects whose children are similar arrays or objects are written with
      one child per line, lined up in columns like a table.
    * Otherwise, each object property or array item is written beginning on its own
      line, indented one step deeper than its parent.

    Comments in the input are kept next to the values they describe, unless
    ``comment_policy`` is ``CommentPolicy.REMOVE``.

    Settings are held in a FormatOptions; keyword arguments override its fields.
    """

    def __init__(
        self: Formatter,
        options: FormatOptions | None = None,
        **kwargs: Any,  # noqa: ANN401
    ) -> None:
        """Create a formatter from options and/or FormatOptions field values."""
        if options is None:
            options = FormatOptions(**kwargs)
        elif kwargs:
            options = dataclasses.replace(options, **kwargs)
        self.options = options

    @property
    def eol_str(self: Formatter) -> str:
        return self.options.eol

    def reformat(self: Formatter, text: str) -> str:
        """Reformat JSON or JSONC text. The result has no final line ending."""
        document = parse_document(text)
        attachments = attach_comments(document, self.options)
        metrics = analyze(document, attachments, self.options)
        plans = plan_layout(document, metrics, attachments, self.options)
        return Renderer(document, attachments, metrics, plans, self.options).render()

    def serialize(self: Formatter, value: Any) -> str:  # noqa: ANN401
        """Serialize a value to formatted JSON."""
        text = json.dumps(
            self.normalise_keys(value),
            ensure_ascii=self.options.ensure_ascii,
            allow_nan=False,
        )
        return self.reformat(text)

    def dump(
        self: Formatter,
        obj: Any,  # noqa: ANN401
        output_file: str | PosixPath,
        newline_at_eof: bool = True,  # noqa: FBT001, FBT002
    ) -> None:
        """Write JSON to a file."""
        formatted: str = self.serialize(obj)
        if newline_at_eof:
            formatted += self.eol_str

        with open(output_file, "w", encoding="utf-8", newline="") as f:
            f.write(formatted)

    def normalise_keys(self: Formatter, element: Any) -> Any:  # noqa: ANN401
        """Convert dict keys to strings, warning about conversions and clashes."""
        if isinstance(element, (list, tuple)):
            return [self.normalise_keys(child) for child in element]
        if not isinstance(element, dict):
            return element

        items = {}
        for k, v in element.items():
            if isinstance(k, Enum):
                k = k.value  # noqa: PLW2901
            if not isinstance(k, str):
                warnings.warn(
                    f"converting key value {k} to string",
                    RuntimeWarning,
                    stacklevel=2,
                )
            k = str(k)  # noqa: PLW2901
            if k in items:
                warnings.warn(
                    f"duplicate key value {k}",
                    RuntimeWarning,
                    stacklevel=2,
                )
            items[k] = self.normalise_keys(v)
        return items


def format_jsonc(text: str, options: FormatOptions | None = None) -> str:
    """Reformat JSON or JSONC text with the given options."""
    return Formatter(options).reformat(text)
