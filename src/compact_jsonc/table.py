"""Column planning for containers whose children line up as table rows."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from compact_jsonc.document import CommentKind, JsonValueKind, split_number
from compact_jsonc.options import NumberListAlignment, TableCommaPlacement

if TYPE_CHECKING:
    from compact_jsonc.comments import Attachments
    from compact_jsonc.document import CommentToken, Document, Node
    from compact_jsonc.metrics import NodeMetrics
    from compact_jsonc.options import FormatOptions

logger = logging.getLogger(__name__)
debug = logger.debug


class ColumnStats:
    """Used in figuring out how to format values as a column in a table format."""

    def __init__(
        self: ColumnStats,
        policy: NumberListAlignment,
        key: str | None = None,
        key_length: int = 0,
    ) -> None:
        """Create a new column stats object."""
        self.policy = policy
        self.key = key
        self.key_length = key_length
        self.count = 0
        self.kind: JsonValueKind | None = None
        self.max_value_size = 0
        self.chars_before_dec = 0
        self.chars_after_dec = 0

    def update(self: ColumnStats, kind: JsonValueKind, text: str, value_length: int) -> None:
        """Add stats about one cell of this column."""
        if self.count == 0:
            self.kind = kind
        elif self.kind != kind:
            self.kind = None
        self.count += 1
        self._max_value_size = max(self._max_value_size, value_length)
        if kind == JsonValueKind.NUMBER:
            whole, frac = split_number(text)
            self.chars_before_dec = max(self.chars_before_dec, len(whole))
            self.chars_after_dec = max(self.chars_after_dec, len(frac))

    @property
    def alignment(self: ColumnStats) -> NumberListAlignment:
        """How cells of this column are aligned."""
        if self.kind == JsonValueKind.NUMBER and self.count:
            return self.policy
        return NumberListAlignment.NONE

    @property
    def max_value_size(self: ColumnStats) -> int:
        """Return max size of a cell."""
        if self.alignment == NumberListAlignment.DECIMAL:
            return self.chars_before_dec + self.chars_after_dec
        return self._max_value_size

    @max_value_size.setter
    def max_value_size(self: ColumnStats, v: int) -> None:
        """Set max size of a cell."""
        self._max_value_size = v

    def format_value(self: ColumnStats, text: str, value_length: int) -> tuple[str, int]:
        """Format a value based on its column position.

        Returns the text and its width. Only the left side is padded here: the
        right-hand padding depends on where the comma goes.
        """
        if self.alignment == NumberListAlignment.DECIMAL:
            whole, frac = split_number(text)
            return whole.rjust(self.chars_before_dec) + frac, (
                self.chars_before_dec + len(frac)
            )
        return text, value_length


def pad_cell(
    text: str,
    width: int,
    column_width: int,
    options: FormatOptions,
    *,
    comma: bool,
) -> str:
    """Pad a cell to its column width, placing the comma per table_comma_placement."""
    padding = " " * (column_width - width)
    if not comma:
        return text + padding
    if options.table_comma_placement == TableCommaPlacement.AFTER_PADDING:
        return text + padding + ","
    return text + "," + padding


@dataclass
class ColumnPlan:
    """Column layout shared by every row of a table."""

    columns: list[ColumnStats]
    cells: dict[int, list[int | None]]
    is_object: bool
    bracket_padding: bool

    def segment_width(self: ColumnPlan, column: ColumnStats, options: FormatOptions) -> int:
        """Width of a column including its property name and colon."""
        if self.is_object:
            return column.key_length + len(options.colon_str) + column.max_value_size
        return column.max_value_size

    def row_width(self: ColumnPlan, options: FormatOptions) -> int:
        width = sum(self.segment_width(column, options) for column in self.columns)
        width += (len(self.columns) - 1) * len(options.comma_str)
        return width + 2 + (2 if self.bracket_padding else 0)


class TableFormatter:
    """Decide whether a container's children can share columns, and format rows."""

    def __init__(
        self: TableFormatter,
        document: Document,
        metrics: list[NodeMetrics],
        attachments: Attachments,
        options: FormatOptions,
    ) -> None:
        self.document = document
        self.metrics = metrics
        self.attachments = attachments
        self.options = options

    def plan(self: TableFormatter, index: int) -> ColumnPlan | None:
        """Check if this node's children can be formatted as a table.

        If so, return a column plan with the width of each column.
        Returns None if they're not eligible.
        """
        node = self.document[index]
        if len(node.children) < 2:  # noqa: PLR2004
            return None

        rows = [self.document[child] for child in node.children]
        kind = rows[0].kind
        if kind not in (JsonValueKind.ARRAY, JsonValueKind.OBJECT):
            return None
        for row in rows:
            if row.kind != kind or not row.children:
                return None
            if self.attachments.get(row.index).inner:
                debug(f"table: row {row.index} has comments before its closing bracket")
                return None

        if kind == JsonValueKind.ARRAY:
            cells = self._array_cells(rows)
        else:
            cells = self._object_cells(rows)
        if cells is None:
            return None

        first_row = self.document[rows[0].index]
        columns = self._columns(first_row, cells)
        if columns is None:
            return None

        # Anything written after a comment that ends a line would move to another
        # line, so only the last comment of a row may do that.
        for row in rows:
            comments = self.row_comments(row.index)
            if any(c.kind == CommentKind.LINE or "\n" in c.text for c in comments[:-1]):
                debug(f"table: row {row.index} has a comment ending a line before others")
                return None

        complexity = max(self.metrics[row.index].complexity for row in rows)
        if complexity > self.options.max_table_row_complexity:
            debug(f"table: rows of node {index} have complexity {complexity}")
            return None
        plan = ColumnPlan(
            columns=columns,
            cells=cells,
            is_object=kind == JsonValueKind.OBJECT,
            bracket_padding=self.options.bracket_padding(complexity),
        )
        debug(f"table: node {index} has {len(columns)} columns")
        return plan

    def _array_cells(self: TableFormatter, rows: list[Node]) -> dict | None:
        signatures = {self.metrics[row.index].signature for row in rows}
        if len(signatures) != 1:
            debug(f"table: array rows differ in shape {signatures}")
            return None
        width = max(len(row.children) for row in rows)
        return {
            row.index: list(row.children) + [None] * (width - len(row.children))
            for row in rows
        }

    def _object_cells(self: TableFormatter, rows: list[Node]) -> dict | None:
        # The longest set of keys that at least two rows share becomes the columns;
        # every other row must have a subset of those keys in the same order.
        counts = Counter(self.metrics[row.index].signature for row in rows)
        shared = [signature for signature, count in counts.items() if count >= 2]  # noqa: PLR2004
        if not shared:
            debug("table: no two object rows share their keys")
            return None
        keys = max(shared, key=len)

        cells = {}
        for row in rows:
            row_cells: list[int | None] = [None] * len(keys)
            column = 0
            for child in row.children:
                while column < len(keys) and keys[column] != self.document[child].key:
                    column += 1
                if column == len(keys):
                    debug(f"table: row {row.index} keys don't fit {keys}")
                    return None
                row_cells[column] = child
                column += 1
            cells[row.index] = row_cells
        return cells

    def _columns(
        self: TableFormatter,
        first_row: Node,
        cells: dict[int, list[int | None]],
    ) -> list[ColumnStats] | None:
        options = self.options
        is_object = first_row.kind == JsonValueKind.OBJECT
        width = len(next(iter(cells.values())))
        columns = [ColumnStats(options.number_list_alignment) for _ in range(width)]

        for row_cells in cells.values():
            for column, cell in zip(columns, row_cells):
                if cell is None:
                    continue
                node = self.document[cell]
                metrics = self.metrics[cell]
                if node.is_container and (
                    metrics.contains_comments
                    or metrics.complexity > options.max_inline_complexity
                ):
                    debug(f"table: cell {cell} is too complex for one line")
                    return None
                if is_object and column.key is None:
                    column.key = node.key
                    column.key_length = metrics.key_width
                column.update(node.kind, node.text, metrics.inline_width)
        return columns

    def row_comments(self: TableFormatter, row: int) -> list[CommentToken]:
        """Comments written after a table row: those of its cells, then its own."""
        comments = []
        for cell in self.document[row].children:
            slots = self.attachments.get(cell)
            comments += slots.leading + slots.trailing
        return comments + self.attachments.get(row).trailing

    def format_row(
        self: TableFormatter,
        plan: ColumnPlan,
        row: int,
        cell_text: Callable[[int], str],
    ) -> str:
        """Format a row on a single line, with padding to line up with its siblings."""
        options = self.options
        row_cells = plan.cells[row]
        last_present = max(i for i, cell in enumerate(row_cells) if cell is not None)
        last_column = len(plan.columns) - 1
        gap = " " * (len(options.comma_str) - 1)

        buffer = []
        for index, (column, cell) in enumerate(zip(plan.columns, row_cells)):
            segment_width = plan.segment_width(column, options)
            if cell is None:
                # This row doesn't have this particular cell. Pad it out.
                skip_length = segment_width
                if index < last_column:
                    skip_length += len(options.comma_str)
                buffer.append(" " * skip_length)
                continue

            text, width = column.format_value(
                cell_text(cell),
                self.metrics[cell].inline_width,
            )
            if plan.is_object:
                text = column.key + options.colon_str + text
                width += column.key_length + len(options.colon_str)

            if index < last_present:
                buffer += [pad_cell(text, width, segment_width, options, comma=True), gap]
            elif index < last_column:
                buffer += [text, " " * (segment_width - width + len(options.comma_str))]
            else:
                buffer += [text, " " * (segment_width - width)]

        opening, closing = self.document[row].brackets
        padding = " " if plan.bracket_padding else ""
        return "".join([opening, padding, *buffer, padding, closing])


def number_column(
    document: Document,
    metrics: list[NodeMetrics],
    index: int,
    options: FormatOptions,
) -> ColumnStats | None:
    """Stats for lining up an array of numbers written one or several per line."""
    node = document[index]
    if (
        options.number_list_alignment == NumberListAlignment.NONE
        or node.kind != JsonValueKind.ARRAY
        or len(node.children) < 2  # noqa: PLR2004
    ):
        return None
    column = ColumnStats(options.number_list_alignment)
    for child in node.children:
        if document[child].kind != JsonValueKind.NUMBER:
            return None
        column.update(JsonValueKind.NUMBER, document[child].text, metrics[child].inline_width)
    return column
