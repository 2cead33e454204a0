"""Choose a layout mode for every container, from the root down."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from compact_jsonc.document import JsonValueKind
from compact_jsonc.table import ColumnPlan, ColumnStats, TableFormatter, number_column

if TYPE_CHECKING:
    from compact_jsonc.comments import Attachments
    from compact_jsonc.document import Document, Node
    from compact_jsonc.metrics import NodeMetrics
    from compact_jsonc.options import FormatOptions

logger = logging.getLogger(__name__)
debug = logger.debug


class Format(IntEnum):
    """Format type enumeration."""

    INLINE = auto()
    COMPACT_PACKED = auto()
    TABLE = auto()
    EXPANDED = auto()


@dataclass(frozen=True)
class LayoutPlan:
    """How one container is written.

    ``name_width`` is the width member names are padded to (0 for no padding),
    ``table`` is only set for TABLE and ``numbers`` only for arrays of numbers
    written one or several per line.
    """

    format: Format
    name_width: int = 0
    table: ColumnPlan | None = None
    numbers: ColumnStats | None = None


def plan_layout(
    document: Document,
    metrics: list[NodeMetrics],
    attachments: Attachments,
    options: FormatOptions,
) -> dict[int, LayoutPlan]:
    """Pick a Format for each container that isn't written inside an inlined parent.

    Decisions are made greedily from the root down and never revisited. Containers
    inside an INLINE, COMPACT_PACKED or TABLE parent get no plan of their own: they
    are always written on one line.
    """
    tables = TableFormatter(document, metrics, attachments, options)
    prefix_width = options.str_len(options.prefix_string)
    plans: dict[int, LayoutPlan] = {}

    # (node index, column where the value starts, width of what follows it)
    stack = [(document.root, prefix_width, 0)]
    while stack:
        index, column, suffix = stack.pop()
        node = document[index]
        plan = _choose(node, column, suffix, document, metrics, attachments, tables, options)
        plans[index] = plan
        debug(f"plan_layout: node {index} at column {column} -> {plan.format.name}")

        if plan.format != Format.EXPANDED:
            continue

        child_column = prefix_width + options.indent_width * (node.depth + 1)
        last = len(node.children) - 1
        for position, child in reversed(list(enumerate(node.children))):
            if not document[child].is_container:
                continue
            start = child_column
            if node.kind == JsonValueKind.OBJECT:
                start += (plan.name_width or metrics[child].key_width) + len(options.colon_str)
            comma = 1 if position < last or options.allow_trailing_commas else 0
            stack.append((child, start, comma))

    return plans


def _choose(  # noqa: PLR0913
    node: Node,
    column: int,
    suffix: int,
    document: Document,
    metrics: list[NodeMetrics],
    attachments: Attachments,
    tables: TableFormatter,
    options: FormatOptions,
) -> LayoutPlan:
    node_metrics = metrics[node.index]
    if not node.children and not attachments.get(node.index).inner:
        return LayoutPlan(Format.INLINE)

    single_line_ok = (
        node.depth > options.always_expand_depth
        and not node_metrics.contains_comments
        and node_metrics.complexity <= options.max_inline_complexity
    )
    if single_line_ok:
        if column + node_metrics.inline_width + suffix <= options.max_total_line_length:
            return LayoutPlan(Format.INLINE)
        debug(f"plan_layout: node {node.index} too wide to inline")

    if (
        single_line_ok
        and node.kind == JsonValueKind.ARRAY
        and node_metrics.complexity <= options.max_compact_array_complexity
        and len(node.children) >= options.min_compact_array_row_items
        and all(document[child].kind != JsonValueKind.OBJECT for child in node.children)
    ):
        return LayoutPlan(
            Format.COMPACT_PACKED,
            numbers=number_column(document, metrics, node.index, options),
        )

    longest_name = 0
    name_width = 0
    if node.kind == JsonValueKind.OBJECT and node.children:
        key_widths = [metrics[child].key_width for child in node.children]
        longest_name = max(key_widths)
        if longest_name - min(key_widths) <= options.max_prop_name_padding:
            name_width = longest_name

    table = tables.plan(node.index)
    if table is not None:
        row_column = options.str_len(options.prefix_string)
        row_column += options.indent_width * (node.depth + 1)
        if node.kind == JsonValueKind.OBJECT:
            row_column += longest_name + len(options.colon_str)
        if row_column + table.row_width(options) + 1 <= options.max_total_line_length:
            return LayoutPlan(Format.TABLE, name_width=name_width, table=table)
        debug(f"plan_layout: table rows of node {node.index} are too wide")

    return LayoutPlan(
        Format.EXPANDED,
        name_width=name_width if options.align_expanded_property_names else 0,
        numbers=number_column(document, metrics, node.index, options),
    )
