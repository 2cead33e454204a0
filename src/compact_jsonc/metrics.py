"""Bottom-up measurements of every node: complexity, inline width and shape."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from compact_jsonc.document import JsonValueKind

if TYPE_CHECKING:
    from compact_jsonc.comments import Attachments
    from compact_jsonc.document import Document
    from compact_jsonc.options import FormatOptions

logger = logging.getLogger(__name__)
debug = logger.debug


@dataclass(frozen=True)
class NodeMetrics:
    """Data about a JSON element that drives how it can be laid out."""

    complexity: int
    inline_width: int
    key_width: int
    signature: tuple
    contains_comments: bool


def analyze(
    document: Document,
    attachments: Attachments,
    options: FormatOptions,
) -> list[NodeMetrics]:
    """Compute metrics for every node, indexed like the document.

    Children always come after their parent in the document, so walking the
    nodes backwards visits every child before its parent.
    """
    metrics: list[NodeMetrics | None] = [None] * len(document)
    for node in reversed(document.nodes):
        key_width = 0 if node.key is None else options.str_len(node.key)
        owns_comments = attachments.owns_comments(node.index)

        if not node.is_container:
            metrics[node.index] = NodeMetrics(
                complexity=0,
                inline_width=options.str_len(node.text),
                key_width=key_width,
                signature=("scalar", node.kind),
                contains_comments=owns_comments,
            )
            continue

        children = [metrics[child] for child in node.children]
        if not children:
            metrics[node.index] = NodeMetrics(
                complexity=0,
                inline_width=3 if options.simple_bracket_padding else 2,
                key_width=key_width,
                signature=_signature(document, node.index),
                contains_comments=owns_comments,
            )
            continue

        complexity = max(child.complexity for child in children) + 1
        width = 2 + (2 if options.bracket_padding(complexity) else 0)
        width += (len(children) - 1) * len(options.comma_str)
        width += sum(child.inline_width for child in children)
        if node.kind == JsonValueKind.OBJECT:
            width += sum(child.key_width for child in children)
            width += len(children) * len(options.colon_str)

        metrics[node.index] = NodeMetrics(
            complexity=complexity,
            inline_width=width,
            key_width=key_width,
            signature=_signature(document, node.index),
            contains_comments=owns_comments
            or any(child.contains_comments for child in children),
        )

    return metrics


def _signature(document: Document, index: int) -> tuple:
    """Structural fingerprint used to group table rows."""
    node = document[index]
    if node.kind == JsonValueKind.OBJECT:
        return tuple(document[child].key for child in node.children)

    kinds = {document[child].kind for child in node.children}
    if not kinds:
        return ("array", "empty")
    if kinds & {JsonValueKind.ARRAY, JsonValueKind.OBJECT}:
        return ("array", "container")
    if len(kinds) > 1:
        return ("array", "non-uniform")
    return ("array", "uniform", kinds.pop())
