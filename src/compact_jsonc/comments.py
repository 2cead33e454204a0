"""Attach comment tokens to the nodes they describe."""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass, field
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from compact_jsonc.options import CommentPolicy

if TYPE_CHECKING:
    from compact_jsonc.document import CommentToken, Document, Node
    from compact_jsonc.options import FormatOptions

logger = logging.getLogger(__name__)
debug = logger.debug


class Slot(IntEnum):
    """Where an attached comment is written relative to its node."""

    LEADING_BEFORE = auto()
    TRAILING_ON_SAME_LINE = auto()
    INNER_TRAILING = auto()
    FOOTER = auto()


@dataclass(frozen=True)
class Attachment:
    """A comment bound to a node."""

    comment: CommentToken
    node: int
    slot: Slot


@dataclass
class CommentSlots:
    """Comments owned by one node, in source order within each slot."""

    leading: list[CommentToken] = field(default_factory=list)
    trailing: list[CommentToken] = field(default_factory=list)
    inner: list[CommentToken] = field(default_factory=list)
    footer: list[CommentToken] = field(default_factory=list)

    def __bool__(self: CommentSlots) -> bool:
        return bool(self.leading or self.trailing or self.inner or self.footer)

    def slot(self: CommentSlots, slot: Slot) -> list[CommentToken]:
        return {
            Slot.LEADING_BEFORE: self.leading,
            Slot.TRAILING_ON_SAME_LINE: self.trailing,
            Slot.INNER_TRAILING: self.inner,
            Slot.FOOTER: self.footer,
        }[slot]


_NO_COMMENTS = CommentSlots()


class Attachments:
    """Comment annotations for a document, keyed by node index."""

    def __init__(self: Attachments) -> None:
        self._by_node: dict[int, CommentSlots] = {}
        self._all: list[Attachment] = []

    def __len__(self: Attachments) -> int:
        return len(self._all)

    def __iter__(self):  # noqa: ANN204
        return iter(self._all)

    def add(self: Attachments, attachment: Attachment) -> None:
        slots = self._by_node.setdefault(attachment.node, CommentSlots())
        slots.slot(attachment.slot).append(attachment.comment)
        self._all.append(attachment)

    def get(self: Attachments, index: int) -> CommentSlots:
        return self._by_node.get(index, _NO_COMMENTS)

    def owns_comments(self: Attachments, index: int) -> bool:
        return index in self._by_node


def attach_comments(document: Document, options: FormatOptions) -> Attachments:
    """Bind each comment of the document to exactly one node.

    Comments are resolved in source order:

    * a comment on the same line as the end of the value before it trails that value;
    * a comment between a member's key and its value leads that member;
    * otherwise a comment leads the next value in the same container;
    * with no next value it goes inside the container, before the closing bracket;
    * at document level, comments after the root on later lines are its footer.

    A comment after a container's last element and a line break therefore belongs
    to the container, never to the last element.
    """
    attachments = Attachments()
    if options.comment_policy == CommentPolicy.REMOVE:
        debug(f"attach_comments: removing {len(document.comments)} comments")
        return attachments

    locator = _Locator(document)
    for comment in document.comments:
        node, slot = locator.resolve(comment)
        debug(f"attach_comments: {comment.text[:20]!r} -> node {node} {slot.name}")
        attachments.add(Attachment(comment, node, slot))
    return attachments


class _Locator:
    """Find the node and slot for a comment by descending from the root."""

    def __init__(self: _Locator, document: Document) -> None:
        self.document = document
        self.starts: dict[int, list[int]] = {}

    def child_starts(self: _Locator, node: Node) -> list[int]:
        if node.index not in self.starts:
            self.starts[node.index] = [
                self.document[child].start_pos for child in node.children
            ]
        return self.starts[node.index]

    def resolve(self: _Locator, comment: CommentToken) -> tuple[int, Slot]:
        document = self.document
        container: Node | None = None
        children: tuple[int, ...] = (document.root,)
        starts = [document[document.root].start_pos]

        while True:
            pos = bisect_right(starts, comment.offset)
            previous = document[children[pos - 1]] if pos else None
            if previous is not None and comment.offset < previous.end_pos:
                if previous.is_container and previous.value_pos < comment.offset:
                    container = previous
                    children = previous.children
                    starts = self.child_starts(previous)
                    continue
                # Between a member's key and its value.
                return previous.index, Slot.LEADING_BEFORE
            following = document[children[pos]] if pos < len(children) else None
            break

        if previous is not None and comment.line == previous.end_line:
            return previous.index, Slot.TRAILING_ON_SAME_LINE
        if following is not None:
            return following.index, Slot.LEADING_BEFORE
        if container is None:
            return document.root, Slot.FOOTER
        return container.index, Slot.INNER_TRAILING
