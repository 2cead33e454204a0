"""Parsed JSONC document: an arena of immutable nodes plus the comment tokens."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import NamedTuple


class JsonValueKind(IntEnum):
    """JSON token enumeration."""

    NULL = auto()
    BOOLEAN = auto()
    NUMBER = auto()
    STRING = auto()
    ARRAY = auto()
    OBJECT = auto()


class CommentKind(IntEnum):
    """Comment token enumeration."""

    LINE = auto()
    BLOCK = auto()


@dataclass(frozen=True)
class CommentToken:
    """A comment as found in the source.

    The position is only used to attach the comment to a node.
    """

    kind: CommentKind
    text: str
    line: int
    column: int
    offset: int


@dataclass(frozen=True)
class Node:
    """One JSON value.

    Object members carry their raw key text (quotes included). Positions are
    character offsets into the normalised source; for members ``start_pos``
    is the start of the key.
    """

    index: int
    kind: JsonValueKind
    text: str
    key: str | None
    parent: int
    depth: int
    children: tuple[int, ...]
    start_pos: int
    value_pos: int
    end_pos: int
    end_line: int

    @property
    def is_container(self: Node) -> bool:
        return self.kind in (JsonValueKind.ARRAY, JsonValueKind.OBJECT)

    @property
    def brackets(self: Node) -> tuple[str, str]:
        return ("{", "}") if self.kind == JsonValueKind.OBJECT else ("[", "]")


@dataclass(frozen=True)
class Document:
    """The nodes of a document in pre-order, and its comments in source order."""

    nodes: tuple[Node, ...]
    comments: tuple[CommentToken, ...]

    root = 0

    def __len__(self: Document) -> int:
        return len(self.nodes)

    def __getitem__(self: Document, index: int) -> Node:
        return self.nodes[index]


class NumberParts(NamedTuple):
    """A number literal split around its decimal point."""

    integer: str
    fraction: str


_NUMBER_RE = re.compile(r"(-?[0-9]+)((?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?)")


def split_number(text: str) -> NumberParts:
    """Split a number into sign and integer digits, and the rest.

    The second part holds the decimal point, the fraction digits and any exponent.
    """
    match = _NUMBER_RE.fullmatch(text)
    if match is None:
        return NumberParts(text, "")
    return NumberParts(match.group(1), match.group(2))
