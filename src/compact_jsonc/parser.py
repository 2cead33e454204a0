"""Turn JSONC text into a Document using a lark grammar."""

from __future__ import annotations

import logging

from lark import Lark, Token, Tree, UnexpectedInput

from compact_jsonc.document import (
    CommentKind,
    CommentToken,
    Document,
    JsonValueKind,
    Node,
)
from compact_jsonc.errors import NestingDepthError, ParseError

logger = logging.getLogger(__name__)
debug = logger.debug

MAX_NESTING_DEPTH = 256

JSONC_GRAMMAR = r"""
    start: value

    ?value: object
          | array
          | scalar

    object: LBRACE (member ("," member)* ","?)? RBRACE
    member: STRING ":" value
    array: LSQB (value ("," value)* ","?)? RSQB
    scalar: STRING | NUMBER | TRUE | FALSE | NULL

    LBRACE: "{"
    RBRACE: "}"
    LSQB: "["
    RSQB: "]"
    TRUE: "true"
    FALSE: "false"
    NULL: "null"
    STRING: /"(?:[^"\\\n\r]|\\.)*"/
    NUMBER: /-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?/

    %import common.WS
    %import common.CPP_COMMENT
    %import common.C_COMMENT
    %ignore WS
    %ignore CPP_COMMENT
    %ignore C_COMMENT
"""

_COMMENT_KINDS = {"CPP_COMMENT": CommentKind.LINE, "C_COMMENT": CommentKind.BLOCK}

_SCALAR_KINDS = {
    "STRING": JsonValueKind.STRING,
    "NUMBER": JsonValueKind.NUMBER,
    "TRUE": JsonValueKind.BOOLEAN,
    "FALSE": JsonValueKind.BOOLEAN,
    "NULL": JsonValueKind.NULL,
}

_parser = Lark(JSONC_GRAMMAR, parser="lalr", lexer="basic")


def normalise_source(text: str) -> str:
    """Drop a byte order mark and convert CRLF line endings."""
    if text.startswith("\ufeff"):
        text = text[1:]
    return text.replace("\r\n", "\n").replace("\r", "\n")


def parse_document(text: str) -> Document:
    """Parse JSONC text into a Document.

    Raises ParseError on malformed input and NestingDepthError if containers nest
    deeper than MAX_NESTING_DEPTH.
    """
    source = normalise_source(text)
    try:
        tree = _parser.parse(source)
    except UnexpectedInput as exc:
        message = str(exc).strip().splitlines()[0]
        raise ParseError(message, exc.line, exc.column) from exc

    comments = tuple(
        CommentToken(
            kind=_COMMENT_KINDS[token.type],
            text=token.value.rstrip() if token.type == "CPP_COMMENT" else token.value,
            line=token.line,
            column=token.column,
            offset=token.start_pos,
        )
        for token in _parser.lex(source, dont_ignore=True)
        if token.type in _COMMENT_KINDS
    )

    nodes = _build_nodes(tree.children[0])
    debug(f"parse_document: {len(nodes)} nodes, {len(comments)} comments")
    return Document(nodes=nodes, comments=comments)


def _build_nodes(root: Tree) -> tuple[Node, ...]:
    """Flatten the parse tree into pre-order nodes without recursion."""
    fields: list[dict] = []
    children: list[list[int]] = []

    # (tree, key token, parent index, depth)
    stack: list[tuple[Tree, Token | None, int, int]] = [(root, None, -1, 0)]
    while stack:
        tree, key, parent, depth = stack.pop()
        index = len(fields)
        if parent >= 0:
            children[parent].append(index)
        children.append([])

        if tree.data == "scalar":
            token = tree.children[0]
            kind = _SCALAR_KINDS[token.type]
            text = str(token)
            value_pos = token.start_pos
            end_pos = token.end_pos
            end_line = token.end_line
        else:
            opening, closing = tree.children[0], tree.children[-1]
            if depth >= MAX_NESTING_DEPTH:
                msg = f"containers nested deeper than {MAX_NESTING_DEPTH} levels"
                raise NestingDepthError(msg, opening.line, opening.column)
            kind = JsonValueKind.OBJECT if tree.data == "object" else JsonValueKind.ARRAY
            text = ""
            value_pos = opening.start_pos
            end_pos = closing.end_pos
            end_line = closing.end_line
            for child in reversed(tree.children[1:-1]):
                if kind == JsonValueKind.OBJECT:
                    stack.append((child.children[1], child.children[0], index, depth + 1))
                else:
                    stack.append((child, None, index, depth + 1))

        fields.append(
            {
                "index": index,
                "kind": kind,
                "text": text,
                "key": None if key is None else str(key),
                "parent": parent,
                "depth": depth,
                "start_pos": value_pos if key is None else key.start_pos,
                "value_pos": value_pos,
                "end_pos": end_pos,
                "end_line": end_line,
            },
        )

    return tuple(
        Node(children=tuple(kids), **node_fields)
        for node_fields, kids in zip(fields, children)
    )
