"""JSONC formatting package."""

import importlib.metadata

from compact_jsonc.errors import (  # noqa: F401
    CompactJsonError,
    InvalidOptionsError,
    NestingDepthError,
    ParseError,
)
from compact_jsonc.formatter import Formatter, format_jsonc  # noqa: F401
from compact_jsonc.layout import Format  # noqa: F401
from compact_jsonc.options import (  # noqa: F401
    CommentPolicy,
    EolStyle,
    FormatOptions,
    NumberListAlignment,
    TableCommaPlacement,
)

__version__ = importlib.metadata.version("compact-jsonc")


def _get_version() -> str:
    return __version__
