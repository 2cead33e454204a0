import argparse
import logging
import sys

import compact_jsonc
from compact_jsonc import (
    CommentPolicy,
    CompactJsonError,
    EolStyle,
    Formatter,
    FormatOptions,
    NumberListAlignment,
    TableCommaPlacement,
    _get_version,
)

logger = logging.getLogger(compact_jsonc.__name__)

STDIN = "-"


def indent_value(value: str) -> str:
    if value == "tab":
        return value
    try:
        return int(value)
    except ValueError:
        msg = f"expected a number of spaces or 'tab', not {value!r}"
        raise argparse.ArgumentTypeError(msg) from None


def command_line_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compact-jsonc",
        description="Format JSON and JSONC into compact, human readable form",
    )
    parser.add_argument("-V", "--version", action="store_true")

    parser.add_argument(
        "--output",
        "-o",
        action="append",
        help="The output file name(s). The number of output file names must match "
        "the number of input files.",
    )
    parser.add_argument(
        "--check",
        default=False,
        action="store_true",
        help="Don't write anything; exit with status 1 if any file would change",
    )
    parser.add_argument(
        "--align-expanded-property-names",
        "--align-properties",
        action="store_true",
        default=False,
        help="Align property names of expanded objects",
    )
    parser.add_argument(
        "--allow-trailing-commas",
        action="store_true",
        default=False,
        help="Add a comma after the last element of multi-line arrays and objects",
    )
    parser.add_argument(
        "--always-expand-depth",
        metavar="N",
        type=int,
        default=-1,
        help="Depth at which arrays/objects are always fully expanded "
        "(-1=never, 0=root, 1=children; default=-1)",
    )
    parser.add_argument(
        "--colon-before-prop-name-padding",
        action="store_true",
        default=False,
        help='Write aligned property names as "a":   1 rather than "a"   : 1',
    )
    parser.add_argument(
        "--comment-policy",
        choices=["preserve", "remove"],
        default="preserve",
        help="Keep or drop comments (default=preserve)",
    )
    parser.add_argument(
        "--crlf",
        default=False,
        action="store_true",
        help="Use Windows-style CRLF line endings",
    )
    parser.add_argument(
        "--debug",
        default=False,
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--east-asian-chars",
        default=False,
        action="store_true",
        help="Treat strings as unicode East Asian characters",
    )
    parser.add_argument(
        "--eol-style",
        choices=["lf", "crlf"],
        default="lf",
        help="Line endings to write (default=lf)",
    )
    parser.add_argument(
        "--indent-spaces",
        "--indent",
        "-i",
        metavar="N|tab",
        type=indent_value,
        default=4,
        help="Indent N spaces, or a tab per level (default=4)",
    )
    parser.add_argument(
        "--json",
        "-j",
        dest="plain_json",
        action="store_true",
        default=False,
        help="Write plain JSON: drop comments and use LF line endings",
    )
    parser.add_argument(
        "--keep-trailing-whitespace",
        default=False,
        action="store_true",
        help="Don't remove trailing whitespace from output lines",
    )
    parser.add_argument(
        "--max-compact-array-complexity",
        metavar="N",
        type=int,
        default=2,
        help="Maximum nesting of arrays packed over multiple lines, 0 disables (default=2)",
    )
    parser.add_argument(
        "--max-inline-complexity",
        metavar="N",
        type=int,
        default=2,
        help="Maximum nesting: 0=basic types, 1=object/array, 2=all (default=2)",
    )
    parser.add_argument(
        "--max-total-line-length",
        "-l",
        metavar="N",
        type=int,
        default=120,
        help="Limit lines to N chars, including indentation and property names "
        "(default=120)",
    )
    parser.add_argument(
        "--max-prop-name-padding",
        metavar="N",
        type=int,
        default=40,
        help="Don't align property names needing more than N spaces (default=40)",
    )
    parser.add_argument(
        "--max-table-row-complexity",
        metavar="N",
        type=int,
        default=3,
        help="Maximum nesting of rows written as a table (default=3)",
    )
    parser.add_argument(
        "--min-compact-array-row-items",
        metavar="N",
        type=int,
        default=0,
        help="Don't pack arrays with fewer than N items over multiple lines (default=0)",
    )
    parser.add_argument(
        "--no-colon-padding",
        action="store_true",
        default=False,
        help="Don't include a space after property colons",
    )
    parser.add_argument(
        "--no-comma-padding",
        action="store_true",
        default=False,
        help="Don't include a space after commas separating array items and properties",
    )
    parser.add_argument(
        "--no-comment-padding",
        action="store_true",
        default=False,
        help="Don't include a space before comments following a value",
    )
    parser.add_argument(
        "--no-nested-bracket-padding",
        action="store_true",
        default=False,
        help="Don't add spaces inside brackets of inlined nested arrays/objects",
    )
    parser.add_argument(
        "--number-list-alignment",
        choices=["none", "left", "decimal"],
        default="decimal",
        help="How numbers in columns are lined up (default=decimal)",
    )
    parser.add_argument(
        "--prefix-string",
        metavar="STRING",
        help="String attached to the beginning of every line",
    )
    parser.add_argument(
        "--simple-bracket-padding",
        action="store_true",
        default=False,
        help="Add spaces inside brackets of inlined arrays/objects without nesting",
    )
    parser.add_argument(
        "--tab-indent",
        default=False,
        action="store_true",
        help="Use tabs to indent",
    )
    parser.add_argument(
        "--table-comma-placement",
        choices=["before-padding", "after-padding"],
        default="before-padding",
        help="Put commas in tables before or after the column padding "
        "(default=before-padding)",
    )

    parser.add_argument(
        "json",
        nargs="*",
        help='JSON or JSONC file(s) to format in place (or stdin with "-")',
    )
    return parser


def options_from_args(args: argparse.Namespace) -> FormatOptions:
    use_tabs = args.tab_indent or args.indent_spaces == "tab"
    crlf = (args.crlf or args.eol_style == "crlf") and not args.plain_json
    comment_policy = "remove" if args.plain_json else args.comment_policy
    return FormatOptions(
        eol_style=EolStyle.CRLF if crlf else EolStyle.LF,
        max_total_line_length=args.max_total_line_length,
        max_inline_complexity=args.max_inline_complexity,
        max_compact_array_complexity=args.max_compact_array_complexity,
        max_table_row_complexity=args.max_table_row_complexity,
        min_compact_array_row_items=args.min_compact_array_row_items,
        always_expand_depth=args.always_expand_depth,
        indent_spaces=4 if args.indent_spaces == "tab" else args.indent_spaces,
        use_tab_to_indent=use_tabs,
        comment_policy=CommentPolicy[comment_policy.upper()],
        number_list_alignment=NumberListAlignment[args.number_list_alignment.upper()],
        table_comma_placement=TableCommaPlacement[
            args.table_comma_placement.upper().replace("-", "_")
        ],
        allow_trailing_commas=args.allow_trailing_commas,
        simple_bracket_padding=args.simple_bracket_padding,
        nested_bracket_padding=not args.no_nested_bracket_padding,
        colon_padding=not args.no_colon_padding,
        comma_padding=not args.no_comma_padding,
        comment_padding=not args.no_comment_padding,
        align_expanded_property_names=args.align_expanded_property_names,
        max_prop_name_padding=args.max_prop_name_padding,
        colon_before_prop_name_padding=args.colon_before_prop_name_padding,
        prefix_string=args.prefix_string or "",
        east_asian_string_widths=args.east_asian_chars,
        omit_trailing_whitespace=not args.keep_trailing_whitespace,
    )


def read_source(filename: str) -> str:
    if filename == STDIN:
        return sys.stdin.read()
    with open(filename, encoding="utf-8", newline="") as f:
        return f.read()


def write_output(filename: str, text: str) -> None:
    if filename == STDIN:
        sys.stdout.write(text)
        return
    with open(filename, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def main() -> None:  # noqa: C901
    parser = command_line_parser()

    def die(message: str) -> None:
        print(f"{parser.prog}: {message}", file=sys.stderr)
        sys.exit(1)

    args = parser.parse_args()
    if args.version:
        print(_get_version())
        return

    hdlr = logging.StreamHandler()
    hdlr.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
    logger.addHandler(hdlr)
    if args.debug:
        logger.setLevel("DEBUG")
    else:
        logger.setLevel("ERROR")

    try:
        try:
            formatter = Formatter(options_from_args(args))
        except CompactJsonError as e:
            die(str(e))

        in_files = args.json or [STDIN]
        out_files = args.output or in_files
        if len(in_files) != len(out_files):
            die("the numbers of input and output file names do not match")

        failed = False
        for fn_in, fn_out in zip(in_files, out_files):
            name = "<stdin>" if fn_in == STDIN else fn_in
            try:
                source = read_source(fn_in)
                formatted = formatter.reformat(source) + formatter.eol_str
            except (OSError, UnicodeDecodeError, CompactJsonError) as e:
                print(f"{parser.prog}: {name}: {e}", file=sys.stderr)
                failed = True
                continue

            if args.check:
                if formatted != source:
                    print(f"{parser.prog}: {name}: would reformat", file=sys.stderr)
                    failed = True
            elif fn_out == STDIN or fn_out != fn_in or formatted != source:
                logger.debug(f"writing {fn_out}")
                write_output(fn_out, formatted)

        if failed:
            sys.exit(1)
    finally:
        logger.removeHandler(hdlr)


if __name__ == "__main__":  # pragma: no cover
    # execute only if run as a script
    main()
