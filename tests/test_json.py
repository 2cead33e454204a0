import logging
import re
from pathlib import Path

import compact_jsonc
from compact_jsonc import Formatter

logger = logging.getLogger(compact_jsonc.__name__)


test_data_path = Path(__file__).parent / "data"


def read_reference(ref_filename):
    """Split a reference file into its option overrides and expected output."""
    options = {}
    ref_json = ""
    with open(ref_filename, encoding="utf-8") as f:
        for line in f.readlines():
            if line.startswith("@"):
                (param, value) = re.split(r"\s*=\s*", line[1:], maxsplit=1)
                options[param] = eval(value.strip(), vars(compact_jsonc))  # noqa: S307
            else:
                ref_json += line
    # No final newline
    return options, ref_json.rstrip("\n")


def test_json(pytestconfig):
    if pytestconfig.getoption("test_verbose"):
        print("\n")

    if pytestconfig.getoption("test_debug"):
        logger.setLevel("DEBUG")

    if pytestconfig.getoption("test_file") is not None:
        ref_filename = pytestconfig.getoption("test_file")
        source_filenames = [Path(re.sub(r"[.]ref.*", ".jsonc", ref_filename))]
    else:
        source_filenames = sorted(test_data_path.glob("*.jsonc"))
    assert source_filenames

    for source_filename in source_filenames:
        source = source_filename.read_text(encoding="utf-8")

        if pytestconfig.getoption("test_file") is not None:
            ref_filenames = [Path(pytestconfig.getoption("test_file"))]
        else:
            ref_filenames = sorted(test_data_path.glob(source_filename.stem + ".ref*"))
        assert ref_filenames, f"no reference output for {source_filename}"

        for ref_filename in ref_filenames:
            if pytestconfig.getoption("test_verbose"):
                print(f"*** Testing {ref_filename}")
            options, ref_json = read_reference(ref_filename)
            formatter = Formatter(**options)

            json_string = formatter.reformat(source)

            if pytestconfig.getoption("test_verbose") and json_string != ref_json:
                json_string_dbg = ">" + re.sub(r"\n", "<\n>", json_string) + "<"
                ref_json_dbg = ">" + re.sub(r"\n", "<\n>", ref_json) + "<"
                print("===== TEST")
                print(json_string_dbg)
                print("===== REF")
                print(ref_json_dbg)
                print("=====")

            assert json_string == ref_json, ref_filename.name
            # Formatting the output again changes nothing
            assert formatter.reformat(json_string) == json_string, ref_filename.name


def test_dump(tmp_path):
    tmp_file = tmp_path / "test.json"
    formatter = Formatter()
    formatter.dump({"bools": {"true": True, "false": False}}, output_file=tmp_file)
    assert tmp_file.read_text() == '{ "bools": {"true": true, "false": false} }\n'

    formatter.dump([1, 2], output_file=tmp_file, newline_at_eof=False)
    assert tmp_file.read_text() == "[1, 2]"


def test_dump_crlf(tmp_path):
    tmp_file = tmp_path / "test.json"
    formatter = Formatter(eol_style=compact_jsonc.EolStyle.CRLF, max_inline_complexity=0)
    formatter.dump({"a": 1}, output_file=tmp_file)
    assert tmp_file.read_bytes() == b'{\r\n    "a": 1\r\n}\r\n'
