"""
Tests for the AutoLaunch single-file build.
"""

import build


def test_strips_relative_and_header_imports():
    source = "\n".join([
        "import json",
        "from loguru import logger",
        "from .errors import Error, ErrorReport",
        "from .commands import (",
        "    MERGE_COMMAND,",
        "    SPLIT_COMMAND,",
        ")",
        "import shutil",
        "",
        "VALUE = 1",
    ])

    assert build.strip_module_imports(source) == "import shutil\n\nVALUE = 1"


def test_strips_module_docstring_after_comments():
    source = '# Banner\n"""Docstring."""\n\nVALUE = 1\n'

    assert build.strip_module_docstring(source) == "# Banner\nVALUE = 1\n"


def test_built_script_is_valid_python():
    output = build.build()

    compile(output, str(build.OUTPUT_FILE), "exec")
    assert output.startswith("#!/usr/bin/env python3")
    for module_name in build.MODULE_ORDER:
        assert f"# Module: {module_name}" in output
    assert "from ." not in output
