#!/usr/bin/env python3
"""
Build script for iTerm2 Split/Merge.

Concatenates src/_header.py and the src/split_merge/ package modules into a
single iterm2-split-merge.py file, since iTerm2 AutoLaunch requires one .py file.

Usage:
    python build.py           # Build iterm2-split-merge.py
    python build.py --check   # Verify output matches (for CI)

Module order matters for dependencies:
1. _header.py          - PEP 723 metadata, docstring, imports
2. logging_config.py   - Loguru structured logging
3. errors.py           - Error/Result types
4. models.py           - Tab/Window/Snapshot
5. host.py             - WindowingHost protocol
6. iterm2_host.py      - iTerm2 backend
7. split.py            - Split operation
8. merge.py            - Merge operation
9. config_loader.py    - TOML config (needs merge target policies)
10. commands.py        - Command dispatch
11. main.py            - Entry point (RPC registration, iterm2.run_forever)
"""

import re
import sys
from pathlib import Path

ROOT = Path(__file__).parent
SRC_DIR = ROOT / "src"
PACKAGE_DIR = SRC_DIR / "split_merge"
HEADER_FILE = SRC_DIR / "_header.py"
OUTPUT_FILE = ROOT / "iterm2-split-merge.py"

# Module order (dependencies flow downward)
MODULE_ORDER = [
    "logging_config.py",
    "errors.py",
    "models.py",
    "host.py",
    "iterm2_host.py",
    "split.py",
    "merge.py",
    "config_loader.py",
    "commands.py",
    "main.py",
]

# Imports that should only appear once (in _header.py)
STDLIB_IMPORTS = {
    "import functools",
    "import json",
    "import re",
    "import subprocess",
    "import sys",
    "import tomllib",
    "import traceback",
    "from contextvars import ContextVar",
    "from dataclasses import dataclass",
    "from dataclasses import dataclass, field",
    "from enum import Enum",
    "from pathlib import Path",
    "from typing import Generic, TypeVar",
    "from typing import Protocol, Sequence",
    "from typing import Sequence",
    "from uuid import uuid4",
}

# External imports handled specially in _header.py
EXTERNAL_IMPORTS = {
    "import iterm2",
    "import platformdirs",
    "from loguru import logger",
}

RELATIVE_IMPORT = re.compile(r"^from \.\w* import ")


def strip_module_imports(content: str) -> str:
    """Remove imports already in _header.py and all intra-package imports."""
    lines = content.split("\n")
    result = []
    in_relative_import = False

    for line in lines:
        stripped = line.strip()
        if in_relative_import:
            # Continuation of a parenthesized relative import
            if stripped.endswith(")"):
                in_relative_import = False
            continue
        if RELATIVE_IMPORT.match(line):
            if stripped.endswith("(") or ("(" in stripped and not stripped.endswith(")")):
                in_relative_import = True
            continue
        if stripped in STDLIB_IMPORTS or stripped in EXTERNAL_IMPORTS:
            continue
        if stripped.startswith("from loguru import"):
            continue
        if stripped.startswith("import iterm2"):
            continue
        result.append(line)

    return "\n".join(result)


def strip_module_docstring(content: str) -> str:
    """Remove module-level docstring (we use the one from _header.py)."""
    pattern = r'^((?:#[^\n]*\n)*)\s*(?:\'\'\'[\s\S]*?\'\'\'|"""[\s\S]*?""")\s*\n'
    return re.sub(pattern, r'\1', content)


def process_module(path: Path, is_header: bool = False) -> str:
    """Process a single module file for concatenation."""
    content = path.read_text()

    if is_header:
        return content

    if content.startswith("#!"):
        content = "\n".join(content.split("\n")[1:])

    content = strip_module_imports(content)
    content = strip_module_docstring(content)

    return content.strip()


def build() -> str:
    """Build the concatenated output."""
    parts = [process_module(HEADER_FILE, is_header=True)]

    for module_name in MODULE_ORDER:
        module_path = PACKAGE_DIR / module_name
        if not module_path.exists():
            print(f"ERROR: Missing module: {module_path}", file=sys.stderr)
            sys.exit(1)

        content = process_module(module_path)
        if content:
            separator = f"\n\n# {'=' * 77}\n# Module: {module_name}\n# {'=' * 77}\n\n"
            parts.append(separator)
            parts.append(content)

    return "".join(parts) + "\n"


def main():
    check_mode = "--check" in sys.argv

    if not PACKAGE_DIR.exists():
        print(f"ERROR: package directory not found: {PACKAGE_DIR}", file=sys.stderr)
        sys.exit(1)

    output = build()

    if check_mode:
        if not OUTPUT_FILE.exists():
            print(f"ERROR: Output file not found: {OUTPUT_FILE}", file=sys.stderr)
            sys.exit(1)

        existing = OUTPUT_FILE.read_text()
        if existing != output:
            print("ERROR: Built output differs from existing file.", file=sys.stderr)
            print("Run 'python build.py' to regenerate.", file=sys.stderr)
            sys.exit(1)

        print("OK: Output matches.")
        sys.exit(0)

    OUTPUT_FILE.write_text(output)

    import py_compile
    try:
        py_compile.compile(str(OUTPUT_FILE), doraise=True)
        print(f"Built: {OUTPUT_FILE} ({len(output)} bytes, syntax OK)")
    except py_compile.PyCompileError as e:
        print(f"ERROR: Syntax error in output: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
