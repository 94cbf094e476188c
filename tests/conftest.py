"""Pytest configuration for modaudit CLI tests."""

import shlex
import stat
import sys
import tempfile
import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def temp_root(tmp_path, monkeypatch):
    """Redirect tempfile to an empty directory so leftovers can be detected."""
    root = tmp_path / "tmp"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


@pytest.fixture
def make_tool(tmp_path):
    """Create a fake module tool executable backed by a Python script.

    Returns a factory taking the script source and returning the executable path.
    """

    def _make_tool(source: str, name: str = "go") -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)

        script = bin_dir / f"{name}_impl.py"
        script.write_text(textwrap.dedent(source))

        tool = bin_dir / name
        tool.write_text(
            f'#!/bin/sh\nexec {shlex.quote(sys.executable)} {shlex.quote(str(script))} "$@"\n'
        )
        tool.chmod(tool.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return tool

    return _make_tool


# Emits one module object per requested reference, surrounded by diagnostics
FAKE_GO_DOWNLOAD = """
import json
import os
import sys

args = sys.argv[1:]
if args[:3] != ["mod", "download", "-json"]:
    print(f"unexpected arguments: {args}", file=sys.stderr)
    sys.exit(2)

cwd_file = os.environ.get("FAKE_GO_CWD_FILE")
if cwd_file:
    with open(cwd_file, "w") as f:
        f.write(os.getcwd() + "\\n" + str(len(os.listdir(os.getcwd()))))

print("go: downloading modules", flush=True)
for ref in args[3:]:
    path, _, version = ref.rpartition("@")
    module = {
        "Path": path,
        "Version": version,
        "Dir": "/gopath/pkg/mod/" + ref,
        "Sum": "h1:" + version,
        "GoModSum": "h1:gomod",
    }
    print(json.dumps(module, indent="\\t"), flush=True)
print("go: done", flush=True)
"""


@pytest.fixture
def fake_go(make_tool):
    return make_tool(FAKE_GO_DOWNLOAD)
