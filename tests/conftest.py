"""
Shared pytest fixtures for pipefilter tests.

This module provides common fixtures including:
- FilterScripts: small executable filter programs written to a temp dir
- Registries and plugins wired to those programs
"""

import os
import stat
import sys
from pathlib import Path
from typing import Dict

import pytest
import yaml

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pipefilter.modules.registry.registry import ProgramEntry, ProgramRegistry
from pipefilter.modules.transformations.text_plain_external import TextPlainExternal


posix_only = pytest.mark.skipif(
    sys.platform == "win32", reason="External filter programs require a POSIX shell"
)


# =============================================================================
# Filter Program Scripts
# =============================================================================

SCRIPTS: Dict[str, str] = {
    "upper": "tr '[:lower:]' '[:upper:]'",
    "cat": "cat",
    "args": "cat > /dev/null\nprintf '%s\\n' \"$@\"",
    "fail": "cat\nexit 3",
    "sleep": "exec sleep 30",
    "no_stdin": "printf 'ignored input'",
}


class FilterScripts:
    """
    Executable shell scripts used as external filter programs.

    Usage:
        def test_something(filter_scripts):
            path = filter_scripts.path("upper")
    """

    def __init__(self, directory: Path):
        self.directory = directory
        self._paths: Dict[str, str] = {}
        for name, body in SCRIPTS.items():
            self._paths[name] = self._write(name, body)

    def _write(self, name: str, body: str) -> str:
        script = self.directory / f"{name}.sh"
        script.write_text(f"#!/bin/sh\n{body}\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IRUSR)
        return str(script)

    def path(self, name: str) -> str:
        return self._paths[name]

    def entry(self, index: int, name: str, args: str = "") -> ProgramEntry:
        return ProgramEntry(index=index, path=self.path(name), args=args)


@pytest.fixture
def filter_scripts(tmp_path):
    """Fixture that provides executable filter scripts in a temp directory."""
    return FilterScripts(tmp_path)


@pytest.fixture
def registry(filter_scripts):
    """Registry with the uppercasing filter at 0 and cat at 1."""
    return ProgramRegistry([
        filter_scripts.entry(0, "upper"),
        filter_scripts.entry(1, "cat"),
    ])


@pytest.fixture
def plugin(registry):
    """Text/Plain external plugin over the default test registry."""
    return TextPlainExternal(registry=registry, timeout_seconds=10)


@pytest.fixture
def empty_plugin():
    """Plugin with no programs configured."""
    return TextPlainExternal(registry=ProgramRegistry())


@pytest.fixture
def write_config(tmp_path):
    """Fixture that writes a YAML config file and returns its path."""

    def _write(config: dict, name: str = "pipefilter.yaml") -> str:
        path = tmp_path / name
        with open(path, "w") as f:
            yaml.safe_dump(config, f)
        return str(path)

    return _write


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "subprocess: Tests that spawn real external programs"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
