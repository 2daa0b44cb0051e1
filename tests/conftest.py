"""Shared test fixtures."""

import io
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from rubocheck.project.models import ModuleContext, SdkDescriptor

REPORT: dict[str, Any] = {
    "metadata": {
        "rubocop_version": "1.57.2",
        "ruby_engine": "ruby",
        "ruby_version": "3.2.2",
        "ruby_patchlevel": "53",
        "ruby_platform": "x86_64-linux",
    },
    "files": [
        {
            "path": "app/foo.rb",
            "offenses": [
                {
                    "severity": "convention",
                    "message": "Missing frozen string literal comment.",
                    "cop_name": "Style/FrozenStringLiteralComment",
                    "corrected": False,
                    "correctable": True,
                    "location": {
                        "start_line": 1,
                        "start_column": 1,
                        "last_line": 1,
                        "last_column": 1,
                        "length": 1,
                        "line": 1,
                        "column": 1,
                    },
                }
            ],
        },
        {"path": "app/bar.rb", "offenses": []},
    ],
    "summary": {"offense_count": 1, "target_file_count": 2, "inspected_file_count": 2},
}


class FakeProcess:
    """Stand-in for subprocess.Popen with in-memory pipes."""

    def __init__(self, stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> None:
        self.stdout = io.BytesIO(stdout)
        self.stderr = io.BytesIO(stderr)
        self.pid = 4242
        self.returncode: int | None = None
        self.exit_code = returncode
        self.wait_calls = 0
        self.terminated = False

    def poll(self) -> int | None:
        return self.returncode

    def wait(self, timeout: float | None = None) -> int:
        self.wait_calls += 1
        if self.returncode is None:
            self.returncode = self.exit_code
        return self.returncode

    def terminate(self) -> None:
        self.terminated = True
        self.returncode = -15

    def kill(self) -> None:
        self.returncode = -9


class FakePopen:
    """Callable recording launches and returning a FakeProcess (or raising)."""

    def __init__(self, process: FakeProcess | None = None, error: OSError | None = None) -> None:
        self.process = process or FakeProcess()
        self.error = error
        self.calls: list[tuple[list[str], dict[str, Any]]] = []

    def __call__(self, args: list[str], **kwargs: Any) -> FakeProcess:
        self.calls.append((args, kwargs))
        if self.error is not None:
            raise self.error
        return self.process


@pytest.fixture
def report_json() -> str:
    return json.dumps(REPORT)


@pytest.fixture
def ruby_sdk() -> SdkDescriptor:
    return SdkDescriptor(name="ruby-3.2.2", home_path=Path("/opt/ruby/bin/ruby"))


@pytest.fixture
def ruby_module(tmp_path: Path, ruby_sdk: SdkDescriptor) -> ModuleContext:
    return ModuleContext(name="app", content_roots=[tmp_path], sdk=ruby_sdk)


@pytest.fixture
def make_popen() -> Callable[..., FakePopen]:
    """Factory for FakePopen instances wrapping a FakeProcess."""

    def _make(
        stdout: bytes = b"",
        stderr: bytes = b"",
        returncode: int = 0,
        error: OSError | None = None,
    ) -> FakePopen:
        return FakePopen(FakeProcess(stdout, stderr, returncode), error)

    return _make
