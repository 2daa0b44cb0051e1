"""Tests for the stream parser."""

import logging
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, TextIO
from unittest.mock import MagicMock

import pytest

from rubocheck.inspection.config import InspectionConfig
from rubocheck.inspection.parser import StreamParser
from rubocheck.inspection.process import ProcessRunner, RunningProcess
from rubocheck.inspection.result import RubocopResult


def _start(tmp_path: Path, popen: Any) -> RunningProcess:
    return ProcessRunner(popen=popen).start(["rubocop", "--format", "json"], tmp_path)


class TestStreamParser:
    """Test StreamParser.parse."""

    def test_parses_valid_report(
        self, tmp_path: Path, make_popen: Callable[..., Any], report_json: str
    ) -> None:
        running = _start(tmp_path, make_popen(stdout=report_json.encode()))
        try:
            result = StreamParser().parse(running)
        finally:
            running.close()

        assert isinstance(result, RubocopResult)
        assert result.summary.inspected_file_count == 2

    def test_malformed_output_logs_both_streams(
        self,
        tmp_path: Path,
        make_popen: Callable[..., Any],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """On decode failure stderr and the full stdout are logged."""
        popen = make_popen(
            stdout=b"Could not find gem 'rubocop' in locally installed gems.",
            stderr=b"Bundler::GemNotFound",
        )
        running = _start(tmp_path, popen)

        with caplog.at_level(logging.ERROR, logger="rubocheck.inspection.parser"):
            result = StreamParser().parse(running)
        running.close()

        assert result is None
        messages = [r.getMessage() for r in caplog.records]
        assert "Failed to parse RuboCop output." in messages
        assert "ERROR:\nBundler::GemNotFound" in messages
        assert "OUTPUT:\nCould not find gem 'rubocop' in locally installed gems." in messages

    def test_failure_replays_stdout_from_start(
        self,
        tmp_path: Path,
        make_popen: Callable[..., Any],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Bytes consumed by the decoder before failing are included in OUTPUT."""

        def partial_decoder(reader: TextIO) -> RubocopResult:
            reader.read(10)
            raise ValueError("truncated")

        stdout = b'{"metadata": {"rubocop_version": "1.0"'
        running = _start(tmp_path, make_popen(stdout=stdout))

        result = StreamParser(decoder=partial_decoder).parse(running)
        running.close()

        assert result is None
        assert f"OUTPUT:\n{stdout.decode()}" in [r.getMessage() for r in caplog.records]

    def test_failure_closes_streams(self, tmp_path: Path, make_popen: Callable[..., Any]) -> None:
        popen = make_popen(stdout=b"garbage")
        running = _start(tmp_path, popen)

        StreamParser().parse(running)

        assert popen.process.stdout.closed
        assert popen.process.stderr.closed
        running.close()

    def test_invalid_utf8_is_decode_failure(
        self, tmp_path: Path, make_popen: Callable[..., Any]
    ) -> None:
        running = _start(tmp_path, make_popen(stdout=b"\xff\xfe\xfa"))

        assert StreamParser().parse(running) is None
        running.close()

    def test_custom_decoder(self, tmp_path: Path, make_popen: Callable[..., Any]) -> None:
        expected = MagicMock(spec=RubocopResult)
        decoder = MagicMock(return_value=expected)
        running = _start(tmp_path, make_popen(stdout=b"{}"))

        result = StreamParser(decoder=decoder).parse(running)
        running.close()

        assert result is expected
        decoder.assert_called_once_with(running.stdout_reader)


class TestStreamParserWithRealProcess:
    """Decode failures against a real child whose stdout is still being written."""

    def test_early_failure_drains_pending_stdout(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A decoder failing on the first byte must not wait out the timeout."""
        size = 4 * 1024 * 1024
        script = (
            "import sys\n"
            "sys.stderr.write('rubocop: warning')\n"
            "sys.stderr.flush()\n"
            "sys.stdout.buffer.write(b'\\xff')\n"
            f"sys.stdout.buffer.write(b'x' * {size})\n"
            "sys.stdout.flush()\n"
        )
        runner = ProcessRunner(InspectionConfig(timeout_seconds=60))
        running = runner.start([sys.executable, "-c", script], tmp_path)

        started = time.monotonic()
        try:
            with caplog.at_level(logging.ERROR, logger="rubocheck.inspection.parser"):
                result = StreamParser().parse(running)
            code = running.wait()
        finally:
            running.close()

        assert result is None
        assert time.monotonic() - started < 30
        assert code == 0
        messages = [r.getMessage() for r in caplog.records]
        assert "ERROR:\nrubocop: warning" in messages
        output = next(m for m in messages if m.startswith("OUTPUT:\n"))
        assert len(output) == len("OUTPUT:\n") + 1 + size
