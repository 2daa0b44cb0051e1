"""Process runner for executing RuboCop with concurrent stream draining."""

from __future__ import annotations

import contextlib
import io
import logging
import subprocess
import threading
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import IO

from rubocheck.inspection.config import InspectionConfig

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class ProcessLaunchError(Exception):
    """Raised when the RuboCop process cannot be started."""

    def __init__(self, command: Sequence[str], cause: OSError) -> None:
        super().__init__(f"Could not start '{command[0]}': {cause}")
        self.command = tuple(command)
        self.cause = cause


class CancellationToken:
    """Thread-safe cancellation flag with callbacks.

    Callbacks registered before cancellation run once when ``cancel`` is called;
    callbacks registered afterwards run immediately.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def register(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register ``callback`` and return a function that unregisters it."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return lambda: self._unregister(callback)
        callback()
        return lambda: None

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout)

    def _unregister(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)


def _read_chunk(stream: IO[bytes], size: int) -> bytes:
    read1 = getattr(stream, "read1", None)
    if read1 is not None:
        return bytes(read1(size))
    return stream.read(size)


def try_close(stream: IO[bytes] | io.IOBase | None) -> None:
    """Close ``stream``, ignoring failures."""
    if stream is None:
        return
    with contextlib.suppress(OSError, ValueError):
        stream.close()


class StreamDrain:
    """Drains a byte stream on a background thread into memory.

    Keeps the child from blocking on a full stderr pipe while stdout is
    being decoded on the calling thread.
    """

    def __init__(self, stream: IO[bytes], name: str = "rubocop-stderr") -> None:
        self.stream = stream
        self._buffer = bytearray()
        self._lock = threading.Lock()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def _run(self) -> None:
        try:
            while chunk := _read_chunk(self.stream, CHUNK_SIZE):
                with self._lock:
                    self._buffer.extend(chunk)
        except (OSError, ValueError):
            # Stream closed while reading; whatever arrived is kept
            logger.debug("stderr stream closed during drain")

    def drain(self, timeout: float | None = None) -> bytes:
        """Wait for end of stream (up to ``timeout``) and return captured bytes."""
        self._thread.join(timeout)
        with self._lock:
            return bytes(self._buffer)

    def close(self) -> None:
        try_close(self.stream)


class RewindableStream(io.RawIOBase):
    """Raw reader that records every byte read from its source.

    Lets a failed decode replay stdout from the beginning for diagnostics.
    """

    def __init__(self, source: IO[bytes]) -> None:
        super().__init__()
        self.source = source
        self._record = bytearray()

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: memoryview | bytearray) -> int:  # type: ignore[override]
        data = _read_chunk(self.source, len(buffer))
        size = len(data)
        buffer[:size] = data
        self._record.extend(data)
        return size

    def drain_from_start(self) -> bytes:
        """Read the source to the end and return everything since the first byte."""
        try:
            while chunk := _read_chunk(self.source, CHUNK_SIZE):
                self._record.extend(chunk)
        except (OSError, ValueError):
            logger.debug("stdout stream closed during drain")
        return bytes(self._record)

    def close(self) -> None:
        try:
            try_close(self.source)
        finally:
            super().close()


class RunningProcess:
    """A launched RuboCop process with its captured streams."""

    def __init__(
        self,
        process: subprocess.Popen[bytes],
        token: CancellationToken,
        buffer_size: int,
        timeout_seconds: float | None = None,
    ) -> None:
        if process.stdout is None or process.stderr is None:
            raise ValueError("process must be started with piped stdout and stderr")

        self.process = process
        self.token = token
        self.timeout_seconds = timeout_seconds
        self.stdout = RewindableStream(process.stdout)
        self.stderr = StreamDrain(process.stderr)
        self.stdout_reader = io.TextIOWrapper(
            io.BufferedReader(self.stdout, buffer_size=min(buffer_size, CHUNK_SIZE)),
            encoding="utf-8",
        )

        self._watchdog: threading.Timer | None = None
        self._unregister = token.register(self.terminate)
        self.stderr.start()
        if timeout_seconds is not None:
            self._watchdog = threading.Timer(timeout_seconds, self._on_timeout)
            self._watchdog.daemon = True
            self._watchdog.start()

    @property
    def pid(self) -> int:
        return self.process.pid

    def stderr_text(self) -> str:
        return self.stderr.drain(self.timeout_seconds).decode("utf-8", errors="replace")

    def stdout_text(self) -> str:
        return self.stdout.drain_from_start().decode("utf-8", errors="replace")

    def wait(self) -> int | None:
        """Wait for the process to exit.

        Non-zero exit codes are logged as warnings. A timeout kills the process
        and is logged, never raised.

        Returns:
            Exit code or None if the wait was interrupted
        """
        try:
            code = self.process.wait(timeout=self.timeout_seconds)
        except subprocess.TimeoutExpired as e:
            logger.error("Interrupted while waiting for RuboCop.", exc_info=e)
            self.kill()
            return None

        if self.token.cancelled:
            logger.warning("RuboCop was cancelled (exit code %d)", code)
        elif code != 0:
            logger.warning("RuboCop exited with %d", code)
        return code

    def terminate(self) -> None:
        if self.process.poll() is None:
            logger.debug("Terminating RuboCop process %d", self.pid)
            with contextlib.suppress(OSError):
                self.process.terminate()

    def kill(self) -> None:
        if self.process.poll() is None:
            with contextlib.suppress(OSError):
                self.process.kill()
            with contextlib.suppress(subprocess.TimeoutExpired):
                self.process.wait(timeout=5)

    def close_streams(self) -> None:
        try_close(self.stdout_reader)
        try_close(self.stdout)
        self.stderr.close()

    def close(self) -> None:
        """Release streams, the watchdog and the cancellation hook."""
        if self._watchdog is not None:
            self._watchdog.cancel()
        self._unregister()
        self.close_streams()

    def _on_timeout(self) -> None:
        logger.error("RuboCop timed out after %ss", self.timeout_seconds)
        self.token.cancel()


class ProcessRunner:
    """Launches RuboCop commands with piped, buffered output streams."""

    def __init__(
        self,
        config: InspectionConfig | None = None,
        popen: Callable[..., subprocess.Popen[bytes]] = subprocess.Popen,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize process runner.

        Args:
            config: Buffer size and timeout settings
            popen: Process factory (subprocess.Popen unless overridden)
            env: Optional environment for the child (inherits if None)
        """
        self.config = config or InspectionConfig()
        self.popen = popen
        self.env = env

    def start(
        self,
        command: Sequence[str],
        cwd: Path,
        token: CancellationToken | None = None,
    ) -> RunningProcess:
        """Launch ``command`` in ``cwd``.

        Args:
            command: Command vector; first element is the executable
            cwd: Working directory
            token: Cancellation token that terminates the process when cancelled

        Returns:
            RunningProcess with stderr already draining

        Raises:
            ProcessLaunchError: If the executable cannot be started
        """
        try:
            process = self.popen(
                list(command),
                cwd=str(cwd),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                bufsize=self.config.buffer_size,
                env=dict(self.env) if self.env is not None else None,
            )
        except OSError as e:
            raise ProcessLaunchError(command, e) from e

        return RunningProcess(
            process,
            token or CancellationToken(),
            buffer_size=self.config.buffer_size,
            timeout_seconds=self.config.timeout_seconds,
        )
