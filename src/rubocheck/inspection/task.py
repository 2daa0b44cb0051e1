"""RubocopTask: orchestrates one RuboCop run over a set of files."""

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable, Sequence
from pathlib import Path

from rubocheck.inspection.command import build_command
from rubocheck.inspection.config import InspectionConfig
from rubocheck.inspection.environment import EnvironmentFacts, probe_environment
from rubocheck.inspection.parser import StreamParser
from rubocheck.inspection.process import CancellationToken, ProcessLaunchError, ProcessRunner
from rubocheck.inspection.result import RubocopResult
from rubocheck.project.access import DirectReadAccess, ReadAccess
from rubocheck.project.models import RUBY_SDK_KIND, ModuleContext, Project, SdkDescriptor

logger = logging.getLogger(__name__)

CompletionCallback = Callable[["RubocopTask"], None]


class RubocopTask:
    """Runs RuboCop for one module and keeps the decoded result.

    ``execute`` never raises: every failure is logged and leaves ``result``
    as None. ``on_complete`` is called exactly once per execution.
    """

    title = "Running RuboCop"

    def __init__(
        self,
        module: ModuleContext,
        paths: Sequence[str],
        config: InspectionConfig | None = None,
        read_access: ReadAccess | None = None,
        runner: ProcessRunner | None = None,
        parser: StreamParser | None = None,
        facts: EnvironmentFacts | None = None,
        home: Path | None = None,
    ) -> None:
        """Initialize task.

        Args:
            module: Module whose working directory and SDK are used
            paths: Absolute file paths to inspect (must not be empty)
            config: Inspection configuration (defaults to InspectionConfig())
            read_access: Read scope for marker-file probes
            runner: Process runner (built from config if None)
            parser: Stream parser (JSON decoder if None)
            facts: Pre-computed environment facts (probed on execute if None)
            home: Home directory for version manager resolution

        Raises:
            ValueError: If paths is empty
        """
        if not paths:
            raise ValueError("paths must not be empty")

        self.module = module
        self.paths: tuple[str, ...] = tuple(paths)
        self.config = config or InspectionConfig()
        self.read_access = read_access or DirectReadAccess()
        self.runner = runner or ProcessRunner(self.config)
        self.parser = parser or StreamParser()
        self.facts = facts
        self.home = home

        self.token = CancellationToken()
        self.command: list[str] | None = None
        self.exit_code: int | None = None
        self.result: RubocopResult | None = None
        self.on_complete: CompletionCallback | None = None
        self._executed = False

    @property
    def sdk(self) -> SdkDescriptor | None:
        return self.module.sdk

    @property
    def sdk_root(self) -> str:
        return str(self.sdk.root) if self.sdk is not None else "<none>"

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    def cancel(self) -> None:
        """Cancel the run, terminating the RuboCop process if it is running."""
        if not self.token.cancelled:
            logger.warning("Cancelling RuboCop run for %s", self.module.name)
        self.token.cancel()

    def execute(self) -> RubocopResult | None:
        """Run RuboCop and decode its output.

        Returns:
            RubocopResult or None if the run was skipped or failed
        """
        if self._executed:
            logger.warning("RuboCop task for %s was already executed", self.module.name)
            return self.result
        self._executed = True

        try:
            self._execute()
        except Exception:
            logger.exception("Unexpected error while running RuboCop")
        finally:
            self._notify_complete()
        return self.result

    def _execute(self) -> None:
        sdk = self.sdk
        if sdk is None or not is_ruby_sdk(sdk, self.config.expected_sdk_kind):
            logger.warning("Not a Ruby SDK: %s", sdk.kind if sdk else None)
            return

        if self.token.cancelled:
            logger.warning("RuboCop run cancelled before start")
            return

        if self.facts is None:
            self.facts = probe_environment(self.module, sdk, self.config, self.read_access)

        self.command = build_command(self.facts, self.paths, self.config, self.home)
        logger.debug("Executing RuboCop: %s", shlex.join(self.command))

        try:
            process = self.runner.start(self.command, self.module.work_directory, self.token)
        except ProcessLaunchError as e:
            logger.error(
                "Failed to run RuboCop command - is it (or bundler) installed? (SDK=%s)",
                self.sdk_root,
                exc_info=e,
            )
            return

        try:
            self.result = self.parser.parse(process)
            self.exit_code = process.wait()
        finally:
            process.close()

    def _notify_complete(self) -> None:
        if self.on_complete is None:
            return
        try:
            self.on_complete(self)
        except Exception:
            logger.exception("RuboCop completion callback failed")


def is_ruby_sdk(sdk: SdkDescriptor | None, expected_kind: str = RUBY_SDK_KIND) -> bool:
    return sdk is not None and sdk.kind == expected_kind


def for_paths(module: ModuleContext, *paths: str, **options: object) -> RubocopTask:
    """Create a task for absolute ``paths`` inside ``module``.

    Raises:
        ValueError: If no paths are given
    """
    return RubocopTask(module, list(paths), **options)  # type: ignore[arg-type]


def for_module_files(module: ModuleContext, *files: Path, **options: object) -> RubocopTask:
    """Create a task for ``files`` inside ``module`` using their canonical paths.

    Raises:
        ValueError: If no files are given
    """
    if not files:
        raise ValueError("files must not be empty")
    paths = [str(f.resolve()) for f in files]
    return RubocopTask(module, paths, **options)  # type: ignore[arg-type]


def for_files(project: Project, *files: Path, **options: object) -> RubocopTask:
    """Create a task for ``files``, using the module that owns the first file.

    Raises:
        ValueError: If no files are given or no module owns the first file
    """
    if not files:
        raise ValueError("files must not be empty")
    first = files[0].resolve()
    module = project.module_for_file(first)
    if module is None:
        raise ValueError(f"No module in project {project.name} contains {first}")
    return for_module_files(module, *files, **options)
