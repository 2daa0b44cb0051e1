"""CLI commands for RuboCop inspection."""

import json
import shutil
from pathlib import Path

import rich
from rich.console import Console
from rich.markup import escape

from rubocheck.inspection.background import BackgroundRunner
from rubocheck.inspection.config import InspectionConfig, load_config
from rubocheck.inspection.result import RubocopResult, Severity
from rubocheck.inspection.task import RubocopTask
from rubocheck.project.models import ModuleContext, SdkDescriptor

SEVERITY_STYLES = {
    Severity.INFO: "dim",
    Severity.REFACTOR: "cyan",
    Severity.CONVENTION: "blue",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
    Severity.FATAL: "bold red",
}


def check_command(
    project_root: Path,
    paths: list[str] | None = None,
    sdk_home: Path | None = None,
    format: str = "human",
    timeout_seconds: float | None = None,
    config: InspectionConfig | None = None,
) -> int:
    """Run RuboCop on a project.

    Args:
        project_root: Root directory of the project (RuboCop's working directory)
        paths: Files to inspect (all *.rb files under project_root if None)
        sdk_home: Ruby interpreter path (ruby on PATH if None)
        format: Output format: "human", "json", or "jsonl"
        timeout_seconds: Optional override for the process timeout
        config: Inspection configuration (loaded from the environment if None)

    Returns:
        Exit code (0 = no offenses, 1 = offenses or failure)
    """
    try:
        if not project_root.is_dir():
            _error(f"Project root does not exist: {project_root}", format)
            return 1

        config = config or load_config()
        if timeout_seconds is not None:
            config = config.model_copy(update={"timeout_seconds": timeout_seconds})

        root = project_root.resolve()
        targets = _resolve_targets(root, paths)
        if not targets:
            _error(f"No Ruby files found under {root}", format)
            return 1

        home = sdk_home or _default_sdk_home()
        if home is None:
            _error("No Ruby interpreter found on PATH; pass --sdk-home", format)
            return 1

        module = ModuleContext(
            name=root.name,
            content_roots=[root],
            sdk=SdkDescriptor(name="ruby", home_path=home),
        )
        task = RubocopTask(module, targets, config=config)

        with BackgroundRunner(max_workers=1) as background:
            future = background.submit(task)
            if format == "human":
                with Console().status(task.title):
                    result = future.result()
            else:
                result = future.result()

        if result is None:
            _error("RuboCop did not produce a report (see log for details)", format)
            return 1

        _output_result(result, format)
        return 1 if result.has_offenses else 0

    except Exception as e:
        _error(str(e), format)
        return 1


def _resolve_targets(root: Path, paths: list[str] | None) -> list[str]:
    if paths:
        return [str((root / p).resolve()) for p in paths]
    return sorted(str(p) for p in root.rglob("*.rb") if p.is_file())


def _default_sdk_home() -> Path | None:
    ruby = shutil.which("ruby")
    return Path(ruby) if ruby else None


def _error(message: str, format: str) -> None:
    if format == "human":
        rich.print(f"[red]Error:[/red] {escape(message)}")
    else:
        print(json.dumps({"error": message}))


def _output_result(result: RubocopResult, format: str) -> None:
    """Output RuboCop result in specified format.

    Args:
        result: RubocopResult to output
        format: Output format ("human", "json", or "jsonl")
    """
    if format == "json":
        print(result.model_dump_json(indent=2))

    elif format == "jsonl":
        # One JSON object per offense
        for path, offense in result.offenses():
            print(json.dumps({"path": path, **offense.model_dump(mode="json")}))

        print(json.dumps(result.summary.model_dump()))

    else:  # human
        for file_result in result.files:
            for offense in file_result.offenses:
                style = SEVERITY_STYLES[offense.severity]
                loc = offense.location
                rich.print(
                    f"{escape(file_result.path)}:{loc.line}:{loc.column}: "
                    f"[{style}]{offense.severity}[/{style}] "
                    f"[bold]{offense.cop_name}[/bold] {escape(offense.message)}"
                )

        summary = result.summary
        if result.has_offenses:
            rich.print(
                f"\n[red]✗ {summary.offense_count} offenses[/red] in "
                f"{summary.inspected_file_count} files"
            )
        else:
            rich.print(f"\n[green]✓ {summary.inspected_file_count} files, no offenses[/green]")
