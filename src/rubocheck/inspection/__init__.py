"""Rubocheck inspection: run RuboCop and decode its JSON report.

Public API for inspection module.
"""

from rubocheck.inspection.background import BackgroundRunner
from rubocheck.inspection.cli import check_command
from rubocheck.inspection.command import build_command
from rubocheck.inspection.config import InspectionConfig, load_config
from rubocheck.inspection.environment import EnvironmentFacts, probe_environment
from rubocheck.inspection.parser import StreamParser
from rubocheck.inspection.process import (
    CancellationToken,
    ProcessLaunchError,
    ProcessRunner,
    RunningProcess,
)
from rubocheck.inspection.result import (
    FileResult,
    Location,
    Metadata,
    Offense,
    RubocopResult,
    Severity,
    Summary,
)
from rubocheck.inspection.task import (
    RubocopTask,
    for_files,
    for_module_files,
    for_paths,
    is_ruby_sdk,
)

__all__ = [
    "BackgroundRunner",
    "CancellationToken",
    "EnvironmentFacts",
    "FileResult",
    "InspectionConfig",
    "Location",
    "Metadata",
    "Offense",
    "ProcessLaunchError",
    "ProcessRunner",
    "RubocopResult",
    "RubocopTask",
    "RunningProcess",
    "Severity",
    "StreamParser",
    "Summary",
    "build_command",
    "check_command",
    "for_files",
    "for_module_files",
    "for_paths",
    "is_ruby_sdk",
    "load_config",
    "probe_environment",
]
