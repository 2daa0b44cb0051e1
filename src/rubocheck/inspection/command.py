"""Command line construction for RuboCop runs."""

from collections.abc import Sequence
from pathlib import Path

from rubocheck.inspection.config import InspectionConfig
from rubocheck.inspection.environment import EnvironmentFacts, resolve_version_manager


def build_command(
    facts: EnvironmentFacts,
    paths: Sequence[str],
    config: InspectionConfig | None = None,
    home: Path | None = None,
) -> list[str]:
    """Build the RuboCop argument vector.

    Layout: ``[<rvm> . do] [vagrant exec | bundle exec] rubocop --format json <path>...``.
    Virtualization wins over bundler when both are detected. The first element
    is the executable; it is not checked for existence here.

    Args:
        facts: Detected environment facts
        paths: Files to inspect, in order
        config: Tool and wrapper names (defaults to InspectionConfig())
        home: Home directory for version manager resolution (defaults to Path.home())

    Returns:
        Command vector
    """
    config = config or InspectionConfig()
    parts: list[str] = []

    if facts.uses_version_manager:
        parts.append(str(resolve_version_manager(config, home)))
        parts.extend(config.version_manager_args)

    if facts.uses_virtualization:
        parts.extend(config.virtualization_exec)
    elif facts.uses_bundler:
        parts.extend(config.bundler_exec)

    parts.append(config.tool)
    parts.extend(config.format_args)
    parts.extend(paths)
    return parts
