"""Environment detection for Ruby modules."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from rubocheck.inspection.config import InspectionConfig
from rubocheck.project.access import DirectReadAccess, ReadAccess
from rubocheck.project.models import ModuleContext, SdkDescriptor


class EnvironmentFacts(BaseModel):
    """Wrapper commands a module needs around the RuboCop invocation.

    Computed once per task and never changed afterwards.
    """

    uses_version_manager: bool = False
    uses_virtualization: bool = False
    uses_bundler: bool = False

    model_config = ConfigDict(frozen=True)


def probe_environment(
    module: ModuleContext,
    sdk: SdkDescriptor,
    config: InspectionConfig | None = None,
    read_access: ReadAccess | None = None,
) -> EnvironmentFacts:
    """Detect version manager, virtualization and bundler usage.

    Args:
        module: Module whose working directory is inspected
        sdk: SDK bound to the module
        config: Marker names (defaults to InspectionConfig())
        read_access: Read scope for filesystem checks (no locking if None)

    Returns:
        EnvironmentFacts for the module
    """
    config = config or InspectionConfig()
    read_access = read_access or DirectReadAccess()
    work_directory = module.work_directory

    def has_marker(name: str) -> bool:
        return read_access.run_read(lambda: (work_directory / name).is_file())

    return EnvironmentFacts(
        uses_version_manager=config.version_manager_marker in str(sdk.home_path),
        uses_virtualization=has_marker(config.virtualization_marker),
        uses_bundler=has_marker(config.bundler_marker),
    )


def resolve_version_manager(config: InspectionConfig, home: Path | None = None) -> Path:
    """Resolve the version manager executable under the user's home directory."""
    home = home or Path.home()
    return (home / config.version_manager_path).resolve()
