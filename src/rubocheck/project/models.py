"""Project model: the modules and SDKs an inspection runs against.

These types stand in for the host application's project structure:
- SdkDescriptor: interpreter/toolchain bound to a module
- ModuleContext: a project subunit with content roots and an SDK
- Project: a named collection of modules with file-to-module lookup
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

RUBY_SDK_KIND = "RUBY_SDK"


class SdkDescriptor(BaseModel):
    """Interpreter/toolchain descriptor.

    ``home_path`` points at the interpreter executable (e.g. ``/opt/ruby/bin/ruby``),
    ``kind`` tags the toolchain family.
    """

    name: str
    home_path: Path
    kind: str = RUBY_SDK_KIND

    model_config = ConfigDict(frozen=True)

    @property
    def root(self) -> Path:
        """Directory holding the interpreter executable."""
        return self.home_path.parent


class ModuleContext(BaseModel):
    """A project subunit bound to one SDK.

    The first content root is the working directory RuboCop runs in.
    """

    name: str
    content_roots: list[Path] = Field(min_length=1)
    sdk: SdkDescriptor | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def work_directory(self) -> Path:
        return self.content_roots[0]

    def contains(self, path: Path) -> bool:
        """Check whether ``path`` lives under one of the module's content roots."""
        return any(path.is_relative_to(root) for root in self.content_roots)


class Project(BaseModel):
    """A named collection of modules."""

    name: str
    modules: list[ModuleContext] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def module_for_file(self, path: Path) -> ModuleContext | None:
        """Find the module owning ``path``.

        Nested content roots resolve to the innermost module.

        Args:
            path: Absolute file path

        Returns:
            Owning ModuleContext or None if no module contains the file
        """
        best: ModuleContext | None = None
        best_depth = -1
        for module in self.modules:
            for root in module.content_roots:
                if path.is_relative_to(root) and len(root.parts) > best_depth:
                    best = module
                    best_depth = len(root.parts)
        return best

    def first_ruby_module(self, sdk_kind: str = RUBY_SDK_KIND) -> ModuleContext | None:
        """Get the first module bound to an SDK of ``sdk_kind``."""
        for module in self.modules:
            if module.sdk is not None and module.sdk.kind == sdk_kind:
                return module
        return None
