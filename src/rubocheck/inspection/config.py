"""Inspection configuration.

Defines the tool invocation, environment markers, and process limits.
Uses BaseModel (not BaseSettings); ``load_config`` overlays RUBOCHECK_* env vars.
"""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from rubocheck.project.models import RUBY_SDK_KIND

DEFAULT_BUFFER_SIZE = 5 * 1024 * 1024


class InspectionConfig(BaseModel):
    """Configuration for building and running a RuboCop command.

    Wrapper detection:
    - version manager: ``version_manager_marker`` appears in the SDK home path
    - virtualization: ``virtualization_marker`` file in the working directory
    - bundler: ``bundler_marker`` file in the working directory
    """

    tool: str = "rubocop"
    format_args: tuple[str, ...] = ("--format", "json")

    version_manager_marker: str = "rvm"
    version_manager_path: str = ".rvm/bin/rvm"  # relative to the user's home
    version_manager_args: tuple[str, ...] = (".", "do")

    virtualization_marker: str = "Vagrantfile"
    virtualization_exec: tuple[str, ...] = ("vagrant", "exec")

    bundler_marker: str = "Gemfile"
    bundler_exec: tuple[str, ...] = ("bundle", "exec")

    expected_sdk_kind: str = RUBY_SDK_KIND
    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, gt=0)
    timeout_seconds: float | None = Field(default=300, gt=0)

    model_config = ConfigDict(frozen=True)


def load_config(environ: Mapping[str, str] | None = None) -> InspectionConfig:
    """Build an InspectionConfig from defaults plus environment overrides.

    Recognized variables:
    - RUBOCHECK_TOOL: tool executable name
    - RUBOCHECK_TIMEOUT_SECONDS: process timeout ("none" disables it)
    - RUBOCHECK_BUFFER_SIZE: stream buffer size in bytes
    - RUBOCHECK_RVM_PATH: version manager path relative to the home directory

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        InspectionConfig with overrides applied

    Raises:
        ValueError: If a variable holds an invalid value
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, object] = {}

    if tool := env.get("RUBOCHECK_TOOL"):
        overrides["tool"] = tool

    if (timeout := env.get("RUBOCHECK_TIMEOUT_SECONDS")) is not None:
        overrides["timeout_seconds"] = None if timeout.lower() == "none" else float(timeout)

    if (buffer_size := env.get("RUBOCHECK_BUFFER_SIZE")) is not None:
        overrides["buffer_size"] = int(buffer_size)

    if rvm_path := env.get("RUBOCHECK_RVM_PATH"):
        overrides["version_manager_path"] = rvm_path

    # pydantic.ValidationError is a ValueError subclass
    return InspectionConfig.model_validate(overrides)
