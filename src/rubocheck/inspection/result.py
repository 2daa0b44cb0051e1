"""RuboCop result models.

Typed view of ``rubocop --format json`` output:
- Metadata: RuboCop and Ruby versions
- FileResult: offenses for one inspected file
- Summary: offense and file counts
"""

from collections.abc import Iterator
from enum import StrEnum
from typing import TextIO

from pydantic import BaseModel, ConfigDict, Field

READ_CHUNK = 64 * 1024


class Severity(StrEnum):
    """RuboCop offense severities, lowest first."""

    INFO = "info"
    REFACTOR = "refactor"
    CONVENTION = "convention"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


class Location(BaseModel):
    """Source span of an offense (1-based lines and columns)."""

    start_line: int
    start_column: int
    last_line: int
    last_column: int
    length: int = 0
    line: int
    column: int

    model_config = ConfigDict(frozen=True, extra="ignore")


class Offense(BaseModel):
    """A single cop violation."""

    severity: Severity
    message: str
    cop_name: str
    corrected: bool = False
    correctable: bool = False
    location: Location

    model_config = ConfigDict(frozen=True, extra="ignore")


class FileResult(BaseModel):
    """Offenses reported for one file."""

    path: str
    offenses: list[Offense] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")


class Metadata(BaseModel):
    rubocop_version: str
    ruby_engine: str
    ruby_version: str
    ruby_patchlevel: str | None = None
    ruby_platform: str | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")


class Summary(BaseModel):
    offense_count: int
    target_file_count: int
    inspected_file_count: int

    model_config = ConfigDict(frozen=True, extra="ignore")


class RubocopResult(BaseModel):
    """Decoded RuboCop JSON report."""

    metadata: Metadata
    files: list[FileResult] = Field(default_factory=list)
    summary: Summary

    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def read_from(cls, reader: TextIO) -> "RubocopResult":
        """Decode a report from a text stream.

        Reads in chunks until end of stream, so the producer is drained while
        it is still writing.

        Raises:
            ValueError: If the text is not a valid report (pydantic.ValidationError)
        """
        chunks: list[str] = []
        while chunk := reader.read(READ_CHUNK):
            chunks.append(chunk)
        return cls.model_validate_json("".join(chunks))

    @property
    def offense_count(self) -> int:
        return self.summary.offense_count

    @property
    def has_offenses(self) -> bool:
        return any(f.offenses for f in self.files)

    def offenses(self) -> Iterator[tuple[str, Offense]]:
        """Iterate over (path, offense) pairs in report order."""
        for file_result in self.files:
            for offense in file_result.offenses:
                yield file_result.path, offense

    def for_path(self, path: str) -> FileResult | None:
        """Get the FileResult for ``path`` or None if it was not inspected."""
        for file_result in self.files:
            if file_result.path == path:
                return file_result
        return None
