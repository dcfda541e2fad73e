"""Pydantic v2 models for the tsbridge scanners.

Facts recovered from source text are modelled here.  None of them outlive a
single pipeline stage: they are extracted, rendered, written, and dropped.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConstantDeclaration(BaseModel):
    """A ``pub const NAME: &str = "value";`` recovered from Rust source."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=r"^[A-Z_0-9]+$", description="Upper snake case identifier")
    value: str = Field(..., description="Literal content without quotes or terminator")


class UnionTypeDeclaration(BaseModel):
    """A string-literal union type alias to be rewritten as a TypeScript enum."""

    name: str = Field(..., description="Type alias name")
    source_file: Path = Field(..., description="File the alias was read from")
    values: list[str] = Field(..., description="Literal alternatives in source order")

    @field_validator("values")
    @classmethod
    def _values_not_empty(cls, values: list[str]) -> list[str]:
        if not values:
            raise ValueError("a union type needs at least one literal alternative")
        return values


class OptionalFieldMatch(BaseModel):
    """One ``field: T | undefined`` occurrence inside a file's text."""

    model_config = ConfigDict(frozen=True)

    full_match: str
    field_name: str
    base_type: str

    @property
    def replacement(self) -> str:
        return f"{self.field_name}?: {self.base_type}"


class StageReport(BaseModel):
    """Counts gathered by a file-processing stage.

    Skipped inputs are never errors; these numbers are the only place they
    become visible.
    """

    stage: str
    files_scanned: int = 0
    files_changed: int = 0
    items_found: int = 0
    warnings: list[str] = Field(default_factory=list)
