"""
Pydantic models for CLI argument validation.

Options are validated at the boundary so the search handler only ever
sees well-formed values.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from walkgrep.shared.constants import Pipeline


class SearchOptions(BaseModel):
    """Validated options of the ``search`` command."""

    pattern: str = Field(..., description="Regular expression to search for")
    roots: list[str] = Field(default_factory=lambda: ["."], min_length=1)
    context: int | None = Field(default=None, ge=0)
    types: list[str] = Field(default_factory=list)
    sort: bool = False
    with_filename: bool = False
    files_with_matches: bool = False
    stats: bool = False
    workers: int | None = Field(default=None, ge=Pipeline.MIN_WORKERS)

    @field_validator("types")
    @classmethod
    def normalize_types(cls, value: list[str]) -> list[str]:
        """Lower-case extensions and strip a leading dot."""
        normalized = [item.strip().lower().lstrip(".") for item in value]
        return [item for item in normalized if item]
