"""
Configuration Models

Pydantic models for type-safe configuration management with validation,
defaults, and field documentation.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class FilterConfig(BaseModel):
    """Default query applied to a record collection."""

    model_config = ConfigDict(populate_by_name=True)

    # Record source
    source: str = Field(
        default="flat",
        description="Record adapter name (flat, notion, or a registered adapter)"
    )

    # Filters
    groups: List[Dict[str, Any]] = Field(
        default=[],
        description="Filter groups; each has 'filters' and an 'operator' of 'and' or 'or'"
    )
    strict: bool = Field(
        default=False,
        description="Reject filters that use an operator illegal for their property type"
    )

    # Search
    search: Optional[str] = Field(
        default=None,
        description="Free-text search query"
    )
    search_fields: List[str] = Field(
        default=[],
        alias="searchFields",
        description="Fields to search (empty = every field)"
    )

    # Sorting
    sort_key: Optional[str] = Field(
        default=None,
        alias="sortKey",
        description="Property to sort by"
    )
    sort_direction: Optional[str] = Field(
        default=None,
        alias="sortDirection",
        description="Sort direction: asc, desc, or empty for unsorted"
    )

    @field_validator('source')
    @classmethod
    def validate_source(cls, v):
        """Normalize the adapter name."""
        if not v or not v.strip():
            raise ValueError("source cannot be empty")
        return v.strip().lower()

    @field_validator('sort_direction')
    @classmethod
    def validate_sort_direction(cls, v):
        """Validate sort direction values."""
        if v is None or v == "":
            return None
        if v.lower() not in {'asc', 'desc'}:
            raise ValueError(f"Unsupported sort direction: {v}")
        return v.lower()

    @model_validator(mode='after')
    def validate_sort(self):
        """A sort direction needs a sort key."""
        if self.sort_direction and not self.sort_key:
            raise ValueError("sort_direction requires sort_key")
        return self


class OutputConfig(BaseModel):
    """How query results are rendered by the CLI."""

    format: str = Field(
        default="table",
        description="Output format (table, json)"
    )
    columns: List[str] = Field(
        default=[],
        description="Columns shown in table output (empty = all keys of the first record)"
    )
    max_rows: int = Field(
        default=100,
        ge=0,
        le=100000,
        description="Maximum rows shown in table output (0 = unlimited)"
    )

    @field_validator('format')
    @classmethod
    def validate_format(cls, v):
        """Validate output format is supported."""
        if v.lower() not in {'table', 'json'}:
            raise ValueError(f"Unsupported output format: {v}")
        return v.lower()


class AppConfig(BaseModel):
    """Root application configuration model."""

    # Metadata
    version: str = Field(default="0.1.0", description="Configuration version")
    created: datetime = Field(default_factory=datetime.now, description="Configuration creation time")

    # Sections
    filters: FilterConfig = Field(default_factory=FilterConfig, description="Filter configuration")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output configuration")

    # General Settings
    verbose: bool = Field(
        default=False,
        description="Enable verbose logging output"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with detailed logging"
    )
