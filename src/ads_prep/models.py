from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .dataset import SemanticType
from .errors import ConfigError


class ColumnSpec(BaseModel):
    """
    How the Column Typer should treat one column.

    type: target semantic type
    levels: ordered allowed values (categorical types only); derived from
        the data when omitted
    rename: new column name, applied before typing
    format: strptime format for date columns (default %Y-%m-%d)
    """
    type: SemanticType
    levels: Optional[list[str]] = None
    rename: Optional[str] = None
    format: Optional[str] = None

    @field_validator("levels", mode="before")
    @classmethod
    def _levels_as_strings(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, (str, bytes)) or not isinstance(v, (list, tuple)):
            raise ValueError("levels must be a list of values.")
        return [str(x) for x in v]

    @field_validator("rename")
    @classmethod
    def _rename_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("rename must be a non-empty string.")
        return v

    @model_validator(mode="after")
    def _check_type_options(self) -> "ColumnSpec":
        if self.levels is not None:
            if self.type is None or not self.type.is_categorical:
                raise ValueError("levels are only allowed for categorical types.")
            dupes = sorted({x for x in self.levels if self.levels.count(x) > 1})
            if dupes:
                raise ValueError(f"levels must be unique; duplicated: {dupes}")
        if self.format is not None and self.type is not SemanticType.DATE:
            raise ValueError("format is only allowed for date columns.")
        return self


class ColumnConfig(ColumnSpec):
    """ColumnSpec plus the labels to attach once the column is typed."""

    model_config = ConfigDict(extra="forbid")

    type: Optional[SemanticType] = None  # type: ignore[assignment]
    label: Optional[str] = None
    value_labels: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _label_only_entries(self) -> "ColumnConfig":
        if self.type is None and self.rename is not None:
            raise ValueError("rename requires a type.")
        return self

    @field_validator("value_labels", mode="before")
    @classmethod
    def _value_label_keys_as_strings(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(k): val for k, val in v.items()}
        return v


class DictionaryOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sortlevels: bool = False
    maxlevels: Optional[int] = Field(default=None, ge=1)
    frequencies: bool = True


class ExportOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    delimiter: str = Field(default=",", min_length=1)
    page_length: int = Field(default=10, ge=1)


class PrepConfig(BaseModel):
    """
    Preparation config: per-column typing and labels, dictionary options and
    export options. Column keys are the names found in the raw file.
    """
    model_config = ConfigDict(extra="forbid")

    columns: dict[str, ColumnConfig] = Field(default_factory=dict)
    dictionary: DictionaryOptions = Field(default_factory=DictionaryOptions)
    export: ExportOptions = Field(default_factory=ExportOptions)

    def column_specs(self) -> dict[str, ColumnSpec]:
        return {
            name: ColumnSpec(type=c.type, levels=c.levels, rename=c.rename, format=c.format)
            for name, c in self.columns.items()
            if c.type is not None
        }

    def final_name(self, name: str) -> str:
        c = self.columns.get(name)
        return c.rename if c is not None and c.rename else name

    def labels(self) -> dict[str, str]:
        """Configured labels keyed by the column name after renaming."""
        return {self.final_name(n): c.label for n, c in self.columns.items() if c.label is not None}

    def value_labels(self) -> dict[str, dict[str, str]]:
        return {self.final_name(n): dict(c.value_labels) for n, c in self.columns.items() if c.value_labels}


class PrepArtifacts(BaseModel):
    """
    Paths to the files written by a preparation run.

    These files are the contract the viewer (or any other presenter) reads.
    """
    out_dir: str
    dictionary_json: str
    dictionary_md: str
    export_csv: str
    table_view_json: str
    prep_log_json: str


def parse_config(obj: Any) -> PrepConfig:
    if obj is None:
        return PrepConfig()
    try:
        return PrepConfig.model_validate(obj)
    except ValidationError as e:
        raise ConfigError(f"Invalid preparation config: {e}") from e


def load_config(path: Path) -> PrepConfig:
    """Load and validate a JSON preparation config."""
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config is not valid JSON: {e}") from e
    return parse_config(raw)


def default_maxlevels(default: Optional[int] = None) -> Optional[int]:
    """Dictionary level cap from ADS_PREP_MAXLEVELS; invalid values are ignored."""
    raw = os.environ.get("ADS_PREP_MAXLEVELS")
    if raw is None or raw.strip() == "":
        return default
    try:
        v = int(raw)
        return v if v > 0 else default
    except ValueError:
        return default
