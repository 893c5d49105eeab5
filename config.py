"""Configuration for the catalog store."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Self

from pydantic import BaseModel, field_validator

from models.keys import KeyFormat

ENV_PREFIX = "CDCAT_"

DEFAULT_CATALOG_BASE = "cdc_data"
DEFAULT_TRACK_BASE = "cdt_data"


class StoreConfig(BaseModel):
    """Where the two tables live and how they are encoded.

    Fields:
        data_dir: Directory holding the table files
        catalog_base: Base file name of the catalog table
        track_base: Base file name of the track table
        backend: dbm module to use (e.g. "dbm.dumb"); None lets dbm pick
        key_format: FIXED for NUL-padded legacy keys, COMPACT otherwise
        file_mode: Permission bits for newly created table files
    """

    data_dir: Path = Path(".")
    catalog_base: str = DEFAULT_CATALOG_BASE
    track_base: str = DEFAULT_TRACK_BASE
    backend: str | None = None
    key_format: KeyFormat = KeyFormat.FIXED
    file_mode: int = 0o644

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str | None) -> str | None:
        if v is not None and v != "dbm" and not v.startswith("dbm."):
            raise ValueError(f"Backend must be a dbm module, got {v!r}")
        return v

    @field_validator("catalog_base", "track_base")
    @classmethod
    def validate_base(cls, v: str) -> str:
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"Table base name must be a plain file name, got {v!r}")
        return v

    @property
    def catalog_path(self) -> Path:
        return self.data_dir / self.catalog_base

    @property
    def track_path(self) -> Path:
        return self.data_dir / self.track_base

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        """Build a config from CDCAT_* environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        values = {}
        for field in ("data_dir", "catalog_base", "track_base", "backend", "key_format"):
            raw = env.get(ENV_PREFIX + field.upper())
            if raw:
                values[field] = raw.lower() if field == "key_format" else raw
        return cls(**values)
