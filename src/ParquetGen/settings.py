# === NAVMAP v1 ===
# {
#   "module": "ParquetGen.settings",
#   "purpose": "Pydantic v2 Settings for logging and Parquet writer configuration.",
#   "sections": [
#     {
#       "id": "loglevel",
#       "name": "LogLevel",
#       "anchor": "class-loglevel",
#       "kind": "class"
#     },
#     {
#       "id": "logformat",
#       "name": "LogFormat",
#       "anchor": "class-logformat",
#       "kind": "class"
#     },
#     {
#       "id": "compression",
#       "name": "Compression",
#       "anchor": "class-compression",
#       "kind": "class"
#     },
#     {
#       "id": "appcfg",
#       "name": "AppCfg",
#       "anchor": "class-appcfg",
#       "kind": "class"
#     },
#     {
#       "id": "writercfg",
#       "name": "WriterCfg",
#       "anchor": "class-writercfg",
#       "kind": "class"
#     },
#     {
#       "id": "settings",
#       "name": "Settings",
#       "anchor": "class-settings",
#       "kind": "class"
#     },
#     {
#       "id": "load-settings",
#       "name": "load_settings",
#       "anchor": "function-load-settings",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Typed settings for ParquetGen.

Settings are Pydantic v2 ``BaseSettings`` models with a consistent ENV prefix
(``PARQUETGEN_``). Precedence is explicit overrides (CLI) > ENV > defaults.

NAVMAP:
- AppCfg: logging level and format
- WriterCfg: Parquet encoding options (compression, row groups, atomic writes)
- Settings: root aggregation of both
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ============================================================================
# Enums for validated choices
# ============================================================================


class LogLevel(str, Enum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Supported log output formats."""

    CONSOLE = "console"
    JSON = "json"


class Compression(str, Enum):
    """Parquet column chunk compression codecs."""

    NONE = "none"
    SNAPPY = "snappy"
    GZIP = "gzip"
    ZSTD = "zstd"
    BROTLI = "brotli"
    LZ4 = "lz4"


# ============================================================================
# Global configuration (AppCfg)
# ============================================================================


class AppCfg(BaseSettings):
    """Global application-level configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PARQUETGEN_",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: LogLevel = Field(LogLevel.INFO, description="Root logging level")
    log_format: LogFormat = Field(
        LogFormat.CONSOLE, description="Pretty console or structured JSON"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        """Accept lower-case level names from ENV and CLI."""
        if isinstance(v, str):
            return v.upper()
        return v


# ============================================================================
# Writer configuration (WriterCfg)
# ============================================================================


class WriterCfg(BaseSettings):
    """Parquet encoding options applied to every table write."""

    model_config = SettingsConfigDict(
        env_prefix="PARQUETGEN_WRITER_",
        case_sensitive=False,
        extra="ignore",
    )

    compression: Compression = Field(
        Compression.NONE, description="Column chunk compression codec"
    )
    compression_level: Optional[int] = Field(
        None, description="Codec-specific compression level (None = codec default)"
    )
    row_group_size: Optional[int] = Field(
        None,
        description="Maximum rows per row group (None = whole table in one row group)",
        ge=1,
    )
    write_statistics: bool = Field(True, description="Write per-column chunk statistics")
    atomic_writes: bool = Field(
        False,
        description="Write to a temporary sibling and rename over the destination",
    )
    created_by: str = Field("ParquetGen", description="Creator recorded in the footer")

    @field_validator("compression", mode="before")
    @classmethod
    def normalize_compression(cls, v: Any) -> Any:
        """Accept upper-case codec names and ``None``."""
        if v is None:
            return Compression.NONE
        if isinstance(v, str):
            return v.lower()
        return v

    @model_validator(mode="after")
    def validate_compression_level(self) -> WriterCfg:
        """A compression level only makes sense with a codec."""
        if self.compression_level is not None and self.compression is Compression.NONE:
            raise ValueError("compression_level requires a compression codec")
        return self

    def parquet_kwargs(self) -> Dict[str, Any]:
        """Return ``pyarrow.parquet.ParquetWriter`` keyword arguments."""
        kwargs: Dict[str, Any] = {
            "compression": self.compression.value,
            "write_statistics": self.write_statistics,
        }
        if self.compression_level is not None:
            kwargs["compression_level"] = self.compression_level
        return kwargs


# ============================================================================
# Root Settings
# ============================================================================


class Settings(BaseModel):
    """Root settings aggregating app and writer configuration."""

    app: AppCfg = Field(default_factory=AppCfg)
    writer: WriterCfg = Field(default_factory=WriterCfg)


def load_settings(
    app_overrides: Optional[Dict[str, Any]] = None,
    writer_overrides: Optional[Dict[str, Any]] = None,
) -> Settings:
    """
    Build settings with precedence overrides > ENV > defaults.

    ``None`` values in the override mappings are treated as "not provided" so
    CLI options that were left unset fall through to the environment.
    """
    app_kwargs = {k: v for k, v in (app_overrides or {}).items() if v is not None}
    writer_kwargs = {k: v for k, v in (writer_overrides or {}).items() if v is not None}
    return Settings(app=AppCfg(**app_kwargs), writer=WriterCfg(**writer_kwargs))
