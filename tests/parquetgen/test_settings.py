"""Tests for ENV-driven settings and their precedence."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ParquetGen.settings import (
    AppCfg,
    Compression,
    LogFormat,
    LogLevel,
    WriterCfg,
    load_settings,
)


def test_defaults():
    """Uncompressed, single row group, non-atomic, console logging at INFO."""
    settings = load_settings()

    assert settings.app.log_level is LogLevel.INFO
    assert settings.app.log_format is LogFormat.CONSOLE
    assert settings.writer.compression is Compression.NONE
    assert settings.writer.row_group_size is None
    assert settings.writer.atomic_writes is False
    assert settings.writer.parquet_kwargs() == {
        "compression": "none",
        "write_statistics": True,
    }


def test_env_overrides(monkeypatch):
    """PARQUETGEN_* variables populate both models."""
    monkeypatch.setenv("PARQUETGEN_LOG_LEVEL", "debug")
    monkeypatch.setenv("PARQUETGEN_LOG_FORMAT", "json")
    monkeypatch.setenv("PARQUETGEN_WRITER_COMPRESSION", "ZSTD")
    monkeypatch.setenv("PARQUETGEN_WRITER_COMPRESSION_LEVEL", "3")
    monkeypatch.setenv("PARQUETGEN_WRITER_ATOMIC_WRITES", "true")

    settings = load_settings()

    assert settings.app.log_level is LogLevel.DEBUG
    assert settings.app.log_format is LogFormat.JSON
    assert settings.writer.compression is Compression.ZSTD
    assert settings.writer.atomic_writes is True
    assert settings.writer.parquet_kwargs()["compression_level"] == 3


def test_overrides_beat_env(monkeypatch):
    """Explicit overrides win; None overrides fall through to ENV."""
    monkeypatch.setenv("PARQUETGEN_WRITER_ROW_GROUP_SIZE", "10")
    monkeypatch.setenv("PARQUETGEN_WRITER_COMPRESSION", "gzip")

    settings = load_settings(
        app_overrides={"log_level": None},
        writer_overrides={"row_group_size": 2, "compression": None},
    )

    assert settings.writer.row_group_size == 2
    assert settings.writer.compression is Compression.GZIP
    assert settings.app.log_level is LogLevel.INFO


def test_row_group_size_must_be_positive():
    with pytest.raises(ValidationError):
        WriterCfg(row_group_size=0)


def test_unknown_compression_rejected(monkeypatch):
    monkeypatch.setenv("PARQUETGEN_WRITER_COMPRESSION", "rar")
    with pytest.raises(ValidationError):
        WriterCfg()


def test_compression_level_requires_codec():
    """A level without a codec is a configuration error."""
    with pytest.raises(ValidationError, match="requires a compression codec"):
        WriterCfg(compression_level=5)


def test_compression_none_value():
    """``None`` is accepted as an alias for no compression."""
    assert WriterCfg(compression=None).compression is Compression.NONE


def test_unrelated_env_ignored(monkeypatch):
    monkeypatch.setenv("PARQUETGEN_SOMETHING_ELSE", "x")
    assert AppCfg().log_level is LogLevel.INFO
