#!/usr/bin/env python3
"""
Settings models for toolchain discovery and invocation.

Settings are validated with Pydantic v2 and frozen once built: the toolchain
invoker only ever reads them. They can be constructed directly or loaded from
JSON files, synchronously or asynchronously.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .architecture import guess_architecture, host_architecture
from .core_types import Architecture, ConfigurationError, PathLike


class MsvcVersionPolicy(BaseModel):
    """
    MSVC version requirements.

    Builds for ``legacy_runtime_version`` need exactly the
    ``legacy_major.legacy_minor`` compiler (Windows SDK 7.1); all other runtime
    versions need at least ``minimum_major`` (Visual Studio 2015).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    minimum_major: int = Field(default=19, ge=0)
    legacy_runtime_version: int = Field(default=8, ge=0)
    legacy_major: int = Field(default=16, ge=0)
    legacy_minor: int = Field(default=0, ge=0)


class LibCSettings(BaseModel):
    """The C library the build links against and the flags it adds."""

    model_config = ConfigDict(extra="forbid", frozen=True, str_strip_whitespace=True)

    name: str = Field(default="glibc", description="C library implementation")
    compiler_options: List[str] = Field(
        default_factory=list,
        description="Flags appended after all compiler inputs",
    )

    def get_compiler_options(self) -> List[str]:
        return list(self.compiler_options)


class ToolchainSettings(BaseModel):
    """Build-wide settings read by the toolchain invoker."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    compiler_path: Optional[Path] = Field(
        default=None, description="Explicit compiler executable, bypasses PATH lookup"
    )
    compiler_options: List[str] = Field(
        default_factory=list,
        description="Extra options passed to every compiler invocation",
    )
    target_arch: Architecture = Field(
        default_factory=host_architecture,
        description="Architecture the build is targeting",
    )
    runtime_version: int = Field(
        default=17, ge=1, description="Language runtime version the build targets"
    )
    msvc_policy: MsvcVersionPolicy = Field(default_factory=MsvcVersionPolicy)
    libc: LibCSettings = Field(default_factory=LibCSettings)

    @field_validator("compiler_path", mode="before")
    @classmethod
    def expand_compiler_path(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser() if v.strip() else None
        return v

    @field_validator("target_arch", mode="before")
    @classmethod
    def canonicalize_target_arch(cls, v: Any) -> Any:
        """Accept raw compiler tokens such as ``x86_64`` or ``x64``."""
        canonical = {arch.value for arch in Architecture}
        if isinstance(v, str) and v not in canonical:
            return guess_architecture(v)
        return v


class SettingsLoader:
    """Loads and saves :class:`ToolchainSettings` as JSON."""

    @staticmethod
    def _check_exists(path: Path) -> None:
        if not path.is_file():
            raise ConfigurationError(
                f"Settings file not found: {path}", file_path=str(path)
            )

    @staticmethod
    def _validate(data: Any, path: Path) -> ToolchainSettings:
        try:
            settings = ToolchainSettings.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid settings in {path}: {e}",
                file_path=str(path),
                validation_errors=e.errors(),
            ) from e
        logger.debug(f"Loaded toolchain settings from {path}")
        return settings

    @staticmethod
    def _decode(content: str, path: Path) -> Dict[str, Any]:
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in file {path}: {e}",
                file_path=str(path),
                json_error=str(e),
            ) from e

    @classmethod
    def load(cls, file_path: PathLike) -> ToolchainSettings:
        """
        Load settings from a JSON file.

        Raises:
            ConfigurationError: If the file is missing, unreadable, not JSON
                or does not validate
        """
        path = Path(file_path)
        cls._check_exists(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read file {path}: {e}", file_path=str(path)
            ) from e
        return cls._validate(cls._decode(content, path), path)

    @classmethod
    async def load_async(cls, file_path: PathLike) -> ToolchainSettings:
        """Asynchronously load settings from a JSON file."""
        path = Path(file_path)
        cls._check_exists(path)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read file {path}: {e}", file_path=str(path)
            ) from e
        return cls._validate(cls._decode(content, path), path)

    @staticmethod
    def save(file_path: PathLike, settings: ToolchainSettings, indent: int = 2) -> None:
        """Write settings as JSON, creating parent directories."""
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            path.write_text(settings.model_dump_json(indent=indent), encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                f"Failed to save settings to {path}: {e}", file_path=str(path)
            ) from e
        logger.debug(f"Toolchain settings saved to {path}")
