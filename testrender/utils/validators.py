"""Schema validation for renderer configuration and session options.

Provides centralized validation using pydantic:
    - Session options (``create(element, options)``): create_node_mock,
      unstable_is_async; unknown keys ignored
    - Renderer config (renderer.v1.yaml): logging block + session defaults
    - Snapshot files (snapshot.v1): stored serialized trees

All loaders fail fast with a :class:`ConfigError` naming the offending keys.

Usage:
    from testrender.utils import validators

    cfg = validators.load_renderer_config("configs/renderer.v1.yaml")
    opts = validators.SessionOptions.from_value({"unstable_is_async": True})
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from . import fs


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


def _format_validation_error(source: str, exc: ValidationError) -> str:
    lines = [f"Invalid configuration in {source}:"]
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "<root>"
        lines.append(f"  - {loc}: {err['msg']}")
    return "\n".join(lines)


# ============================================================================
# SESSION OPTIONS
# ============================================================================

class SessionOptions(BaseModel):
    """Options accepted by ``test_renderer.create``.

    ``create_node_mock`` supplies stand-ins for host instances (used for refs
    and ``TestInstance.instance``); non-callable values fall back to the
    default. ``unstable_is_async`` is honoured only when exactly ``True``.
    """

    model_config = ConfigDict(extra="ignore", arbitrary_types_allowed=True)

    create_node_mock: Optional[Callable[[Any], Any]] = None
    unstable_is_async: bool = False

    @field_validator("create_node_mock", mode="before")
    @classmethod
    def drop_non_callable(cls, v: Any) -> Any:
        return v if callable(v) else None

    @field_validator("unstable_is_async", mode="before")
    @classmethod
    def strict_true(cls, v: Any) -> bool:
        return v is True

    @classmethod
    def from_value(cls, value: Any) -> "SessionOptions":
        """Coerce None, a mapping, or an existing model into options."""
        if isinstance(value, SessionOptions):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        return cls()


# ============================================================================
# RENDERER CONFIG V1
# ============================================================================

class RotateConfig(BaseModel):
    """Log file rotation (see logging_config.setup_logging)."""
    mode: Literal["size", "time"] = "size"
    max_bytes: int = Field(5_000_000, gt=0)
    backup_count: int = Field(3, ge=0)
    when: str = "D"
    interval: int = Field(1, ge=1)


class LoggingConfig(BaseModel):
    """Arguments forwarded to ``setup_logging``."""
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: Optional[str] = None
    json_format: bool = Field(False, alias="json")
    color: bool = True
    to_stderr: bool = True
    rotate: Optional[RotateConfig] = None
    tz: Literal["UTC", "local"] = "UTC"
    capture_warnings: bool = True
    quiet_libs: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    def as_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``setup_logging``."""
        return {
            "log_level": self.log_level,
            "log_file": self.log_file,
            "json": self.json_format,
            "color": self.color,
            "to_stderr": self.to_stderr,
            "rotate": self.rotate.model_dump() if self.rotate else None,
            "tz": self.tz,
            "capture_warnings": self.capture_warnings,
            "quiet_libs": list(self.quiet_libs),
        }


class SessionDefaults(BaseModel):
    """Session defaults applied by scripts that build sessions from config."""
    unstable_is_async: bool = False

    model_config = ConfigDict(extra="forbid")


class RendererConfigV1(BaseModel):
    """Renderer configuration (renderer.v1.yaml schema)."""
    schema_version: str = Field("renderer.v1", alias="schema")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    session: SessionDefaults = Field(default_factory=SessionDefaults)
    snapshot_dir: str = "tests/__snapshots__"

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("schema_version")
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "renderer.v1":
            raise ValueError(f"Expected schema 'renderer.v1', got '{v}'")
        return v


def load_renderer_config(path: Union[str, Path]) -> RendererConfigV1:
    """Load and validate a renderer config file.

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist
    ConfigError
        If the content doesn't match renderer.v1
    """
    data = fs.load_yaml(path)
    return validate_renderer_config(data, source=str(path))


def validate_renderer_config(data: Any, source: str = "<dict>") -> RendererConfigV1:
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid configuration in {source}: expected a mapping, got {type(data).__name__}")
    try:
        return RendererConfigV1.model_validate(data)
    except ValidationError as e:
        raise ConfigError(_format_validation_error(source, e)) from e


# ============================================================================
# SNAPSHOT FILE V1
# ============================================================================

class SnapshotFileV1(BaseModel):
    """Stored snapshot (snapshot.v1 schema)."""
    schema_version: str = Field("snapshot.v1", alias="schema")
    value: Any = None

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("schema_version")
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "snapshot.v1":
            raise ValueError(f"Expected schema 'snapshot.v1', got '{v}'")
        return v


def validate_snapshot_file(data: Any, source: str = "<dict>") -> SnapshotFileV1:
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid snapshot in {source}: expected a mapping, got {type(data).__name__}")
    try:
        return SnapshotFileV1.model_validate(data)
    except ValidationError as e:
        raise ConfigError(_format_validation_error(source, e)) from e
