"""Configuration management using Pydantic Settings.

Two kinds of configuration live here:

- ``Settings``: how the prober behaves (timeouts, headers, logging),
  read from ``KEEPALIVE_*`` environment variables or an optional YAML file.
- Targets: which services to probe, read from exactly one source, either
  a projects file or an environment variable holding the same document.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, TypeAdapter, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from keepalive.core.exceptions import ConfigNotFoundError, ConfigParseError
from keepalive.core.models import Target

DEFAULT_CONFIG_FILE = Path("config.json")
DEFAULT_ENV_VAR = "KEEPALIVE_PROJECTS"

_BOOL = TypeAdapter(bool)


class ProberSettings(BaseSettings):
    """Prober module configuration."""

    model_config = SettingsConfigDict(env_prefix="KEEPALIVE_PROBER_")

    timeout: float = Field(
        default=10.0,
        gt=0,
        le=300,
        description="Per-request timeout in seconds"
    )

    default_endpoint: str = Field(
        default="/rest/v1/",
        description="Path probed on authenticated targets that omit an endpoint"
    )

    follow_redirects: bool = Field(
        default=False,
        description="Follow HTTP redirects"
    )

    verify_ssl: bool = Field(
        default=True,
        description="Verify SSL certificates"
    )

    http2: bool = Field(
        default=True,
        description="Negotiate HTTP/2 when the server supports it"
    )

    user_agent: str = Field(
        default="keepalive-prober/1.0",
        description="User-Agent header for requests"
    )


class OutputSettings(BaseSettings):
    """Output configuration."""

    model_config = SettingsConfigDict(env_prefix="KEEPALIVE_OUTPUT_")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum level for progress lines"
    )

    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines instead of console lines"
    )

    report_path: Path | None = Field(
        default=None,
        description="Write a JSON run report to this path"
    )

    log_file: Path | None = Field(
        default=None,
        description="Append log lines to this file as well as stdout"
    )


class Settings(BaseSettings):
    """Main configuration container."""

    model_config = SettingsConfigDict(
        env_prefix="KEEPALIVE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    prober: ProberSettings = Field(default_factory=ProberSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)

    dry_run: bool = Field(
        default=False,
        description="List targets without sending any request"
    )

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML configuration file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_file_or_default(cls, path: Path | None = None) -> "Settings":
        """Load from file if exists, otherwise return defaults."""
        default_paths = [
            Path("keepalive.yaml"),
            Path("keepalive.yml"),
            Path(".keepalive.yaml"),
            Path.home() / ".config" / "keepalive" / "config.yaml",
        ]

        if path and path.exists():
            return cls.from_yaml(path)

        for default_path in default_paths:
            if default_path.exists():
                return cls.from_yaml(default_path)

        return cls()


@dataclass(frozen=True)
class TargetSource:
    """Where targets come from for one deployment.

    Attributes:
        kind: ``"file"`` or ``"env"``
        location: File path or environment variable name
    """

    kind: Literal["file", "env"]
    location: str

    @classmethod
    def file(cls, path: Path | str = DEFAULT_CONFIG_FILE) -> "TargetSource":
        return cls(kind="file", location=str(path))

    @classmethod
    def env(cls, variable: str = DEFAULT_ENV_VAR) -> "TargetSource":
        return cls(kind="env", location=variable)

    @property
    def authenticated_by_default(self) -> bool:
        """Environment deployments carry credentials, file deployments do not."""
        return self.kind == "env"

    def describe(self) -> str:
        if self.kind == "env":
            return f"environment variable {self.location}"
        return f"file {self.location}"

    def read_text(self, environ: dict[str, str] | None = None) -> str:
        """Return the raw configuration text.

        Raises:
            ConfigNotFoundError: If the file or variable is missing or empty
        """
        if self.kind == "env":
            environ = os.environ if environ is None else environ
            text = environ.get(self.location, "")
        else:
            path = Path(self.location)
            if not path.is_file():
                raise ConfigNotFoundError(f"Configuration file '{path}' does not exist")
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as e:
                raise ConfigNotFoundError(f"Cannot read configuration file '{path}': {e}") from e

        if not text.strip():
            raise ConfigNotFoundError(f"No configuration found in {self.describe()}")
        return text


def parse_targets(
    text: str,
    *,
    require_apikey: bool = False,
    origin: str = "configuration",
) -> list[Target]:
    """Parse configuration text into an ordered list of targets.

    Accepts YAML or JSON: either a mapping with a ``projects`` list or a
    bare list of project entries. Document-level ``require_apikey`` and
    ``default_endpoint`` keys apply to entries that do not set them.

    Args:
        text: Raw YAML/JSON text
        require_apikey: Default for entries and documents that omit it
        origin: Human-readable source used in error messages

    Raises:
        ConfigParseError: If the text is malformed or no valid targets exist
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Not JSON; YAML covers the rest
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigParseError(f"Invalid configuration in {origin}: {e}") from e

    default_endpoint: str | None = None
    if isinstance(data, dict):
        if "require_apikey" in data:
            try:
                require_apikey = _BOOL.validate_python(data["require_apikey"])
            except ValidationError as e:
                raise ConfigParseError(f"Invalid require_apikey in {origin}: {e}") from e
        default_endpoint = data.get("default_endpoint")
        if default_endpoint is not None and not isinstance(default_endpoint, str):
            raise ConfigParseError(f"default_endpoint in {origin} must be a string")
        entries = data.get("projects")
    else:
        entries = data

    if not isinstance(entries, list):
        raise ConfigParseError(f"Expected a 'projects' list in {origin}")
    if not entries:
        raise ConfigParseError(f"No projects configured in {origin}")

    targets: list[Target] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigParseError(f"Project #{index + 1} in {origin} is not a mapping")
        bad_keys = [key for key in entry if not isinstance(key, str)]
        if bad_keys:
            raise ConfigParseError(
                f"Project #{index + 1} in {origin} has non-string keys: "
                f"{', '.join(repr(key) for key in bad_keys)}"
            )

        values: dict[str, Any] = {"require_apikey": require_apikey, **entry}

        try:
            target = Target.model_validate(values)
        except ValidationError as e:
            label = entry.get("name") or f"#{index + 1}"
            raise ConfigParseError(f"Invalid project {label} in {origin}: {e}") from e

        if default_endpoint and target.endpoint is None and target.is_authenticated:
            target = target.model_copy(update={"endpoint": default_endpoint})

        if target.name in seen:
            raise ConfigParseError(f"Duplicate project name '{target.name}' in {origin}")
        seen.add(target.name)
        targets.append(target)

    return targets


def load_targets(
    source: TargetSource,
    environ: dict[str, str] | None = None,
) -> list[Target]:
    """Load targets from a single authoritative source.

    Raises:
        ConfigurationError: If the source is missing or unparseable
    """
    text = source.read_text(environ)
    return parse_targets(
        text,
        require_apikey=source.authenticated_by_default,
        origin=source.describe(),
    )
