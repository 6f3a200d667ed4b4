"""Configuration loading helpers for mergelog."""

from __future__ import annotations

import copy
import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping

from .errors import MergelogError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "mergelog.toml"
DEFAULT_FORMAT = "{item} ({link_name})"

DEFAULT_CONFIG: Dict[str, Any] = {
    "sections": [],
    "format": DEFAULT_FORMAT,
    "short-links": False,
    "credentials": {
        "gitlab-token": None,
    },
}


class ConfigError(MergelogError):
    """Raised for missing or malformed configuration."""

    code = "config::invalid"


@dataclass(slots=True)
class MergelogConfig:
    """In-memory representation of the effective configuration."""

    data: Dict[str, Any]
    config_path: Path | None = None

    @property
    def sections(self) -> List[str]:
        return list(self.data.get("sections") or [])

    @property
    def format(self) -> str:
        return self.data.get("format", DEFAULT_FORMAT)

    @property
    def short_links(self) -> bool:
        return bool(self.data.get("short-links", False))

    @property
    def gitlab_token(self) -> str | None:
        return self.data.get("credentials", {}).get("gitlab-token")


def get_config(
    changelog_directory: Path | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> MergelogConfig:
    """Return the effective configuration for the CLI execution."""

    root = Path.cwd()
    merged: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
    file_config, config_file = _load_file_config(root, changelog_directory, config_path)
    if file_config:
        merged = _deep_merge(merged, file_config)

    env_overrides = _environment_overrides()
    if env_overrides:
        merged = _deep_merge(merged, env_overrides)

    if cli_overrides:
        merged = _deep_merge(merged, cli_overrides)

    _validate(merged, config_file)
    return MergelogConfig(data=merged, config_path=config_file)


def _load_file_config(
    root: Path,
    changelog_directory: Path | None,
    explicit: str | Path | None,
) -> tuple[Dict[str, Any], Path | None]:
    if explicit:
        location = (Path(explicit) if Path(explicit).is_absolute() else root / explicit).resolve()
        if not location.is_file():
            raise ConfigError(
                "Configuration file not found",
                code="load_config::missing",
                location=str(location),
            )
        return _read_config_file(location), location

    candidates = [root / CONFIG_FILE_NAME]
    if changelog_directory is not None:
        candidates.append(changelog_directory / CONFIG_FILE_NAME)
    for location in candidates:
        if location.is_file():
            return _read_config_file(location), location
    return {}, None


def _read_config_file(location: Path) -> Dict[str, Any]:
    try:
        text = location.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(
            f"Failed to read config file: {exc}",
            code="load_config::io_error",
            location=str(location),
        ) from exc
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Failed to parse config file: {exc}",
            code="load_config::toml_error",
            location=str(location),
        ) from exc
    logger.info("Loaded config from %s", location)
    return data


def _environment_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    token = os.environ.get("GITLAB_TOKEN")
    if token:
        overrides.setdefault("credentials", {})["gitlab-token"] = token
    return overrides


def _validate(data: Mapping[str, Any], location: Path | None) -> None:
    where = str(location) if location else None
    for key in data:
        if key not in DEFAULT_CONFIG:
            logger.warning("Ignoring unknown config key %r", key)

    sections = data.get("sections")
    if not isinstance(sections, list) or not all(isinstance(item, str) for item in sections):
        raise ConfigError("'sections' must be a list of strings", location=where)
    if not isinstance(data.get("format"), str):
        raise ConfigError("'format' must be a string", location=where)
    if not isinstance(data.get("short-links"), bool):
        raise ConfigError("'short-links' must be a boolean", location=where)
    credentials = data.get("credentials")
    if not isinstance(credentials, Mapping):
        raise ConfigError("'credentials' must be a table", location=where)
    token = credentials.get("gitlab-token")
    if token is not None and not isinstance(token, str):
        raise ConfigError("'credentials.gitlab-token' must be a string", location=where)


def _deep_merge(original: Dict[str, Any], update: Mapping[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = copy.deepcopy(original)
    for key, value in update.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, Mapping)
        ):
            result[key] = _deep_merge(result[key], value)  # type: ignore[arg-type]
        else:
            result[key] = value
    return result
