"""
Conversion between env files and JSON object strings.

Env file format:
  - one KEY=VALUE assignment per line, split at the first "="
  - lines end at LF or CRLF; other Unicode line separators are part of the data
  - lines starting with "#" (after leading whitespace) are comments
  - blank lines and lines without "=" are ignored
  - keys are stripped of surrounding whitespace, values are kept verbatim
  - no quoting or escaping
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from opskit.constants import ENV_ASSIGNMENT, ENV_COMMENT, ENV_FILE_ENCODING
from opskit.exceptions import EnvFileError, ValidationError
from opskit.monitoring.logger import get_logger

logger = get_logger(__name__)


def parse_env(content: str) -> dict[str, str]:
    """
    Parse env-file text into an ordered mapping.

    Duplicate keys: the last value wins, the key keeps its first position.
    """
    values: dict[str, str] = {}
    for line in content.split("\n"):
        line = line.removesuffix("\r")
        stripped = line.strip()
        if not stripped or stripped.startswith(ENV_COMMENT):
            continue
        key, sep, value = line.partition(ENV_ASSIGNMENT)
        if not sep:
            continue
        key = key.strip()
        if not key:
            continue
        values[key] = value
    return values


def _env_value(key: str, value: Any) -> str:
    """Render one JSON value for the env file (strings verbatim, scalars as JSON text)."""
    if value is None:
        return ""
    if isinstance(value, str):
        text = value
    elif isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, (int, float)):
        text = json.dumps(value)
    else:
        raise ValidationError(
            f"Value for '{key}' must be a string, number, boolean or null, got {type(value).__name__}"
        )
    if "\n" in text or "\r" in text:
        raise ValidationError(f"Value for '{key}' contains a line break")
    return text


def _check_key(key: str) -> None:
    """Reject keys that would not read back unchanged."""
    if not key.strip():
        raise ValidationError("Env keys must not be empty")
    if ENV_ASSIGNMENT in key or "\n" in key or "\r" in key:
        raise ValidationError(f"Env key {key!r} contains '=' or a line break")
    if key != key.strip():
        raise ValidationError(f"Env key {key!r} has leading or trailing whitespace")
    if key.startswith(ENV_COMMENT):
        raise ValidationError(f"Env key {key!r} would be read as a comment")


def render_env(values: dict[str, Any]) -> str:
    """Render a flat mapping as env-file text, one assignment per line."""
    lines = []
    for key, value in values.items():
        _check_key(key)
        lines.append(f"{key}{ENV_ASSIGNMENT}{_env_value(key, value)}\n")
    return "".join(lines)


def env_to_json_string(env_path: str) -> str:
    """
    Read the env file at *env_path* and return it as a compact JSON object.

    Raises:
        EnvFileError: If the file cannot be read
    """
    try:
        content = Path(env_path).read_text(encoding=ENV_FILE_ENCODING)
    except (OSError, UnicodeDecodeError) as e:
        raise EnvFileError(f"Failed to read {env_path}: {e}", path=env_path) from e

    values = parse_env(content)
    logger.debug("ENV_TO_JSON", env_path=env_path, entries=len(values))
    return json.dumps(values, ensure_ascii=False, separators=(",", ":"))


def json_string_to_env(json_str: str, env_path: str) -> None:
    """
    Write the flat JSON object *json_str* to *env_path*, replacing its content.

    The whole document is validated before the file is opened.

    Raises:
        ValidationError: Invalid JSON, not an object, nested values, or
            keys/values that cannot be represented in an env file
        EnvFileError: If the file cannot be written
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Failed to parse JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError(f"Cannot convert JSON {type(data).__name__} to env file, expected an object")

    content = render_env(data)

    try:
        with open(env_path, "w", encoding=ENV_FILE_ENCODING, newline="\n") as f:
            f.write(content)
    except OSError as e:
        raise EnvFileError(f"Failed to write {env_path}: {e}", path=env_path) from e

    logger.debug("JSON_TO_ENV", env_path=env_path, entries=len(data))
