"""File helpers for locating and reading the options file."""

from __future__ import annotations

__all__ = [
    "get_app_dir",
    "load_validated_json",
    "require_file_exists",
]

import json
from pathlib import Path
from typing import Any, TypeVar

import click
from pydantic import BaseModel, ValidationError

from toolkit_auth.constants import APP_NAME

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_app_dir() -> Path:
    """Per-user configuration directory, as chosen by click for this platform.

    e.g. ~/.config/toolkit-auth on Linux,
    ~/Library/Application Support/toolkit-auth on macOS.
    """
    return Path(click.get_app_dir(APP_NAME))


def require_file_exists(file_path: Path, file_type: str = "file") -> None:
    """Raise FileNotFoundError naming file_type and the expected location."""
    if not file_path.exists():
        raise FileNotFoundError(f"{file_type.capitalize()} file not found at {file_path}.")


def _format_validation_error(error: ValidationError) -> str:
    return "\n".join(
        f"  - {'.'.join(str(part) for part in item['loc'])}: {item['msg']}" for item in error.errors()
    )


def load_validated_json(
    file_path: Path,
    model_class: type[ModelT],
    file_type: str = "file",
    overrides: dict[str, Any] | None = None,
) -> ModelT:
    """Read a JSON object from file_path and validate it as model_class.

    Args:
        file_path: JSON file to read.
        model_class: Pydantic model the content must satisfy.
        file_type: Used in error messages (e.g., "options").
        overrides: Keys that replace file values before validation.

    Returns:
        The validated model.

    Raises:
        ValueError: If the file is unreadable, not a JSON object, or invalid
            for model_class. The message names the file and each bad field.
    """
    label = f"{file_type} file {file_path}"
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {label}: {e}") from e
    except OSError as e:
        raise ValueError(f"Could not read {label}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Invalid {label}: expected a JSON object")

    try:
        return model_class.model_validate({**data, **(overrides or {})})
    except ValidationError as e:
        raise ValueError(f"Invalid {label}:\n{_format_validation_error(e)}") from e
