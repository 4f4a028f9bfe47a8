"""Logging utilities and helpers.

- iso_formatter: JSONL formatting with ISO 8601 timestamps
- logger_setup: Factory for file-backed JSONL loggers
- logging_helpers: Event serialization and identifier hashing

Import directly from submodules:
    from toolkit_auth.utils.logging.logger_setup import setup_jsonl_logger
"""

__all__: list[str] = []  # Direct submodule imports required (see docstring)
