"""Configuration: YAML file + env var overrides.

Priority: env var > YAML file > default.
Env vars use the BYTESINK_{FIELD} convention (e.g. BYTESINK_LOG_LEVEL=DEBUG).
YAML file default: ~/.bytesink/config.yaml (override with BYTESINK_CONFIG).

Logging:
    Formatter: BYTESINK_LOG_FORMATTER=structlog (default) | stdlib
    Destination: BYTESINK_LOG_DESTINATION=stderr (default) | jsonl
    Renderer: BYTESINK_LOG_FORMAT=json (default) | console

Encoding:
    BYTESINK_SURROGATE_POLICY=replace (default) | strict
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from bytesink.utf8 import check_policy

logger = logging.getLogger(__name__)

_DEFAULT_PATH = Path("~/.bytesink/config.yaml").expanduser()


def _default_path() -> Path:
    override = os.environ.get("BYTESINK_CONFIG")
    return Path(override).expanduser() if override else _DEFAULT_PATH


@dataclass
class BytesinkConfig:
    # --- Logging: formatter x destination ---
    log_formatter: str = "structlog"  # "structlog" | "stdlib"
    log_destination: str = "stderr"  # "stderr" | "jsonl"
    log_level: str = "INFO"
    log_format: str = "json"  # "json" | "console"
    jsonl_path: str | None = None

    # --- Encoding ---
    # How unpaired surrogates in str payloads are handled.
    surrogate_policy: str = "replace"  # "replace" | "strict"

    def __post_init__(self) -> None:
        check_policy(self.surrogate_policy)

    @classmethod
    def load(cls, path: Path | None = None) -> BytesinkConfig:
        """Load from YAML file, then override with env vars."""
        file_path = path or _default_path()
        file_values: dict[str, str] = {}

        if file_path.exists():
            raw = yaml.safe_load(file_path.read_text()) or {}
            if not isinstance(raw, dict):
                raise ValueError(f"{file_path}: expected a mapping, got {type(raw).__name__}")
            known = {f.name for f in fields(cls)}
            for k, v in raw.items():
                if k in known and v is not None:
                    file_values[k] = str(v)
                elif k not in known:
                    logger.warning("ignoring unknown config key %r in %s", k, file_path)

        kwargs: dict[str, str] = {}
        for f in fields(cls):
            env_key = f"BYTESINK_{f.name.upper()}"
            if env_key in os.environ:
                kwargs[f.name] = os.environ[env_key]
            elif f.name in file_values:
                kwargs[f.name] = file_values[f.name]

        config = cls(**kwargs)
        logger.debug(
            "loaded config from %s (%d file keys, %d env overrides)",
            file_path if file_path.exists() else "defaults",
            len(file_values),
            sum(1 for f in fields(cls) if f"BYTESINK_{f.name.upper()}" in os.environ),
        )
        return config

    def to_dict(self) -> dict[str, str | None]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# Singleton
_config: BytesinkConfig | None = None


def get_config(path: Path | None = None) -> BytesinkConfig:
    """Get the process-wide config, loading it on first use."""
    global _config
    if _config is None:
        _config = BytesinkConfig.load(path)
    return _config


def reset_config() -> None:
    """Reset for testing."""
    global _config
    _config = None
