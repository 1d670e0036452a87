"""Runtime settings: .playground/config.yaml, overridden by PLAYGROUND_* env vars."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

PLAYGROUND_DIR = ".playground"
CONFIG_FILE = "config.yaml"

_ENV_PREFIX = "PLAYGROUND_"
_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass
class Settings:
    delay: float = 1.0  # seconds of simulated latency per submission
    jitter: float = 0.0  # extra random latency, uniform in [0, jitter]
    failure_rate: float = 0.0  # probability of a simulated server_error
    log_level: str = "WARNING"
    forms_dir: Path | None = None  # extra *.yaml form definitions
    constraints_dir: Path | None = None  # *.py files with @constraint predicates

    def __post_init__(self):
        self.delay = _as_float("delay", self.delay, minimum=0.0)
        self.jitter = _as_float("jitter", self.jitter, minimum=0.0)
        self.failure_rate = _as_float("failure_rate", self.failure_rate, minimum=0.0, maximum=1.0)
        self.log_level = str(self.log_level).upper()
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(sorted(_LOG_LEVELS))}, got {self.log_level!r}")
        if self.forms_dir is not None:
            self.forms_dir = Path(self.forms_dir)
        if self.constraints_dir is not None:
            self.constraints_dir = Path(self.constraints_dir)

    def configure_logging(self) -> None:
        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def _as_float(name: str, value: Any, minimum: float | None = None, maximum: float | None = None) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if minimum is not None and result < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {result}")
    if maximum is not None and result > maximum:
        raise ValueError(f"{name} must be <= {maximum}, got {result}")
    return result


def load_settings(root: str | Path | None = None, env: dict[str, str] | None = None) -> Settings:
    """Build Settings from <root>/.playground/config.yaml, then environment overrides.

    Relative directories in the config file resolve against <root>/.playground.
    When the file is absent, <root>/.playground/forms and /constraints are used
    if they exist.
    """
    base = Path(root or os.getcwd()) / PLAYGROUND_DIR
    env = os.environ if env is None else env
    known = {f.name for f in fields(Settings)}

    values: dict[str, Any] = {}
    config_path = base / CONFIG_FILE
    if config_path.exists():
        try:
            raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid config {config_path}: {e}") from None
        if not isinstance(raw, dict):
            raise ValueError(f"Invalid config {config_path}: expected a mapping")
        unknown = set(raw) - known
        if unknown:
            raise ValueError(f"Unknown settings in {config_path}: {', '.join(sorted(map(str, unknown)))}")
        values.update(raw)

    for key in ("delay", "jitter", "failure_rate", "log_level"):
        env_value = env.get(f"{_ENV_PREFIX}{key.upper()}")
        if env_value:
            values[key] = env_value

    for key, default in (("forms_dir", "forms"), ("constraints_dir", "constraints")):
        if values.get(key):
            path = Path(values[key])
            values[key] = path if path.is_absolute() else base / path
        elif (base / default).is_dir():
            values[key] = base / default

    return Settings(**values)
