"""
Persisted configuration for the NeuroNano editor.

The config is a small JSON record holding the Gemini API key. Loading never
fails the caller: a missing or broken file yields the default (empty) config.
"""
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from neuronano import logger, paths
from neuronano.errors import ConfigError

CONFIG_ENV_VAR = "NEURONANO_CONFIG"


@dataclass
class Config:
    api_key: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"api_key": self.api_key}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        return cls(api_key=str(data.get("api_key") or ""))


def default_config_path() -> Path:
    override = os.getenv(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return paths.config_dir() / "config.json"


class ConfigStore:
    """Loads and saves the Config record as JSON."""
    def __init__(self, path=None):
        self.path = Path(path) if path is not None else default_config_path()

    def read(self) -> Config:
        """Read the config file, raising ConfigError when it is unreadable or malformed."""
        if not self.path.exists():
            return Config()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ConfigError(f"cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"malformed config in {self.path}")
        return Config.from_dict(data)

    def load(self) -> Config:
        """Like read(), but falls back to the default config on any ConfigError."""
        try:
            return self.read()
        except ConfigError as exc:
            logger.log(f"config error, using defaults: {exc}")
            return Config()

    def save(self, config: Config) -> None:
        data = json.dumps(config.to_dict(), indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(data, encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"cannot write {self.path}: {exc}") from exc
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            pass
