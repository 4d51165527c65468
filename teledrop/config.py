"""Configuration management for teledrop."""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv
from platformdirs import user_config_path

from .errors import ConfigError, ConfigMissing

logger = logging.getLogger(__name__)

APP_NAME = "teledrop"
CONFIG_NAME = "config.toml"
DEFAULT_API_BASE = "https://api.telegram.org"

ENV_PREFIX = "TELEDROP_"

CONFIG_TEMPLATE = """\
# teledrop configuration
#
# bot_token = '123456789:ABC-DEF1234ghIkl-zyx57W2v1u123ew11'
# chat_id = '123456789'

bot_token = ''
chat_id = ''
"""


def default_config_path() -> Path:
    """Platform-specific location of the config file."""
    return user_config_path(APP_NAME) / CONFIG_NAME


@dataclass(frozen=True)
class Config:
    """Bot credentials and the chat that receives uploaded documents."""

    bot_token: str
    chat_id: str
    api_base: str = DEFAULT_API_BASE

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "Config":
        """
        Load configuration from the TOML file, then apply environment overrides.

        A missing file is created from a template so the user has something
        to fill in.

        Args:
            path: Config file location, defaults to ``default_config_path()``

        Raises:
            ConfigError: the file exists but is not valid TOML
            ConfigMissing: ``bot_token`` or ``chat_id`` is empty
        """
        load_dotenv(find_dotenv(usecwd=True))
        path = Path(path) if path else default_config_path()

        values = _read_file(path)
        for key in ("bot_token", "chat_id", "api_base"):
            env_value = os.getenv(ENV_PREFIX + key.upper())
            if env_value:
                values[key] = env_value

        bot_token = str(values.get("bot_token") or "").strip()
        chat_id = str(values.get("chat_id") or "").strip()
        api_base = str(values.get("api_base") or DEFAULT_API_BASE).rstrip("/")

        missing = []
        if not bot_token:
            missing.append("bot_token")
        if not chat_id:
            missing.append("chat_id")
        if missing:
            raise ConfigMissing(missing, path)

        return cls(bot_token=bot_token, chat_id=chat_id, api_base=api_base)


def _read_file(path: Path) -> dict:
    if not path.exists():
        logger.info("Config file %s not found, writing template", path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
        except OSError as e:
            logger.warning("Could not create config file %s: %s", path, e)
        return {}

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Config error: {path}: {e}") from e

    # chat ids are numeric, accept them unquoted
    for key in ("bot_token", "chat_id", "api_base"):
        value = data.get(key)
        if key in data and (isinstance(value, bool) or not isinstance(value, (str, int))):
            raise ConfigError(f"Config error: {key} must be a string")
    return data
