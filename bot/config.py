#!/usr/bin/env python3
"""
Bot configuration.

Values are resolved in this order, later sources winning:

    1. built-in defaults (``BotConfig()``)
    2. a YAML file given with ``--config``
    3. the ``PIZZABOT_SERVER`` environment variable (server URL only)
    4. command line options

Example file:

    server: wss://game-us-s1.airma.sh/ffa1
    name: PIZZABOT
    flag: XX
    log_level: INFO
    commands:
      -bot-ping:
        reply: whisper
        text: "I am PIZZABOT. Owner: Dominos"
      -get-pizza:
        reply: chat
        text: "Order airmash pizza here: http://tiny.cc/airmash-pizza"

A ``commands`` section replaces the default table entirely. Entries keep the
order they have in the file.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from bot.commands import ChatRule, CommandTable, WhisperRule, default_command_table
from bot.errors import ConfigError

DEFAULT_SERVER = "wss://game-us-s1.airma.sh/ffa1"
DEFAULT_NAME = "PIZZABOT"
# The UN flag
DEFAULT_FLAG = "XX"

SERVER_ENV_VAR = "PIZZABOT_SERVER"

_REPLY_KINDS = {
    "whisper": WhisperRule,
    "chat": ChatRule,
}
_TOP_LEVEL_KEYS = {"server", "name", "flag", "log_level", "commands"}


@dataclass(frozen=True)
class BotConfig:
    server: str = DEFAULT_SERVER
    name: str = DEFAULT_NAME
    flag: str = DEFAULT_FLAG
    log_level: str = "INFO"
    commands: CommandTable = field(default_factory=default_command_table)

    def with_overrides(self, **overrides: Optional[str]) -> "BotConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _require_str(data: Dict[str, Any], key: str, where: str) -> str:
    value = data[key]
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{where}: '{key}' must be a non-empty string")
    return value


def parse_commands(data: Any) -> CommandTable:
    if not isinstance(data, dict):
        raise ConfigError("'commands' must be a mapping of command -> {reply, text}")

    pairs = []
    for command, entry in data.items():
        where = f"commands[{command!r}]"
        if not isinstance(command, str) or not command:
            raise ConfigError(f"{where}: command must be a non-empty string")
        if not isinstance(entry, dict) or set(entry) != {"reply", "text"}:
            raise ConfigError(f"{where}: expected exactly the keys 'reply' and 'text'")
        kind = _require_str(entry, "reply", where)
        if kind not in _REPLY_KINDS:
            raise ConfigError(f"{where}: unknown reply kind {kind!r}, expected one of {sorted(_REPLY_KINDS)}")
        text = _require_str(entry, "text", where)
        if len(text.encode("utf-8")) > 255:
            raise ConfigError(f"{where}: reply text is longer than 255 bytes")
        pairs.append((command, _REPLY_KINDS[kind](text)))

    if not pairs:
        raise ConfigError("'commands' must contain at least one command")
    return CommandTable.from_pairs(pairs)


def config_from_dict(data: Any, base: Optional[BotConfig] = None) -> BotConfig:
    base = base or BotConfig()
    if data is None:
        return base
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    unknown = set(data) - _TOP_LEVEL_KEYS
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")

    overrides: Dict[str, Any] = {}
    for key in ("server", "name", "flag", "log_level"):
        if key in data:
            overrides[key] = _require_str(data, key, "config")
    if "commands" in data:
        overrides["commands"] = parse_commands(data["commands"])
    return replace(base, **overrides)


def load_config(path: Optional[Path] = None) -> BotConfig:
    """Build the configuration from defaults, an optional YAML file and the environment."""
    config = BotConfig()
    if path is not None:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        config = config_from_dict(data, config)

    env_server = os.getenv(SERVER_ENV_VAR)
    if env_server:
        config = replace(config, server=env_server)
    return config
