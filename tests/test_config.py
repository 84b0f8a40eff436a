import pytest

from bot.commands import BOT_PING, GET_PIZZA, ChatRule, WhisperRule
from bot.config import DEFAULT_SERVER, SERVER_ENV_VAR, BotConfig, config_from_dict, load_config
from bot.errors import ConfigError


@pytest.fixture(autouse=True)
def clear_server_env(monkeypatch):
    monkeypatch.delenv(SERVER_ENV_VAR, raising=False)


def test_defaults():
    config = load_config()

    assert config.server == DEFAULT_SERVER
    assert config.name == "PIZZABOT"
    assert config.flag == "XX"
    assert list(config.commands) == [BOT_PING, GET_PIZZA]


def test_yaml_file_overrides_defaults(tmp_path):
    path = tmp_path / "bot.yaml"
    path.write_text(
        "server: ws://localhost:3501/ffa\n"
        "name: TESTBOT\n"
        "commands:\n"
        "  -hi:\n"
        "    reply: chat\n"
        "    text: hello\n"
        "  -whoami:\n"
        "    reply: whisper\n"
        "    text: a bot\n"
    )

    config = load_config(path)

    assert config.server == "ws://localhost:3501/ffa"
    assert config.name == "TESTBOT"
    assert config.flag == "XX"
    assert list(config.commands) == ["-hi", "-whoami"]
    assert config.commands["-hi"] == ChatRule("hello")
    assert config.commands["-whoami"] == WhisperRule("a bot")


def test_env_var_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "bot.yaml"
    path.write_text("server: ws://from-file\n")
    monkeypatch.setenv(SERVER_ENV_VAR, "ws://from-env")

    assert load_config(path).server == "ws://from-env"


def test_cli_style_overrides_skip_none():
    config = BotConfig().with_overrides(server=None, name="CLIBOT", flag=None)

    assert config.name == "CLIBOT"
    assert config.server == DEFAULT_SERVER


def test_empty_file_keeps_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")

    assert load_config(path) == BotConfig()


@pytest.mark.parametrize(
    "data",
    [
        ["not", "a", "mapping"],
        {"port": 80},
        {"name": ""},
        {"flag": 12},
        {"commands": []},
        {"commands": {}},
        {"commands": {"-x": {"reply": "shout", "text": "hi"}}},
        {"commands": {"-x": {"reply": "chat"}}},
        {"commands": {"-x": {"reply": "chat", "text": "hi", "extra": 1}}},
        {"commands": {"-x": {"reply": "chat", "text": "x" * 256}}},
    ],
)
def test_invalid_config_raises(data):
    with pytest.raises(ConfigError):
        config_from_dict(data)


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("server: [unclosed\n")

    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml")
