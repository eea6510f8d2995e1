import pytest

from changie.config import Config, ConfigError, load_config


@pytest.fixture
def empty_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.delenv("APP_LOG_LEVEL", raising=False)
    return home


def test_load_config_invalid_config_file():
    with pytest.raises(ConfigError, match="failed to read config file"):
        load_config("/invalid/path/to/config.yaml", "changie")


def test_load_config_no_config_file(empty_home):
    config = load_config(None, "changie")
    assert config.get_str("app.log_level") == "info"
    assert config.config_file is None


def test_load_config_explicit_yaml(tmp_path, empty_home):
    path = tmp_path / "conf.yaml"
    path.write_text("app:\n  log_level: debug\n  changelog:\n    file: NEWS.md\n")
    config = load_config(str(path), "changie")
    assert config.get_str("app.log_level") == "debug"
    assert config.get_str("app.changelog.file") == "NEWS.md"
    assert config.config_file == path


def test_load_config_finds_home_file(empty_home):
    (empty_home / ".changie.yaml").write_text("app:\n  log_level: warn\n")
    config = load_config(None, "changie")
    assert config.get_str("app.log_level") == "warn"


def test_load_config_malformed_file(tmp_path, empty_home):
    path = tmp_path / "conf.yaml"
    path.write_text("app: [unclosed\n")
    with pytest.raises(ConfigError, match="failed to read config file"):
        load_config(str(path), "changie")


def test_load_config_unsupported_extension(tmp_path, empty_home):
    path = tmp_path / "conf.ini"
    path.write_text("x=1\n")
    with pytest.raises(ConfigError, match="Unsupported"):
        load_config(str(path), "changie")


def test_environment_overrides_file(tmp_path):
    path = tmp_path / "conf.json"
    path.write_text('{"app": {"log_level": "debug"}}')
    config = Config(env={"APP_LOG_LEVEL": "error"})
    config.read_file(path)
    assert config.get_str("app.log_level") == "error"


def test_set_overrides_environment():
    config = Config(env={"APP_CHANGELOG_FILE": "ENV.md"})
    config.set_default("app.changelog.file", "CHANGELOG.md")
    assert config.get_str("app.changelog.file") == "ENV.md"
    config.set("app.changelog.file", "FLAG.md")
    assert config.get_str("app.changelog.file") == "FLAG.md"


def test_empty_environment_value_is_ignored():
    config = Config(env={"APP_LOG_LEVEL": ""})
    config.set_default("app.log_level", "info")
    assert config.get_str("app.log_level") == "info"


def test_missing_key():
    config = Config(env={})
    assert config.get("nothing.here") is None
    assert config.get_str("nothing.here") == ""
    assert config.get_bool("nothing.here") is False


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("true", True), ("1", True), ("T", True), ("false", False), ("0", False), ("yes", False)],
)
def test_get_bool_from_environment(raw, expected):
    config = Config(env={"APP_CHANGELOG_AUTO_PUSH": raw})
    assert config.get_bool("app.changelog.auto_push") is expected


def test_get_bool_and_str_from_typed_values():
    config = Config(env={})
    config.set_default("app.changelog.auto_push", True)
    config.set_default("app.count", 3)
    assert config.get_bool("app.changelog.auto_push") is True
    assert config.get_str("app.changelog.auto_push") == "true"
    assert config.get_bool("app.count") is True
    assert config.get_str("app.count") == "3"


def test_keys_are_case_insensitive(tmp_path):
    path = tmp_path / "conf.toml"
    path.write_text('[App]\nLog_Level = "trace"\n')
    config = Config(env={})
    config.read_file(path)
    assert config.get_str("app.log_level") == "trace"