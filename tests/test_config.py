import json

import pytest

from neuronano.config import Config, ConfigStore, default_config_path
from neuronano.errors import ConfigError


def test_missing_file_loads_default(tmp_path):
    assert ConfigStore(tmp_path / "nope.json").load() == Config()


def test_save_then_load(tmp_path):
    store = ConfigStore(tmp_path / "sub" / "config.json")
    store.save(Config(api_key="abc"))
    assert json.loads(store.path.read_text(encoding="utf-8")) == {"api_key": "abc"}
    assert store.load().api_key == "abc"


def test_malformed_file_falls_back_to_default(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    store = ConfigStore(path)
    with pytest.raises(ConfigError):
        store.read()
    assert store.load() == Config()


def test_non_object_json_falls_back_to_default(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert ConfigStore(path).load() == Config()


def test_save_failure_raises_config_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(ConfigError):
        ConfigStore(blocker / "config.json").save(Config(api_key="k"))


def test_default_path_honours_env(tmp_path, monkeypatch):
    monkeypatch.setenv("NEURONANO_CONFIG", str(tmp_path / "custom.json"))
    assert default_config_path() == tmp_path / "custom.json"


def test_default_path_is_in_user_config_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    path = default_config_path()
    assert path.name == "config.json"
    assert path.parent.name == "neuronano"
