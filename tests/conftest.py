import time
from pathlib import Path

import pytest

from neuronano.config import Config, ConfigStore
from neuronano.session import Session
from neuronano.worker import BackgroundLoop


@pytest.fixture(autouse=True)
def _isolate_home(tmp_path_factory, monkeypatch):
    """Keep config and log files out of the real home directory."""
    base = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(base))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(base / ".config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(base / ".local" / "state"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(base / ".cache"))
    monkeypatch.setenv("NEURONANO_LOG", str(base / "neuronano.log"))
    monkeypatch.delenv("NEURONANO_CONFIG", raising=False)
    monkeypatch.setattr(Path, "home", lambda: base)


@pytest.fixture
def engine():
    loop = BackgroundLoop(name="neuronano-test-tasks").start()
    yield loop
    loop.stop()


@pytest.fixture
def config_store(tmp_path):
    store = ConfigStore(tmp_path / "config.json")
    store.save(Config(api_key="test-key"))
    return store


@pytest.fixture
def make_session(config_store, engine):
    """Build a Session with a configured API key and a real background loop."""
    def factory(filename=None, rewrite=None):
        return Session(filename, config_store=config_store, rewrite=rewrite, engine=engine)
    return factory


def _wait_for_result(session, timeout: float = 2.0) -> bool:
    """Drive poll_result() like the editor loop does until a result is applied."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if session.poll_result():
            return True
        time.sleep(0.01)
    return False


@pytest.fixture
def wait_for_result():
    return _wait_for_result
