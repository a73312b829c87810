import pytest

from tweak_core.tool_config import ToolConfig


@pytest.fixture
def temp_dir(tmp_path):
    """Scratch directory for source files under rewrite"""
    return tmp_path


@pytest.fixture(autouse=True)
def isolated_logs_and_config(tmp_path_factory, monkeypatch):
    """Keep test logs out of the system temp dir and config out of the repo"""
    monkeypatch.setenv("TWEAK_LOG_DIR", str(tmp_path_factory.getbasetemp()))
    monkeypatch.setenv("TWEAK_CONFIG", str(tmp_path_factory.getbasetemp() / "missing-tweak.json"))
    ToolConfig.reset()
    yield
    ToolConfig.reset()
