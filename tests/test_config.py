import pytest

from jobflow import config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("JOBFLOW_AI_MODE", "LLM_MODEL", "GROQ_LLM_MODEL", "LLM_BASE_URL",
                "AUTOPILOT_DELAY", "LLM_API_KEY", "GROQ_API_KEY"):
        monkeypatch.delenv(key, raising=False)


def test_defaults_when_file_missing(tmp_path):
    settings = config.load_settings(tmp_path / "missing.yaml")
    assert settings == config.DEFAULT_SETTINGS
    assert settings is not config.DEFAULT_SETTINGS


def test_yaml_overlays_defaults(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("autopilot:\n  analysis_delay: 3\nai:\n  mode: strict\n")
    settings = config.load_settings(path)
    assert settings["autopilot"]["analysis_delay"] == 3
    assert settings["autopilot"]["tick_interval"] == 0.5
    assert settings["ai"]["mode"] == "strict"
    assert settings["ai"]["model"] == config.DEFAULT_SETTINGS["ai"]["model"]


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "settings.yaml"
    path.write_text("ai:\n  mode: strict\n")
    monkeypatch.setenv("JOBFLOW_AI_MODE", "Permissive")
    monkeypatch.setenv("AUTOPILOT_DELAY", "1.5")
    monkeypatch.setenv("LLM_MODEL", "mixtral")
    settings = config.load_settings(path)
    assert settings["ai"]["mode"] == "permissive"
    assert settings["autopilot"]["analysis_delay"] == 1.5
    assert settings["ai"]["model"] == "mixtral"


def test_bad_values_are_ignored(tmp_path, monkeypatch):
    path = tmp_path / "settings.yaml"
    path.write_text("ai: [unclosed\n")
    monkeypatch.setenv("JOBFLOW_AI_MODE", "yolo")
    monkeypatch.setenv("AUTOPILOT_DELAY", "soon")
    settings = config.load_settings(path)
    assert settings["ai"]["mode"] == "permissive"
    assert settings["autopilot"]["analysis_delay"] == 10.0


def test_placeholder_keys_count_as_missing(monkeypatch):
    assert config.is_placeholder("your_key_here")
    assert config.is_placeholder("undefined")
    assert not config.is_placeholder("gsk_real")

    monkeypatch.setenv("LLM_API_KEY", "your_key_here")
    assert config.get_api_key() == ""
    monkeypatch.setenv("GROQ_API_KEY", "gsk_real")
    monkeypatch.delenv("LLM_API_KEY")
    assert config.get_api_key() == "gsk_real"


def test_write_settings(tmp_path):
    path = config.write_settings(config.DEFAULT_SETTINGS, tmp_path / "settings.yaml")
    assert config.load_settings(path) == config.DEFAULT_SETTINGS
