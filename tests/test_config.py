from pathlib import Path

import pytest

from teleguard.utils.config import ENV_OVERRIDES, AppConfig, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults_without_file():
    cfg = load_config()
    assert cfg == AppConfig()
    assert cfg.providers == ["gemini"]


def test_yaml_file_values(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text(
        "providers: [local, gemini]\n"
        "report_dir: out/reports\n"
        "checklist_language: Thai\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.providers == ["local", "gemini"]
    assert cfg.report_dir == Path("out/reports")
    assert cfg.checklist_language == "Thai"


def test_config_yaml_in_cwd_is_picked_up(tmp_path):
    (tmp_path / "config.yaml").write_text("gemini_model: gemini-2.5-pro\n", encoding="utf-8")
    assert load_config().gemini_model == "gemini-2.5-pro"


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("providers: [gemini]\n", encoding="utf-8")
    monkeypatch.setenv("TELEGUARD_PROVIDERS", "gemini, Local")
    monkeypatch.setenv("TELEGUARD_FONT_URL", "")

    cfg = load_config(path)
    assert cfg.providers == ["gemini", "local"]
    assert cfg.report_font_url == ""


def test_unknown_keys_are_rejected(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("colour: blue\n", encoding="utf-8")
    with pytest.raises(ValueError, match="colour"):
        load_config(path)


def test_missing_explicit_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")
