import json
from pathlib import Path

from lazylinear.config import AppConfig, default_config_path, load_config, save_config


def test_load_config_reads_api_key(tmp_path: Path) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text(
        """
{
  "api_key": "lin_api_123",
  "request_timeout_seconds": 12
}
""".strip(),
        encoding="utf-8",
    )

    loaded = load_config(config_file)
    assert loaded.api_key == "lin_api_123"
    assert loaded.request_timeout_seconds == 12.0
    assert loaded.config_source == str(config_file)


def test_load_config_missing_file_gives_empty_key(tmp_path: Path) -> None:
    loaded = load_config(tmp_path / "missing" / "config.json")
    assert loaded == AppConfig()
    assert loaded.api_key == ""


def test_load_config_invalid_json_falls_back(tmp_path: Path) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text("{ this-is: bad json", encoding="utf-8")

    assert load_config(config_file) == AppConfig()


def test_load_config_non_object_falls_back(tmp_path: Path) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text('["lin_api_123"]', encoding="utf-8")

    assert load_config(config_file) == AppConfig()


def test_save_config_creates_directory(tmp_path: Path) -> None:
    target = tmp_path / "nested" / ".lazylinear" / "config.json"

    saved = save_config(AppConfig(api_key="lin_api_456"), target)

    assert saved == target
    assert json.loads(target.read_text(encoding="utf-8")) == {"api_key": "lin_api_456"}
    assert load_config(target).api_key == "lin_api_456"


def test_from_env_prefers_environment_key(monkeypatch, tmp_path: Path) -> None:
    config_file = tmp_path / "config.json"
    save_config(AppConfig(api_key="from-file"), config_file)
    monkeypatch.setenv("LINEAR_API_KEY", "from-env")
    monkeypatch.setenv("LAZYLINEAR_TIMEOUT", "5")

    config = AppConfig.from_env(config_file)

    assert config.api_key == "from-env"
    assert config.request_timeout_seconds == 5.0
    assert config.config_source.endswith("+env")


def test_from_env_uses_file_key_without_environment(monkeypatch, tmp_path: Path) -> None:
    config_file = tmp_path / "config.json"
    save_config(AppConfig(api_key="from-file"), config_file)
    monkeypatch.delenv("LINEAR_API_KEY", raising=False)
    monkeypatch.delenv("LAZYLINEAR_TIMEOUT", raising=False)

    assert AppConfig.from_env(config_file).api_key == "from-file"


def test_default_config_path_honours_override(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LAZYLINEAR_CONFIG_PATH", str(tmp_path / "custom.json"))
    assert default_config_path() == tmp_path / "custom.json"

    monkeypatch.delenv("LAZYLINEAR_CONFIG_PATH")
    assert default_config_path() == Path.home() / ".lazylinear" / "config.json"
