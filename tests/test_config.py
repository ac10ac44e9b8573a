from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from areacodes.config import AreaCodeSettings, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in (
        "AREACODES_CONFIG",
        "AREACODES_LOG_LEVEL",
        "AREACODES_JSON_LOGGING",
        "AREACODES_DATA_DIR",
        "AREACODES_MAX_LOAD_WORKERS",
        "AREACODES_SUGGESTION_LIMIT",
    ):
        monkeypatch.delenv(key, raising=False)
    # Keep a developer's ./.env out of the picture.
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    settings = load_settings()
    assert settings == AreaCodeSettings()
    assert settings.data_dir is None
    assert settings.suggestion_limit == 10


def test_precedence_yaml_then_dotenv_then_os_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    yaml_path = tmp_path / "areacodes.yaml"
    yaml_path.write_text(
        "log_level: DEBUG\nsuggestion_limit: 3\nmax_load_workers: 2\n", encoding="utf-8"
    )
    env_path = tmp_path / "custom.env"
    env_path.write_text("AREACODES_SUGGESTION_LIMIT=7\nAREACODES_JSON_LOGGING=true\n", encoding="utf-8")
    monkeypatch.setenv("AREACODES_MAX_LOAD_WORKERS", "8")

    settings = load_settings(yaml_path=yaml_path, env_path=env_path)
    assert settings.log_level == "DEBUG"
    assert settings.suggestion_limit == 7
    assert settings.json_logging is True
    assert settings.max_load_workers == 8


def test_config_path_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    yaml_path = tmp_path / "cfg.yaml"
    yaml_path.write_text(f"data_dir: {tmp_path}\n", encoding="utf-8")
    monkeypatch.setenv("AREACODES_CONFIG", str(yaml_path))
    assert load_settings().data_dir == tmp_path


def test_invalid_values_are_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AREACODES_MAX_LOAD_WORKERS", "0")
    with pytest.raises(ValidationError):
        load_settings()
