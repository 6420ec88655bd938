from pathlib import Path

import pytest

from habitlist.config import Config


def test_defaults_written_on_first_run(isolated_config: Path) -> None:
    config = Config()
    assert config.global_dir == isolated_config / "habitlist"
    assert (config.global_dir / "config.toml").exists()
    assert config.store_key == "TASKS"
    assert config.date_format == "%m/%d/%Y"
    assert config.store_path == config.global_dir / "store.json"
    assert config.get("general.log_level") == "info"
    assert config.get("missing.key", "fallback") == "fallback"

    # The written file parses back to the same values.
    reloaded = Config()
    assert reloaded.store_path == config.store_path
    assert reloaded.log_file == config.log_file


def test_project_config_overrides_global(isolated_config: Path) -> None:
    project = Path.cwd() / ".habitlist"
    project.mkdir()
    (project / "config.toml").write_text('[display]\ndate_format = "%d/%m/%Y"\n', encoding="utf-8")

    config = Config()
    assert config.project_dir == project
    assert config.date_format == "%d/%m/%Y"
    assert config.store_key == "TASKS"


def test_env_overrides_take_priority(isolated_config: Path, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HABITLIST_STORAGE_PATH", str(tmp_path / "elsewhere.json"))
    monkeypatch.setenv("HABITLIST_STORAGE_KEY", "HABITS")
    monkeypatch.setenv("HABITLIST_DISPLAY_DATE_FORMAT", "%Y/%m/%d")

    config = Config()
    assert config.store_path == tmp_path / "elsewhere.json"
    assert config.store_key == "HABITS"
    assert config.date_format == "%Y/%m/%d"
