"""Unit tests for config.py"""

import pytest
from pydantic import ValidationError

from lecturehub.config import load_config


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run each test in an empty directory with no LECTUREHUB_ env vars."""
    monkeypatch.chdir(tmp_path)
    for name in ("DB_URL", "DATA_DIR", "CACHE_TTL", "MAX_KEYWORDS", "LOG_LEVEL", "HUB_NAME"):
        monkeypatch.delenv(f"LECTUREHUB_{name}", raising=False)


def test_load_config_defaults():
    """Settings defaults are used when no config.yaml, env var, or CLI override exists."""
    settings = load_config()
    assert settings.db_url == "sqlite:///lecturehub.db"
    assert settings.data_dir == "data"
    assert settings.cache_ttl == 300
    assert settings.min_search_length == 2
    assert settings.max_keywords == 10
    assert settings.headings_per_page == 5


def test_load_config_uses_env_db_url(monkeypatch):
    """LECTUREHUB_DB_URL env var is picked up by load_config."""
    monkeypatch.setenv("LECTUREHUB_DB_URL", "sqlite:///env.db")
    assert load_config().db_url == "sqlite:///env.db"


def test_load_config_reads_config_yaml(tmp_path):
    """Values in config.yaml replace the defaults."""
    (tmp_path / "config.yaml").write_text("data_dir: 'courses'\ncache_ttl: 60\n")
    settings = load_config()
    assert settings.data_dir == "courses"
    assert settings.cache_ttl == 60


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """LECTUREHUB_DB_URL takes precedence over config.yaml db_url."""
    (tmp_path / "config.yaml").write_text("db_url: 'sqlite:///project.db'\n")
    monkeypatch.setenv("LECTUREHUB_DB_URL", "sqlite:///override.db")
    assert load_config().db_url == "sqlite:///override.db"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("LECTUREHUB_DATA_DIR", "env-data")
    settings = load_config(overrides={"data_dir": "cli-data", "db_url": None})
    assert settings.data_dir == "cli-data"
    assert settings.db_url == "sqlite:///lecturehub.db"


def test_load_config_env_int_coerced(monkeypatch):
    """LECTUREHUB_MAX_KEYWORDS is coerced to int."""
    monkeypatch.setenv("LECTUREHUB_MAX_KEYWORDS", "3")
    assert load_config().max_keywords == 3


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_rejects_bad_log_level(monkeypatch):
    """log_level must be a known level name."""
    monkeypatch.setenv("LECTUREHUB_LOG_LEVEL", "LOUD")
    with pytest.raises(ValidationError):
        load_config()


def test_load_config_rejects_negative_ttl():
    """cache_ttl cannot be negative."""
    with pytest.raises(ValidationError):
        load_config(overrides={"cache_ttl": -1})
