"""Test environment configuration loading."""

import json
from pathlib import Path

import pytest

from config import Config


@pytest.fixture
def env_file(tmp_path):
    config_file = tmp_path / "environments.json"
    config_file.write_text(
        json.dumps(
            {
                "default": "laptop",
                "environments": {
                    "laptop": {
                        "description": "Local analysis",
                        "output_dir": str(tmp_path / "laptop_output"),
                        "parse_chunk_size": 250,
                        "max_errors": 10,
                        "skip_errors": False,
                        "log_level": "DEBUG",
                    },
                    "ci": {
                        "description": "Continuous integration",
                        "output_dir": str(tmp_path / "ci_output"),
                        "cache_ttl_seconds": 1,
                    },
                },
            }
        ),
        encoding="utf-8",
    )
    return config_file


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, restore_config):
    for name in [
        "INVOICE_ENV",
        "OUTPUT_DIR",
        "LOG_LEVEL",
        "INVOICE_MAX_ERRORS",
        "INVOICE_SKIP_ERRORS",
        "INVOICE_CHUNK_SIZE",
        "INVOICE_CACHE_TTL",
    ]:
        monkeypatch.delenv(name, raising=False)


def test_list_environments(env_file):
    """Test listing available environments."""
    envs = Config.list_environments(str(env_file))

    assert set(envs) == {"laptop", "ci"}
    assert envs["laptop"]["is_default"]
    assert not envs["ci"]["is_default"]
    for settings in envs.values():
        assert "description" in settings
        assert "output_dir" in settings


def test_list_environments_missing_file(tmp_path):
    assert Config.list_environments(str(tmp_path / "missing.json")) == {}


def test_load_default_environment(env_file, tmp_path):
    """Test loading default environment."""
    env_name = Config.load_environment(config_file=str(env_file))

    assert env_name == "laptop"
    assert Config.CURRENT_ENVIRONMENT == "laptop"
    assert Config.OUTPUT_DIR == tmp_path / "laptop_output"
    assert Config.PARSE_CHUNK_SIZE == 250
    assert Config.MAX_ERRORS == 10
    assert Config.SKIP_ERRORS is False
    assert Config.LOG_LEVEL == "DEBUG"


def test_load_specific_environment(env_file):
    """Test loading a specific environment."""
    env_name = Config.load_environment("ci", config_file=str(env_file))

    assert env_name == "ci"
    assert Config.CACHE_TTL_SECONDS == 1


def test_invoice_env_variable_selects_environment(env_file, monkeypatch):
    monkeypatch.setenv("INVOICE_ENV", "ci")
    assert Config.load_environment(config_file=str(env_file)) == "ci"


def test_invalid_environment(env_file):
    """Test loading non-existent environment raises error."""
    with pytest.raises(ValueError, match="not found"):
        Config.load_environment("nonexistent_environment_xyz", config_file=str(env_file))


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.load_environment(config_file=str(tmp_path / "missing.json"))


def test_environment_variables_override_file(env_file, monkeypatch, tmp_path):
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "override"))
    monkeypatch.setenv("INVOICE_MAX_ERRORS", "5")
    monkeypatch.setenv("INVOICE_SKIP_ERRORS", "TRUE")
    monkeypatch.setenv("INVOICE_CHUNK_SIZE", "10")

    Config.load_environment(config_file=str(env_file))

    assert Config.OUTPUT_DIR == tmp_path / "override"
    assert Config.MAX_ERRORS == 5
    assert Config.SKIP_ERRORS is True
    assert Config.PARSE_CHUNK_SIZE == 10


def test_load_from_env(monkeypatch):
    monkeypatch.setenv("INVOICE_CACHE_TTL", "60")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    Config.load_from_env()

    assert Config.CACHE_TTL_SECONDS == 60
    assert Config.LOG_LEVEL == "WARNING"


def test_ensure_directories(monkeypatch, tmp_path):
    monkeypatch.setattr(Config, "OUTPUT_DIR", tmp_path / "nested" / "output")
    Config.ensure_directories()
    assert Path(Config.OUTPUT_DIR).is_dir()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
