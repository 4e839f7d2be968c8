"""Tests for the YAML configuration loader."""

# pylint: disable=protected-access,missing-function-docstring

from __future__ import annotations

from pathlib import Path

import pytest
from box import Box

from postal.config import (
    ConfigFileNotFoundError,
    ConfigFormatError,
    EnvVarError,
    clear_config,
    get_config,
    load_config,
)
from postal.config import loader as cfg_loader


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_explicit_path(tmp_path: Path) -> None:
    config_file = _write(tmp_path / "custom.yml", "mailer:\n  host: smtp.example.com\n  port: 2525\n")

    config = load_config(config_file)

    assert isinstance(config, Box)
    assert config.mailer.host == "smtp.example.com"
    assert config.mailer.port == 2525


def test_load_default_filename_from_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write(tmp_path / "postal.conf.yml", "mailer:\n  provider: gmail\n")
    monkeypatch.chdir(tmp_path)

    assert load_config().mailer.provider == "gmail"


def test_env_var_path_takes_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write(tmp_path / "postal.conf.yml", "source: cwd\n")
    other = _write(tmp_path / "other.yml", "source: env\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("POSTAL_CONFIG", str(other))

    assert load_config().source == "env"


def test_missing_file_lists_searched_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("POSTAL_CONFIG", str(tmp_path / "nope.yml"))

    with pytest.raises(ConfigFileNotFoundError) as exc_info:
        load_config()

    assert str(tmp_path / "nope.yml") in exc_info.value.searched
    assert str(tmp_path / "postal.conf.yml") in exc_info.value.searched


def test_explicit_missing_path(tmp_path: Path) -> None:
    with pytest.raises(ConfigFileNotFoundError):
        load_config(tmp_path / "missing.yml")


def test_invalid_yaml(tmp_path: Path) -> None:
    config_file = _write(tmp_path / "bad.yml", "mailer: [unclosed\n")

    with pytest.raises(ConfigFormatError):
        load_config(config_file)


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    config_file = _write(tmp_path / "list.yml", "- a\n- b\n")

    with pytest.raises(ConfigFormatError, match="mapping"):
        load_config(config_file)


def test_empty_file_gives_empty_config(tmp_path: Path) -> None:
    config_file = _write(tmp_path / "empty.yml", "")

    assert load_config(config_file) == Box()


def test_env_vars_are_expanded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POSTAL_TEST_PASSWORD", "s3cret")
    monkeypatch.delenv("POSTAL_TEST_PORT", raising=False)
    config_file = _write(
        tmp_path / "env.yml",
        "mailer:\n"
        "  password: ${POSTAL_TEST_PASSWORD}\n"
        "  port: ${POSTAL_TEST_PORT:-587}\n"
        "  tags: [a, '${POSTAL_TEST_PASSWORD}']\n",
    )

    config = load_config(config_file)

    assert config.mailer.password == "s3cret"
    assert config.mailer.port == "587"
    assert config.mailer.tags == ["a", "s3cret"]


def test_missing_required_env_var(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("POSTAL_TEST_UNSET", raising=False)
    config_file = _write(tmp_path / "env.yml", "mailer:\n  password: ${POSTAL_TEST_UNSET}\n")

    with pytest.raises(EnvVarError) as exc_info:
        load_config(config_file)

    assert exc_info.value.var_name == "POSTAL_TEST_UNSET"
    assert exc_info.value.source == str(config_file)


def test_get_config_caches_last_load(tmp_path: Path) -> None:
    config_file = _write(tmp_path / "cached.yml", "value: 1\n")
    loaded = load_config(config_file)

    assert get_config() is loaded

    clear_config()
    assert cfg_loader._cache is None


def test_get_config_loads_on_first_use(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write(tmp_path / "postal.conf.yml", "value: 2\n")
    monkeypatch.chdir(tmp_path)

    assert get_config().value == 2


def test_fallback_used_for_empty_variable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POSTAL_TEST_HOST", "")
    monkeypatch.setenv("POSTAL_TEST_USER", "")
    config_file = _write(
        tmp_path / "env.yml",
        "mailer:\n"
        "  host: ${POSTAL_TEST_HOST:-localhost}\n"
        "  username: '${POSTAL_TEST_USER}'\n"
        "  identity: '${POSTAL_TEST_HOST:-}'\n",
    )

    config = load_config(config_file)

    assert config.mailer.host == "localhost"
    assert config.mailer.username == ""
    assert config.mailer.identity == ""


def test_nested_values_are_interpolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POSTAL_TEST_DOMAIN", "example.org")
    config_file = _write(
        tmp_path / "nested.yml",
        "relays:\n"
        "  - host: smtp.${POSTAL_TEST_DOMAIN}\n"
        "    port: 587\n"
        "    aliases: ['mx1.${POSTAL_TEST_DOMAIN}', 'mx2.${POSTAL_TEST_DOMAIN}']\n"
        "  - enabled: false\n",
    )

    config = load_config(config_file)

    assert config.relays[0].host == "smtp.example.org"
    assert config.relays[0].port == 587
    assert config.relays[0].aliases == ["mx1.example.org", "mx2.example.org"]
    assert config.relays[1].enabled is False


def test_text_without_references_is_unchanged(tmp_path: Path) -> None:
    config_file = _write(tmp_path / "plain.yml", "note: 'costs $5 {not a ref} $NAME'\n")

    assert load_config(config_file).note == "costs $5 {not a ref} $NAME"
