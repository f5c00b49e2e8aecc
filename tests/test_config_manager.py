# tests/test_config_manager.py

import argparse
import textwrap
from pathlib import Path

import pytest
import pytomlpp

from llm_renamer import config_manager
from llm_renamer.config_manager import ConfigHelper, ConfigManager, ENV_OVERRIDES
from llm_renamer.exceptions import ConfigError

DEFAULT_CONFIG_FILENAME = config_manager.DEFAULT_CONFIG_FILENAME

SAMPLE_TOML = textwrap.dedent("""
    [default]
    ollama_model = "llama3.1"
    max_attempts = 5
    on_conflict = "SUFFIX"
    log_level = "debug"

    [nested]
    rename_strategy = "nested"
    max_attempts = 8
""")


@pytest.fixture(autouse=True)
def isolated_env(mocker, monkeypatch, tmp_path):
    """No real .env, user config dir or environment overrides leak into tests."""
    for env_name in ENV_OVERRIDES.values():
        monkeypatch.delenv(env_name, raising=False)
    mocker.patch('llm_renamer.config_manager.find_dotenv', return_value="")
    mocker.patch('llm_renamer.config_manager.default_user_config_path', return_value=tmp_path / "user" / DEFAULT_CONFIG_FILENAME)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def config_file(tmp_path) -> Path:
    path = tmp_path / "custom.toml"
    path.write_text(SAMPLE_TOML, encoding="utf-8")
    return path


def test_load_explicit_path(config_file):
    manager = ConfigManager(config_path_override=config_file)
    assert manager.config_path == config_file.resolve()
    assert manager.get_value('ollama_model') == "llama3.1"
    assert manager.get_value('on_conflict') == "suffix"
    assert manager.get_value('log_level') == "DEBUG"


def test_find_in_cwd(tmp_path):
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text(SAMPLE_TOML, encoding="utf-8")
    manager = ConfigManager()
    assert manager.config_path == (tmp_path / DEFAULT_CONFIG_FILENAME).resolve()
    assert manager.get_value('max_attempts') == 5


def test_no_file_uses_model_defaults(tmp_path):
    manager = ConfigManager()
    assert manager.config_path == (tmp_path / "user" / DEFAULT_CONFIG_FILENAME).resolve()
    assert manager.get_value('max_attempts') == 15
    assert manager.get_value('rename_strategy') == 'flat'
    assert manager.get_value('batch_check_strategy') == 'regex'
    assert manager.get_value('root_dir') == "/rename"
    assert manager.get_value('cache_max_entries') is None


def test_empty_file_uses_defaults(tmp_path):
    path = tmp_path / "empty.toml"
    path.write_text("   \n", encoding="utf-8")
    assert ConfigManager(config_path_override=path).get_value('on_conflict') == 'skip'


def test_parse_error(tmp_path):
    path = tmp_path / "broken.toml"
    path.write_text("[default\nollama_model = ", encoding="utf-8")
    with pytest.raises(ConfigError, match="Failed to parse TOML"):
        ConfigManager(config_path_override=path)


@pytest.mark.parametrize("body", [
    '[default]\non_conflict = "rename"',
    '[default]\nmax_attempts = 0',
    '[default]\nrename_strategy = "deep"',
    '[default]\nollama_host = "localhost:11434"',
    '[nested]\nbatch_check_strategy = "vibes"',
])
def test_validation_errors(tmp_path, body):
    path = tmp_path / "invalid.toml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        ConfigManager(config_path_override=path)


def test_env_overrides_config(config_file, monkeypatch):
    monkeypatch.setenv("OLLAMA_MODEL", "mistral")
    monkeypatch.setenv("RENAME_ROOT", "/media")
    monkeypatch.setenv("FOLDER", "tv")
    manager = ConfigManager(config_path_override=config_file)
    assert manager.get_value('ollama_model') == "mistral"
    assert manager.get_value('root_dir') == "/media"
    assert manager.get_value('folder') == "tv"


def test_command_line_beats_env(config_file, monkeypatch):
    monkeypatch.setenv("OLLAMA_MODEL", "mistral")
    manager = ConfigManager(config_path_override=config_file)
    assert manager.get_value('ollama_model', command_line_value="qwen2.5") == "qwen2.5"


def test_profile_precedence(config_file):
    manager = ConfigManager(config_path_override=config_file)
    assert manager.get_value('max_attempts', profile='nested') == 8
    assert manager.get_value('rename_strategy', profile='nested') == "nested"
    # falls back to [default], then to the model default
    assert manager.get_value('ollama_model', profile='nested') == "llama3.1"
    assert manager.get_value('ollama_host', profile='nested') == "http://localhost:11434"
    assert manager.get_value('unknown_key', default_value="x") == "x"


def test_extra_profile_values_are_normalized(tmp_path):
    path = tmp_path / "mixed.toml"
    path.write_text(textwrap.dedent("""
        [default]
        rename_strategy = "Flat"

        [nested]
        rename_strategy = "Nested"
        batch_check_strategy = "MODEL"
        on_conflict = "Suffix"
        ollama_host = "http://ollama:11434/"
    """), encoding="utf-8")
    manager = ConfigManager(config_path_override=path)

    assert manager.get_value('rename_strategy') == "flat"
    assert manager.get_value('rename_strategy', profile='nested') == "nested"
    assert manager.get_value('batch_check_strategy', profile='nested') == "model"
    assert manager.get_value('on_conflict', profile='nested') == "suffix"
    assert manager.get_value('ollama_host', profile='nested') == "http://ollama:11434"
    # keys the profile leaves out still come from [default]
    assert manager.get_value('max_attempts', profile='nested') == 15
    assert manager.get_profile_settings('nested')['rename_strategy'] == "nested"


def test_get_profile_settings(config_file, monkeypatch):
    monkeypatch.setenv("FOLDER", "incoming")
    settings = ConfigManager(config_path_override=config_file).get_profile_settings('nested')
    assert settings['max_attempts'] == 8
    assert settings['ollama_model'] == "llama3.1"
    assert settings['folder'] == "incoming"
    assert settings['request_timeout'] is None


def test_helper_reads_args(config_file):
    manager = ConfigManager(config_path_override=config_file)
    args = argparse.Namespace(profile='nested', ollama_model=None, max_attempts=3, directory=None)
    cfg = ConfigHelper(manager, args)
    assert cfg('max_attempts') == 3
    assert cfg('ollama_model') == "llama3.1"
    assert cfg('rename_strategy') == "nested"
    assert cfg('max_attempts', arg_value=11) == 11


def test_helper_target_directory(config_file, monkeypatch):
    monkeypatch.setenv("RENAME_ROOT", "/media")
    monkeypatch.setenv("FOLDER", "tv/incoming")
    manager = ConfigManager(config_path_override=config_file)

    cfg = ConfigHelper(manager, argparse.Namespace(profile='default', directory=None))
    assert cfg.target_directory() == Path("/media/tv/incoming")

    cfg = ConfigHelper(manager, argparse.Namespace(profile='default', directory=Path("/elsewhere")))
    assert cfg.target_directory() == Path("/elsewhere")


def test_target_directory_defaults():
    cfg = ConfigHelper(ConfigManager(), argparse.Namespace(profile='default', directory=None))
    assert cfg.target_directory() == Path("/rename")


def test_target_directory_absolute_folder_stays_under_root(monkeypatch):
    monkeypatch.setenv("FOLDER", "/Movies/series/Family Guy")
    cfg = ConfigHelper(ConfigManager(), argparse.Namespace(profile='default', directory=None))
    assert cfg.target_directory() == Path("/rename/Movies/series/Family Guy")


def test_generate_default_toml_roundtrips():
    content = config_manager.generate_default_toml_content()
    data = pytomlpp.loads(content)
    config_manager.RootConfigModel.model_validate(data)
    assert data['default']['max_attempts'] == 15
    assert data['default']['on_conflict'] == "skip"
    assert "# request_timeout = (not set)" in content
