# tests/test_main.py
import asyncio
import logging

import pytest

import llm_renamer_main
from conftest import StubGenerator
from llm_renamer.config_manager import ENV_OVERRIDES
from llm_renamer.exceptions import RetryExhaustedError
from llm_renamer.log_setup import ROOT_LOGGER_NAME


@pytest.fixture(autouse=True)
def isolated(mocker, monkeypatch, tmp_path):
    for env_name in ENV_OVERRIDES.values():
        monkeypatch.delenv(env_name, raising=False)
    mocker.patch('llm_renamer.config_manager.find_dotenv', return_value="")
    monkeypatch.chdir(tmp_path)
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def generator(mocker):
    stub = StubGenerator({
        'classify': lambda p: {"classification": "Episode" if "S01E" in p else "Unrelated"},
        'series': {"series": "Show"},
        'season': {"season": 1},
        'episode': lambda p: {"episode": int(p.split("S01E")[1][:2])},
    })
    mocker.patch('llm_renamer_main.create_text_client', return_value=stub)
    return stub


def run(*argv):
    return asyncio.run(llm_renamer_main.main_async(['--config', 'missing.toml', *argv]))


def test_config_generate(tmp_path):
    assert run('config', 'generate') == 0
    assert (tmp_path / "config.toml").is_file()
    # refuses to overwrite without --force
    assert run('config', 'generate') == 1
    assert run('config', 'generate', '--force') == 0


def test_config_show(capsys):
    assert run('config', 'show') == 0
    out = capsys.readouterr().out
    assert '"max_attempts": 15' in out


def test_invalid_config_exits_2(tmp_path, capsys):
    (tmp_path / "bad.toml").write_text('[default]\non_conflict = "explode"', encoding="utf-8")
    code = asyncio.run(llm_renamer_main.main_async(['--config', 'bad.toml', 'config', 'show']))
    assert code == 2
    assert "FATAL CONFIGURATION ERROR" in capsys.readouterr().err


def test_classify_command(generator, capsys):
    assert run('classify', '/tv/Show.S01E02.mkv', '/tv/.DS_Store') == 0
    out = capsys.readouterr().out
    assert "Episode" in out
    assert "Unrelated" in out


def test_details_command(generator, capsys):
    assert run('details', '/tv/Show.S01E02.mkv') == 0
    assert "S01E02" in capsys.readouterr().out


def test_details_failure_exit_code(generator):
    generator.responses['episode'] = RetryExhaustedError(15)
    assert run('details', '/tv/Show.S01E02.mkv') == 1


def test_rename_dry_run_then_live(generator, tmp_path):
    library = tmp_path / "library"
    library.mkdir()
    (library / "Show.S01E02.720p.mkv").touch()

    assert run('rename', str(library)) == 0
    assert (library / "Show.S01E02.720p.mkv").exists()

    assert run('rename', str(library), '--live') == 0
    assert (library / "Show S01E02.mkv").exists()


def test_rename_uses_env_root(generator, tmp_path, monkeypatch):
    (tmp_path / "media" / "tv").mkdir(parents=True)
    (tmp_path / "media" / "tv" / "Show.S01E03.mkv").touch()
    monkeypatch.setenv("RENAME_ROOT", str(tmp_path / "media"))
    monkeypatch.setenv("FOLDER", "tv")

    assert run('rename', '--live', '--strategy', 'nested') == 0
    assert (tmp_path / "media" / "tv" / "Show" / "Season 01" / "Show.S01E03.mkv").exists()


def test_rename_missing_directory_exits_1(generator, tmp_path, capsys):
    assert run('rename', str(tmp_path / "nope")) == 1
    assert "ERROR" in capsys.readouterr().err


def test_rename_with_mixed_case_profile(generator, tmp_path):
    (tmp_path / "profiles.toml").write_text(
        '[default]\nrename_strategy = "Flat"\n\n[nested]\nrename_strategy = "Nested"\n', encoding="utf-8")
    library = tmp_path / "library"
    library.mkdir()
    (library / "Show.S01E04.mkv").touch()

    code = asyncio.run(llm_renamer_main.main_async(
        ['--config', 'profiles.toml', '--profile', 'nested', 'rename', str(library), '--live']))
    assert code == 0
    assert (library / "Show" / "Season 01" / "Show.S01E04.mkv").exists()


def test_repeated_runs_do_not_stack_handlers(generator, tmp_path):
    log_file = tmp_path / "cli.log"
    assert run('config', 'show') == 0
    assert asyncio.run(llm_renamer_main.main_async(
        ['--config', 'missing.toml', 'rename', str(tmp_path / "nope"), '--log-file', str(log_file)])) == 1
    assert run('config', 'show') == 0

    handlers = logging.getLogger(ROOT_LOGGER_NAME).handlers
    assert len(handlers) == 1
    assert not isinstance(handlers[0], logging.FileHandler)
    assert "Application Error" in log_file.read_text(encoding="utf-8")


def test_rename_keeps_release_tokens_out_of_extension(generator, tmp_path):
    library = tmp_path / "library"
    library.mkdir()
    (library / "Show.S01E05.720p").touch()

    assert run('rename', str(library), '--live') == 0
    assert sorted(p.name for p in library.iterdir()) == ["Show S01E05"]
