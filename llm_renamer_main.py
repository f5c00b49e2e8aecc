#!/usr/bin/env python3
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from rich.text import Text

from llm_renamer.api_clients import create_text_client
from llm_renamer.classifier import FileClassifier
from llm_renamer.cli import parse_arguments
from llm_renamer.config_manager import (
    BaseProfileSettings, ConfigHelper, ConfigManager, DEFAULT_CONFIG_FILENAME,
    generate_default_toml_content,
)
from llm_renamer.enums import BatchCheckStrategy, RenameStrategy
from llm_renamer.exceptions import ConfigError, LLMError, RenamerError
from llm_renamer.file_system_ops import FileSystemOps
from llm_renamer.log_setup import ROOT_LOGGER_NAME, setup_logging
from llm_renamer.main_processor import MainProcessor
from llm_renamer.metadata_extractor import MetadataExtractor
from llm_renamer.ui_utils import make_console, print_key_value_table, print_run_summary, print_stderr_message

log = logging.getLogger(ROOT_LOGGER_NAME)


def generate_config(args, console) -> int:
    target_path = (args.output or Path.cwd() / DEFAULT_CONFIG_FILENAME).resolve()
    if target_path.exists() and not args.force:
        print_stderr_message(f"Config file {target_path} exists. Use --force to overwrite.", args.quiet)
        return 1
    try:
        target_path.parent.mkdir(parents=True, exist_ok=True)
        target_path.write_text(generate_default_toml_content(), encoding="utf-8")
    except OSError as e:
        print_stderr_message(f"Error: Could not write configuration file to {target_path}: {e}", args.quiet)
        log.error(f"Failed to write generated config to {target_path}: {e}")
        return 1
    console.print(f"[green]Default configuration file generated at: {target_path}[/green]")
    log.info(f"Default config.toml generated at {target_path}")
    return 0


def show_config(args, console, manager: ConfigManager, cfg: ConfigHelper) -> int:
    console.print(f"--- Configuration Effective for Profile: '{args.profile}' ---")
    if manager.config_path.is_file():
        console.print(f"Config file loaded: [cyan]{manager.config_path}[/cyan]")
    else:
        console.print(f"Config file [yellow]{manager.config_path}[/yellow] not found. Using internal defaults and environment variables.")
    if getattr(args, 'raw', False):
        console.print(manager.get_raw_toml_content() or "# No config file loaded.", markup=False)
        return 0
    effective_settings: Dict[str, Any] = {key: cfg(key) for key in BaseProfileSettings.model_fields}
    console.print(json.dumps(effective_settings, indent=2, default=str), markup=False)
    return 0


async def classify_paths(args, console, cfg: ConfigHelper) -> int:
    classifier = FileClassifier(create_text_client(cfg))
    rows = []
    for path in args.paths:
        rows.append((path, await classifier.classify(path)))
    print_key_value_table(console, "Classification", ("Path", "Classification"), rows)
    return 0


async def extract_details(args, console, cfg: ConfigHelper) -> int:
    extractor = MetadataExtractor(create_text_client(cfg))
    rows = []
    failures = 0
    for path in args.paths:
        try:
            details = await extractor.get_details(path)
            rows.append((path, details.series, details.season, details.episode, details.episode_code))
        except LLMError as e:
            log.error(f"Could not extract details for '{path}': {e}")
            rows.append((path, "-", "-", "-", f"error: {e}"))
            failures += 1
    print_key_value_table(console, "Episode Details", ("Path", "Series", "Season", "Episode", "Code"), rows)
    return 1 if failures else 0


async def rename_directory(args, console, cfg: ConfigHelper) -> int:
    directory = cfg.target_directory()
    fs_ops = FileSystemOps(live=args.live, on_conflict=cfg('on_conflict', 'skip'))
    processor = MainProcessor.from_generator(
        create_text_client(cfg),
        fs_ops,
        strategy=RenameStrategy(cfg('rename_strategy', 'flat')),
        check_strategy=BatchCheckStrategy(cfg('batch_check_strategy', 'regex')),
    )
    summary = await processor.run(directory)
    print_run_summary(console, summary)
    return 1 if summary.failed else 0


async def main_async(argv=None) -> int:
    args = parse_arguments(argv)
    is_quiet = getattr(args, 'quiet', False)
    console = make_console(quiet=is_quiet)

    try:
        if args.command == 'config' and args.config_command == 'generate':
            setup_logging(log_level_console=getattr(logging, args.log_level or 'INFO'))
            return generate_config(args, console)

        manager = ConfigManager(config_path_override=getattr(args, 'config', None))
        cfg = ConfigHelper(manager, args)

        log_level_str = cfg('log_level', 'INFO', arg_value=getattr(args, 'log_level', None))
        setup_logging(
            log_level_console=getattr(logging, log_level_str.upper(), logging.INFO),
            log_file=cfg('log_file', None, arg_value=getattr(args, 'log_file', None)),
        )
        log.debug(f"Full logging configured. Parsed args: {args}")
        log.debug(f"Using profile: {args.profile}")

        if args.command == 'config':
            return show_config(args, console, manager, cfg)
        if args.command == 'classify':
            return await classify_paths(args, console, cfg)
        if args.command == 'details':
            return await extract_details(args, console, cfg)
        if args.command == 'rename':
            return await rename_directory(args, console, cfg)
        raise RenamerError(f"Unknown command '{args.command}'")

    except ConfigError as e_cfg:
        print_stderr_message(f"FATAL CONFIGURATION ERROR: {e_cfg}", is_quiet)
        if log.handlers: log.critical(f"Config Error: {e_cfg}")
        return 2
    except RenamerError as e_app:
        if log.handlers: log.error(f"Application Error: {e_app}", exc_info=True)
        print_stderr_message(Text(f"ERROR: {e_app}", style="bold red"), is_quiet)
        return 1


def main(argv=None):
    try:
        sys.exit(asyncio.run(main_async(argv)))
    except KeyboardInterrupt:
        print("\nCancelled by user.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
