import argparse
from pathlib import Path

from . import __version__
from .file_system_ops import CONFLICT_MODES


def create_parser():
    parser = argparse.ArgumentParser(
        description=f"Renames TV episodes with a local LLM (v{__version__}).",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--config', type=Path, help='Path to TOML config file (overrides default search).')
    parser.add_argument('--profile', type=str, default='default', help='Configuration profile to use.')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], default=None, help='Console logging level (overrides config).')
    parser.add_argument('--quiet', '-q', action='store_true', default=False, help='Suppress all non-essential console output (summaries, info). Errors still shown.')

    subparsers = parser.add_subparsers(dest='command', required=True, help='Action to perform')

    # --- Rename Subparser ---
    parser_rename = subparsers.add_parser('rename', help='Scan a directory tree and rename episodes.', formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    parser_rename.add_argument("directory", type=Path, nargs='?', default=None, help="Directory to process (default: root_dir/folder from config or RENAME_ROOT/FOLDER).")
    parser_rename.add_argument("--live", action="store_true", default=False, help="Perform live run (Default: dry run).")
    parser_rename.add_argument("--strategy", dest='rename_strategy', choices=['flat', 'nested'], default=None, help="Rename in place or move into {series}/Season xx/ (overrides config).")
    parser_rename.add_argument("--check-strategy", dest='batch_check_strategy', choices=['regex', 'model'], default=None, help="How a folder is judged already canonical (overrides config).")
    parser_rename.add_argument("--on-conflict", choices=list(CONFLICT_MODES), default=None, help="Action on filename conflict (overrides config).")
    parser_rename.add_argument("--log-file", type=str, default=None, help="Log file path (overrides config).")
    _add_service_arguments(parser_rename)

    # --- Classify Subparser ---
    parser_classify = subparsers.add_parser('classify', help='Print the classification (Movie, Episode, Unrelated) of paths.')
    parser_classify.add_argument("paths", nargs='+', help="File paths to classify (need not exist).")
    _add_service_arguments(parser_classify)

    # --- Details Subparser ---
    parser_details = subparsers.add_parser('details', help='Print series, season and episode extracted from paths.')
    parser_details.add_argument("paths", nargs='+', help="File paths to analyse (need not exist).")
    _add_service_arguments(parser_details)

    # --- Config Subparser ---
    parser_config = subparsers.add_parser('config', help='Manage application configuration.')
    config_subparsers = parser_config.add_subparsers(dest='config_command', required=True, help='Configuration action to perform')

    parser_config_show = config_subparsers.add_parser('show', help='Show the effective configuration.')
    parser_config_show.add_argument('--raw', action="store_true", help="Show the raw TOML content of the loaded config file.")

    parser_config_generate = config_subparsers.add_parser('generate', help='Generate a default config.toml file.')
    parser_config_generate.add_argument('--output', type=Path, default=None, help='Path to save the generated config.toml (default: ./config.toml).')
    parser_config_generate.add_argument('--force', '-f', action='store_true', help='Overwrite the config file if it already exists.')

    return parser


def _add_service_arguments(subparser):
    subparser.add_argument("--model", dest='ollama_model', type=str, default=None, help="Ollama model name (overrides config/env).")
    subparser.add_argument("--host", dest='ollama_host', type=str, default=None, help="Ollama server URL (overrides config/env).")
    subparser.add_argument("--max-attempts", type=int, default=None, help="Attempts per request before giving up (overrides config).")


def parse_arguments(argv=None):
    parser = create_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, 'profile') or args.profile is None:
        args.profile = 'default'
    if getattr(args, 'max_attempts', None) is not None and args.max_attempts < 1:
        parser.error("--max-attempts must be at least 1")
    return args
