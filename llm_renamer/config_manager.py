# llm_renamer/config_manager.py

import argparse
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import platformdirs
import pytomlpp
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError
from .file_system_ops import CONFLICT_MODES

log = logging.getLogger(__name__)
APP_NAME = "llm_renamer"
DEFAULT_CONFIG_FILENAME = "config.toml"

# Environment variables and the setting each one overrides.
ENV_OVERRIDES = {
    'ollama_host': "OLLAMA_HOST",
    'ollama_model': "OLLAMA_MODEL",
    'root_dir': "RENAME_ROOT",
    'folder': "FOLDER",
}


class BaseProfileSettings(BaseModel):
    # Text Generation Service
    ollama_host: Optional[str] = Field(default="http://localhost:11434", description="Base URL of the Ollama server.")
    ollama_model: Optional[str] = Field(default="llama3.2", description="Model used for every request.")
    request_timeout: Optional[float] = Field(default=None, gt=0, description="Per-request timeout in seconds (unset: no timeout).")
    max_attempts: Optional[int] = Field(default=15, ge=1, description="Attempts per request before giving up.")
    cache_max_entries: Optional[int] = Field(default=None, ge=1, description="Bound on cached responses per run (unset: unbounded).")

    # Renaming
    rename_strategy: Optional[str] = Field(default='flat', description="Rename strategy: 'flat' (rename in place) or 'nested' (move to {series}/Season xx/).")
    batch_check_strategy: Optional[str] = Field(default='regex', description="Batch format check: 'regex' or 'model'.")
    on_conflict: Optional[str] = Field(default='skip', description="Action on filename conflict: 'skip', 'overwrite', 'suffix', 'fail'.")
    root_dir: Optional[str] = Field(default="/rename", description="Root directory of the library.")
    folder: Optional[str] = Field(default="", description="Folder below root_dir to process.")

    # Logging Options
    log_file: Optional[str] = Field(default=None, description="Path to log file (e.g., llm_renamer.log).")
    log_level: Optional[str] = Field(default='INFO', description="Logging level: DEBUG, INFO, WARNING, ERROR.")

    @field_validator('on_conflict', mode='before')
    @classmethod
    def check_on_conflict(cls, v: Any) -> Optional[str]:
        if v is not None and isinstance(v, str) and v.lower() not in CONFLICT_MODES:
            raise ValueError("on_conflict must be one of 'skip', 'overwrite', 'suffix', 'fail'")
        return v.lower() if isinstance(v, str) else None

    @field_validator('log_level', mode='before')
    @classmethod
    def check_log_level(cls, v: Any) -> Optional[str]:
        if v is not None and isinstance(v, str) and v.upper() not in ['DEBUG', 'INFO', 'WARNING', 'ERROR']:
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR")
        return v.upper() if isinstance(v, str) else None

    @field_validator('rename_strategy', mode='before')
    @classmethod
    def check_rename_strategy(cls, v: Any) -> Optional[str]:
        if v is not None and isinstance(v, str) and v.lower() not in ['flat', 'nested']:
            raise ValueError("rename_strategy must be 'flat' or 'nested'")
        return v.lower() if isinstance(v, str) else 'flat'

    @field_validator('batch_check_strategy', mode='before')
    @classmethod
    def check_batch_check_strategy(cls, v: Any) -> Optional[str]:
        if v is not None and isinstance(v, str) and v.lower() not in ['regex', 'model']:
            raise ValueError("batch_check_strategy must be 'regex' or 'model'")
        return v.lower() if isinstance(v, str) else 'regex'

    @field_validator('ollama_host', mode='before')
    @classmethod
    def check_ollama_host(cls, v: Any) -> Optional[str]:
        if v is not None and (not isinstance(v, str) or not v.startswith(("http://", "https://"))):
            raise ValueError("ollama_host must be an http(s) URL")
        return v.rstrip("/") if isinstance(v, str) else None


class DefaultSettings(BaseProfileSettings):
    pass


class RootConfigModel(BaseModel):
    default: DefaultSettings = Field(default_factory=DefaultSettings)
    model_config = {'extra': 'allow'}


def _toml_value(value: Any) -> str:
    if isinstance(value, str):
        escaped = value.replace('\\', '\\\\').replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def generate_default_toml_content() -> str:
    default_settings = DefaultSettings()
    content_lines = ["# LLM Renamer Default Configuration File"]
    content_lines.append("# Environment variables OLLAMA_HOST, OLLAMA_MODEL, RENAME_ROOT and FOLDER override these values.\n")

    sections = {
        "Text Generation Service": ['ollama_host', 'ollama_model', 'request_timeout', 'max_attempts', 'cache_max_entries'],
        "Renaming": ['rename_strategy', 'batch_check_strategy', 'on_conflict', 'root_dir', 'folder'],
        "Logging Options": ['log_file', 'log_level'],
    }

    content_lines.append("[default]")
    for section_name, keys in sections.items():
        content_lines.append(f"\n  # --- {section_name} ---")
        for key in keys:
            field_info = BaseProfileSettings.model_fields[key]
            if field_info.description:
                content_lines.append(f"  # {field_info.description}")
            default_value = getattr(default_settings, key)
            if default_value is None:
                content_lines.append(f"  # {key} = (not set)")
                continue
            content_lines.append(f"  {key} = {_toml_value(default_value)}")

    content_lines.append("\n# You can create other profiles, e.g.:")
    content_lines.append("# [nested]")
    content_lines.append("# rename_strategy = \"nested\"")
    content_lines.append("# on_conflict = \"suffix\"")

    return "\n".join(content_lines) + "\n"


def default_user_config_path() -> Path:
    return Path(platformdirs.user_config_dir(APP_NAME, ensure_exists=False)) / DEFAULT_CONFIG_FILENAME


class ConfigManager:
    def __init__(self, config_path_override: Optional[Path] = None):
        self.config_path = self._resolve_config_path(config_path_override)
        self._raw_toml_content_str: Optional[str] = None
        self._config = self._load_config()
        self._env_values = self._load_env_overrides()
        log.debug(f"Config path used: {self.config_path}")

    def _resolve_config_path(self, config_path_override: Optional[Path]) -> Path:
        if config_path_override:
            p = Path(config_path_override)
            log.debug(f"Using explicit config path target: {p.resolve()}")
            return p.resolve()

        cwd_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
        if cwd_path.is_file():
            log.debug(f"Found config file in current directory: {cwd_path}")
            return cwd_path.resolve()

        user_config_path = default_user_config_path()
        if user_config_path.is_file():
            log.debug(f"Found config file in user config directory: {user_config_path}")
        else:
            log.debug(f"No config file found. Preferred default creation location: {user_config_path}")
        return user_config_path.resolve()

    def _load_config(self) -> Dict[str, Any]:
        if not self.config_path.is_file():
            log.info(f"Config file not found at '{self.config_path}'. Using internal defaults.")
            self._raw_toml_content_str = "# Config file not found.\n"
            return RootConfigModel().model_dump(exclude_unset=False, by_alias=False)

        try:
            self._raw_toml_content_str = self.config_path.read_text(encoding='utf-8')
            if not self._raw_toml_content_str.strip():
                log.warning(f"Config file '{self.config_path}' is empty. Using internal defaults.")
                return RootConfigModel().model_dump(exclude_unset=False, by_alias=False)
            cfg_dict = pytomlpp.loads(self._raw_toml_content_str)
            log.info(f"Loaded configuration from '{self.config_path}'")
        except pytomlpp.DecodeError as e_toml:
            raise ConfigError(f"Failed to parse TOML config '{self.config_path}': {e_toml}") from e_toml
        except OSError as e_os:
            raise ConfigError(f"Failed to read config file '{self.config_path}': {e_os}") from e_os

        try:
            validated_config = RootConfigModel.model_validate(cfg_dict)
        except ValidationError as e_val:
            error_msgs = [f"  - Field `{' -> '.join(map(str, err['loc']))}`: {err['msg']}" for err in e_val.errors()]
            error_summary = f"Config file '{self.config_path}' validation failed:\n" + "\n".join(error_msgs)
            log.error(error_summary)
            raise ConfigError(error_summary) from e_val

        config = validated_config.model_dump(exclude_unset=False, by_alias=False)
        for profile_name, profile_values in list(config.items()):
            if profile_name == 'default':
                continue
            if not isinstance(profile_values, dict):
                raise ConfigError(f"Profile '{profile_name}' in '{self.config_path}' must be a table.")
            try:
                validated_profile = BaseProfileSettings.model_validate(profile_values)
            except ValidationError as e_val:
                raise ConfigError(f"Profile '{profile_name}' validation failed: {e_val}") from e_val
            config[profile_name] = validated_profile.model_dump(exclude_unset=True)
        log.debug("Config validation successful.")
        return config

    def get_raw_toml_content(self) -> Optional[str]:
        return self._raw_toml_content_str

    def _load_env_overrides(self) -> Dict[str, Optional[str]]:
        env_path: Union[str, Path, None] = find_dotenv(usecwd=True)
        if env_path:
            log.debug(f"Loading environment variables from: {env_path}")
            load_dotenv(dotenv_path=env_path)
        else:
            log.debug(".env file not found by find_dotenv. Checking os.getenv directly.")

        values = {key: os.getenv(env_name) for key, env_name in ENV_OVERRIDES.items()}
        found = [ENV_OVERRIDES[k] for k, v in values.items() if v is not None]
        if found:
            log.debug(f"Environment overrides present: {', '.join(found)}")
        return values

    def get_value(self, key: str, profile: str = 'default', command_line_value: Any = None, default_value: Any = None) -> Any:
        if command_line_value is not None:
            return command_line_value

        env_value = self._env_values.get(key)
        if env_value is not None:
            return env_value

        profile_settings_dict = self._config.get(profile, {})
        if isinstance(profile_settings_dict, dict) and profile_settings_dict.get(key) is not None:
            return profile_settings_dict[key]

        default_settings_dict = self._config.get('default', {})
        if isinstance(default_settings_dict, dict) and default_settings_dict.get(key) is not None:
            return default_settings_dict[key]

        if default_value is None and key in BaseProfileSettings.model_fields:
            return BaseProfileSettings.model_fields[key].default
        return default_value

    def get_profile_settings(self, profile: str = 'default') -> Dict[str, Any]:
        final_settings = DefaultSettings().model_dump(exclude_unset=False, by_alias=False)
        for section in ('default', profile):
            section_values = self._config.get(section, {})
            if isinstance(section_values, dict):
                final_settings.update({k: v for k, v in section_values.items() if v is not None})
            elif section != 'default':
                log.debug(f"Profile '{profile}' not found in config. Using default settings.")
        final_settings.update({k: v for k, v in self._env_values.items() if v is not None})
        return final_settings


class ConfigHelper:
    def __init__(self, config_manager: ConfigManager, args_ns: argparse.Namespace):
        self.manager = config_manager
        self.args = args_ns
        self.profile = getattr(args_ns, 'profile', 'default') or 'default'

    def __call__(self, key: str, default_value: Any = None, arg_value: Any = None) -> Any:
        cmd_line_val = arg_value if arg_value is not None else getattr(self.args, key, None)
        return self.manager.get_value(key, self.profile, cmd_line_val, default_value)

    def target_directory(self) -> Path:
        """Directory to process: the CLI argument, else root_dir joined with folder."""
        directory = getattr(self.args, 'directory', None)
        if directory:
            return Path(directory)
        # folder is always taken relative to root_dir, even when written as "/Movies/..."
        folder = (self('folder') or "").lstrip("/\\")
        return Path(self('root_dir')) / folder
