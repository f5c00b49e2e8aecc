# llm_renamer/log_setup.py
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

ROOT_LOGGER_NAME = "llm_renamer"
SIMPLE_FORMAT = '%(levelname)-8s: %(message)s'
DETAILED_FORMAT = '%(asctime)s %(levelname)-8s [%(name)s:%(lineno)d] %(message)s'


def _reset_handlers(log: logging.Logger) -> None:
    for handler in log.handlers[:]:
        log.removeHandler(handler)
        handler.close()


def _console_handler(level) -> logging.Handler:
    fmt = DETAILED_FORMAT if level <= logging.DEBUG else SIMPLE_FORMAT
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt='%H:%M:%S'))
    return handler


def _file_handler(log_file) -> logging.Handler:
    path = Path(log_file).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode='a', encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S%z'))
    return handler


def setup_logging(log_level_console=logging.INFO, log_file=None):
    """
    (Re)configure the `llm_renamer` logger tree: a stderr handler at the console
    level and, when log_file is given, a DEBUG file handler. Calling it again
    replaces the handlers of the previous call, so repeated CLI runs in one
    process never log twice.
    """
    log = logging.getLogger(ROOT_LOGGER_NAME)
    log.setLevel(logging.DEBUG)
    _reset_handlers(log)
    log.addHandler(_console_handler(log_level_console))

    if log_file:
        try:
            log.addHandler(_file_handler(log_file))
        except OSError as e:
            # console handler stays in place
            log.error(f"Failed to configure file logging to '{log_file}': {e}")
        else:
            log.info(f"--- Log session started: {datetime.now(timezone.utc).isoformat()} ---")
            log.info(f"Command: {' '.join(sys.argv)}")
    return log
