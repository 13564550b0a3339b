"""
Configuration for the Quecto text editor.

Settings live in ~/.config/quecto/quecto.conf (or the file named by $QUECTO_CONFIG)
as plain key=value lines; blank lines and lines starting with '#' are skipped.

    tab_stop=4
    layout=wrap
    message_timeout=5
    log_file=~/.cache/quecto.log
"""
import os
from dataclasses import dataclass

from quecto import logger
from quecto.coords import TAB_STOP
from quecto.layout import LayoutMode

CONFIG_PATH = os.path.expanduser("~/.config/quecto/quecto.conf")


@dataclass
class EditorConfig:
    tab_stop: int = TAB_STOP
    layout: LayoutMode = LayoutMode.SCROLL
    message_timeout: float = 5.0
    log_file: str = logger.LOG_FILE_PATH


def config_path() -> str:
    return os.environ.get("QUECTO_CONFIG") or CONFIG_PATH


def _apply(config: EditorConfig, key: str, value: str):
    if key == "tab_stop":
        stop = int(value)
        if stop < 1:
            raise ValueError("tab_stop must be at least 1")
        config.tab_stop = stop
    elif key == "layout":
        config.layout = LayoutMode(value.lower())
    elif key == "message_timeout":
        config.message_timeout = float(value)
    elif key == "log_file":
        config.log_file = os.path.expanduser(value)
    else:
        raise KeyError(key)


def load_config(path: str = None) -> EditorConfig:
    """
    Read the config file into an EditorConfig.
    A missing file gives the defaults; bad lines are logged and skipped.
    """
    config = EditorConfig()
    path = path or config_path()
    if not os.path.isfile(path):
        return config
    try:
        with open(path, 'r', encoding='utf-8') as f:
            lines = f.readlines()
    except OSError as e:
        logger.log_error(f"read config {path}", e)
        return config

    for number, line in enumerate(lines, 1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            logger.log(f"config {path}:{number}: expected key=value, got '{line}'")
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        try:
            _apply(config, key, value)
        except KeyError:
            logger.log(f"config {path}:{number}: unknown key '{key}'")
        except ValueError as e:
            logger.log(f"config {path}:{number}: bad value for '{key}': {e}")
    return config
