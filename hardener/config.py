"""
Config file loading for hardener.

Reads ~/.config/hardener/config.toml and returns structured config.
Never raises — always returns a valid dict with sensible defaults.
"""

from pathlib import Path

_CONFIG_PATH = Path.home() / ".config" / "hardener" / "config.toml"

DEFAULTS: dict = {
    "policy_dir": Path("policies"),
    "snapshot_dir": Path("snapshots"),
    "run_timeout": 300,
    "log_level": "WARNING",
}

_LOG_LEVELS = frozenset(("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"))


def load_config(path: Path | None = None) -> dict:
    """
    Load and return hardener config from TOML file.

    Returns a dict with every key of DEFAULTS. Missing file or parse errors
    return the defaults; a key with a bad shape falls back to its default
    without affecting the other keys.
    """
    config_path = path or _CONFIG_PATH
    config = dict(DEFAULTS)

    if not config_path.is_file():
        return config

    try:
        raw = config_path.read_bytes()
    except OSError:
        return config

    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError):
        return config

    for key in ("policy_dir", "snapshot_dir"):
        value = data.get(key)
        if isinstance(value, str) and value:
            config[key] = Path(value).expanduser()

    timeout = data.get("run_timeout")
    # bool is an int subclass; `run_timeout = true` is not a timeout
    if isinstance(timeout, int) and not isinstance(timeout, bool) and timeout > 0:
        config["run_timeout"] = timeout

    level = data.get("log_level")
    if isinstance(level, str) and level.upper() in _LOG_LEVELS:
        config["log_level"] = level.upper()

    return config
