import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

DEFAULT_CONFIG_PATH = Path("plasmid_browser.config.yaml")

DEFAULT_CONFIG: Dict[str, Any] = {
    "data_url": None,
    "client_id": None,
    "page_size": 50,
    "timeout_seconds": 20,
    "user_agent": "plasmid-browser/0.1",
}

ENV_OVERRIDES = {
    "PLASMID_BROWSER_DATA_URL": "data_url",
    "PLASMID_BROWSER_CLIENT_ID": "client_id",
    "PLASMID_BROWSER_PAGE_SIZE": "page_size",
}


def _positive_int(config: Dict[str, Any], key: str) -> int:
    value = config.get(key)
    if isinstance(value, bool):
        raise ValueError(f"Config '{key}' must be a positive integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Config '{key}' must be a positive integer, got {value!r}") from None
    if number <= 0 or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"Config '{key}' must be a positive integer, got {value!r}")
    return number


def load_config(
    path: Path | None = None,
    env: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Load browser configuration from YAML, then apply environment overrides.

    A missing file is not an error: the built-in defaults are used, so the
    endpoint can be supplied through the environment alone.

    Args:
        path: Optional path to the config file. Defaults to plasmid_browser.config.yaml
        env: Environment mapping (defaults to os.environ)

    Returns:
        Dictionary with every key of DEFAULT_CONFIG present

    Raises:
        ValueError: If the document or one of its values is invalid
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    file_config: Any = {}
    if cfg_path.exists():
        with cfg_path.open("r", encoding="utf-8") as f:
            file_config = yaml.safe_load(f) or {}
    elif path is not None:
        raise FileNotFoundError(f"Config file not found: {cfg_path}")

    if not isinstance(file_config, dict):
        raise ValueError("Config must be a dictionary")

    config = {**DEFAULT_CONFIG, **file_config}

    env = os.environ if env is None else env
    for var, key in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            config[key] = value

    config["page_size"] = _positive_int(config, "page_size")
    config["timeout_seconds"] = _positive_int(config, "timeout_seconds")
    return config


def require_data_url(config: Dict[str, Any]) -> str:
    """Return the configured data endpoint, or raise if none is set."""
    url = config.get("data_url")
    if not url or not isinstance(url, str):
        raise ValueError(
            "Data endpoint not configured. Set 'data_url' in "
            f"{DEFAULT_CONFIG_PATH} or PLASMID_BROWSER_DATA_URL"
        )
    return url.strip()
