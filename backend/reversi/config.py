import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

CONFIG_ENV = "REVERSI_CONFIG"

DEFAULT_CONFIG = {
    "search_depth": 4,
    "weights_file": None,
    "host": "0.0.0.0",
    "port": 8000,
    "log_level": "info",
    "cors_origins": ["*"],
}


def load_config(path: Optional[str] = None) -> dict:
    """Read a JSON config file and shallow-merge it over the defaults.

    The path comes from the argument, then $REVERSI_CONFIG, then config.json.
    A missing file yields the defaults; a malformed one raises.
    """
    p = Path(path or os.environ.get(CONFIG_ENV, "config.json"))
    merged = DEFAULT_CONFIG.copy()
    if not p.exists():
        return merged

    with p.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{p}: config must be a JSON object")

    unknown = set(data) - set(DEFAULT_CONFIG)
    if unknown:
        logger.warning("%s: ignoring unknown config keys %s", p, sorted(unknown))
    merged.update({k: v for k, v in data.items() if k in DEFAULT_CONFIG and v is not None})

    if not isinstance(merged["search_depth"], int) or merged["search_depth"] < 1:
        raise ValueError(f"{p}: search_depth must be a positive integer")
    logger.info("Loaded config from %s", p)
    return merged
