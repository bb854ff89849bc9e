"""Configuration loading: defaults, optional JSON file, then environment."""
import json
import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger('playhub.config')

MODE_DYNAMIC = 'dynamic'
MODE_STATIC = 'static'

DEFAULT_CONFIG: Dict[str, Any] = {
    'mode': MODE_DYNAMIC,
    'data_dir': os.path.join('public', 'data'),
    'seed': True,
    'secret_key': None,
    'host': '127.0.0.1',
    'port': 5000,
    'log_level': 'INFO',
    'static_cache_seconds': 60,
    'popular_limit': 5,
    'leaderboard_limit': 10,
}

# env var -> (config key, converter)
_ENV_OVERRIDES = {
    'PLAYHUB_MODE': ('mode', str),
    'PLAYHUB_DATA_DIR': ('data_dir', str),
    'PLAYHUB_SEED': ('seed', lambda v: v.strip().lower() not in ('0', 'false', 'no', 'off')),
    'PLAYHUB_SECRET_KEY': ('secret_key', str),
    'PLAYHUB_HOST': ('host', str),
    'PLAYHUB_PORT': ('port', int),
    'PLAYHUB_LOG_LEVEL': ('log_level', str),
    'PLAYHUB_STATIC_CACHE_SECONDS': ('static_cache_seconds', int),
}


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration with environment variable support.

    Values are layered: :data:`DEFAULT_CONFIG`, then the JSON object in
    *config_path* (if given and readable), then ``PLAYHUB_*`` environment
    variables, which take precedence over everything else.

    A missing or corrupt config file is logged and ignored rather than being
    fatal, so the server can always start with defaults.
    """
    config = dict(DEFAULT_CONFIG)

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
            if isinstance(file_config, dict):
                config.update(file_config)
            else:
                logger.warning("Ignoring %s: top-level value is not an object", config_path)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not load config %s: %s", config_path, exc)

    for env_name, (key, convert) in _ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is None or raw == '':
            continue
        try:
            config[key] = convert(raw)
        except ValueError:
            logger.warning("Ignoring %s=%r: not a valid value", env_name, raw)

    if config['mode'] not in (MODE_DYNAMIC, MODE_STATIC):
        logger.warning("Unknown mode %r, falling back to %s", config['mode'], MODE_DYNAMIC)
        config['mode'] = MODE_DYNAMIC

    return config
