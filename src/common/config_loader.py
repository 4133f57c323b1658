"""
Configuration Loader

Loads the export configuration from ``config/commerce.yaml`` and applies
environment variable overrides (COMMERCE_BASE_URL, COMMERCE_ADMIN_USERNAME, ...).
Entry points load ``.env`` with python-dotenv before calling
:func:`load_export_config`, so values from ``.env`` arrive here via the environment.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

DEFAULT_CONFIG_FILE = 'commerce.yaml'

# env var -> (section, key)
ENV_OVERRIDES = {
    'COMMERCE_BASE_URL': ('commerce', 'base_url'),
    'COMMERCE_ADMIN_USERNAME': ('commerce', 'admin_username'),
    'COMMERCE_ADMIN_PASSWORD': ('commerce', 'admin_password'),
    'COMMERCE_STORE_URL': ('commerce', 'store_url'),
    'COMMERCE_PAGE_SIZE': ('pagination', 'page_size'),
    'CACHE_BACKEND': ('cache', 'backend'),
    'CACHE_BYPASS': ('cache', 'bypass'),
    'REDIS_URL': ('cache', 'redis_url'),
}

CACHE_BACKENDS = ('memory', 'redis')


class ConfigError(ValueError):
    """Configuration is missing required values or holds invalid ones."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("Invalid configuration: " + "; ".join(errors))


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str = DEFAULT_CONFIG_FILE, config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'commerce.yaml')
        config_dir: Directory to read from (defaults to the project config/ dir)

    Returns:
        Parsed YAML content as dictionary (empty dict for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = (config_dir or _get_config_dir()) / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class ExportConfig:
    """Resolved settings for one export run."""

    # Commerce connection
    base_url: str
    admin_username: str
    admin_password: str
    store_url: str = ""
    api_version: str = "V1"
    timeout: int = 30

    # Pagination
    page_size: int = 100
    default_page: int = 1

    # Batching
    inventory_batch_size: int = 50
    category_batch_threshold: int = 1
    use_category_batch: bool = True

    # Cache
    cache_backend: str = "memory"
    cache_bypass: bool = False
    admin_token_ttl: int = 900
    api_response_ttl: int = 300
    redis_url: str = "redis://localhost:6379/0"

    # Export
    output_path: str = "output/products.csv"

    @property
    def media_base_url(self) -> str:
        """Base URL for legacy media gallery file paths."""
        return f"{self.base_url.rstrip('/')}/media/catalog/product"

    def validate(self) -> None:
        """
        Raise ConfigError listing every problem found.

        Raises:
            ConfigError: If required values are missing or values are out of range
        """
        errors = []
        if not self.base_url:
            errors.append("COMMERCE_BASE_URL is required")
        if not self.admin_username:
            errors.append("COMMERCE_ADMIN_USERNAME is required")
        if not self.admin_password:
            errors.append("COMMERCE_ADMIN_PASSWORD is required")
        if self.page_size < 1:
            errors.append("pagination.page_size must be at least 1")
        if self.inventory_batch_size < 1:
            errors.append("batching.inventory must be at least 1")
        if self.cache_backend not in CACHE_BACKENDS:
            errors.append(f"cache.backend must be one of {', '.join(CACHE_BACKENDS)}")
        if errors:
            raise ConfigError(errors)


def _apply_env_overrides(raw: Dict[str, Any], env: Mapping[str, str]) -> Dict[str, Any]:
    merged = {section: dict(values or {}) for section, values in raw.items()}
    for var, (section, key) in ENV_OVERRIDES.items():
        value = env.get(var)
        if value not in (None, ''):
            merged.setdefault(section, {})[key] = value
    return merged


def build_export_config(raw: Dict[str, Any], env: Optional[Mapping[str, str]] = None) -> ExportConfig:
    """
    Build an ExportConfig from a parsed YAML dict plus environment overrides.

    Args:
        raw: Parsed YAML (sections: commerce, pagination, batching, cache, export)
        env: Environment mapping (defaults to os.environ)

    Returns:
        Validated ExportConfig

    Raises:
        ConfigError: If required values are missing or invalid
    """
    merged = _apply_env_overrides(raw, os.environ if env is None else env)

    commerce = merged.get('commerce', {})
    pagination = merged.get('pagination', {})
    batching = merged.get('batching', {})
    cache = merged.get('cache', {})
    export = merged.get('export', {})

    try:
        config = ExportConfig(
            base_url=str(commerce.get('base_url') or ''),
            admin_username=str(commerce.get('admin_username') or ''),
            admin_password=str(commerce.get('admin_password') or ''),
            store_url=str(commerce.get('store_url') or ''),
            api_version=str(commerce.get('api_version', 'V1')),
            timeout=int(commerce.get('timeout', 30)),
            page_size=int(pagination.get('page_size', 100)),
            default_page=int(pagination.get('default_page', 1)),
            inventory_batch_size=int(batching.get('inventory', 50)),
            category_batch_threshold=int(batching.get('category_threshold', 1)),
            use_category_batch=_parse_bool(batching.get('use_category_batch', True)),
            cache_backend=str(cache.get('backend', 'memory')).lower(),
            cache_bypass=_parse_bool(cache.get('bypass', False)),
            admin_token_ttl=int(cache.get('admin_token_ttl', 900)),
            api_response_ttl=int(cache.get('api_response_ttl', 300)),
            redis_url=str(cache.get('redis_url', 'redis://localhost:6379/0')),
            output_path=str(export.get('output', 'output/products.csv')),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError([f"Invalid numeric setting: {e}"]) from e

    config.validate()
    return config


def load_export_config(
    filename: str = DEFAULT_CONFIG_FILE,
    env: Optional[Mapping[str, str]] = None,
    config_dir: Optional[Path] = None,
) -> ExportConfig:
    """
    Load ``config/<filename>`` and resolve it into an ExportConfig.

    Example:
        load_dotenv()
        config = load_export_config()
    """
    return build_export_config(load_config(filename, config_dir), env)
