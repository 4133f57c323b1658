# Common utilities
from .config_loader import (
    ConfigError,
    ExportConfig,
    build_export_config,
    load_config,
    load_export_config,
)
from .csv_utils import configure_csv, write_csv
from .log_config import setup_logging
