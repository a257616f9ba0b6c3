import os

from controller.common.core.logging_config import setup_logging as common_setup_logging


def setup_logging(config_path: str | None = None):
    """
    Load the manager's YAML config and initialize logging.

    Without an explicit path, LOG_CONFIG_PATH from the environment is used.
    """
    if config_path is None:
        config_path = os.getenv("LOG_CONFIG_PATH", "/app/config/manager_log.yaml")
    common_setup_logging(config_path)
