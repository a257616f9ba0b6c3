"""
Manager configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

from pydantic import Field

from controller.common.core.config import BaseAppConfig


class ManagerConfig(BaseAppConfig):
    """
    Configuration management for the controller manager.
    """

    # Webhook server settings
    WEBHOOK_CERT_DIR: str = Field(
        default="", description="Webhook certificate directory (empty: built-in default)"
    )
    WEBHOOK_PORT: int = Field(default=9443, ge=1, le=65535, description="Webhook listen port")

    # Certificate provisioning
    WEBHOOK_CERT_WAIT_TIMEOUT: float = Field(
        default=0.0, ge=0.0, description="Seconds to wait for a certificate pair (0: no wait)"
    )
    WEBHOOK_CERT_POLL_INTERVAL: float = Field(
        default=1.0, gt=0.0, description="Seconds between certificate pair probes"
    )

    # model_config is inherited
