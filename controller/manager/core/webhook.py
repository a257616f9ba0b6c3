"""
Webhook server options.

Resolves the certificate material the webhook server should load, using the
certificate pair selector, and optionally waits for it to be provisioned.
"""

import logging
import os
import time
from typing import Callable

from pydantic import BaseModel, Field

from controller.manager.config import ManagerConfig
from controller.manager.core.certificates import (
    DEFAULT_WEBHOOK_CERT_DIR,
    select_webhook_certificate_names,
)
from controller.manager.core.exceptions import NoCertificatePairError

logger = logging.getLogger(__name__)


class WebhookServerOptions(BaseModel):
    """Options handed to the TLS-serving webhook component."""

    cert_dir: str
    cert_name: str = Field(..., min_length=1)
    key_name: str = Field(..., min_length=1)
    port: int = 9443

    @property
    def cert_file(self) -> str:
        return os.path.join(self.cert_dir, self.cert_name)

    @property
    def key_file(self) -> str:
        return os.path.join(self.cert_dir, self.key_name)


def resolve_cert_dir(cert_dir: str | None) -> str:
    if cert_dir:
        return cert_dir
    return DEFAULT_WEBHOOK_CERT_DIR


def wait_for_webhook_certificates(
    cert_dir: str,
    timeout: float,
    poll_interval: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> tuple[str, str]:
    """
    Retry the certificate pair selection until it succeeds or timeout elapses.

    The last NoCertificatePairError is re-raised once the deadline passes.
    A timeout of 0 probes exactly once.
    """
    deadline = clock() + timeout
    attempt = 0
    while True:
        attempt += 1
        try:
            return select_webhook_certificate_names(cert_dir)
        except NoCertificatePairError as e:
            remaining = deadline - clock()
            if remaining <= 0:
                logger.error(
                    "Webhook certificates not available",
                    extra={"cert_dir": e.cert_dir, "attempts": attempt},
                )
                raise
            logger.debug(f"Certificate pair not ready (attempt {attempt}): {e}")
            sleep(min(poll_interval, remaining))


def build_webhook_server_options(config: ManagerConfig) -> WebhookServerOptions:
    """
    Build webhook server options from the manager configuration.

    Waits for the certificate pair when WEBHOOK_CERT_WAIT_TIMEOUT is positive,
    otherwise probes once.
    """
    cert_dir = resolve_cert_dir(config.WEBHOOK_CERT_DIR)

    if config.WEBHOOK_CERT_WAIT_TIMEOUT > 0:
        cert_name, key_name = wait_for_webhook_certificates(
            cert_dir,
            config.WEBHOOK_CERT_WAIT_TIMEOUT,
            config.WEBHOOK_CERT_POLL_INTERVAL,
        )
    else:
        cert_name, key_name = select_webhook_certificate_names(cert_dir)

    logger.info(
        f"Using webhook certificate {cert_name} and key {key_name} from {cert_dir}",
        extra={"cert_dir": cert_dir},
    )
    return WebhookServerOptions(
        cert_dir=cert_dir,
        cert_name=cert_name,
        key_name=key_name,
        port=config.WEBHOOK_PORT,
    )
