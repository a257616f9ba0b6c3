"""
Where: controller/manager/tests/test_webhook.py
What: Unit tests for webhook server option resolution.
Why: Verify the caller-side wait policy and option assembly.
"""

import logging
from pathlib import Path

import pytest

from controller.manager.config import ManagerConfig
from controller.manager.core import webhook
from controller.manager.core.certificates import DEFAULT_WEBHOOK_CERT_DIR
from controller.manager.core.exceptions import NoCertificatePairError
from controller.manager.core.webhook import (
    WebhookServerOptions,
    build_webhook_server_options,
    resolve_cert_dir,
    wait_for_webhook_certificates,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def _write_pair(cert_dir: Path, prefix: str = "tls") -> None:
    (cert_dir / f"{prefix}.crt").write_text("cert content", encoding="utf-8")
    (cert_dir / f"{prefix}.key").write_text("key content", encoding="utf-8")


def test_resolve_cert_dir_substitutes_default():
    assert resolve_cert_dir("") == DEFAULT_WEBHOOK_CERT_DIR
    assert resolve_cert_dir(None) == DEFAULT_WEBHOOK_CERT_DIR
    assert resolve_cert_dir("/etc/webhook") == "/etc/webhook"


def test_options_join_paths():
    options = WebhookServerOptions(cert_dir="/certs", cert_name="tls.crt", key_name="tls.key")

    assert options.cert_file == "/certs/tls.crt"
    assert options.key_file == "/certs/tls.key"
    assert options.port == 9443


def test_options_reject_empty_names():
    with pytest.raises(ValueError):
        WebhookServerOptions(cert_dir="/certs", cert_name="", key_name="tls.key")


def test_build_options_from_config(tmp_path, monkeypatch):
    _write_pair(tmp_path, "apiserver")
    monkeypatch.setenv("WEBHOOK_CERT_DIR", str(tmp_path))
    monkeypatch.setenv("WEBHOOK_PORT", "8443")

    options = build_webhook_server_options(ManagerConfig())

    assert options.cert_dir == str(tmp_path)
    assert options.cert_name == "apiserver.crt"
    assert options.key_name == "apiserver.key"
    assert options.port == 8443


def test_build_options_propagates_missing_pair(tmp_path, monkeypatch):
    monkeypatch.setenv("WEBHOOK_CERT_DIR", str(tmp_path))
    monkeypatch.delenv("WEBHOOK_CERT_WAIT_TIMEOUT", raising=False)

    with pytest.raises(NoCertificatePairError, match="no valid certificate pair found"):
        build_webhook_server_options(ManagerConfig())


def test_build_options_waits_when_timeout_configured(tmp_path, monkeypatch):
    monkeypatch.setenv("WEBHOOK_CERT_DIR", str(tmp_path))
    monkeypatch.setenv("WEBHOOK_CERT_WAIT_TIMEOUT", "5")
    captured = {}

    def fake_wait(cert_dir, timeout, poll_interval):
        captured["args"] = (cert_dir, timeout, poll_interval)
        return "tls.crt", "tls.key"

    monkeypatch.setattr(webhook, "wait_for_webhook_certificates", fake_wait)

    options = build_webhook_server_options(ManagerConfig())

    assert captured["args"] == (str(tmp_path), 5.0, 1.0)
    assert options.cert_name == "tls.crt"


def test_wait_returns_immediately_when_pair_present(tmp_path):
    _write_pair(tmp_path)
    clock = FakeClock()

    names = wait_for_webhook_certificates(
        str(tmp_path), timeout=10, poll_interval=1, sleep=clock.sleep, clock=clock
    )

    assert names == ("tls.crt", "tls.key")
    assert clock.sleeps == []


def test_wait_polls_until_pair_appears(tmp_path):
    clock = FakeClock()

    def provisioning_sleep(seconds: float) -> None:
        clock.sleep(seconds)
        if len(clock.sleeps) == 3:
            _write_pair(tmp_path)

    names = wait_for_webhook_certificates(
        str(tmp_path), timeout=10, poll_interval=2, sleep=provisioning_sleep, clock=clock
    )

    assert names == ("tls.crt", "tls.key")
    assert clock.sleeps == [2, 2, 2]


def test_wait_raises_last_error_after_timeout(tmp_path, caplog):
    clock = FakeClock()

    with caplog.at_level(logging.DEBUG, logger=webhook.__name__):
        with pytest.raises(NoCertificatePairError) as exc_info:
            wait_for_webhook_certificates(
                str(tmp_path), timeout=5, poll_interval=2, sleep=clock.sleep, clock=clock
            )

    assert exc_info.value.cert_dir == str(tmp_path)
    # Last sleep is clamped to the remaining time.
    assert clock.sleeps == [2, 2, 1]
    assert any("not available" in r.getMessage() for r in caplog.records)


def test_wait_with_zero_timeout_probes_once(tmp_path):
    clock = FakeClock()

    with pytest.raises(NoCertificatePairError):
        wait_for_webhook_certificates(
            str(tmp_path), timeout=0, poll_interval=1, sleep=clock.sleep, clock=clock
        )

    assert clock.sleeps == []
