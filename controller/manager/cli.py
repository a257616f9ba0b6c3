#!/usr/bin/env python3
"""Webhook certificate discovery CLI."""

from __future__ import annotations

import argparse
import json
import sys

from controller.manager.config import ManagerConfig
from controller.manager.core.certificates import select_webhook_certificate_names
from controller.manager.core.exceptions import WebhookCertificateError
from controller.manager.core.logging_config import setup_logging
from controller.manager.core.webhook import (
    WebhookServerOptions,
    resolve_cert_dir,
    wait_for_webhook_certificates,
)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-d",
        "--cert-dir",
        default=None,
        help="Certificate directory. Omit to use WEBHOOK_CERT_DIR or the built-in default.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the selection as a JSON object",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Locate the TLS certificate pair used to serve webhooks",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    select_parser = subparsers.add_parser(
        "select",
        help="Print the certificate and key names found in the directory",
    )
    _add_common_arguments(select_parser)
    select_parser.set_defaults(func=run_select)

    wait_parser = subparsers.add_parser(
        "wait",
        help="Wait until a certificate pair is present, then print it",
    )
    _add_common_arguments(wait_parser)
    wait_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait (default: WEBHOOK_CERT_WAIT_TIMEOUT)",
    )
    wait_parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between probes (default: WEBHOOK_CERT_POLL_INTERVAL)",
    )
    wait_parser.set_defaults(func=run_wait)

    return parser


def _print_selection(args: argparse.Namespace, cert_dir: str, names: tuple[str, str]) -> None:
    cert_name, key_name = names
    if not args.json:
        print(f"{cert_name} {key_name}")
        return
    options = WebhookServerOptions(cert_dir=cert_dir, cert_name=cert_name, key_name=key_name)
    payload = options.model_dump(exclude={"port"})
    payload["cert_file"] = options.cert_file
    payload["key_file"] = options.key_file
    print(json.dumps(payload))


def _cert_dir_argument(args: argparse.Namespace, config: ManagerConfig) -> str:
    if args.cert_dir is None:
        return config.WEBHOOK_CERT_DIR
    return args.cert_dir


def run_select(args: argparse.Namespace, config: ManagerConfig) -> int:
    cert_dir = resolve_cert_dir(_cert_dir_argument(args, config))
    _print_selection(args, cert_dir, select_webhook_certificate_names(cert_dir))
    return 0


def run_wait(args: argparse.Namespace, config: ManagerConfig) -> int:
    cert_dir = resolve_cert_dir(_cert_dir_argument(args, config))
    timeout = config.WEBHOOK_CERT_WAIT_TIMEOUT if args.timeout is None else args.timeout
    interval = config.WEBHOOK_CERT_POLL_INTERVAL if args.interval is None else args.interval
    if timeout < 0 or interval <= 0:
        raise ValueError("--timeout must be >= 0 and --interval must be > 0")

    names = wait_for_webhook_certificates(cert_dir, timeout, interval)
    _print_selection(args, cert_dir, names)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = ManagerConfig()
        setup_logging(config.LOG_CONFIG_PATH)
        return int(args.func(args, config))
    except WebhookCertificateError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
