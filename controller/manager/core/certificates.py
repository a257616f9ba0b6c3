"""Webhook certificate pair discovery."""

from __future__ import annotations

import errno
import os
import stat
from dataclasses import dataclass

from controller.manager.core.exceptions import NoCertificatePairError

DEFAULT_WEBHOOK_CERT_DIR = "/run/secrets/cnpg.io/webhook"


@dataclass(frozen=True)
class CertificatePair:
    cert_name: str
    key_name: str

    def as_tuple(self) -> tuple[str, str]:
        return self.cert_name, self.key_name


# Ordered by preference.
CANDIDATE_PAIRS: tuple[CertificatePair, ...] = (
    CertificatePair("apiserver.crt", "apiserver.key"),
    CertificatePair("tls.crt", "tls.key"),
)

_MISSING_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR})


def _is_regular_file(path: str) -> bool:
    """
    Return whether path names a regular file.

    A missing file, a missing parent directory, or a path the OS cannot
    represent (e.g. an embedded NUL byte) yields False. Any other stat
    failure is raised to the caller.
    """
    try:
        st = os.stat(path)
    except OSError as e:
        if e.errno in _MISSING_ERRNOS:
            return False
        raise
    except ValueError:
        return False
    return stat.S_ISREG(st.st_mode)


def _pair_present(cert_dir: str, pair: CertificatePair) -> bool:
    return _is_regular_file(os.path.join(cert_dir, pair.cert_name)) and _is_regular_file(
        os.path.join(cert_dir, pair.key_name)
    )


def select_webhook_certificate_names(
    cert_dir: str = "",
    default_dir: str = DEFAULT_WEBHOOK_CERT_DIR,
    candidates: tuple[CertificatePair, ...] = CANDIDATE_PAIRS,
) -> tuple[str, str]:
    """
    Pick the certificate and key file names to serve webhooks with.

    Candidates are probed in order and the first one whose certificate and
    key both exist in cert_dir wins. An empty cert_dir means default_dir.

    Returns:
        (cert_name, key_name) basenames of the selected pair.

    Raises:
        NoCertificatePairError: no candidate is complete. Stat failures other
            than not-found (e.g. permission denied) skip the candidate and are
            reported on the raised error.
    """
    if not cert_dir:
        cert_dir = default_dir

    probe_errors: list[OSError] = []
    for pair in candidates:
        try:
            if _pair_present(cert_dir, pair):
                return pair.as_tuple()
        except OSError as e:
            probe_errors.append(e)

    raise NoCertificatePairError(
        cert_dir,
        tuple(pair.as_tuple() for pair in candidates),
        probe_errors,
    )
