"""
Custom exception classes.

Represent errors raised while locating webhook certificate material.
"""


class WebhookCertificateError(Exception):
    """Base exception class for webhook certificate discovery."""

    pass


class NoCertificatePairError(WebhookCertificateError):
    """Raised when no candidate certificate/key pair is fully present."""

    def __init__(
        self,
        cert_dir: str,
        candidates: tuple[tuple[str, str], ...],
        probe_errors: list[OSError] | None = None,
    ):
        self.cert_dir = cert_dir
        self.candidates = candidates
        self.probe_errors = list(probe_errors or [])

        tried = ", ".join(f"{cert}/{key}" for cert, key in candidates)
        message = f"no valid certificate pair found in {cert_dir} (tried: {tried})"
        if self.probe_errors:
            details = "; ".join(str(e) for e in self.probe_errors)
            message = f"{message}; unexpected errors: {details}"
        super().__init__(message)
