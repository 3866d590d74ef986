"""Exception hierarchy."""

from typing import Optional, Union


class AutoInstError(Exception):
    """Base class for all autoinst errors."""
    pass


class ConfigurationError(AutoInstError):
    """Invalid fetch mode or argument combination."""
    pass


class InvalidFingerprintError(ConfigurationError):
    """Certificate fingerprint is not a SHA-256 hex digest."""
    pass


class UsageError(ConfigurationError):
    """Help was requested on the command line."""

    def __init__(self, usage: str):
        super().__init__(usage)
        self.usage = usage


class AnswerParseError(AutoInstError):
    """Answer document is not valid TOML or does not match the schema."""
    pass


class AnswerValidationError(AutoInstError):
    """Answer document is well-formed but semantically invalid."""
    pass


class FetchError(AutoInstError):
    """A source failed to produce an answer document."""
    pass


class FileReadError(FetchError):
    """Source file could not be read."""

    def __init__(self, path, cause: Union[OSError, UnicodeDecodeError]):
        super().__init__(f"Failed to read {path}: {cause}")
        self.path = path
        self.cause = cause


class PartitionNotFoundError(FetchError):
    """No partition carries the expected filesystem label."""
    pass


class MountError(FetchError):
    """Mounting the answer partition failed."""
    pass


class HttpError(FetchError):
    """HTTP request failed."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class HttpStatusError(HttpError):
    """Server answered with a non-success status."""

    def __init__(self, url: str, status_code: int, reason: str = ""):
        status = f"{status_code} {reason}" if reason else str(status_code)
        super().__init__(f"HTTP error {status} for {url}", url)
        self.status_code = status_code


class HttpTimeoutError(HttpError):
    """Request did not complete within the timeout."""
    pass


class CertificateFingerprintMismatch(HttpError):
    """Server certificate does not match the pinned fingerprint."""

    def __init__(self, expected: bytes, actual: bytes, url: Optional[str] = None):
        super().__init__(
            f"Fingerprint did not match! expected {expected.hex()}, got {actual.hex()}", url
        )
        self.expected = expected
        self.actual = actual


class NoAnswerFoundError(AutoInstError):
    """The configured source did not yield an answer document."""
    pass


class InstallerProtocolError(AutoInstError):
    """Malformed message from the low-level installer."""
    pass
