"""
Exception hierarchy for the GCS filesystem package.

Backend failures raised by google-cloud-storage are not wrapped; they reach
the caller unchanged. The classes here cover what the driver itself decides.
"""


class StorageError(Exception):
    """Base exception for storage operations."""

    pass


class StorageInitializationError(StorageError):
    """Raised when a driver cannot build its backend client."""

    pass


class SignedUrlError(StorageError):
    """Raised when a temporary signed URL cannot be generated."""

    pass


class OperationCancelled(StorageError):
    """Raised when an operation runs under a cancelled context."""

    pass


class DeadlineExceeded(StorageError):
    """Raised when an operation runs after its context deadline."""

    pass


class CredentialsError(StorageError):
    """Base exception for service account key problems."""

    pass


class CredentialsPathError(CredentialsError):
    """Raised when no credentials path is configured."""

    pass


class CredentialsReadError(CredentialsError):
    """Raised when the key file cannot be read."""

    pass


class CredentialsParseError(CredentialsError):
    """Raised when the key file is not valid JSON."""

    pass


class PemDecodeError(CredentialsError):
    """Raised when the private key is not a PEM block."""

    pass


class PrivateKeyParseError(CredentialsError):
    """Raised when the PEM block does not hold a parseable private key."""

    pass


class UnsupportedKeyTypeError(CredentialsError):
    """Raised when the private key is not an RSA key."""

    pass
