"""
Service account credential loading for signed URLs.

Reads a service account JSON key file and extracts the identity and RSA
private key GCS needs to sign V4 URLs locally. Every way the file can be
wrong maps to its own exception so the caller can tell a missing file from a
bad key.
"""

import base64
import binascii
import json
import logging
import re
from dataclasses import dataclass

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from google.auth import crypt
from google.oauth2 import service_account

from .constants import GOOGLE_TOKEN_URI
from .errors import (
    CredentialsParseError,
    CredentialsPathError,
    CredentialsReadError,
    PemDecodeError,
    PrivateKeyParseError,
    UnsupportedKeyTypeError,
)

logger = logging.getLogger(__name__)

PEM_BLOCK_PATTERN = re.compile(
    r"-----BEGIN (?P<label>[A-Z0-9 ]+)-----\s*(?P<body>[A-Za-z0-9+/=\s]+?)\s*-----END (?P=label)-----"
)


@dataclass(frozen=True)
class ServiceAccountKey:
    """Identity and key material extracted from a service account file."""

    client_email: str
    private_key: bytes  # PKCS8 PEM

    def signing_credentials(self) -> service_account.Credentials:
        """
        Build credentials that sign locally with this key.

        Only the signer is used by GCS for V4 URLs, so no token is fetched.
        """
        signer = crypt.RSASigner.from_string(self.private_key)
        return service_account.Credentials(
            signer=signer,
            service_account_email=self.client_email,
            token_uri=GOOGLE_TOKEN_URI,
        )


def decode_pem_block(data: str) -> bytes:
    """
    Return the DER payload of the first PEM block in ``data``.

    Raises:
        PemDecodeError: If no well-formed PEM block is present
    """
    match = PEM_BLOCK_PATTERN.search(data or "")
    if not match:
        raise PemDecodeError("failed to decode PEM block from private key")
    body = "".join(match.group("body").split())
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise PemDecodeError(f"failed to decode PEM block from private key: {e}") from e


def load_service_account_key(credentials_path: str) -> ServiceAccountKey:
    """
    Load the identity and RSA key from a service account JSON file.

    Args:
        credentials_path: Path to the JSON key file

    Returns:
        ServiceAccountKey with the client email and PKCS8 PEM key

    Raises:
        CredentialsPathError: If the path is empty
        CredentialsReadError: If the file cannot be read
        CredentialsParseError: If the file is not JSON
        PemDecodeError: If ``private_key`` is not a PEM block
        PrivateKeyParseError: If the PEM block is not a PKCS8 key
        UnsupportedKeyTypeError: If the key is not RSA
    """
    if not credentials_path:
        raise CredentialsPathError("credentials path not configured")

    try:
        with open(credentials_path, "r", encoding="utf-8") as f:
            raw = f.read()
    except OSError as e:
        raise CredentialsReadError(f"failed to read credentials file: {e}") from e

    try:
        info = json.loads(raw)
    except ValueError as e:
        raise CredentialsParseError(f"failed to parse credentials JSON: {e}") from e
    if not isinstance(info, dict):
        raise CredentialsParseError("failed to parse credentials JSON: expected an object")

    client_email = info.get("client_email") or ""
    der = decode_pem_block(info.get("private_key") or "")

    try:
        private_key = serialization.load_der_private_key(der, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise PrivateKeyParseError(f"failed to parse private key: {e}") from e

    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise UnsupportedKeyTypeError("private key is not an RSA key")

    pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    logger.debug(f"Loaded service account key for {client_email}")
    return ServiceAccountKey(client_email=client_email, private_key=pem)
