"""
Shared fixtures: an in-memory stand-in for google.cloud.storage.

The fake models what the driver relies on: prefix/delimiter listing with
lazily populated ``prefixes``, streaming readers/writers that only persist on
close, NotFound on missing objects, and server-side copies.
"""

import io
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional
from unittest.mock import patch

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from google.cloud.exceptions import NotFound

from gcs_filesystem.config import DiskConfig
from gcs_filesystem.storage.gcs_adapter import GCSDriver


@dataclass
class StoredObject:
    data: bytes
    content_type: Optional[str]
    updated: datetime


class FakeWriter(io.BytesIO):
    """Buffers writes; the object appears in the bucket only on close."""

    def __init__(self, blob, content_type):
        super().__init__()
        self._blob = blob
        self._content_type = content_type

    def close(self):
        if self.closed:
            return
        data = self.getvalue()
        super().close()
        error = self._blob.bucket.close_errors.get(self._blob.name)
        if error is not None:
            raise error
        self._blob.bucket.store(self._blob.name, data, self._content_type)


class FakeReader(io.BytesIO):
    """Reader that can be made to fail mid-read."""

    def __init__(self, data, error=None):
        super().__init__(data)
        self._error = error

    def read(self, size=-1):
        if self._error is not None:
            raise self._error
        return super().read(size)


class FakeBlob:
    def __init__(self, bucket, name):
        self.bucket = bucket
        self.name = name
        self.content_type = None
        self.size = None
        self.updated = None

    def _stored(self) -> StoredObject:
        obj = self.bucket.objects.get(self.name)
        if obj is None:
            raise NotFound(f"No such object: {self.bucket.name}/{self.name}")
        return obj

    def exists(self, timeout=None):
        self.bucket.calls.append(("exists", self.name, timeout))
        return self.name in self.bucket.objects

    def reload(self, timeout=None):
        obj = self._stored()
        self.content_type = obj.content_type
        self.size = len(obj.data)
        self.updated = obj.updated

    def delete(self, timeout=None):
        self.bucket.calls.append(("delete", self.name, timeout))
        if self.name in self.bucket.delete_errors:
            raise self.bucket.delete_errors[self.name]
        self._stored()
        del self.bucket.objects[self.name]

    def upload_from_string(self, data, content_type=None, timeout=None):
        self.bucket.store(self.name, data, content_type)

    def open(self, mode="r", content_type=None, timeout=None, **kwargs):
        self.bucket.calls.append(("open", self.name, mode, timeout))
        if mode == "rb":
            reader = FakeReader(self._stored().data, self.bucket.read_errors.get(self.name))
            self.bucket.readers.append(reader)
            return reader
        if mode == "wb":
            return FakeWriter(self, content_type)
        raise ValueError(f"unsupported mode {mode}")

    def generate_signed_url(self, **kwargs):
        self.bucket.signed_requests.append(kwargs)
        if self.bucket.signing_error is not None:
            raise self.bucket.signing_error
        return f"https://storage.googleapis.com/{self.bucket.name}/{self.name}?X-Goog-Signature=fake"


class FakeIterator:
    """Mimics HTTPIterator: ``prefixes`` fills up as the pages are read."""

    def __init__(self, blobs: List[FakeBlob], prefixes: List[str]):
        self._blobs = blobs
        self._pending_prefixes = prefixes
        self.prefixes = set()

    def __iter__(self):
        for blob in self._blobs:
            yield blob
        self.prefixes.update(self._pending_prefixes)


class FakeBucket:
    def __init__(self, name):
        self.name = name
        self.objects: Dict[str, StoredObject] = {}
        self.delete_errors: Dict[str, Exception] = {}
        self.close_errors: Dict[str, Exception] = {}
        self.read_errors: Dict[str, Exception] = {}
        self.readers: List[FakeReader] = []
        self.signed_requests: List[dict] = []
        self.signing_error: Optional[Exception] = None
        self.calls: List[tuple] = []

    def store(self, name, data, content_type=None):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self.objects[name] = StoredObject(
            data=bytes(data),
            content_type=content_type or "application/octet-stream",
            updated=datetime.now(timezone.utc),
        )

    def blob(self, name):
        return FakeBlob(self, name)

    def copy_blob(self, blob, destination_bucket, new_name=None, timeout=None):
        source = self.objects.get(blob.name)
        if source is None:
            raise NotFound(f"No such object: {self.name}/{blob.name}")
        destination_bucket.objects[new_name] = StoredObject(
            data=source.data,
            content_type=source.content_type,
            updated=datetime.now(timezone.utc),
        )
        return destination_bucket.blob(new_name)


class FakeClient:
    def __init__(self):
        self.buckets: Dict[str, FakeBucket] = {}
        self.list_calls: List[dict] = []

    def bucket(self, name):
        return self.buckets.setdefault(name, FakeBucket(name))

    def list_blobs(self, bucket_or_name, prefix=None, delimiter=None, timeout=None):
        bucket = bucket_or_name if isinstance(bucket_or_name, FakeBucket) else self.bucket(bucket_or_name)
        self.list_calls.append({"prefix": prefix, "delimiter": delimiter, "timeout": timeout})
        prefix = prefix or ""
        blobs, prefixes = [], []
        for name in sorted(bucket.objects):
            if not name.startswith(prefix):
                continue
            rest = name[len(prefix):]
            if delimiter and delimiter in rest:
                common = prefix + rest[: rest.index(delimiter) + len(delimiter)]
                if common not in prefixes:
                    prefixes.append(common)
                continue
            blobs.append(bucket.blob(name))
        return FakeIterator(blobs, prefixes)


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def mock_gcs_client(fake_client):
    """Patch the storage module used by the GCS driver."""
    with patch("gcs_filesystem.storage.gcs_adapter.storage") as mock_storage:
        mock_storage.Client.return_value = fake_client
        yield mock_storage, fake_client


@pytest.fixture
def disk_config():
    return DiskConfig(disk="gcs", bucket="test-bucket", project_id="test-project")


@pytest.fixture
def gcs_driver(mock_gcs_client, disk_config):
    """GCSDriver backed by the in-memory client."""
    return GCSDriver(disk_config)


@pytest.fixture
def bucket(gcs_driver, fake_client):
    return fake_client.bucket("test-bucket")


@pytest.fixture(scope="session")
def rsa_private_key_pem():
    """PKCS8 PEM of a throwaway RSA key, as found in service account files."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def service_account_file(tmp_path, rsa_private_key_pem):
    """A service account JSON key file on disk."""
    path = tmp_path / "service-account.json"
    path.write_text(
        json.dumps(
            {
                "type": "service_account",
                "project_id": "test-project",
                "private_key_id": "abc123",
                "private_key": rsa_private_key_pem,
                "client_email": "signer@test-project.iam.gserviceaccount.com",
                "token_uri": "https://oauth2.googleapis.com/token",
            }
        )
    )
    return path
