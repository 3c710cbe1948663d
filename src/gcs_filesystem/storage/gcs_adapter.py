"""
Google Cloud Storage driver.

Implements Driver on top of a GCS bucket:
- Object keys are normalized paths (no leading slash)
- Directories are inferred from key prefixes; make_directory writes a marker
- Lazy, lock-guarded client creation (explicit key file or ADC)
- V4 signed URLs from a service account key file or ambient credentials
"""

import logging
import mimetypes
import posixpath
import shutil
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterator, List, Optional

from google.auth.exceptions import GoogleAuthError
from google.cloud import storage
from google.cloud.exceptions import GoogleCloudError, NotFound
from google.oauth2 import service_account

from ..config import DiskConfig
from ..constants import (
    DEFAULT_CONTENT_TYPE,
    DIRECTORY_CONTENT_TYPE,
    PATH_SEPARATOR,
    SIGNED_URL_METHOD,
    SIGNED_URL_VERSION,
)
from ..context import RequestContext
from ..credentials import load_service_account_key
from ..errors import SignedUrlError, StorageError, StorageInitializationError
from .base_adapter import Driver, content_bytes, directory_prefix, normalize_path

logger = logging.getLogger(__name__)


def _strip_separator(prefix: str) -> str:
    if prefix.endswith(PATH_SEPARATOR):
        return prefix[: -len(PATH_SEPARATOR)]
    return prefix


class GCSDriver(Driver):
    """
    Filesystem-style driver for one GCS disk.

    Usage:
        driver = GCSDriver(DiskConfig(bucket="my-bucket", credentials="/keys/sa.json"))

        driver.put("docs/readme.txt", "hello")
        driver.get("docs/readme.txt")            # "hello"
        driver.files("docs")                     # ["docs/readme.txt"]
        driver.temporary_url("docs/readme.txt", datetime.now(timezone.utc) + timedelta(hours=1))

    Security:
    - Key file: ``credentials`` points at a service account JSON key
    - Otherwise Application Default Credentials (Workload Identity, gcloud)
    """

    def __init__(
        self,
        config: DiskConfig,
        context: Optional[RequestContext] = None,
        client: Optional[storage.Client] = None,
    ):
        """
        Args:
            config: Resolved disk configuration
            context: Cancellation/deadline for every call (background if None)
            client: Pre-built client to share; created on first use if None
        """
        self.config = config
        self.context = context or RequestContext.background()
        self._client = client
        self._bucket: Optional[storage.Bucket] = None
        self._lock = threading.Lock()

    @property
    def bucket_name(self) -> str:
        return self.config.bucket

    def with_context(self, ctx: RequestContext) -> "GCSDriver":
        return GCSDriver(self.config, context=ctx, client=self._client)

    # Initialization

    def _create_client(self) -> storage.Client:
        credentials = None
        if self.config.credentials:
            credentials = service_account.Credentials.from_service_account_file(
                self.config.credentials
            )
        return storage.Client(
            project=self.config.project_id or None,
            credentials=credentials,
        )

    def _init(self) -> storage.Bucket:
        """
        Build the client and bucket handle once.

        Raises:
            StorageInitializationError: If the client cannot be created; the
                next call tries again
        """
        if self._bucket is not None:
            return self._bucket

        with self._lock:
            if self._bucket is not None:
                return self._bucket

            try:
                client = self._client or self._create_client()
                bucket = client.bucket(self.config.bucket)
            except (GoogleAuthError, GoogleCloudError, OSError, ValueError) as e:
                logger.error(f"Failed to create GCS client for disk {self.config.disk}: {e}")
                raise StorageInitializationError(f"failed to create GCS client: {e}") from e

            self._client = client
            self._bucket = bucket
            logger.info(
                f"Initialized GCS driver: disk={self.config.disk}, bucket={self.config.bucket}"
            )
            return bucket

    def _prepare(self) -> storage.Bucket:
        self.context.check()
        return self._init()

    def _blob(self, file: str) -> storage.Blob:
        return self._prepare().blob(normalize_path(file))

    @contextmanager
    def _logged(self, action: str, path: str) -> Iterator[None]:
        try:
            yield
        except GoogleCloudError as e:
            logger.error(f"Failed to {action} {path}: {e}")
            raise

    def _list(self, prefix: str, delimiter: Optional[str] = None):
        bucket = self._prepare()
        return self._client.list_blobs(
            bucket,
            prefix=prefix,
            delimiter=delimiter,
            timeout=self.context.timeout(),
        )

    # Listing

    def all_files(self, path: str) -> List[str]:
        prefix = directory_prefix(path)
        files = []
        with self._logged("list files under", prefix):
            for blob in self._list(prefix):
                if not blob.name.endswith(PATH_SEPARATOR):
                    files.append(blob.name)
        return files

    def all_directories(self, path: str) -> List[str]:
        """
        Every directory below ``path``, inferred from object keys and
        directory markers, in first-seen order.
        """
        prefix = directory_prefix(path)
        seen: Dict[str, None] = {}
        with self._logged("list directories under", prefix):
            for blob in self._list(prefix):
                segments = blob.name[len(prefix):].split(PATH_SEPARATOR)[:-1]
                for depth in range(1, len(segments) + 1):
                    seen[prefix + PATH_SEPARATOR.join(segments[:depth])] = None
        return list(seen)

    def files(self, path: str) -> List[str]:
        prefix = directory_prefix(path)
        with self._logged("list files under", prefix):
            return [
                blob.name
                for blob in self._list(prefix, delimiter=PATH_SEPARATOR)
                if not blob.name.endswith(PATH_SEPARATOR)
            ]

    def directories(self, path: str) -> List[str]:
        prefix = directory_prefix(path)
        with self._logged("list directories under", prefix):
            iterator = self._list(prefix, delimiter=PATH_SEPARATOR)
            # prefixes are collected while the pages are consumed
            for _ in iterator:
                pass
            return sorted(
                _strip_separator(p) for p in iterator.prefixes if p and p != prefix
            )

    # Mutation

    def copy(self, old_file: str, new_file: str) -> None:
        bucket = self._prepare()
        source = bucket.blob(normalize_path(old_file))
        with self._logged("copy", old_file):
            bucket.copy_blob(
                source, bucket, normalize_path(new_file), timeout=self.context.timeout()
            )

    def delete(self, *files: str) -> None:
        bucket = self._prepare()
        for file in files:
            self.context.check()
            key = normalize_path(file)
            try:
                bucket.blob(key).delete(timeout=self.context.timeout())
            except NotFound:
                logger.debug(f"File not found for deletion: {key}")
            except GoogleCloudError as e:
                logger.error(f"Failed to delete {key}: {e}")
                raise

    def delete_directory(self, directory: str) -> None:
        """
        Delete every object under ``directory``, markers included.

        Not atomic: objects deleted before a failure stay deleted.
        """
        prefix = directory_prefix(directory)
        with self._logged("list objects under", prefix):
            keys = [blob.name for blob in self._list(prefix)]
        self.delete(*keys)
        logger.info(f"Deleted directory {prefix}: {len(keys)} objects")

    def make_directory(self, directory: str) -> None:
        key = normalize_path(directory)
        if not key.endswith(PATH_SEPARATOR):
            key += PATH_SEPARATOR
        blob = self._prepare().blob(key)
        with self._logged("create directory", key):
            blob.upload_from_string(
                b"", content_type=DIRECTORY_CONTENT_TYPE, timeout=self.context.timeout()
            )

    def put(self, file: str, content) -> None:
        data = content_bytes(content)
        key = normalize_path(file)
        blob = self._prepare().blob(key)
        content_type, _ = mimetypes.guess_type(key)
        with self._logged("write", key):
            # the upload is only final once the writer closes
            with blob.open(
                "wb",
                content_type=content_type or DEFAULT_CONTENT_TYPE,
                timeout=self.context.timeout(),
            ) as writer:
                writer.write(data)

    def put_file(self, path: str, source) -> str:
        key = posixpath.join(normalize_path(path), source.hash_name())
        self._put_file_content(key, source)
        return key

    def put_file_as(self, path: str, source, name: str) -> str:
        extension = source.extension()
        if "." not in name:
            name = f"{name}.{extension}"
        key = posixpath.join(normalize_path(path), name)
        self._put_file_content(key, source)
        return key

    def _put_file_content(self, key: str, source) -> None:
        blob = self._prepare().blob(key)
        try:
            content_type = source.mime_type()
        except ValueError as e:
            logger.debug(f"No MIME type for {key}: {e}")
            content_type = None

        with open(source.file(), "rb") as src:
            with self._logged("upload", key):
                with blob.open(
                    "wb", content_type=content_type, timeout=self.context.timeout()
                ) as writer:
                    shutil.copyfileobj(src, writer)

    # Reading

    def exists(self, file: str) -> bool:
        try:
            blob = self._blob(file)
            return blob.exists(timeout=self.context.timeout())
        except (StorageError, GoogleCloudError, GoogleAuthError, OSError) as e:
            logger.warning(f"Failed to check existence of {file}: {e}")
            return False

    def get(self, file: str) -> str:
        return self.get_bytes(file).decode("utf-8")

    def get_bytes(self, file: str) -> bytes:
        blob = self._blob(file)
        with self._logged("read", file):
            with blob.open("rb", timeout=self.context.timeout()) as reader:
                return reader.read()

    def _metadata(self, file: str) -> storage.Blob:
        blob = self._blob(file)
        with self._logged("get metadata for", file):
            blob.reload(timeout=self.context.timeout())
        return blob

    def last_modified(self, file: str) -> datetime:
        return self._metadata(file).updated

    def mime_type(self, file: str) -> Optional[str]:
        return self._metadata(file).content_type

    def size(self, file: str) -> int:
        return self._metadata(file).size or 0

    # URLs

    def url(self, file: str) -> str:
        return f"{self.config.url.rstrip(PATH_SEPARATOR)}/{normalize_path(file)}"

    def temporary_url(self, file: str, expiry: datetime) -> str:
        """
        Generate a V4 signed GET URL valid until ``expiry``.

        With a configured key file the URL is signed locally with that key;
        otherwise the client's own credentials must be able to sign.

        Raises:
            google.cloud.exceptions.NotFound: If the object does not exist
            CredentialsError: If the configured key file is unusable
            SignedUrlError: If signing fails
        """
        blob = self._metadata(file)

        credentials = None
        if self.config.credentials:
            credentials = load_service_account_key(self.config.credentials).signing_credentials()

        try:
            return blob.generate_signed_url(
                version=SIGNED_URL_VERSION,
                expiration=expiry,
                method=SIGNED_URL_METHOD,
                credentials=credentials,
            )
        except (GoogleAuthError, AttributeError, TypeError, ValueError) as e:
            logger.error(f"Failed to generate signed URL for {file}: {e}")
            raise SignedUrlError(
                f"Signed URL generation failed: {e}. "
                f"Ensure the disk has service account credentials with signing permission."
            ) from e

    def __repr__(self) -> str:
        return f"<GCSDriver disk={self.config.disk} bucket={self.config.bucket}>"
