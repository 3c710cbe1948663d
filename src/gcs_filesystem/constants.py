"""
Shared constants for the GCS filesystem driver.
"""

# Container binding for the GCS driver
BINDING = "gcs_filesystem.gcs"

# Container bindings the provider depends on / provides for
CONFIG_BINDING = "config"
STORAGE_BINDING = "storage"

# Distribution name used when publishing resources into the host project
PACKAGE_NAME = "gcs-filesystem"

# Public URL used when a disk has no "url" configured
DEFAULT_URL_TEMPLATE = "https://storage.googleapis.com/{bucket}"

# Object keys and pseudo-directories
PATH_SEPARATOR = "/"
DIRECTORY_CONTENT_TYPE = "application/x-directory"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Config key layout: filesystems.disks.<disk>.<key>
DISK_CONFIG_PREFIX = "filesystems.disks"
DEFAULT_DRIVER = "gcs"

# Environment inputs read by DiskConfig.from_env() and the published stub
ENV_PROJECT_ID = "GCS_PROJECT_ID"
ENV_BUCKET = "GCS_BUCKET"
ENV_CREDENTIALS_PATH = "GCS_CREDENTIALS_PATH"
ENV_URL = "GCS_URL"

# Request timeout (seconds) when the request context has no deadline
DEFAULT_TIMEOUT = 60.0

# Signed URL settings
SIGNED_URL_VERSION = "v4"
SIGNED_URL_METHOD = "GET"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
