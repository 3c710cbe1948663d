"""
GCS disk configuration.

Published into the host project by GCSServiceProvider.boot(). Merge DISK
into ``filesystems.disks`` under the disk name you pass to gcs(app, disk).
"""

import os

DISK = {
    "driver": "gcs",

    # GCS Project ID
    "project_id": os.getenv("GCS_PROJECT_ID", ""),

    # GCS Bucket Name
    "bucket": os.getenv("GCS_BUCKET", ""),

    # Path to service account credentials JSON file
    "credentials": os.getenv("GCS_CREDENTIALS_PATH", ""),

    # Public URL for the bucket
    # Leave empty to use default: https://storage.googleapis.com/{bucket}
    "url": os.getenv("GCS_URL", ""),
}
