"""Django storage configuration for S3-compatible backends.

Uploaded file blobs live in an S3-compatible bucket (MinIO locally,
any S3 endpoint in production). The namespace only keeps the object
key on each ``File`` row and removes the object when the row goes.
"""

from typing import Any, Final

from cloudnotes.settings.components import config

STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'storages.backends.s3.S3Storage',
        'OPTIONS': {
            'bucket_name': config(
                'AWS_STORAGE_BUCKET_NAME',
                default='cloudnotes',
            ),
            'access_key': config('AWS_ACCESS_KEY_ID', default='cloudnotes'),
            'secret_key': config(
                'AWS_SECRET_ACCESS_KEY',
                default='cloudnotes',
            ),
            'endpoint_url': config(
                'AWS_S3_ENDPOINT_URL',
                default=None,
            ),
            'region_name': config(
                'AWS_S3_REGION_NAME',
                default='us-east-1',
            ),
            'file_overwrite': False,  # Prevent accidental overwrites
            'default_acl': None,  # Inherit bucket ACL
        },
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
