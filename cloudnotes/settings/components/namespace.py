"""Namespace engine settings."""

from cloudnotes.settings.components import config

# Largest file accepted by the namespace (50 MB)
NAMESPACE_MAX_FILE_SIZE = config(
    'NAMESPACE_MAX_FILE_SIZE',
    cast=int,
    default=50 * 1024 * 1024,
)
