"""Signal handlers for namespace app."""

import logging

from django.core.files.storage import default_storage
from django.db.models.signals import post_delete
from django.dispatch import receiver

from cloudnotes.apps.namespace.models import File

logger = logging.getLogger(__name__)


@receiver(post_delete, sender=File)
def delete_blob_from_storage(
    sender: type[File],
    instance: File,
    **kwargs: object,
) -> None:
    """Drop the uploaded content once a file leaves the namespace.

    Runs for every way a File row can disappear, so the bucket never
    keeps content nobody can reach. Files created without an upload
    have no blob and need nothing.

    Args:
        sender: The File model class.
        instance: The removed File row.
        **kwargs: Additional signal arguments.
    """
    if not instance.blob:
        return

    key = instance.blob.name
    try:
        if not default_storage.exists(key):
            logger.warning(
                'Blob %s of file %d was already gone from storage',
                key,
                instance.pk,
            )
            return
        default_storage.delete(key)
    except Exception:
        # The row is gone either way; the object needs manual cleanup
        logger.exception(
            'Could not remove blob %s of file %d from storage',
            key,
            instance.pk,
        )
        return

    logger.info('Removed blob %s of file %d', key, instance.pk)
