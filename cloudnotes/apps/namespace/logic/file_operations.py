"""Business logic for file placement operations.

Files are leaves: renaming, moving or deleting one never cascades.
Blob cleanup on delete is handled by the post_delete signal handler in
signals.py.
"""

import logging
from typing import Any

from django.db import transaction
from django.db.models import QuerySet

from cloudnotes.apps.namespace.constants import UNSET, Unset
from cloudnotes.apps.namespace.infrastructure.metadata import (
    classify_file_kind,
    detect_mime_type,
)
from cloudnotes.apps.namespace.logic.guards import (
    get_owned_file,
    get_owned_folder,
    lock_namespace,
    validate_file_kind,
    validate_file_size,
    validate_name,
)
from cloudnotes.apps.namespace.models import File

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


def create_file(  # noqa: WPS211
    owner: _User,
    name: str,
    *,
    folder_id: int | None = None,
    kind: str | None = None,
    size_bytes: int = 0,
    mime_type: str = '',
    blob: str = '',
) -> File:
    """Create a file record in a folder or at the root.

    When no MIME type is given it is guessed from the name, and when no
    kind is given it is derived from the MIME type.

    Args:
        owner: Owner of the new file.
        name: File name.
        folder_id: Containing folder, None for a root-level file.
        kind: Content kind (one of FileKind values).
        size_bytes: Content size in bytes.
        mime_type: MIME type of the content.
        blob: Storage key of already uploaded content, if any.

    Returns:
        Created File instance.

    Raises:
        NamespaceValidationError: If name, kind or size is invalid.
        NotFoundError: If the folder does not exist for this owner.
    """
    valid_name = validate_name(name)
    valid_size = validate_file_size(size_bytes)
    mime_type = mime_type or detect_mime_type(valid_name)
    if kind is None:
        valid_kind = classify_file_kind(mime_type)
    else:
        valid_kind = validate_file_kind(kind)

    with transaction.atomic():
        lock_namespace(owner)
        if folder_id is not None:
            get_owned_folder(owner, folder_id)
        file_instance = File.objects.create(
            owner=owner,
            folder_id=folder_id,
            name=valid_name,
            kind=valid_kind,
            size_bytes=valid_size,
            mime_type=mime_type,
            blob=blob,
        )

    logger.info(
        'File created: %s (ID: %d, folder: %s, owner: %s)',
        valid_name,
        file_instance.pk,
        folder_id,
        owner.pk,
    )
    return file_instance


def update_file(
    owner: _User,
    file_id: int,
    *,
    name: str | Unset = UNSET,
    folder_id: int | None | Unset = UNSET,
) -> File:
    """Rename and/or move a file.

    An argument left as ``UNSET`` keeps the current value; passing
    ``folder_id=None`` explicitly moves the file to the root.

    Args:
        owner: Owner of the namespace.
        file_id: File to change.
        name: New name.
        folder_id: New containing folder, None for the root.

    Returns:
        Updated File instance.

    Raises:
        NotFoundError: If the file or target folder does not exist.
        NamespaceValidationError: If the new name is invalid.
    """
    with transaction.atomic():
        lock_namespace(owner)
        file_instance = get_owned_file(owner, file_id, for_update=True)
        update_fields = []

        if name is not UNSET:
            file_instance.name = validate_name(name)
            update_fields.append('name')

        if folder_id is not UNSET:
            if folder_id is not None:
                get_owned_folder(owner, folder_id)
            file_instance.folder_id = folder_id
            update_fields.append('folder')

        if update_fields:
            file_instance.save(update_fields=[*update_fields, 'updated_at'])

    logger.info(
        'File updated: %s (ID: %d, folder: %s)',
        file_instance.name,
        file_instance.pk,
        file_instance.folder_id,
    )
    return file_instance


def rename_file(owner: _User, file_id: int, new_name: str) -> File:
    """Rename a file in place.

    Args:
        owner: Owner of the namespace.
        file_id: File to rename.
        new_name: New name.

    Returns:
        Updated File instance.
    """
    return update_file(owner, file_id, name=new_name)


def move_file(owner: _User, file_id: int, folder_id: int | None) -> File:
    """Move a file to another folder, or to the root with None.

    Args:
        owner: Owner of the namespace.
        file_id: File to move.
        folder_id: Target folder ID, None for the root.

    Returns:
        Updated File instance.
    """
    return update_file(owner, file_id, folder_id=folder_id)


def delete_file(owner: _User, file_id: int) -> None:
    """Delete a file record.

    Storage cleanup of the blob is handled by the post_delete signal.

    Args:
        owner: Owner of the namespace.
        file_id: File to delete.

    Raises:
        NotFoundError: If the file does not exist for this owner.
    """
    with transaction.atomic():
        lock_namespace(owner)
        file_instance = get_owned_file(owner, file_id, for_update=True)
        name = file_instance.name
        file_instance.delete()

    logger.info('File deleted: %s (ID: %d, owner: %s)', name, file_id, owner.pk)


def get_file(owner: _User, file_id: int) -> File:
    """Get a file of the owner.

    Args:
        owner: Owner of the namespace.
        file_id: File ID.

    Returns:
        File instance.

    Raises:
        NotFoundError: If the file does not exist for this owner.
    """
    return get_owned_file(owner, file_id)


def list_files(
    owner: _User,
    folder_id: int | None | Unset = UNSET,
    kind: str | None = None,
) -> QuerySet[File]:
    """List the owner's files, ordered by name.

    Args:
        owner: Owner of the namespace.
        folder_id: Only files directly in this folder; None for root-level
            files; UNSET for all files.
        kind: Only files of this kind.

    Returns:
        QuerySet of File objects.

    Raises:
        NamespaceValidationError: If the kind is not a known value.
    """
    files = File.objects.filter(owner=owner)

    if folder_id is not UNSET:
        files = files.filter(folder_id=folder_id)

    if kind is not None:
        files = files.filter(kind=validate_file_kind(kind))

    return files.order_by('name')
