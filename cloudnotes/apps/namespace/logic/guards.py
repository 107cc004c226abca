"""Integrity checks run before every namespace mutation.

Each check either returns what it loaded or raises a NamespaceError
subclass. Nothing in this module writes, so a rejected mutation leaves
the namespace exactly as it was.
"""

import logging
from typing import Any, Final

from django.conf import settings
from django.contrib.auth import get_user_model

from cloudnotes.apps.namespace.constants import NAME_MAX_LENGTH
from cloudnotes.apps.namespace.exceptions import (
    FolderCycleError,
    FolderNotEmptyError,
    NamespaceValidationError,
    NotFoundError,
)
from cloudnotes.apps.namespace.models import File, FileKind, Folder

# User type for Django's dynamic user model
_User = Any

# Characters that may never appear in a folder or file name
_FORBIDDEN_NAME_CHARACTERS: Final = ('/', '\x00')

logger = logging.getLogger(__name__)


def lock_namespace(owner: _User) -> None:
    """Serialize mutations of one owner's namespace.

    Takes a row lock on the owner's user record which is held until the
    surrounding transaction ends. Must be called inside
    ``transaction.atomic()``. Different owners never wait on each other.

    Args:
        owner: Owner whose namespace is about to change.
    """
    user_model = get_user_model()
    list(
        user_model.objects.select_for_update()
        .filter(pk=owner.pk)
        .values_list('pk', flat=True),
    )


def validate_name(name: object) -> str:
    """Validate a folder or file name.

    Args:
        name: Proposed name, straight from the caller.

    Returns:
        The name, unchanged.

    Raises:
        NamespaceValidationError: If the name is missing, blank, too long
            or contains a path separator.
    """
    if not isinstance(name, str) or not name.strip():
        raise NamespaceValidationError('Name must be a non-empty string')

    for character in _FORBIDDEN_NAME_CHARACTERS:
        if character in name:
            raise NamespaceValidationError(
                f'Name must not contain {character!r}',
            )

    if len(name) > NAME_MAX_LENGTH:
        raise NamespaceValidationError(
            f'Name must be at most {NAME_MAX_LENGTH} characters',
        )

    return name


def get_owned_folder(
    owner: _User,
    folder_id: int,
    *,
    for_update: bool = False,
) -> Folder:
    """Load a folder that belongs to the owner.

    Args:
        owner: Expected owner.
        folder_id: Folder ID.
        for_update: Lock the row until the transaction ends.

    Returns:
        Folder instance.

    Raises:
        NotFoundError: If no such folder exists for this owner.
    """
    queryset = Folder.objects.filter(owner=owner)
    if for_update:
        queryset = queryset.select_for_update()

    try:
        return queryset.get(pk=folder_id)
    except Folder.DoesNotExist as error:
        logger.warning(
            'Folder not found for owner %s: ID=%s',
            owner.pk,
            folder_id,
        )
        raise NotFoundError('folder', folder_id) from error


def get_owned_file(
    owner: _User,
    file_id: int,
    *,
    for_update: bool = False,
) -> File:
    """Load a file that belongs to the owner.

    Args:
        owner: Expected owner.
        file_id: File ID.
        for_update: Lock the row until the transaction ends.

    Returns:
        File instance.

    Raises:
        NotFoundError: If no such file exists for this owner.
    """
    queryset = File.objects.filter(owner=owner)
    if for_update:
        queryset = queryset.select_for_update()

    try:
        return queryset.get(pk=file_id)
    except File.DoesNotExist as error:
        logger.warning(
            'File not found for owner %s: ID=%s',
            owner.pk,
            file_id,
        )
        raise NotFoundError('file', file_id) from error


def ensure_name_available(
    owner: _User,
    parent_id: int | None,
    name: str,
    *,
    exclude_id: int | None = None,
) -> None:
    """Reject a folder name already used by a sibling.

    Args:
        owner: Owner of the namespace.
        parent_id: Parent the folder will live under (None for root).
        name: Proposed folder name.
        exclude_id: Folder being renamed or moved, not a clash with itself.

    Raises:
        NamespaceValidationError: If a sibling already has the name.
    """
    siblings = Folder.objects.filter(
        owner=owner,
        parent_id=parent_id,
        name=name,
    )
    if exclude_id is not None:
        siblings = siblings.exclude(pk=exclude_id)

    if siblings.exists():
        raise NamespaceValidationError(
            f'A folder named {name!r} already exists here',
        )


def ensure_not_descendant(
    owner: _User,
    folder: Folder,
    candidate_parent_id: int,
) -> None:
    """Reject a move that would put a folder below itself.

    Walks from the proposed parent up to the root. If the moved folder
    shows up on the way, the move would create a cycle.

    Args:
        owner: Owner of the namespace.
        folder: Folder being moved.
        candidate_parent_id: Proposed new parent.

    Raises:
        FolderCycleError: If the parent is the folder or a descendant,
            or if the stored ancestor chain already loops.
    """
    visited: set[int] = set()
    current: int | None = candidate_parent_id

    while current is not None:
        if current == folder.pk or current in visited:
            logger.warning(
                'Rejected move of folder %d under %d: cycle',
                folder.pk,
                candidate_parent_id,
            )
            raise FolderCycleError(folder.pk, candidate_parent_id)
        visited.add(current)
        current = (
            Folder.objects.filter(owner=owner, pk=current)
            .values_list('parent_id', flat=True)
            .first()
        )


def check_create_folder(
    owner: _User,
    parent_id: int | None,
    name: object,
) -> str:
    """Validate a folder creation.

    Args:
        owner: Owner of the new folder.
        parent_id: Parent folder (None for root).
        name: Proposed name.

    Returns:
        The validated name.

    Raises:
        NamespaceValidationError: If the name is invalid or taken.
        NotFoundError: If the parent does not exist for this owner.
    """
    valid_name = validate_name(name)
    if parent_id is not None:
        get_owned_folder(owner, parent_id)
    ensure_name_available(owner, parent_id, valid_name)
    return valid_name


def check_move_folder(
    owner: _User,
    folder: Folder,
    new_parent_id: int | None,
) -> None:
    """Validate moving a folder under a new parent.

    Args:
        owner: Owner of the namespace.
        folder: Folder being moved.
        new_parent_id: New parent (None moves to the root).

    Raises:
        NotFoundError: If the new parent does not exist for this owner.
        FolderCycleError: If the new parent is inside the moved subtree.
    """
    if new_parent_id is None:
        return

    get_owned_folder(owner, new_parent_id)
    ensure_not_descendant(owner, folder, new_parent_id)


def check_delete_folder(folder: Folder) -> None:
    """Validate a folder deletion.

    Args:
        folder: Folder to delete.

    Raises:
        FolderNotEmptyError: If the folder has child folders or files.
    """
    child_count = folder.children.count()
    file_count = folder.files.count()

    if child_count or file_count:
        logger.warning(
            'Rejected delete of non-empty folder %d: %d folders, %d files',
            folder.pk,
            child_count,
            file_count,
        )
        raise FolderNotEmptyError(folder.pk, child_count, file_count)


def validate_file_kind(kind: object) -> FileKind:
    """Validate a file kind.

    Args:
        kind: Proposed kind value (e.g. 'markdown').

    Returns:
        Matching FileKind member.

    Raises:
        NamespaceValidationError: If the kind is not a known value.
    """
    if kind not in FileKind.values:
        raise NamespaceValidationError(
            'Kind must be one of: {0}'.format(', '.join(FileKind.values)),
        )
    return FileKind(kind)


def validate_file_size(size_bytes: object) -> int:
    """Validate a file size against the configured limit.

    Args:
        size_bytes: Proposed size in bytes.

    Returns:
        The size.

    Raises:
        NamespaceValidationError: If the size is negative, not an
            integer, or above NAMESPACE_MAX_FILE_SIZE.
    """
    if isinstance(size_bytes, bool) or not isinstance(size_bytes, int):
        raise NamespaceValidationError('Size must be an integer')
    if size_bytes < 0:
        raise NamespaceValidationError('Size must not be negative')

    limit = getattr(settings, 'NAMESPACE_MAX_FILE_SIZE', 50 * 1024 * 1024)
    if size_bytes > limit:
        raise NamespaceValidationError(
            f'File is too large: {size_bytes} bytes (limit {limit})',
        )
    return size_bytes
