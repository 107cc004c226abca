"""Business logic for folder operations.

Every mutation runs in one transaction holding the owner's namespace
lock: validate, compute the new path, write the folder, then cascade
the path change to its descendants. A failure at any step rolls the
whole operation back.
"""

import logging
from typing import Any

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from cloudnotes.apps.namespace.constants import PATH_SEPARATOR, UNSET, Unset
from cloudnotes.apps.namespace.exceptions import ConcurrentMutationError
from cloudnotes.apps.namespace.logic.cascade import rewrite_path_prefix
from cloudnotes.apps.namespace.logic.guards import (
    check_create_folder,
    check_delete_folder,
    check_move_folder,
    ensure_name_available,
    get_owned_folder,
    lock_namespace,
    validate_name,
)
from cloudnotes.apps.namespace.logic.paths import compute_path, is_within
from cloudnotes.apps.namespace.models import Folder

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


def create_folder(
    owner: _User,
    name: str,
    parent_id: int | None = None,
) -> Folder:
    """Create a folder with its computed path.

    Args:
        owner: Owner of the new folder.
        name: Folder name.
        parent_id: Parent folder ID, None for a root folder.

    Returns:
        Created Folder instance.

    Raises:
        NamespaceValidationError: If the name is invalid or taken.
        NotFoundError: If the parent does not exist for this owner.
    """
    with transaction.atomic():
        lock_namespace(owner)
        valid_name = check_create_folder(owner, parent_id, name)
        path = compute_path(owner, parent_id, valid_name)
        folder = Folder.objects.create(
            owner=owner,
            parent_id=parent_id,
            name=valid_name,
            path=path,
        )

    logger.info(
        'Folder created: %s (ID: %d, owner: %s)',
        path,
        folder.pk,
        owner.pk,
    )
    return folder


def update_folder(
    owner: _User,
    folder_id: int,
    *,
    name: str | Unset = UNSET,
    parent_id: int | None | Unset = UNSET,
    expected_path: str | None = None,
) -> Folder:
    """Rename and/or move a folder, cascading the path change.

    An argument left as ``UNSET`` keeps the current value; passing
    ``parent_id=None`` explicitly moves the folder to the root.

    The write only applies if the folder still has ``expected_path``.
    Without one, the path read before waiting for the namespace lock is
    used, so a change committed by another request in the meantime
    aborts this one instead of being silently built upon.

    Args:
        owner: Owner of the namespace.
        folder_id: Folder to change.
        name: New name.
        parent_id: New parent folder ID, None for the root.
        expected_path: Path the caller last saw for the folder.

    Returns:
        Updated Folder instance.

    Raises:
        NotFoundError: If the folder or new parent does not exist.
        NamespaceValidationError: If the new name is invalid or taken.
        FolderCycleError: If the new parent is inside the folder.
        ConcurrentMutationError: If the folder no longer has the
            expected path.
        CascadeFailureError: If descendant paths could not be rewritten.
    """
    with transaction.atomic():
        if expected_path is None:
            expected_path = get_owned_folder(owner, folder_id).path

        lock_namespace(owner)
        folder = get_owned_folder(owner, folder_id, for_update=True)

        new_name = folder.name if name is UNSET else validate_name(name)
        new_parent_id = folder.parent_id if parent_id is UNSET else parent_id

        if new_name == folder.name and new_parent_id == folder.parent_id:
            logger.debug('Folder unchanged: ID=%d', folder.pk)
            return folder

        if new_parent_id != folder.parent_id:
            check_move_folder(owner, folder, new_parent_id)
        ensure_name_available(
            owner,
            new_parent_id,
            new_name,
            exclude_id=folder.pk,
        )

        old_path = folder.path
        new_path = compute_path(owner, new_parent_id, new_name)

        updated = Folder.objects.filter(
            pk=folder.pk,
            owner=owner,
            path=expected_path,
        ).update(
            name=new_name,
            parent_id=new_parent_id,
            path=new_path,
            updated_at=timezone.now(),
        )
        if not updated:
            logger.warning(
                'Concurrent change on folder %d: expected %s, found %s',
                folder.pk,
                expected_path,
                old_path,
            )
            raise ConcurrentMutationError(folder.pk, expected_path)

        rewritten = rewrite_path_prefix(owner, old_path, new_path)
        folder.refresh_from_db()

    logger.info(
        'Folder updated: %s -> %s (ID: %d, %d descendants rewritten)',
        old_path,
        new_path,
        folder.pk,
        rewritten,
    )
    return folder


def rename_folder(owner: _User, folder_id: int, new_name: str) -> Folder:
    """Rename a folder in place.

    Renaming to the current name is a no-op: nothing is written.

    Args:
        owner: Owner of the namespace.
        folder_id: Folder to rename.
        new_name: New name.

    Returns:
        Updated Folder instance.
    """
    return update_folder(owner, folder_id, name=new_name)


def move_folder(
    owner: _User,
    folder_id: int,
    new_parent_id: int | None,
) -> Folder:
    """Move a folder under a new parent, or to the root with None.

    Args:
        owner: Owner of the namespace.
        folder_id: Folder to move.
        new_parent_id: New parent folder ID, None for the root.

    Returns:
        Updated Folder instance.
    """
    return update_folder(owner, folder_id, parent_id=new_parent_id)


def delete_folder(owner: _User, folder_id: int) -> None:
    """Delete an empty folder.

    Args:
        owner: Owner of the namespace.
        folder_id: Folder to delete.

    Raises:
        NotFoundError: If the folder does not exist for this owner.
        FolderNotEmptyError: If it still has child folders or files.
    """
    with transaction.atomic():
        lock_namespace(owner)
        folder = get_owned_folder(owner, folder_id, for_update=True)
        check_delete_folder(folder)
        path = folder.path
        folder.delete()

    logger.info(
        'Folder deleted: %s (ID: %d, owner: %s)',
        path,
        folder_id,
        owner.pk,
    )


def get_folder(owner: _User, folder_id: int) -> Folder:
    """Get a folder of the owner.

    Args:
        owner: Owner of the namespace.
        folder_id: Folder ID.

    Returns:
        Folder instance.

    Raises:
        NotFoundError: If the folder does not exist for this owner.
    """
    return get_owned_folder(owner, folder_id)


def list_folders(owner: _User) -> QuerySet[Folder]:
    """List all folders of the owner, ordered by path.

    Args:
        owner: Owner of the namespace.

    Returns:
        QuerySet of Folder objects.
    """
    return Folder.objects.filter(owner=owner).order_by('path')


def get_subtree(owner: _User, folder: Folder) -> list[Folder]:
    """List every descendant of a folder, ordered by path.

    Clients use this after a rename or move to patch their copy of the
    tree instead of reloading everything.

    Args:
        owner: Owner of the namespace.
        folder: Subtree root (not included).

    Returns:
        Descendant Folder objects.
    """
    candidates = Folder.objects.filter(
        owner=owner,
        path__startswith=folder.path + PATH_SEPARATOR,
    ).order_by('path')
    # LIKE ignores case on some backends
    return [
        descendant for descendant in candidates
        if is_within(descendant.path, folder.path)
    ]
