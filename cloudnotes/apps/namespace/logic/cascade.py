"""Propagation of folder path changes to descendants.

The moved or renamed folder's own row is written by the caller. This
module then rewrites every stored path under the old prefix. Rows are
selected by the old prefix alone, so running the rewrite again after an
interrupted run only touches rows that still carry the old prefix and
ends in the same state.
"""

import logging
from typing import Any, Final

from django.db import DatabaseError, transaction
from django.db.models import Q
from django.utils import timezone

from cloudnotes.apps.namespace.constants import PATH_SEPARATOR
from cloudnotes.apps.namespace.exceptions import CascadeFailureError
from cloudnotes.apps.namespace.logic.paths import (
    is_within,
    replace_path_prefix,
)
from cloudnotes.apps.namespace.models import Folder

# User type for Django's dynamic user model
_User = Any

_BATCH_SIZE: Final = 500

logger = logging.getLogger(__name__)


def rewrite_path_prefix(owner: _User, old_path: str, new_path: str) -> int:
    """Rewrite the paths of all folders under ``old_path``.

    Every folder of the owner whose path is ``old_path`` or starts with
    ``old_path + '/'`` gets that prefix replaced by ``new_path``. All
    rows are written in one savepoint: either every row moves or none
    does.

    Args:
        owner: Owner of the namespace.
        old_path: Previous path of the renamed or moved folder.
        new_path: Its new path.

    Returns:
        Number of folders rewritten.

    Raises:
        CascadeFailureError: If the database rejected the rewrite.
    """
    if old_path == new_path:
        return 0

    try:
        with transaction.atomic():
            candidates = (
                Folder.objects.select_for_update()
                .filter(owner=owner)
                .filter(
                    Q(path=old_path)
                    | Q(path__startswith=old_path + PATH_SEPARATOR),
                )
                .order_by('path')
            )
            # LIKE ignores case on some backends
            affected = [
                folder for folder in candidates
                if is_within(folder.path, old_path)
            ]

            now = timezone.now()
            for folder in affected:
                folder.path = replace_path_prefix(
                    folder.path,
                    old_path,
                    new_path,
                )
                folder.updated_at = now

            Folder.objects.bulk_update(
                affected,
                ['path', 'updated_at'],
                batch_size=_BATCH_SIZE,
            )
    except DatabaseError as error:
        logger.critical(
            'Cascade failed for owner %s: %s -> %s',
            owner.pk,
            old_path,
            new_path,
            exc_info=True,
        )
        raise CascadeFailureError(owner.pk, old_path, new_path) from error

    logger.info(
        'Rewrote %d folder paths for owner %s: %s -> %s',
        len(affected),
        owner.pk,
        old_path,
        new_path,
    )
    return len(affected)
