"""Detection and repair of stored paths that disagree with parent links.

Parent links and names are the source of truth; a stored path that does
not match them is drift (for instance after a cascade failure was
reported). Repairs recompute the expected path top-down.
"""

import dataclasses
import logging
from typing import Any

from django.db import transaction
from django.utils import timezone

from cloudnotes.apps.namespace.logic.guards import lock_namespace
from cloudnotes.apps.namespace.logic.paths import join_path
from cloudnotes.apps.namespace.models import Folder

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class PathRepair:
    """A folder whose stored path differs from the expected one."""

    folder_id: int
    stored_path: str
    expected_path: str


def find_path_drift(owner: _User) -> list[PathRepair]:
    """List the owner's folders whose stored path is wrong.

    Folders whose parent belongs to someone else or no longer exists are
    treated as roots. Folders caught in a parent loop have no expected
    path and are logged instead of reported.

    Args:
        owner: Owner of the namespace.

    Returns:
        Repairs ordered by expected depth, parents before children.
    """
    folders = {
        folder.pk: folder
        for folder in Folder.objects.filter(owner=owner).only(
            'id',
            'parent_id',
            'name',
            'path',
        )
    }
    expected = _expected_paths(folders)

    drift = [
        PathRepair(
            folder_id=folder_id,
            stored_path=folders[folder_id].path,
            expected_path=path,
        )
        for folder_id, path in expected.items()
        if folders[folder_id].path != path
    ]
    return sorted(drift, key=lambda repair: repair.expected_path.count('/'))


def repair_paths(owner: _User, *, dry_run: bool = False) -> list[PathRepair]:
    """Rewrite every drifted path of the owner to its expected value.

    Args:
        owner: Owner of the namespace.
        dry_run: Only report what would change.

    Returns:
        Repairs that were (or would be) applied.
    """
    with transaction.atomic():
        lock_namespace(owner)
        drift = find_path_drift(owner)
        if dry_run or not drift:
            return drift

        now = timezone.now()
        # One row at a time, parents first
        for repair in drift:
            Folder.objects.filter(pk=repair.folder_id, owner=owner).update(
                path=repair.expected_path,
                updated_at=now,
            )

    logger.warning(
        'Repaired %d folder paths for owner %s',
        len(drift),
        owner.pk,
    )
    return drift


def _expected_paths(folders: dict[int, Folder]) -> dict[int, str]:
    expected: dict[int, str] = {}
    looping: set[int] = set()

    for folder_id in folders:
        chain: list[int] = []
        current: int | None = folder_id
        while current is not None and current not in expected:
            if current in looping or current in chain:
                looping.update(chain)
                break
            chain.append(current)
            parent_id = folders[current].parent_id
            current = parent_id if parent_id in folders else None
        else:
            base = None if current is None else expected[current]
            for chain_id in reversed(chain):
                base = join_path(base, folders[chain_id].name)
                expected[chain_id] = base

    if looping:
        logger.error(
            'Folders in a parent loop, paths not repairable: %s',
            sorted(looping),
        )
    return expected
