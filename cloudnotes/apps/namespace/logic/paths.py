"""Materialized path computation for folders.

Create, rename and move all compute a folder's path through
``compute_path`` so the format cannot drift between code paths.
"""

from typing import Any

from cloudnotes.apps.namespace.constants import PATH_SEPARATOR
from cloudnotes.apps.namespace.logic.guards import get_owned_folder

# User type for Django's dynamic user model
_User = Any


def join_path(parent_path: str | None, name: str) -> str:
    """Join a parent path and a name.

    Args:
        parent_path: Parent's materialized path, None for the root.
        name: Child name.

    Returns:
        'name' at the root, otherwise 'parent/name'.
    """
    if parent_path is None:
        return name
    return f'{parent_path}{PATH_SEPARATOR}{name}'


def compute_path(owner: _User, parent_id: int | None, name: str) -> str:
    """Compute the materialized path of a folder.

    Args:
        owner: Owner of the namespace; the parent is looked up in it.
        parent_id: Parent folder ID, None for a root folder.
        name: Folder name (already validated).

    Returns:
        The folder's path.

    Raises:
        NotFoundError: If the parent does not exist for this owner.
    """
    if parent_id is None:
        return join_path(None, name)

    parent = get_owned_folder(owner, parent_id)
    return join_path(parent.path, name)


def is_within(path: str, ancestor_path: str) -> bool:
    """Check whether a path is an ancestor path or lies below it.

    Segment aware: 'notes-old/a' is not within 'notes'.

    Args:
        path: Path to test.
        ancestor_path: Candidate ancestor.

    Returns:
        True for the ancestor itself and for every path below it.
    """
    return path == ancestor_path or path.startswith(
        ancestor_path + PATH_SEPARATOR,
    )


def replace_path_prefix(path: str, old_prefix: str, new_prefix: str) -> str:
    """Swap the leading ``old_prefix`` of a path for ``new_prefix``.

    Only the leading segments are replaced; the remainder is kept
    verbatim even if it happens to contain ``old_prefix`` again.

    Example: ('a/b/a/c', 'a', 'x') -> 'x/b/a/c'

    Args:
        path: Path to rewrite.
        old_prefix: Current ancestor path.
        new_prefix: Replacement ancestor path.

    Returns:
        Rewritten path.

    Raises:
        ValueError: If the path is not within ``old_prefix``.
    """
    if not is_within(path, old_prefix):
        raise ValueError(f'{path!r} is not within {old_prefix!r}')
    return new_prefix + path[len(old_prefix):]
