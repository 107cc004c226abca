"""Assembly of a flat folder/file listing into an ordered forest.

``build_forest`` and ``search_forest`` are pure: they never query the
database and never mutate their inputs, so the same rows always give
the same forest regardless of the order storage returned them in.
"""

import dataclasses
import functools
from collections.abc import Iterable
from typing import Any, Final, Literal

from pyuca import Collator

from cloudnotes.apps.namespace.logic.paths import join_path
from cloudnotes.apps.namespace.models import File, Folder

# User type for Django's dynamic user model
_User = Any

NodeKind = Literal['folder', 'file']

FOLDER_NODE: Final = 'folder'
FILE_NODE: Final = 'file'

# Folders sort before files
_KIND_RANK: Final = {FOLDER_NODE: 0, FILE_NODE: 1}


@dataclasses.dataclass
class TreeNode:
    """One folder or file in the assembled forest."""

    id: int
    name: str
    kind: NodeKind
    path: str
    children: list['TreeNode'] = dataclasses.field(default_factory=list)


def build_forest(
    folders: Iterable[Folder],
    files: Iterable[File],
) -> list[TreeNode]:
    """Build an ordered forest from flat folder and file rows.

    A folder whose parent is missing from ``folders`` or belongs to
    another owner is promoted to the root, as is a file whose folder is
    missing. Nothing is ever dropped. Siblings are ordered folders
    first, then by name (case-insensitive, Unicode collation), then by input
    order.

    Args:
        folders: Folder rows, normally all folders of one owner.
        files: File rows, normally all files of the same owner.

    Returns:
        List of root nodes.
    """
    folder_rows = list(folders)
    owners = {folder.pk: folder.owner_id for folder in folder_rows}
    nodes = {
        folder.pk: TreeNode(
            id=folder.pk,
            name=folder.name,
            kind=FOLDER_NODE,
            path=folder.path,
        )
        for folder in folder_rows
    }
    parents: dict[int, int] = {}
    roots: list[TreeNode] = []

    for folder in folder_rows:
        node = nodes[folder.pk]
        parent_id = folder.parent_id
        if parent_id in nodes and owners[parent_id] == folder.owner_id:
            parents[folder.pk] = parent_id
            nodes[parent_id].children.append(node)
        else:
            roots.append(node)

    _promote_unreachable(nodes, parents, roots)

    for file_instance in files:
        folder_id = file_instance.folder_id
        if folder_id in nodes and owners[folder_id] == file_instance.owner_id:
            container = nodes[folder_id]
            container.children.append(
                TreeNode(
                    id=file_instance.pk,
                    name=file_instance.name,
                    kind=FILE_NODE,
                    path=join_path(container.path, file_instance.name),
                ),
            )
        else:
            roots.append(
                TreeNode(
                    id=file_instance.pk,
                    name=file_instance.name,
                    kind=FILE_NODE,
                    path=file_instance.name,
                ),
            )

    return _sort_recursively(roots)


def search_forest(forest: list[TreeNode], term: str) -> list[TreeNode]:
    """Filter a forest by a name substring, keeping ancestor context.

    A node survives if its name contains ``term`` (case-insensitive) or
    if any of its children survives. Surviving nodes carry only their
    surviving children. A blank term returns the forest unchanged.

    Args:
        forest: Forest from ``build_forest``.
        term: Substring to look for.

    Returns:
        Filtered copy of the forest; empty when nothing matches.
    """
    if not term.strip():
        return forest
    return _filter_nodes(forest, term.casefold())


def load_forest(owner: _User, term: str = '') -> list[TreeNode]:
    """Read the owner's namespace and assemble it into a forest.

    Args:
        owner: Owner of the namespace.
        term: Optional search term.

    Returns:
        Ordered, optionally filtered forest.
    """
    folders = Folder.objects.filter(owner=owner).order_by('path')
    files = File.objects.filter(owner=owner).order_by('name')
    return search_forest(build_forest(folders, files), term)


def sort_key(node: TreeNode) -> tuple[int, tuple[int, ...]]:
    """Sibling ordering key: kind rank, then collated folded name.

    Names are compared with the Unicode Collation Algorithm, so accented
    letters sort next to their base letter instead of after 'z'.

    Args:
        node: Tree node.

    Returns:
        Tuple usable as a ``sorted`` key.
    """
    return (
        _KIND_RANK[node.kind],
        _collator().sort_key(node.name.casefold()),
    )


@functools.cache
def _collator() -> Collator:
    # Loads the collation table once per process
    return Collator()


def _promote_unreachable(
    nodes: dict[int, TreeNode],
    parents: dict[int, int],
    roots: list[TreeNode],
) -> None:
    """Promote folders stuck in a parent loop to the root.

    Stored data should never loop, but if it does those folders would
    otherwise vanish from the forest.
    """
    reachable = _collect_folder_ids(roots)
    for folder_id, node in nodes.items():
        if folder_id in reachable:
            continue
        parent = nodes[parents.pop(folder_id)]
        parent.children = [
            child for child in parent.children if child is not node
        ]
        roots.append(node)
        reachable |= _collect_folder_ids([node])


def _collect_folder_ids(start: list[TreeNode]) -> set[int]:
    seen: set[int] = set()
    stack = [node for node in start if node.kind == FOLDER_NODE]
    while stack:
        node = stack.pop()
        if node.id in seen:
            continue
        seen.add(node.id)
        stack.extend(
            child for child in node.children if child.kind == FOLDER_NODE
        )
    return seen


def _sort_recursively(nodes: list[TreeNode]) -> list[TreeNode]:
    ordered = sorted(nodes, key=sort_key)
    for node in ordered:
        node.children = _sort_recursively(node.children)
    return ordered


def _filter_nodes(nodes: list[TreeNode], folded_term: str) -> list[TreeNode]:
    filtered = []
    for node in nodes:
        children = _filter_nodes(node.children, folded_term)
        if folded_term in node.name.casefold() or children:
            filtered.append(dataclasses.replace(node, children=children))
    return filtered
