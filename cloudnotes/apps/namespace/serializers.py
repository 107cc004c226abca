"""JSON representations of namespace rows and tree nodes."""

from typing import Any

from cloudnotes.apps.namespace.logic.tree import TreeNode
from cloudnotes.apps.namespace.models import File, Folder


def serialize_folder(folder: Folder) -> dict[str, Any]:
    """Folder row as a JSON-ready dict."""
    return {
        'id': folder.pk,
        'parent_id': folder.parent_id,
        'name': folder.name,
        'path': folder.path,
        'created_at': folder.created_at.isoformat(),
        'updated_at': folder.updated_at.isoformat(),
    }


def serialize_file(file_instance: File) -> dict[str, Any]:
    """File row as a JSON-ready dict."""
    return {
        'id': file_instance.pk,
        'folder_id': file_instance.folder_id,
        'name': file_instance.name,
        'kind': file_instance.kind,
        'size_bytes': file_instance.size_bytes,
        'mime_type': file_instance.mime_type,
        'created_at': file_instance.created_at.isoformat(),
        'updated_at': file_instance.updated_at.isoformat(),
    }


def serialize_node(node: TreeNode) -> dict[str, Any]:
    """Tree node and its children as nested dicts."""
    return {
        'id': node.id,
        'name': node.name,
        'kind': node.kind,
        'path': node.path,
        'children': [serialize_node(child) for child in node.children],
    }
