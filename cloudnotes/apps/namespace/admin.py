"""Django admin configuration for namespace app.

Paths are maintained by the namespace logic, so the admin only shows
rows; it never adds or edits them.
"""

from typing_extensions import override

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from cloudnotes.apps.namespace.models import File, Folder


def _format_bytes(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 KB').
    """
    if size_bytes < 1024:
        return f'{size_bytes} B'
    if size_bytes < 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / 1024:.1f} KB'
    if size_bytes < 1024 * 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / (1024 * 1024):.1f} MB'
    return f'{size_bytes / (1024 * 1024 * 1024):.1f} GB'


class _ReadOnlyMixin:
    """Lists and shows rows but never writes them."""

    def has_add_permission(self, request: HttpRequest) -> bool:
        return False

    def has_change_permission(
        self,
        request: HttpRequest,
        obj: object | None = None,
    ) -> bool:
        return False


@admin.register(Folder)
class FolderAdmin(_ReadOnlyMixin, admin.ModelAdmin[Folder]):
    """Admin interface for Folder model."""

    list_display = [
        'path',
        'owner',
        'child_count',
        'file_count',
        'updated_at',
    ]

    list_filter = [
        'owner',
        'updated_at',
    ]

    search_fields = [
        'path',
        'owner__username',
    ]

    fieldsets = (
        ('Folder Information', {
            'fields': ('name', 'path', 'parent', 'owner'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
        }),
    )

    def child_count(self, obj: Folder) -> int:
        """Count of direct child folders.

        Args:
            obj: Folder instance.

        Returns:
            Number of child folders.
        """
        return obj.children.count()
    child_count.short_description = 'Folders'  # type: ignore[attr-defined]

    def file_count(self, obj: Folder) -> int:
        """Count of files directly in the folder.

        Args:
            obj: Folder instance.

        Returns:
            Number of files.
        """
        return obj.files.count()
    file_count.short_description = 'Files'  # type: ignore[attr-defined]

    @override
    def get_queryset(self, request: HttpRequest) -> QuerySet[Folder]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('owner')


@admin.register(File)
class FileAdmin(_ReadOnlyMixin, admin.ModelAdmin[File]):
    """Admin interface for File model."""

    list_display = [
        'name',
        'owner',
        'folder',
        'kind',
        'size_display',
        'updated_at',
    ]

    list_filter = [
        'kind',
        'owner',
    ]

    search_fields = [
        'name',
        'folder__path',
    ]

    fieldsets = (
        ('File Information', {
            'fields': ('name', 'folder', 'owner'),
        }),
        ('Metadata', {
            'fields': ('kind', 'size_bytes', 'mime_type', 'blob'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
        }),
    )

    def size_display(self, obj: File) -> str:
        """Display file size in human-readable format.

        Args:
            obj: File instance.

        Returns:
            Formatted size string.
        """
        return _format_bytes(obj.size_bytes)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    @override
    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('owner', 'folder')
