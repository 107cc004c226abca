"""Database models for namespace app."""

from pathlib import Path
from typing import Final, final

from typing_extensions import override

from django.conf import settings
from django.db import models

from cloudnotes.apps.namespace.constants import NAME_MAX_LENGTH

# Constants for field max lengths
_KIND_MAX_LENGTH: Final = 16
_MIME_TYPE_MAX_LENGTH: Final = 255


class FileKind(models.TextChoices):
    """Content kind of a file, derived from its MIME type on upload."""

    MARKDOWN = 'markdown', 'Markdown'
    PDF = 'pdf', 'PDF'
    IMAGE = 'image', 'Image'
    DOCUMENT = 'document', 'Document'
    OTHER = 'other', 'Other'


@final
class Folder(models.Model):
    """Named folder in a user's namespace.

    Each folder stores its materialized path: its own name for a root
    folder, otherwise the parent's path, a slash and its own name
    (e.g. 'notes/2024/march'). The path is written by the namespace
    logic whenever the folder or one of its ancestors is renamed or
    moved. It is never derived on read.
    """

    # Owner relationship (tenant)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='folders',
        db_index=True,
    )

    # Only empty folders may be deleted
    parent = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='children',
    )

    name = models.CharField(
        max_length=NAME_MAX_LENGTH,
        help_text='Folder name, without slashes',
    )

    path = models.TextField(
        help_text='Materialized path: parent path + "/" + name',
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Folder'  # type: ignore[mutable-override]
        verbose_name_plural = 'Folders'  # type: ignore[mutable-override]
        ordering = ['path']

        indexes = [
            # Optimize child listing and emptiness checks
            models.Index(
                fields=['owner', 'parent'],
                name='folders_owner_parent_idx',
            ),
        ]

        constraints = [
            # Paths are unique per owner, which the prefix cascade relies on
            models.UniqueConstraint(
                fields=['owner', 'path'],
                name='folders_owner_path_unique',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.owner.username}:{self.path}'

    @property
    def is_root(self) -> bool:
        """Whether the folder sits at the top of the namespace."""
        return self.parent_id is None

    def get_depth(self) -> int:
        """Count ancestors from the stored path.

        Example: 'notes/2024/march' -> 2

        Returns:
            Number of ancestors, 0 for a root folder.
        """
        return self.path.count('/')


@final
class File(models.Model):
    """Leaf file placed in a folder (or at the root of the namespace).

    The file's location is its ``folder``, not a path string, so a
    rename or move of an ancestor folder never touches file rows.
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='files',
        db_index=True,
    )

    folder = models.ForeignKey(
        Folder,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='files',
        help_text='Containing folder; empty for root-level files',
    )

    name = models.CharField(
        max_length=NAME_MAX_LENGTH,
    )

    kind = models.CharField(
        max_length=_KIND_MAX_LENGTH,
        choices=FileKind.choices,
        default=FileKind.OTHER,
    )

    size_bytes = models.BigIntegerField(
        default=0,
        help_text='File size in bytes',
    )

    mime_type = models.CharField(
        max_length=_MIME_TYPE_MAX_LENGTH,
        blank=True,
        default='',
    )

    # Opaque handle to the uploaded content, if any
    blob = models.FileField(
        upload_to='',
        blank=True,
        help_text='Object key in storage',
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering = ['name']

        indexes = [
            # Optimize folder listing queries
            models.Index(
                fields=['owner', 'folder'],
                name='files_owner_folder_idx',
            ),
        ]

        constraints = [
            models.CheckConstraint(
                condition=models.Q(size_bytes__gte=0),
                name='files_size_bytes_non_negative',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.owner.username}:{self.name}'

    def get_extension(self) -> str:
        """Extract file extension.

        Example: 'notes.MD' -> 'md'

        Returns:
            Extension without dot (lowercase).
        """
        extension = Path(self.name).suffix
        return extension.lstrip('.').lower()
