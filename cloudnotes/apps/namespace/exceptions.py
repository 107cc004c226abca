"""Exceptions for namespace app."""


class NamespaceError(Exception):
    """Base class for every rejected or failed namespace mutation."""


class NamespaceValidationError(NamespaceError):
    """Raised when a name, kind, size or other input is invalid."""


class NotFoundError(NamespaceError):
    """Raised when a folder or file does not exist for the owner.

    Rows owned by someone else are reported exactly like missing rows.
    """

    def __init__(self, kind: str, object_id: object) -> None:
        """Initialize NotFoundError.

        Args:
            kind: Either 'folder' or 'file'.
            object_id: The ID that was looked up.
        """
        self.kind = kind
        self.object_id = object_id
        super().__init__(f'{kind.capitalize()} not found: {object_id}')


class FolderNotEmptyError(NamespaceError):
    """Raised when deleting a folder that still has children or files."""

    def __init__(
        self,
        folder_id: int,
        child_count: int,
        file_count: int,
    ) -> None:
        """Initialize FolderNotEmptyError.

        Args:
            folder_id: ID of the folder that was to be deleted.
            child_count: Number of child folders.
            file_count: Number of files directly inside.
        """
        self.folder_id = folder_id
        self.child_count = child_count
        self.file_count = file_count
        super().__init__(
            f'Folder {folder_id} is not empty: '
            f'{child_count} folders, {file_count} files',
        )


class FolderCycleError(NamespaceError):
    """Raised when a move would make a folder its own descendant."""

    def __init__(self, folder_id: int, parent_id: int) -> None:
        """Initialize FolderCycleError.

        Args:
            folder_id: ID of the folder being moved.
            parent_id: ID of the rejected new parent.
        """
        self.folder_id = folder_id
        self.parent_id = parent_id
        super().__init__(
            f'Cannot move folder {folder_id} under folder {parent_id}: '
            'the target is the folder itself or one of its descendants',
        )


class ConcurrentMutationError(NamespaceError):
    """Raised when a folder changed between being read and written."""

    def __init__(self, folder_id: int, expected_path: str) -> None:
        """Initialize ConcurrentMutationError.

        Args:
            folder_id: ID of the folder being written.
            expected_path: Path the folder had when it was read.
        """
        self.folder_id = folder_id
        self.expected_path = expected_path
        super().__init__(
            f'Folder {folder_id} was modified concurrently '
            f'(expected path {expected_path!r})',
        )


class CascadeFailureError(NamespaceError):
    """Raised when rewriting descendant paths failed part way.

    The enclosing transaction is rolled back, but the condition means the
    stored paths disagreed with what the cascade expected. It must reach
    an operator (see the ``repair_paths`` management command).
    """

    def __init__(self, owner_id: int, old_path: str, new_path: str) -> None:
        """Initialize CascadeFailureError.

        Args:
            owner_id: Owner whose namespace was being rewritten.
            old_path: Prefix being replaced.
            new_path: Replacement prefix.
        """
        self.owner_id = owner_id
        self.old_path = old_path
        self.new_path = new_path
        super().__init__(
            f'Failed to rewrite paths {old_path!r} -> {new_path!r} '
            f'for owner {owner_id}',
        )
