"""Tests for namespace integrity checks."""

import pytest
from django.test import override_settings

from cloudnotes.apps.namespace.exceptions import (
    FolderCycleError,
    FolderNotEmptyError,
    NamespaceValidationError,
    NotFoundError,
)
from cloudnotes.apps.namespace.logic.guards import (
    check_create_folder,
    check_delete_folder,
    check_move_folder,
    ensure_name_available,
    get_owned_file,
    get_owned_folder,
    validate_file_kind,
    validate_file_size,
    validate_name,
)
from cloudnotes.apps.namespace.models import File, FileKind, Folder


class TestValidateName:
    """Tests for name validation."""

    def test_valid_name_returned_unchanged(self):
        """Test a valid name passes through untouched."""
        assert validate_name(' My Notes ') == ' My Notes '

    @pytest.mark.parametrize('name', ['', '   ', None, 42])
    def test_blank_or_non_string_rejected(self, name):
        """Test missing, blank and non-string names are rejected."""
        with pytest.raises(NamespaceValidationError):
            validate_name(name)

    @pytest.mark.parametrize('name', ['a/b', '/', 'a\x00b'])
    def test_forbidden_characters_rejected(self, name):
        """Test names with a separator or NUL are rejected."""
        with pytest.raises(NamespaceValidationError, match='must not contain'):
            validate_name(name)

    def test_length_limit(self):
        """Test names longer than 255 characters are rejected."""
        assert validate_name('x' * 255) == 'x' * 255

        with pytest.raises(NamespaceValidationError, match='at most 255'):
            validate_name('x' * 256)


@pytest.mark.django_db
class TestOwnership:
    """Tests for owner scoped lookups."""

    def test_get_owned_folder(self, user, nested_folders):
        """Test the owner can load its own folder."""
        folder_a, _, _ = nested_folders

        assert get_owned_folder(user, folder_a.pk) == folder_a

    def test_foreign_folder_looks_missing(self, other_user, nested_folders):
        """Test another owner's folder is reported as not found."""
        folder_a, _, _ = nested_folders

        with pytest.raises(NotFoundError) as exc_info:
            get_owned_folder(other_user, folder_a.pk)

        assert exc_info.value.kind == 'folder'
        assert exc_info.value.object_id == folder_a.pk

    def test_missing_folder(self, user):
        """Test a non-existent folder ID."""
        with pytest.raises(NotFoundError, match='Folder not found: 99999'):
            get_owned_folder(user, 99999)

    def test_foreign_file_looks_missing(self, user, other_user):
        """Test another owner's file is reported as not found."""
        file_instance = File.objects.create(owner=user, name='a.md')

        assert get_owned_file(user, file_instance.pk) == file_instance
        with pytest.raises(NotFoundError, match='File not found'):
            get_owned_file(other_user, file_instance.pk)


@pytest.mark.django_db
class TestFolderChecks:
    """Tests for create, move and delete checks."""

    def test_create_sibling_name_clash(self, user, nested_folders):
        """Test a second root folder with the same name is rejected."""
        with pytest.raises(NamespaceValidationError, match='already exists'):
            check_create_folder(user, None, 'A')

    def test_create_same_name_elsewhere_allowed(self, user, nested_folders):
        """Test the same name under a different parent is fine."""
        folder_a, _, _ = nested_folders

        assert check_create_folder(user, folder_a.pk, 'C') == 'C'

    def test_create_same_name_other_owner_allowed(
        self,
        other_user,
        nested_folders,
    ):
        """Test names are only unique within one owner's namespace."""
        assert check_create_folder(other_user, None, 'A') == 'A'

    def test_create_under_foreign_parent(self, other_user, nested_folders):
        """Test creating below another owner's folder is rejected."""
        folder_a, _, _ = nested_folders

        with pytest.raises(NotFoundError):
            check_create_folder(other_user, folder_a.pk, 'X')

    def test_name_available_excludes_self(self, user, nested_folders):
        """Test a folder never clashes with its own name."""
        folder_a, _, _ = nested_folders

        ensure_name_available(user, None, 'A', exclude_id=folder_a.pk)

    def test_move_under_itself(self, user, nested_folders):
        """Test a folder cannot become its own parent."""
        folder_a, _, _ = nested_folders

        with pytest.raises(FolderCycleError):
            check_move_folder(user, folder_a, folder_a.pk)

    def test_move_under_descendant(self, user, nested_folders):
        """Test a folder cannot move below its own grandchild."""
        folder_a, _, folder_c = nested_folders

        with pytest.raises(FolderCycleError) as exc_info:
            check_move_folder(user, folder_a, folder_c.pk)

        assert exc_info.value.folder_id == folder_a.pk
        assert exc_info.value.parent_id == folder_c.pk

    def test_move_to_root_always_allowed(self, user, nested_folders):
        """Test moving to the root needs no ancestor walk."""
        _, _, folder_c = nested_folders

        check_move_folder(user, folder_c, None)

    def test_move_under_sibling_subtree(self, user, nested_folders):
        """Test a move into an unrelated folder passes."""
        _, _, folder_c = nested_folders
        other = Folder.objects.create(owner=user, name='Z', path='Z')

        check_move_folder(user, folder_c, other.pk)

    def test_delete_empty_folder_passes(self, nested_folders):
        """Test a leaf folder without files can be deleted."""
        _, _, folder_c = nested_folders

        check_delete_folder(folder_c)

    def test_delete_folder_with_child(self, nested_folders):
        """Test a folder with a child folder cannot be deleted."""
        _, folder_b, _ = nested_folders

        with pytest.raises(FolderNotEmptyError) as exc_info:
            check_delete_folder(folder_b)

        assert exc_info.value.child_count == 1
        assert exc_info.value.file_count == 0

    def test_delete_folder_with_file(self, user, nested_folders):
        """Test a folder holding only a file cannot be deleted."""
        _, _, folder_c = nested_folders
        File.objects.create(owner=user, folder=folder_c, name='a.md')

        with pytest.raises(FolderNotEmptyError) as exc_info:
            check_delete_folder(folder_c)

        assert exc_info.value.child_count == 0
        assert exc_info.value.file_count == 1


class TestFileChecks:
    """Tests for file kind and size validation."""

    def test_known_kind(self):
        """Test kind values map onto FileKind members."""
        assert validate_file_kind('pdf') is FileKind.PDF

    def test_unknown_kind(self):
        """Test unknown kinds are rejected."""
        with pytest.raises(NamespaceValidationError, match='Kind must be'):
            validate_file_kind('video')

    @pytest.mark.parametrize('size', [-1, 1.5, '10', True])
    def test_invalid_size(self, size):
        """Test negative and non-integer sizes are rejected."""
        with pytest.raises(NamespaceValidationError):
            validate_file_size(size)

    @override_settings(NAMESPACE_MAX_FILE_SIZE=100)
    def test_size_limit(self):
        """Test the configured size limit is enforced inclusively."""
        assert validate_file_size(100) == 100

        with pytest.raises(NamespaceValidationError, match='too large'):
            validate_file_size(101)
