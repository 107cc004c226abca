"""Tests for the namespace JSON API."""

import json

import pytest
from django.urls import reverse

from cloudnotes.apps.namespace.logic.file_operations import create_file
from cloudnotes.apps.namespace.logic.folder_operations import create_folder
from cloudnotes.apps.namespace.models import File, Folder


def _send(client, method, url, payload):
    return getattr(client, method)(
        url,
        data=json.dumps(payload),
        content_type='application/json',
    )


def _folder_url(folder_id):
    return reverse('namespace:folder-detail', args=[folder_id])


def _file_url(file_id):
    return reverse('namespace:file-detail', args=[file_id])


@pytest.mark.django_db
class TestAuthentication:
    """Tests for anonymous access."""

    @pytest.mark.parametrize('url_name', [
        'namespace:folder-list',
        'namespace:file-list',
        'namespace:tree',
    ])
    def test_anonymous_rejected(self, client, url_name):
        """Test every endpoint requires a logged-in user."""
        response = client.get(reverse(url_name))

        assert response.status_code == 401
        assert response.json()['code'] == 'unauthorized'


@pytest.mark.django_db
class TestFolderEndpoints:
    """Tests for folder endpoints."""

    def test_create_and_list(self, logged_in_client, user):
        """Test creating folders and listing them by path."""
        response = _send(
            logged_in_client,
            'post',
            reverse('namespace:folder-list'),
            {'name': 'A'},
        )
        assert response.status_code == 201
        parent_id = response.json()['data']['id']

        response = _send(
            logged_in_client,
            'post',
            reverse('namespace:folder-list'),
            {'name': 'B', 'parent_id': parent_id},
        )
        assert response.status_code == 201
        assert response.json()['data']['path'] == 'A/B'

        response = logged_in_client.get(reverse('namespace:folder-list'))
        paths = [folder['path'] for folder in response.json()['data']]
        assert paths == ['A', 'A/B']

    def test_create_invalid_name(self, logged_in_client):
        """Test validation errors map to 400."""
        response = _send(
            logged_in_client,
            'post',
            reverse('namespace:folder-list'),
            {'name': '  '},
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'validation_error'

    def test_malformed_body(self, logged_in_client):
        """Test a body that is not a JSON object is rejected."""
        response = logged_in_client.post(
            reverse('namespace:folder-list'),
            data='[1, 2]',
            content_type='application/json',
        )

        assert response.status_code == 400

    def test_non_integer_parent(self, logged_in_client):
        """Test parent_id must be an integer or null."""
        response = _send(
            logged_in_client,
            'post',
            reverse('namespace:folder-list'),
            {'name': 'A', 'parent_id': 'one'},
        )

        assert response.status_code == 400
        assert not Folder.objects.exists()

    def test_detail_includes_subtree(self, logged_in_client, nested_folders):
        """Test a folder is returned together with its descendants."""
        folder_a, _, _ = nested_folders

        response = logged_in_client.get(_folder_url(folder_a.pk))

        assert response.status_code == 200
        body = response.json()
        assert body['data']['path'] == 'A'
        assert [item['path'] for item in body['subtree']] == ['A/B', 'A/B/C']

    def test_rename_returns_rewritten_subtree(
        self,
        logged_in_client,
        nested_folders,
    ):
        """Test a rename answers with the cascaded descendant paths."""
        folder_a, _, _ = nested_folders

        response = _send(
            logged_in_client,
            'patch',
            _folder_url(folder_a.pk),
            {'name': 'A2'},
        )

        assert response.status_code == 200
        body = response.json()
        assert body['data']['path'] == 'A2'
        assert [item['path'] for item in body['subtree']] == [
            'A2/B',
            'A2/B/C',
        ]

    def test_null_parent_moves_to_root(self, logged_in_client, nested_folders):
        """Test an explicit null parent moves the folder to the root."""
        _, folder_b, _ = nested_folders

        response = _send(
            logged_in_client,
            'patch',
            _folder_url(folder_b.pk),
            {'parent_id': None},
        )

        assert response.status_code == 200
        assert response.json()['data']['path'] == 'B'
        assert response.json()['data']['parent_id'] is None

    def test_missing_parent_keeps_parent(self, logged_in_client, nested_folders):
        """Test leaving out parent_id renames in place."""
        _, folder_b, _ = nested_folders

        response = _send(
            logged_in_client,
            'put',
            _folder_url(folder_b.pk),
            {'name': 'B2'},
        )

        assert response.status_code == 200
        assert response.json()['data']['path'] == 'A/B2'

    def test_cycle_conflict(self, logged_in_client, nested_folders):
        """Test moving into a descendant maps to 409."""
        folder_a, _, folder_c = nested_folders

        response = _send(
            logged_in_client,
            'patch',
            _folder_url(folder_a.pk),
            {'parent_id': folder_c.pk},
        )

        assert response.status_code == 409
        assert response.json()['code'] == 'cycle'

    def test_delete_non_empty_conflict(self, logged_in_client, nested_folders):
        """Test deleting a folder with children maps to 409."""
        folder_a, _, _ = nested_folders

        response = logged_in_client.delete(_folder_url(folder_a.pk))

        assert response.status_code == 409
        assert response.json()['code'] == 'not_empty'

    def test_delete_empty(self, logged_in_client, nested_folders):
        """Test deleting a leaf folder."""
        _, _, folder_c = nested_folders

        response = logged_in_client.delete(_folder_url(folder_c.pk))

        assert response.status_code == 200
        assert not Folder.objects.filter(pk=folder_c.pk).exists()

    def test_foreign_folder_not_found(self, client, other_user, nested_folders):
        """Test another owner's folder maps to 404."""
        folder_a, _, _ = nested_folders
        client.force_login(other_user)

        response = client.get(_folder_url(folder_a.pk))

        assert response.status_code == 404
        assert response.json()['code'] == 'not_found'

    def test_cascade_failure(self, logged_in_client, user, nested_folders):
        """Test a failed cascade maps to 500 with its own code."""
        folder_a, _, _ = nested_folders
        Folder.objects.create(owner=user, name='X', path='A2/B')

        response = _send(
            logged_in_client,
            'patch',
            _folder_url(folder_a.pk),
            {'name': 'A2'},
        )

        assert response.status_code == 500
        assert response.json()['code'] == 'cascade_failure'
        folder_a.refresh_from_db()
        assert folder_a.path == 'A'

    def test_rename_beside_case_variant(self, logged_in_client, user):
        """Test a rename answers only with the folder's own subtree."""
        folder_upper = create_folder(user, 'A')
        folder_lower = create_folder(user, 'a')
        create_folder(user, 'x', folder_lower.pk)

        response = _send(
            logged_in_client,
            'patch',
            _folder_url(folder_upper.pk),
            {'name': 'B'},
        )

        assert response.status_code == 200
        assert response.json()['data']['path'] == 'B'
        assert response.json()['subtree'] == []

    def test_stale_expected_path_conflict(
        self,
        logged_in_client,
        user,
        nested_folders,
    ):
        """Test an update based on an outdated path maps to 409."""
        folder_a, folder_b, _ = nested_folders
        _send(
            logged_in_client,
            'patch',
            _folder_url(folder_a.pk),
            {'name': 'A2'},
        )

        response = _send(
            logged_in_client,
            'patch',
            _folder_url(folder_b.pk),
            {'name': 'B2', 'expected_path': 'A/B'},
        )

        assert response.status_code == 409
        assert response.json()['code'] == 'conflict'
        folder_b.refresh_from_db()
        assert folder_b.path == 'A2/B'

    def test_method_not_allowed(self, logged_in_client):
        """Test unsupported methods are refused."""
        response = logged_in_client.delete(reverse('namespace:folder-list'))

        assert response.status_code == 405


@pytest.mark.django_db
class TestFileEndpoints:
    """Tests for file endpoints."""

    def test_create_file(self, logged_in_client, nested_folders):
        """Test creating a file with derived metadata."""
        _, _, folder_c = nested_folders

        response = _send(
            logged_in_client,
            'post',
            reverse('namespace:file-list'),
            {'name': 'todo.md', 'folder_id': folder_c.pk, 'size_bytes': 12},
        )

        assert response.status_code == 201
        data = response.json()['data']
        assert data['folder_id'] == folder_c.pk
        assert data['kind'] == 'markdown'
        assert data['mime_type'] == 'text/markdown'
        assert data['size_bytes'] == 12

    def test_list_filters(self, logged_in_client, user, nested_folders):
        """Test the folder_id filter, including root-only listing."""
        folder_a, _, _ = nested_folders
        create_file(user, 'in-folder.md', folder_id=folder_a.pk)
        create_file(user, 'at-root.pdf')
        url = reverse('namespace:file-list')

        def names(query):
            response = logged_in_client.get(url, query)
            return [item['name'] for item in response.json()['data']]

        assert names({}) == ['at-root.pdf', 'in-folder.md']
        assert names({'folder_id': 'root'}) == ['at-root.pdf']
        assert names({'folder_id': folder_a.pk}) == ['in-folder.md']
        assert names({'kind': 'pdf'}) == ['at-root.pdf']

    def test_list_bad_filter(self, logged_in_client):
        """Test malformed filters map to 400."""
        url = reverse('namespace:file-list')

        assert logged_in_client.get(url, {'folder_id': 'x'}).status_code == 400
        assert logged_in_client.get(url, {'kind': 'video'}).status_code == 400

    def test_move_file_to_root(self, logged_in_client, user, nested_folders):
        """Test an explicit null folder moves a file to the root."""
        folder_a, _, _ = nested_folders
        file_instance = create_file(user, 'a.md', folder_id=folder_a.pk)

        response = _send(
            logged_in_client,
            'patch',
            _file_url(file_instance.pk),
            {'folder_id': None},
        )

        assert response.status_code == 200
        assert response.json()['data']['folder_id'] is None

    def test_get_and_delete_file(self, logged_in_client, user):
        """Test fetching and deleting a file."""
        file_instance = create_file(user, 'a.md')

        response = logged_in_client.get(_file_url(file_instance.pk))
        assert response.json()['data']['name'] == 'a.md'

        response = logged_in_client.delete(_file_url(file_instance.pk))
        assert response.status_code == 200
        assert not File.objects.filter(pk=file_instance.pk).exists()

    def test_foreign_file_not_found(self, logged_in_client, other_user):
        """Test another owner's file maps to 404."""
        file_instance = create_file(other_user, 'secret.md')

        response = logged_in_client.get(_file_url(file_instance.pk))

        assert response.status_code == 404


@pytest.mark.django_db
class TestTreeEndpoint:
    """Tests for the tree endpoint."""

    def test_tree_and_search(self, logged_in_client, user):
        """Test the nested forest and its search filter."""
        folder_a = create_folder(user, 'A')
        folder_b = create_folder(user, 'B', folder_a.pk)
        create_file(user, 'x.md', folder_id=folder_b.pk)
        create_file(user, 'other.pdf')
        url = reverse('namespace:tree')

        forest = logged_in_client.get(url).json()['data']
        assert [node['name'] for node in forest] == ['A', 'other.pdf']
        assert forest[0]['children'][0]['children'][0] == {
            'id': File.objects.get(name='x.md').pk,
            'name': 'x.md',
            'kind': 'file',
            'path': 'A/B/x.md',
            'children': [],
        }

        found = logged_in_client.get(url, {'q': 'x'}).json()['data']
        assert [node['name'] for node in found] == ['A']

        assert logged_in_client.get(url, {'q': 'zzz'}).json()['data'] == []
