"""Shared fixtures for namespace app tests."""

import boto3
import pytest
from django.contrib.auth import get_user_model
from moto import mock_aws

from cloudnotes.apps.namespace.logic.folder_operations import create_folder

User = get_user_model()


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def mock_s3():
    """Mock S3 service with cloudnotes bucket.

    Yields:
        boto3 S3 resource with cloudnotes bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name='us-east-1')
        conn.create_bucket(Bucket='cloudnotes')

        yield conn


@pytest.fixture
def nested_folders(user):
    """Create the chain A/B/C for the test user.

    Returns:
        Tuple of (A, B, C) folders.
    """
    folder_a = create_folder(user, 'A')
    folder_b = create_folder(user, 'B', folder_a.pk)
    folder_c = create_folder(user, 'C', folder_b.pk)
    return folder_a, folder_b, folder_c


@pytest.fixture
def logged_in_client(client, user):
    """Django test client logged in as the test user.

    Returns:
        Client instance.
    """
    client.force_login(user)
    return client
