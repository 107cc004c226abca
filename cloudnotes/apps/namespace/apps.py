"""Django app configuration for namespace app."""

from typing_extensions import override

from django.apps import AppConfig


class NamespaceConfig(AppConfig):
    """Configuration for namespace app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'cloudnotes.apps.namespace'
    verbose_name = 'Namespace'

    @override
    def ready(self) -> None:
        """Import signal handlers when app is ready."""
        from cloudnotes.apps.namespace import signals  # noqa: F401
