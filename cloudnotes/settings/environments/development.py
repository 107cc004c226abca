"""Development settings, also used by the test suite."""

from typing import Final

from cloudnotes.settings.components import config

DEBUG = config('DJANGO_DEBUG', cast=bool, default=True)

ALLOWED_HOSTS: Final = [
    'localhost',
    '0.0.0.0',  # noqa: S104
    '127.0.0.1',
    '[::1]',
    'testserver',
]
