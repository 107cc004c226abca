"""Logging configuration.

Every module logs through ``logging.getLogger(__name__)``; this only
decides where the records go.
"""

from cloudnotes.settings.components import config

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'console': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'console',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': config('DJANGO_LOG_LEVEL', default='INFO'),
            'propagate': False,
        },
        'cloudnotes': {
            'handlers': ['console'],
            'level': config('CLOUDNOTES_LOG_LEVEL', default='INFO'),
            'propagate': False,
        },
    },
}
