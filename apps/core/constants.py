"""
Application-wide constants and configuration defaults.

Values here are fallbacks; settings.py may override the ones that are
read through django.conf.settings.
"""

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Used by purge_destroyed when SOFT_DELETE_PURGE_AFTER_DAYS is not set.
DEFAULT_PURGE_AFTER_DAYS = 30
