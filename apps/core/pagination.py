"""
Centralized pagination configuration for all API endpoints.

Uses LimitOffsetPagination so the regular list endpoints and the
destroyed/ trash listings page the same way.
"""

from rest_framework.pagination import LimitOffsetPagination

from apps.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class StandardPagination(LimitOffsetPagination):
    default_limit = DEFAULT_PAGE_SIZE
    max_limit = MAX_PAGE_SIZE
