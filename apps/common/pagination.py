# apps/common/pagination.py
"""
Limit/offset pagination shared by the list endpoints.

Query Parameters:
    - limit: Number of items to return (default: 10, max: 100)
    - offset: Starting position in the result set (default: 0)

Response Format (DRF Standard):
    {"count": 150, "next": "...", "previous": null, "results": [...]}
"""

from rest_framework.pagination import LimitOffsetPagination


class StandardLimitOffsetPagination(LimitOffsetPagination):
    """
    LimitOffsetPagination with a default page and a hard upper bound.
    """

    default_limit = 10
    max_limit = 100

    limit_query_param = 'limit'
    offset_query_param = 'offset'

    def get_limit(self, request):
        """Clamp the limit to at least 1."""
        limit = super().get_limit(request)

        if limit is not None and limit < 1:
            return self.default_limit

        return limit
