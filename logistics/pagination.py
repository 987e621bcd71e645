import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class MetaPagination(PageNumberPagination):
    """
    ?page=2&limit=20
    -> {"data": [...], "meta": {"total", "page", "limit", "totalPages", "hasNextPage", "hasPrevPage"}}
    """
    page_size = 10
    page_query_param = "page"
    page_size_query_param = "limit"
    max_page_size = 100

    def get_paginated_response(self, data):
        total = self.page.paginator.count
        limit = self.page.paginator.per_page
        page = self.page.number
        total_pages = math.ceil(total / limit) if limit else 0
        return Response({
            "data": data,
            "meta": {
                "total": total,
                "page": page,
                "limit": limit,
                "totalPages": total_pages,
                "hasNextPage": page < total_pages,
                "hasPrevPage": page > 1,
            },
        })
