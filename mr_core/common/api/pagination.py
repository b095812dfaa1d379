# mr_core/common/api/pagination.py
from __future__ import annotations

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 200


class PaginatedListMixin:
    """
    For GenericAPIView subclasses that build their own scoped querysets.
    Keeps the { count, next, previous, results } contract in one place.
    """

    def list_response(self, queryset, serializer_class) -> Response:
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(serializer_class(page, many=True).data)

        # pagination disabled: plain list
        return Response(serializer_class(queryset, many=True).data)
