"""
Page-number pagination for function-based list endpoints.

Lists keep their named top-level key (``matches``, ``blockers`` ...) and
gain ``count``, ``next`` and ``previous``.
"""
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardPagination(PageNumberPagination):
    """Default pagination for list endpoints."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def paginated_response(request, queryset, serializer_class, *, key, pagination_class=StandardPagination, context=None):
    paginator = pagination_class()
    page = paginator.paginate_queryset(queryset, request)
    data = serializer_class(page, many=True, context=context or {}).data
    return Response({
        key: data,
        'count': paginator.page.paginator.count,
        'next': paginator.get_next_link(),
        'previous': paginator.get_previous_link(),
    })
