from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):
    """Default page size for list endpoints."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 500
