from rest_framework.pagination import LimitOffsetPagination
from rest_framework.response import Response


class OptionalLimitOffsetPagination(LimitOffsetPagination):
    """Full collections by default; ``?limit=``/``?offset=`` slice them.

    A sliced response keeps the plain-list shape and reports the collection
    size in ``X-Total-Count``.
    """

    def paginate_queryset(self, queryset, request, view=None):
        params = request.query_params
        if self.limit_query_param not in params and self.offset_query_param not in params:
            return None
        return super().paginate_queryset(queryset, request, view)

    def get_paginated_response(self, data):
        return Response(data, headers={"X-Total-Count": str(self.count)})

    def get_paginated_response_schema(self, schema):
        return schema
