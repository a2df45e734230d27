# hr_core/employees/api/pagination.py
from __future__ import annotations

from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.utils.urls import replace_query_param

from hr_core.common.api.params import int_param
from hr_core.employees.selectors import EmployeePage, PageRequest, SortDirection, SortKey

DEFAULT_PAGE_SIZE = 20


def page_request_from_params(params) -> PageRequest:
    """
    ?page=<zero-based index>&page_size=&sort=&direction=asc|desc
    """
    size = int_param(params, "page_size", DEFAULT_PAGE_SIZE, minimum=1)
    index = int_param(params, "page", 0, minimum=0)

    sort_raw = params.get("sort") or SortKey.LAST_NAME.value
    direction_raw = (params.get("direction") or SortDirection.ASC.value).lower()

    try:
        sort = SortKey(sort_raw)
    except ValueError:
        raise ValidationError({"sort": f"Must be one of: {', '.join(k.value for k in SortKey)}."})
    try:
        direction = SortDirection(direction_raw)
    except ValueError:
        raise ValidationError({"direction": "Must be 'asc' or 'desc'."})

    return PageRequest(size=size, index=index, sort=sort, direction=direction)


def paginated_response(request, page: EmployeePage, serializer_class) -> Response:
    """
    Stable list contract: { count, page, page_size, pages, next, previous, results }
    """
    url = request.build_absolute_uri()
    next_url = replace_query_param(url, "page", page.index + 1) if page.has_next else None
    previous_url = replace_query_param(url, "page", page.index - 1) if page.has_previous else None

    return Response(
        {
            "count": page.total,
            "page": page.index,
            "page_size": page.size,
            "pages": page.pages,
            "next": next_url,
            "previous": previous_url,
            "results": serializer_class(page.items, many=True).data,
        }
    )
