# hackathons/services/__init__.py

MAX_PAGE_SIZE = 100


def empty_page(limit, offset):
    return {"count": 0, "limit": limit, "offset": offset, "results": []}


def paginate(queryset, limit, offset):
    """
    Slice a queryset into a limit/offset page.

    ``limit``/``offset`` are expected to be validated ints (see views.generics).
    """
    return {
        "count": queryset.count(),
        "limit": limit,
        "offset": offset,
        "results": list(queryset[offset:offset + limit]),
    }
