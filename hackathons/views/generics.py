from rest_framework.exceptions import ValidationError

from hackathons.services import MAX_PAGE_SIZE

TRUE_VALUES = ("1", "true", "yes")
FALSE_VALUES = ("0", "false", "no")


def parse_pagination(request, default_limit):
    """
    Read ``limit``/``offset`` from the query string.
    limit is clamped to 1..MAX_PAGE_SIZE; garbage is a 400.
    """
    try:
        limit = int(request.query_params.get("limit", default_limit))
        offset = int(request.query_params.get("offset", 0))
    except (TypeError, ValueError):
        raise ValidationError({"detail": "limit and offset must be integers"})

    if offset < 0:
        raise ValidationError({"offset": "Must be zero or greater"})

    limit = max(1, min(limit, MAX_PAGE_SIZE))
    return limit, offset


def parse_bool(value, name):
    """None when the parameter is absent, else a strict boolean."""
    if value is None or value == "":
        return None
    lowered = str(value).strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValidationError({name: "Must be a boolean"})


def page_response(page, serializer_class, context=None):
    return {
        "count": page["count"],
        "limit": page["limit"],
        "offset": page["offset"],
        "results": serializer_class(page["results"], many=True, context=context or {}).data,
    }
