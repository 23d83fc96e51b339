from __future__ import annotations

from starlette.requests import Request

UNMATCHED_ROUTE = "unmatched"


def route_label(request: Request) -> str:
    """
    Return the matched route template (e.g. /api/patients/{patient_id}).

    Raw paths carry patient ids, so they are never used as log fields or metric
    labels. Requests that did not match a route get a fixed label.
    """

    route = request.scope.get("route")
    path = getattr(route, "path", None)
    if isinstance(path, str) and path:
        return path
    return UNMATCHED_ROUTE
