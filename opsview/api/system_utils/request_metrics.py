import time

from fastapi import Request
from starlette.routing import Match


def _match_template(routes, scope, prefix=""):
    for route in routes:
        match, child_scope = route.matches(scope)
        if match != Match.FULL:
            continue

        path = prefix + getattr(route, "path", "")
        sub_routes = getattr(route, "routes", None)
        if sub_routes:
            # mounted router: resolve the rest of the path inside it
            return _match_template(sub_routes, {**scope, **child_scope}, path)
        return path
    return None


def route_label(request: Request) -> str:
    """Full matched route template, or the raw path when nothing matched."""
    template = _match_template(request.app.router.routes, dict(request.scope))
    return template or request.url.path


async def track_request_metrics(request: Request, call_next):
    start_time = time.perf_counter()
    status_code = 500
    # resolved before dispatch, while the scope is still the app-level one
    route = route_label(request)

    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        request.app.state.metrics.observe_request(
            request.method,
            route,
            status_code,
            time.perf_counter() - start_time,
        )
