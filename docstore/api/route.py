from enum import StrEnum

from . import routes


class Method(StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

def app_route(rule: str, *, methods: list[Method] | None = None, strict_slashes: bool | None = None):
    """ Collects a vanilla Flask route. Nothing is registered with Flask until register_flask_routes() runs. """
    kwoptions = {
        "methods": [m.value for m in methods] if methods is not None else [Method.GET.value],
        "strict_slashes": strict_slashes
    }
    def decorator(f):
        if f not in routes:
            routes[f] = []
        routes[f].append((rule, kwoptions))
        return f
    return decorator
