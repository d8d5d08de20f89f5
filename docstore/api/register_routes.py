from flask import Flask

from ..utilities.logger import get_logger
from ..utilities.provider_error import ProviderError


def register_flask_routes(app: Flask) -> None:
    """ Registers all Flask routes. Make sure you import any routes here that you want Flask to know about. """
    from . import routes
    from . import endpoints  # noqa: F401
    from .responses import handle_provider_error

    # Actually register the routes with Flask using the global routes variable
    for func, rules in routes.items():
        for rule, options in rules:
            try:
                app.add_url_rule(rule, func.__name__, func, **options)
            except AssertionError as e:
                if "View function mapping is overwriting an existing endpoint function" in str(e):
                    get_logger().error(f"Route registration error: {e} rule={rule} function={func.__name__} options={options}")
                raise

    app.register_error_handler(ProviderError, handle_provider_error)
