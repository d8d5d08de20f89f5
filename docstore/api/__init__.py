from typing import Callable

# Module state
routes: dict[Callable, list[tuple[str, dict]]] = {}

# Set Up: create_app() registers every route collected in `routes`
from .register_routes import register_flask_routes
from .app import create_app
