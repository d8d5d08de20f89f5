from flask import Flask

from .endpoints import PROVIDER_EXTENSION
from .register_routes import register_flask_routes
from ..document.config import DataProviderConfig
from ..document.data_provider import DataProvider
from ..utilities.logger import get_logger


def create_app(config: DataProviderConfig | None = None, provider: DataProvider | None = None) -> Flask:
    """ Builds the Flask app that serves the data provider.

    Pass in a provider to reuse one that is already connected. Otherwise one is created from config
    (or from MONGO_* environment variables when config is None), validated and connected here.
    """
    if provider is None:
        provider = DataProvider(config if config is not None else DataProviderConfig.from_env())
        provider.init()
        provider.connect()

    app = Flask(__name__)
    app.extensions[PROVIDER_EXTENSION] = provider
    register_flask_routes(app)

    get_logger().info(f"Serving database '{provider.config.database}' on {len(list(app.url_map.iter_rules()))} routes")
    return app
