from typing import Any, Callable

from pymongo import MongoClient

from .config import DataProviderConfig


def create_mongo_client(config: DataProviderConfig, client_factory: Callable[..., Any] = MongoClient) -> Any:
    """ Builds the shared client (and its connection pool) from the provider configuration.
    Credentials are authenticated against auth_database, while records live in config.database. """
    options: dict[str, Any] = {
        "host": list(config.addresses),
        "serverSelectionTimeoutMS": int(config.server_selection_timeout * 1000),
        "socketTimeoutMS": int(config.socket_timeout * 1000),
        "connectTimeoutMS": int(config.server_selection_timeout * 1000),
    }
    if config.username:
        options["username"] = config.username
        options["password"] = config.password
        options["authSource"] = config.auth_database

    return client_factory(**options)
