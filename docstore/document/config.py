import os
from dataclasses import dataclass, field

from ..utilities.provider_error import ConfigurationError


@dataclass
class DataProviderConfig:
	""" Connection and behaviour settings for the DataProvider. Timeouts are in seconds. """
	addresses: list[str] = field(default_factory=list)
	database: str = ""
	auth_database: str = "admin"
	username: str | None = None
	password: str | None = None

	server_selection_timeout: float = 1.0
	socket_timeout: float = 1.0
	""" Applied to every operation that writes or queries. """
	read_timeout: float = 0.3
	""" Applied to single-record reads. """

	retry_attempts: int = 5

	def validate(self) -> None:
		if not self.addresses:
			raise ConfigurationError("Database 'addresses' must be specified.")
		if not self.database:
			raise ConfigurationError("Database 'database' must be specified.")
		if self.retry_attempts < 1:
			raise ConfigurationError("Database 'retry_attempts' must be at least 1.")

	@classmethod
	def from_env(cls) -> "DataProviderConfig":
		""" Reads the configuration from MONGO_* environment variables. Unset variables keep their defaults. """
		defaults = cls()

		MONGO_ADDRESSES = os.environ.get("MONGO_ADDRESSES", "")
		addresses = [address.strip() for address in MONGO_ADDRESSES.split(",") if address.strip()]

		return cls(
			addresses=addresses,
			database=os.environ.get("MONGO_DB_NAME", defaults.database),
			auth_database=os.environ.get("MONGO_AUTH_DB_NAME", defaults.auth_database),
			username=os.environ.get("MONGO_USERNAME") or None,
			password=os.environ.get("MONGO_PASSWORD") or None,
			server_selection_timeout=_env_number("MONGO_SERVER_SELECTION_TIMEOUT", float, defaults.server_selection_timeout),
			socket_timeout=_env_number("MONGO_SOCKET_TIMEOUT", float, defaults.socket_timeout),
			read_timeout=_env_number("MONGO_READ_TIMEOUT", float, defaults.read_timeout),
			retry_attempts=_env_number("MONGO_RETRY_ATTEMPTS", int, defaults.retry_attempts),
		)

def _env_number(name: str, cast: type[int] | type[float], default):
	raw_value = os.environ.get(name)
	if raw_value is None or raw_value.strip() == "":
		return default
	try:
		return cast(raw_value)
	except ValueError as e:
		raise ConfigurationError(f"Please set {name} to a valid {cast.__name__} in your environment variables.") from e
