import time
from contextlib import contextmanager
from typing import Any, BinaryIO, Callable, Iterator, TypeVar

import pymongo
from gridfs import GridFSBucket
from gridfs.errors import NoFile
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from .base64_stream import iter_base64_decoded
from .config import DataProviderConfig
from .constants import CREATED_AT, FILE_BUCKET, ID, RESULTS, UPDATED_AT
from .document_id import DocumentId
from .mongo_db import create_mongo_client
from .parameters import Parameters
from .query_parameters import QueryParameters, parse_query_parameters
from .retry import retry
from .update_method import UpdateMethod, next_timestamp, stamp_timestamps
from ..utilities.logger import log_error
from ..utilities.provider_error import BadRequestError, ConnectionFailedError, NotFoundError, ProviderError, ServerError


T = TypeVar('T')

class DataProvider:
	""" Translates framework-level requests into MongoDB calls and normalizes failures into ProviderErrors.

	Records are plain dicts. Every record carries _id, createdAt and updatedAt, which this class generates and maintains.
	Files are stored in GridFS and addressed by a generated id.

	Usage:
		provider = DataProvider(DataProviderConfig.from_env())
		provider.init()
		provider.connect()
		provider.create("users", {"name": "Ada"})
	"""
	def __init__(
			self,
			config: DataProviderConfig,
			*,
			client_factory: Callable[..., Any] = MongoClient,
			bucket_factory: Callable[..., Any] = GridFSBucket,
			clock: Callable[[], float] = time.time
		) -> None:
		self.config = config
		self._client_factory = client_factory
		self._bucket_factory = bucket_factory
		self._clock = clock
		self._client: Any = None

	# region: Lifecycle
	def init(self) -> None:
		""" Validates the configuration. Raises ConfigurationError. """
		self.config.validate()

	def connect(self) -> None:
		""" Creates the shared client and verifies the server is reachable. """
		client = None
		try:
			client = create_mongo_client(self.config, self._client_factory)
			client.admin.command("ping")
		except PyMongoError as e:
			if client is not None:
				client.close()
			log_error("Mongo Error: Connection failed.", reason=e)
			raise ConnectionFailedError("Database connection failed.") from e
		self._client = client

	def close(self) -> None:
		if self._client is not None:
			self._client.close()
			self._client = None

	@property
	def is_connected(self) -> bool:
		return self._client is not None
	# endregion

	# region: Helpers
	def _get_db(self) -> Any:
		if self._client is None:
			raise ConnectionFailedError("Database is not connected.")
		return self._client[self.config.database]

	@contextmanager
	def _session(self) -> Iterator[Any]:
		""" Each operation gets its own session from the shared pool. The session is ended whatever the outcome. """
		if self._client is None:
			raise ConnectionFailedError("Database is not connected.")
		with self._client.start_session() as session:
			yield session

	def _retry(self, timeout: float, function: Callable[[], T]) -> T:
		""" Retries function with a fresh timeout budget for every attempt. """
		def attempt() -> T:
			with pymongo.timeout(timeout):
				return function()
		return retry(self.config.retry_attempts, attempt)
	# endregion

	# region: Records
	def create(self, collection: str, record: dict[str, Any] | None) -> dict[str, Any]:
		""" Inserts the record, generating an _id if it has none. Returns the _id and timestamps. """
		if record is None:
			log_error("Mongo Error: Request body cannot be empty for create requests.")
			raise BadRequestError("Request body cannot be empty for create requests.")

		document = dict(record)
		if ID not in document:
			document[ID] = DocumentId()
		created_at = self._clock()
		stamp_timestamps(document, UpdateMethod.INSERT, created_at)

		try:
			with self._session() as session:
				self._retry(self.config.socket_timeout, lambda: self._get_db()[collection].insert_one(document, session=session))
		except PyMongoError as e:
			log_error("Mongo Error: Inserting item failed.", reason=e, collection=collection, data=document)
			raise ServerError(str(e)) from e

		return {
			ID: document[ID],
			CREATED_AT: created_at,
			UPDATED_AT: created_at,
		}

	def get(self, collection: str, id: str) -> dict[str, Any]:
		""" Returns the record with the given _id. """
		def find_one() -> dict[str, Any]:
			document = self._get_db()[collection].find_one({ ID: id }, session=session)
			if document is None:
				raise NotFoundError(f"'{collection}' with id '{id}' not found.")
			return document

		try:
			with self._session() as session:
				return self._retry(self.config.read_timeout, find_one)
		except NotFoundError as e:
			log_error("Mongo Error: Getting item failed.", reason=e, collection=collection, id=id)
			raise
		except PyMongoError as e:
			log_error("Mongo Error: Getting item failed.", reason=e, collection=collection, id=id)
			raise ServerError(f"Getting '{collection}' with id '{id}' failed.") from e

	def query(self, collection: str, parameters: Parameters) -> dict[str, list[dict[str, Any]]]:
		""" Runs a find (where/sort/skip/limit) or an aggregation pipeline. The result list is never None. """
		try:
			query_parameters = parse_query_parameters(parameters)
		except BadRequestError as e:
			log_error(f"Mongo Error: {e.message}")
			raise

		try:
			with self._session() as session:
				results = self._retry(self.config.socket_timeout, lambda: self._run_query(collection, query_parameters, session))
		except PyMongoError as e:
			log_error("Mongo Error: Querying items failed.", reason=e, collection=collection, parameters=dict(parameters))
			raise ServerError(f"Querying items from database failed. Reason: {e}") from e

		return { RESULTS: results }

	def _run_query(self, collection: str, query_parameters: QueryParameters, session: Any) -> list[dict[str, Any]]:
		# Cursors are consumed by iteration, so every attempt builds a new one
		db_collection = self._get_db()[collection]
		if query_parameters.is_aggregation:
			cursor = db_collection.aggregate(query_parameters.aggregate, session=session)
		else:
			cursor = db_collection.find(
				query_parameters.where,
				skip=query_parameters.skip,
				limit=query_parameters.limit,
				sort=query_parameters.sort,
				session=session
			)
		return list(cursor)

	def update(self, collection: str, id: str, record: dict[str, Any] | None) -> dict[str, Any]:
		""" Merges the record's fields over the stored record and writes the full result back. Returns the new updatedAt. """
		if not record:
			log_error("Mongo Error: Request body cannot be empty for update requests.")
			raise BadRequestError("Request body cannot be empty for update requests.")

		def find_one() -> dict[str, Any]:
			document = db_collection.find_one({ ID: id }, session=session)
			if document is None:
				raise NotFoundError("Item not found.")
			return document

		def replace_one(document: dict[str, Any]) -> None:
			result = db_collection.replace_one({ ID: id }, document, session=session)
			if result.matched_count == 0:
				# Deleted between our read and our write
				raise NotFoundError("Item not found.")

		try:
			with self._session() as session:
				db_collection = self._get_db()[collection]
				existing = self._retry(self.config.socket_timeout, find_one)

				# Update the fields that the request body contains. _id and createdAt are never overwritten.
				merged = dict(existing)
				for key, value in record.items():
					if key in (ID, CREATED_AT):
						continue
					merged[key] = value
				updated_at = next_timestamp(existing.get(UPDATED_AT), self._clock())
				stamp_timestamps(merged, UpdateMethod.UPDATE, updated_at)

				self._retry(self.config.socket_timeout, lambda: replace_one(merged))
		except NotFoundError as e:
			log_error("Mongo Error: Updating item failed.", reason=e, collection=collection, id=id)
			raise
		except PyMongoError as e:
			log_error("Mongo Error: Updating item failed.", reason=e, collection=collection, id=id)
			raise ServerError(f"Updating '{collection}' with id '{id}' failed.") from e

		return { UPDATED_AT: updated_at }

	def delete(self, collection: str, id: str) -> dict[str, Any]:
		def delete_one() -> None:
			result = self._get_db()[collection].delete_one({ ID: id }, session=session)
			if result.deleted_count == 0:
				raise NotFoundError(f"'{collection}' with id '{id}' not found.")

		try:
			with self._session() as session:
				self._retry(self.config.socket_timeout, delete_one)
		except NotFoundError as e:
			log_error("Mongo Error: Deleting item failed.", reason=e, collection=collection, id=id)
			raise
		except PyMongoError as e:
			log_error("Mongo Error: Deleting item failed.", reason=e, collection=collection, id=id)
			raise ServerError(f"Deleting '{collection}' with id '{id}' failed.") from e

		return {}
	# endregion

	# region: Files
	def _get_bucket(self) -> Any:
		return self._bucket_factory(self._get_db(), bucket_name=FILE_BUCKET)

	def create_file(self, stream: BinaryIO | None) -> dict[str, Any]:
		""" Stores a base64 encoded stream as a GridFS file. The content is decoded while it is written. """
		if stream is None:
			log_error("Mongo Error: Request body cannot be empty for create file requests.")
			raise BadRequestError("Request body cannot be empty for create file requests.")

		file_id = DocumentId()
		created_at = self._clock()

		with self._session() as session:
			try:
				grid_in = self._get_bucket().open_upload_stream_with_id(
					file_id,
					file_id,
					metadata={ CREATED_AT: created_at },
					session=session
				)
			except PyMongoError as e:
				log_error("Mongo Error: Creating file failed.", reason=e)
				raise ServerError("Creating file failed.") from e

			try:
				for decoded_chunk in iter_base64_decoded(stream):
					grid_in.write(decoded_chunk)
			except (ProviderError, PyMongoError, OSError) as e:
				# Discard the chunks written so far
				grid_in.abort()
				if isinstance(e, ProviderError):
					log_error("Mongo Error: Writing file failed.", reason=e.message)
					raise
				log_error("Mongo Error: Writing file failed.", reason=e)
				raise ServerError("Writing file failed.") from e
			except BaseException:
				# e.g. the client disconnected mid-upload
				grid_in.abort()
				raise

			try:
				grid_in.close()
			except PyMongoError as e:
				log_error("Mongo Error: Closing file failed.", reason=e)
				raise ServerError("Closing file failed.") from e

		return {
			ID: file_id,
			CREATED_AT: created_at,
		}

	def get_file(self, id: str) -> bytes:
		""" Reads the whole file into memory. """
		with self._session() as session:
			try:
				grid_out = self._get_bucket().open_download_stream(id, session=session)
			except NoFile as e:
				log_error("Mongo Error: File not found.", reason=e)
				raise NotFoundError("File not found.") from e
			except PyMongoError as e:
				log_error("Mongo Error: Getting file failed.", reason=e)
				raise ServerError("Getting file failed.") from e

			try:
				return grid_out.read()
			except PyMongoError as e:
				log_error("Mongo Error: Reading file failed.", reason=e)
				raise ServerError(f"Reading file failed. Reason: {e}") from e
			finally:
				grid_out.close()
	# endregion
