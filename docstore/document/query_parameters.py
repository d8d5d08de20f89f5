from dataclasses import dataclass, field
from typing import Any

from pymongo import ASCENDING, DESCENDING

from .constants import AGGREGATE, LIMIT, SKIP, SORT, WHERE
from .parameters import Parameters, extract_int_parameter, extract_json_parameter, extract_string_parameter
from ..utilities.provider_error import BadRequestError


SortSpec = list[tuple[str, int]]

MAX_INT64 = 2**63 - 1
""" Largest limit or skip BSON can encode. """

@dataclass
class QueryParameters:
	""" Driver-ready form of a query's parameters. Exactly one of where/aggregate drives the query. """
	where: dict[str, Any] = field(default_factory=dict)
	aggregate: list[dict[str, Any]] | None = None
	sort: SortSpec | None = None
	limit: int = 0
	""" 0 means no limit. """
	skip: int = 0

	@property
	def is_aggregation(self) -> bool:
		return self.aggregate is not None

def parse_sort(key: str, sort: str) -> SortSpec:
	""" Parses "-createdAt,name" into [("createdAt", DESCENDING), ("name", ASCENDING)]. """
	sort_spec: SortSpec = []
	for part in sort.split(","):
		part = part.strip()
		direction = ASCENDING
		if part.startswith("-"):
			direction = DESCENDING
			part = part[1:]
		elif part.startswith("+"):
			part = part[1:]
		if not part:
			raise BadRequestError(f"The key '{key}' must list field names to sort by.")
		sort_spec.append((part, direction))
	return sort_spec

def parse_query_parameters(parameters: Parameters) -> QueryParameters:
	""" Validates and decodes the raw query parameters. Raises BadRequestError naming the first offending key. """
	if parameters.get(WHERE) is not None and parameters.get(AGGREGATE) is not None:
		raise BadRequestError("Where and aggregate parameters cannot be used at the same request.")

	where, has_where = extract_json_parameter(parameters, WHERE)
	aggregate, has_aggregate = extract_json_parameter(parameters, AGGREGATE)
	sort, has_sort = extract_string_parameter(parameters, SORT)
	limit, _ = extract_int_parameter(parameters, LIMIT)
	skip, _ = extract_int_parameter(parameters, SKIP)

	query_parameters = QueryParameters(limit=limit, skip=skip)

	if has_where:
		# null is accepted as "match everything"
		if where is None:
			where = {}
		if not isinstance(where, dict):
			raise BadRequestError(f"The key '{WHERE}' must be a JSON object.")
		query_parameters.where = where

	if has_aggregate:
		if not isinstance(aggregate, list) or not all(isinstance(stage, dict) for stage in aggregate):
			raise BadRequestError(f"The key '{AGGREGATE}' must be a JSON array of pipeline stages.")
		query_parameters.aggregate = aggregate

	if has_sort:
		query_parameters.sort = parse_sort(SORT, sort)

	for key, value in ((LIMIT, limit), (SKIP, skip)):
		if value < 0:
			raise BadRequestError(f"The key '{key}' must not be negative.")
		if value > MAX_INT64:
			raise BadRequestError(f"The key '{key}' must not exceed {MAX_INT64}.")

	return query_parameters
