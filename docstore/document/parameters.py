"""
Decoding of query-string values.

The hosting framework hands over query parameters as a multimap of raw strings (Flask's request.args.to_dict(flat=False)).
Each value is expected to be JSON, e.g. ?where={"age":{"$gt":18}}&sort="-createdAt"&limit=10. Only the first value of each key is used.
"""
import json
from typing import Any, Mapping, Sequence

from bson import json_util
from bson.errors import BSONError

from ..utilities.provider_error import BadRequestError


Parameters = Mapping[str, Sequence[str]]

def _first_value(parameters: Parameters, key: str) -> tuple[str | None, bool]:
	values = parameters.get(key)
	if not values:
		return None, False
	return values[0], True

def _parse_error(key: str, e: Exception) -> BadRequestError:
	return BadRequestError(f"Parsing {key} parameter failed. Reason: {e}")

def extract_json_parameter(parameters: Parameters, key: str) -> tuple[Any, bool]:
	""" Returns the decoded value and whether the parameter was supplied. MongoDB extended JSON ($oid, $date, ...) is decoded into bson types. """
	raw_value, has_param = _first_value(parameters, key)
	if not has_param:
		return None, False

	try:
		value = json_util.loads(raw_value)
	except (ValueError, TypeError, BSONError) as e:
		raise _parse_error(key, e) from e
	return value, True

def extract_string_parameter(parameters: Parameters, key: str) -> tuple[str, bool]:
	raw_value, has_param = _first_value(parameters, key)
	if not has_param:
		return "", False

	try:
		value = json.loads(raw_value)
	except ValueError as e:
		raise _parse_error(key, e) from e

	if not isinstance(value, str):
		raise BadRequestError(f"The key '{key}' must be a valid string.")
	return value, True

def extract_int_parameter(parameters: Parameters, key: str) -> tuple[int, bool]:
	raw_value, has_param = _first_value(parameters, key)
	if not has_param:
		return 0, False

	try:
		value = json.loads(raw_value)
	except ValueError as e:
		raise _parse_error(key, e) from e

	# bool is a subclass of int, but true/false are not integers in JSON
	if isinstance(value, bool):
		raise BadRequestError(f"The key '{key}' must be an integer.")
	if isinstance(value, int):
		return value, True
	if isinstance(value, float) and value.is_integer():
		return int(value), True
	raise BadRequestError(f"The key '{key}' must be an integer.")
