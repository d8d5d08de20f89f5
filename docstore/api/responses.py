from typing import Any

from bson import json_util
from bson.errors import BSONError
from flask import Response, make_response, request

from ..utilities.logger import get_logger
from ..utilities.provider_error import BadRequestError, ProviderError


def make_json_response(payload: Any, status: int = 200) -> Response:
    """ Like flask.jsonify, but encodes bson types (ObjectId, datetime, ...) as MongoDB extended JSON. """
    response = make_response(json_util.dumps(payload), status)
    response.mimetype = "application/json"
    return response

def handle_provider_error(e: ProviderError) -> Response:
    get_logger().debug(f"Responding with {int(e.code)}: {e.message}")
    return make_json_response(e.to_dict(), int(e.code))

def get_json_body() -> dict[str, Any] | None:
    """ Returns the request body as a dict, or None when the body is empty. Extended JSON is decoded into bson types. """
    data = request.get_data(as_text=True)
    if not data.strip():
        return None
    try:
        body = json_util.loads(data)
    except (ValueError, TypeError, KeyError, BSONError) as e:
        raise BadRequestError(f"Request body must be valid JSON. Reason: {e}") from e
    if not isinstance(body, dict):
        raise BadRequestError("Request body must be a JSON object.")
    return body
