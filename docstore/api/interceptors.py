from typing import Any

from ..document.constants import RESTRICTED_FIELDS
from ..utilities.provider_error import BadRequestError


def validate_input(body: dict[str, Any] | None) -> None:
    """ Raises BadRequestError if the request body contains any restricted field.
    The data provider generates and maintains these fields, so they are not allowed in input.
    Must run before every create (POST) and update (PUT) request. """
    if not body:
        return
    for field in RESTRICTED_FIELDS:
        if field in body:
            raise BadRequestError(f"Input cannot contain '{field}' field.")
