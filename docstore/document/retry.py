from typing import Callable, TypeVar

from pymongo.errors import DuplicateKeyError, PyMongoError

from ..utilities.logger import log_error
from ..utilities.provider_error import NotFoundError


T = TypeVar('T')

NON_TRANSIENT_ERRORS: tuple[type[Exception], ...] = (NotFoundError, DuplicateKeyError)
""" Errors which will fail the same way on every attempt. """

def is_transient(error: Exception) -> bool:
    if isinstance(error, NON_TRANSIENT_ERRORS):
        return False
    return isinstance(error, PyMongoError)

def retry(attempts: int, function: Callable[[], T]) -> T:
    """ Calls function until it succeeds, at most `attempts` times.
    Non-transient errors are raised right away. If every attempt fails, the last error is raised. """
    if attempts < 1:
        raise ValueError("attempts must be at least 1.")

    attempt = 0
    while True:
        attempt += 1
        try:
            return function()
        except Exception as e:
            if not is_transient(e):
                raise

            # Break if the last attempt failed too
            if attempt >= attempts:
                log_error("Mongo Error: Last attempt failed. Not retrying.", reason=e, attempt=attempt)
                raise

            log_error("Mongo Error: Attempt failed. Retrying.", reason=e, attempt=attempt)
